#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from pathlib import Path

parent_dir = Path(__file__).parent

NATIVE_SETTINGS_FILEPATH = str(parent_dir / 'native.yml')
LITTLE_ENDIAN_SETTINGS_FILEPATH = str(parent_dir / 'little_endian.yml')
BIG_ENDIAN_SETTINGS_FILEPATH = str(parent_dir / 'big_endian.yml')

__all__ = [
    'NATIVE_SETTINGS_FILEPATH',
    'LITTLE_ENDIAN_SETTINGS_FILEPATH',
    'BIG_ENDIAN_SETTINGS_FILEPATH',
]
