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

from primio.primitives import ByteOrder
from primio.utils import pydantic


class PrimioSettings(pydantic.BaseModel):
    # Byte order used by calls that don't pass one explicitly. `native` keeps the platform representation, `little` or
    # `big` make the output portable across platforms (and incompatible with data written as `native` on the other
    # kind of platform).
    BYTE_ORDER: ByteOrder = ByteOrder.NATIVE

    @classmethod
    def from_yaml(cls, *, filepath: str) -> 'PrimioSettings':
        """Takes a filepath to a yaml file and returns a validated PrimioSettings instance."""
        from primio.utils.yaml import model_from_extended_yaml
        return model_from_extended_yaml(cls, filepath=filepath, custom_root=Path(__file__).parent)
