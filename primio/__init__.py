# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Fixed-width primitive I/O.

Every primitive type (u8, i8, u16, i16, u32, i32, u64, i64, f32, f64 and bool) can be read from and written to:

- a raw byte buffer, with an explicit capacity check (`primio.binary`);
- a blocking byte stream, with exact reads and writes (`primio.stream`).

Value holders in `primio.values` expose both disciplines as methods. This module is kept free of imports so that the
version can be read without pulling any dependency.
"""

__version__ = '0.3.0'

__all__ = [
    '__version__',
]
