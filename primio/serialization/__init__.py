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
Blocking byte-stream abstraction used by the stream codec.

A `Serializer` is a sink and a `Deserializer` a source. Both move bytes exactly: `write_bytes` writes every byte or
raises and `read_bytes` returns exactly the requested amount or raises. There are in-memory implementations
(`build_bytes_serializer`/`build_bytes_deserializer`) and implementations over binary file objects
(`build_io_serializer`/`build_io_deserializer`).
"""

from .deserializer import Deserializer
from .exceptions import OutOfDataError, SerializationError, WriteZeroError
from .serializer import Serializer

__all__ = [
    'Serializer',
    'Deserializer',
    'SerializationError',
    'OutOfDataError',
    'WriteZeroError',
]
