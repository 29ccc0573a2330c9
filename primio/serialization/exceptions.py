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


class SerializationError(Exception):
    """Base class for errors raised by serializers and deserializers."""


class OutOfDataError(SerializationError, EOFError):
    """ The source ended before the requested amount of bytes could be read.

    Some bytes may have been consumed before this is raised.
    """


class WriteZeroError(SerializationError, OSError):
    """ The sink did not accept any more bytes before the requested amount could be written.

    Some bytes may have been written before this is raised.
    """
