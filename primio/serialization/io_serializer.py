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

import errno
from typing import BinaryIO

from typing_extensions import override

from .exceptions import WriteZeroError
from .serializer import Serializer
from .types import Buffer


class IOSerializer(Serializer):
    """Serializer that writes to a blocking binary file object (files, pipes, `socket.makefile('wb')`, ...).

    Short writes are retried with the remaining bytes until everything is written. A write that makes no progress
    raises `WriteZeroError`, errors raised by the file object itself propagate unchanged. The file object is not
    closed or flushed by the serializer.
    """

    def __init__(self, fp: BinaryIO) -> None:
        self._fp = fp
        self._pos = 0

    @override
    def cur_pos(self) -> int:
        return self._pos

    @override
    def write_byte(self, data: int) -> None:
        # bytes() checks for correct range
        self.write_bytes(bytes((data,)))

    @override
    def write_bytes(self, data: Buffer) -> None:
        view = memoryview(data).cast('B')
        while view:
            written = self._fp.write(view)
            if written is None:
                # only raw streams in non-blocking mode do this
                raise BlockingIOError(errno.EAGAIN, 'write would block')
            if written == 0:
                raise WriteZeroError('failed to write whole buffer')
            self._pos += written
            view = view[written:]

    def flush(self) -> None:
        self._fp.flush()
