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

from .deserializer import Deserializer
from .exceptions import OutOfDataError


class IODeserializer(Deserializer):
    """Deserializer that reads from a blocking binary file object (files, pipes, `socket.makefile('rb')`, ...).

    Short reads are retried until the requested amount is available, reaching the end of the stream first raises
    `OutOfDataError`. Errors raised by the file object itself propagate unchanged.

    Peeking needs to read ahead: peeked bytes are kept in a small lookahead buffer and handed out by the next reads, so
    the file position may be ahead of what was consumed through this deserializer.
    """

    def __init__(self, fp: BinaryIO) -> None:
        self._fp = fp
        self._lookahead = bytearray()

    def _fill(self, n: int) -> None:
        """Read from the file until at least n bytes are buffered or the stream ends."""
        while len(self._lookahead) < n:
            chunk = self._fp.read(n - len(self._lookahead))
            if chunk is None:
                # only raw streams in non-blocking mode do this
                raise BlockingIOError(errno.EAGAIN, 'read would block')
            if not chunk:
                return
            self._lookahead += chunk

    @override
    def finalize(self) -> None:
        if not self.is_empty():
            raise ValueError('trailing data')
        del self._lookahead

    @override
    def is_empty(self) -> bool:
        self._fill(1)
        return not self._lookahead

    @override
    def peek_byte(self) -> int:
        self._fill(1)
        if not self._lookahead:
            raise OutOfDataError('not enough bytes to read')
        return self._lookahead[0]

    @override
    def peek_bytes(self, n: int, *, exact: bool = True) -> bytes:
        if n < 0:
            raise ValueError('value cannot be negative')
        self._fill(n)
        if exact and len(self._lookahead) < n:
            raise OutOfDataError('failed to fill whole buffer')
        return bytes(self._lookahead[:n])

    @override
    def read_byte(self) -> int:
        b = self.peek_byte()
        del self._lookahead[0]
        return b

    @override
    def read_bytes(self, n: int, *, exact: bool = True) -> bytes:
        b = self.peek_bytes(n, exact=exact)
        del self._lookahead[:len(b)]
        return b

    @override
    def read_all(self) -> bytes:
        while True:
            chunk = self._fp.read()
            if chunk is None:
                raise BlockingIOError(errno.EAGAIN, 'read would block')
            if not chunk:
                break
            self._lookahead += chunk
        b = bytes(self._lookahead)
        self._lookahead.clear()
        return b
