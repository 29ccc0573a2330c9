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

r"""
Direct-buffer codec: copy a primitive value to or from a caller-supplied byte buffer.

There is no intermediate stream and no allocation, the value is packed straight into (or unpacked straight from) the
buffer after a capacity check. Only `type_.width` bytes starting at `offset` are touched, everything else in the buffer
is left as it is. The only expected failure is a buffer that is too short, it is returned as an
`Err(InsufficientCapacityError)` and nothing is written in that case.

>>> sink = bytearray(6)
>>> encode_into(PrimitiveType.U32, 0x12345678, sink, offset=1, byte_order=ByteOrder.BIG)
Ok(4)
>>> bytes(sink).hex()
'001234567800'
>>> decode_from(PrimitiveType.U32, sink, offset=1, byte_order=ByteOrder.BIG)
Ok(305419896)
>>> decode_from(PrimitiveType.U32, sink, offset=3, byte_order=ByteOrder.BIG)
Err(InsufficientCapacityError('need 4 bytes, 3 available'))
>>> decode_from(PrimitiveType.BOOL, b'\x02')
Ok(False)
"""

import struct
from typing import Any, Optional

from typing_extensions import Buffer

from primio.conf.get_settings import resolve_byte_order
from primio.primitives import ByteOrder, PrimitiveType
from primio.utils.result import Err, Ok, Result


class InsufficientCapacityError(Exception):
    """ The buffer has fewer bytes (from the given offset) than the width of the type being read or written.

    This is returned inside an `Err`, not raised. The same error is used for a source that is too short and for a sink
    that is too small.
    """

    def __eq__(self, other: Any) -> bool:
        return type(other) is type(self) and other.args == self.args

    def __hash__(self) -> int:
        return hash(self.args)


def _byte_view(buffer: Buffer) -> memoryview:
    view = memoryview(buffer)
    if view.format != 'B' or view.ndim != 1:
        view = view.cast('B')
    return view


def _check_capacity(type_: PrimitiveType, view: memoryview, offset: int) -> Optional[InsufficientCapacityError]:
    if offset < 0:
        raise ValueError('offset cannot be negative')
    available = max(len(view) - offset, 0)
    # a buffer with exactly `width` bytes is enough
    if available < type_.width:
        return InsufficientCapacityError(f'need {type_.width} bytes, {available} available')
    return None


def decode_from(
    type_: PrimitiveType,
    source: Buffer,
    *,
    offset: int = 0,
    byte_order: Optional[ByteOrder] = None,
) -> Result[Any, InsufficientCapacityError]:
    """ Decode a value of `type_` from the first `type_.width` bytes of `source` starting at `offset`.

    Returns `Ok(value)` or `Err(InsufficientCapacityError)` when there aren't enough bytes.
    """
    view = _byte_view(source)
    if (error := _check_capacity(type_, view, offset)) is not None:
        return Err(error)
    fmt = type_.wire_format(resolve_byte_order(byte_order))
    raw, = struct.unpack_from(fmt, view, offset)
    return Ok(type_.from_wire(raw))


def encode_into(
    type_: PrimitiveType,
    value: Any,
    sink: Buffer,
    *,
    offset: int = 0,
    byte_order: Optional[ByteOrder] = None,
) -> Result[int, InsufficientCapacityError]:
    """ Encode `value` as `type_` into the first `type_.width` bytes of `sink` starting at `offset`.

    Returns `Ok(type_.width)` or `Err(InsufficientCapacityError)` when there isn't enough room, in which case `sink`
    is not modified. An invalid value raises (TypeError/ValueError) and so does a read-only `sink` (TypeError).
    """
    view = _byte_view(sink)
    if view.readonly:
        raise TypeError('sink buffer is read-only')
    type_.check_value(value)
    if (error := _check_capacity(type_, view, offset)) is not None:
        return Err(error)
    fmt = type_.wire_format(resolve_byte_order(byte_order))
    struct.pack_into(fmt, view, offset, type_.to_wire(value))
    return Ok(type_.width)
