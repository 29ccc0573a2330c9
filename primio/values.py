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

"""
Mutable holders for primitive values that can read and write themselves.

Each holder offers both disciplines: `binary_read`/`binary_write` against a byte buffer (see `primio.binary`) and
`stream_read`/`stream_write` against a byte stream (see `primio.stream`). Reads replace the held value in place, a
failed read leaves it untouched.

>>> v = U32(0x12345678)
>>> sink = bytearray(4)
>>> v.binary_write(sink, byte_order=ByteOrder.LITTLE)
Ok(4)
>>> bytes(sink).hex()
'78563412'
>>> w = U32()
>>> w.binary_read(sink, byte_order=ByteOrder.LITTLE)
Ok(4)
>>> w
U32(305419896)
>>> w.binary_read(sink[:3]).is_err(), w.value
(True, 305419896)
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from primio.primitives import ByteOrder, PrimitiveType
from primio.utils.result import Ok, Result, propagate_result

if TYPE_CHECKING:
    from typing_extensions import Buffer

    from primio.binary import InsufficientCapacityError
    from primio.stream import Sink, Source

T = TypeVar('T')


class Primitive(Generic[T]):
    """ Base class for holders of a single primitive value.

    Equality is bit-identical equality of the encoded value: two NaNs with the same payload are equal and `0.0` is not
    equal to `-0.0`. Holders are mutable and therefore not hashable.
    """

    __slots__ = ('_value',)
    __hash__ = None  # type: ignore[assignment]

    # XXX: subclass must define this value:
    _type: ClassVar[PrimitiveType]

    _value: T

    def __init__(self, value: Optional[T] = None) -> None:
        self._value = self._type.default() if value is None else self._type.coerce(value)

    @staticmethod
    def for_type(type_: PrimitiveType) -> type[Primitive[Any]]:
        """Get the holder class of a primitive type."""
        return _HOLDER_BY_TYPE[type_]

    @classmethod
    def primitive_type(cls) -> PrimitiveType:
        return cls._type

    @classmethod
    def width(cls) -> int:
        return cls._type.width

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._value = self._type.coerce(value)

    def _bits(self) -> bytes:
        return struct.pack(self._type.wire_format(ByteOrder.LITTLE), self._type.to_wire(self._value))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        assert isinstance(other, Primitive)
        return self._bits() == other._bits()

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._value!r})'

    @propagate_result
    def binary_read(
        self,
        source: Buffer,
        *,
        offset: int = 0,
        byte_order: Optional[ByteOrder] = None,
    ) -> Result[int, InsufficientCapacityError]:
        """Replace the value with the one decoded from `source`, returns the number of bytes consumed."""
        from primio.binary import decode_from
        self._value = decode_from(self._type, source, offset=offset, byte_order=byte_order).unwrap_or_propagate()
        return Ok(self._type.width)

    def binary_write(
        self,
        sink: Buffer,
        *,
        offset: int = 0,
        byte_order: Optional[ByteOrder] = None,
    ) -> Result[int, InsufficientCapacityError]:
        """Encode the value into `sink`, returns the number of bytes written."""
        from primio.binary import encode_into
        return encode_into(self._type, self._value, sink, offset=offset, byte_order=byte_order)

    def stream_read(self, source: Source, *, byte_order: Optional[ByteOrder] = None) -> None:
        """Replace the value with one read from `source`, stream errors are raised as they are."""
        from primio import stream
        self._value = stream.decode(self._type, source, byte_order=byte_order)

    def stream_write(self, sink: Sink, *, byte_order: Optional[ByteOrder] = None) -> None:
        """Write the value to `sink`, stream errors are raised as they are."""
        from primio import stream
        stream.encode(self._type, self._value, sink, byte_order=byte_order)


class U8(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.U8


class I8(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.I8


class U16(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.U16


class I16(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.I16


class U32(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.U32


class I32(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.I32


class U64(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.U64


class I64(Primitive[int]):
    __slots__ = ()
    _type = PrimitiveType.I64


class F32(Primitive[float]):
    __slots__ = ()
    _type = PrimitiveType.F32


class F64(Primitive[float]):
    __slots__ = ()
    _type = PrimitiveType.F64


class Bool(Primitive[bool]):
    __slots__ = ()
    _type = PrimitiveType.BOOL


_HOLDER_BY_TYPE: dict[PrimitiveType, type[Primitive[Any]]] = {
    holder._type: holder for holder in (U8, I8, U16, I16, U32, I32, U64, I64, F32, F64, Bool)
}
