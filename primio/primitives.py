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
The primitive types that can be encoded and their byte widths.

>>> PrimitiveType.U32.width
4
>>> PrimitiveType.from_label('i16').struct_format(ByteOrder.BIG)
'>h'
>>> PrimitiveType.I8.lower_bound(), PrimitiveType.I8.upper_bound()
(-128, 127)
"""

from __future__ import annotations

import math
import struct
import sys
from enum import Enum, unique
from typing import Any, Literal


@unique
class ByteOrder(Enum):
    """Byte order used on the wire.

    `NATIVE` is whatever the executing platform uses, data written with it can only be read back on a platform with
    the same byte order. `LITTLE` and `BIG` give a fixed, portable layout.
    """

    NATIVE = 'native'
    LITTLE = 'little'
    BIG = 'big'

    def struct_prefix(self) -> str:
        # '=' is native order with standard sizes and no alignment padding
        return _STRUCT_PREFIXES[self]

    def resolve(self) -> Literal['little', 'big']:
        """Concrete order, as accepted by `int.to_bytes`."""
        if self is ByteOrder.NATIVE:
            return sys.byteorder
        return 'little' if self is ByteOrder.LITTLE else 'big'


_STRUCT_PREFIXES = {
    ByteOrder.NATIVE: '=',
    ByteOrder.LITTLE: '<',
    ByteOrder.BIG: '>',
}


@unique
class PrimitiveKind(Enum):
    INT = 'int'
    FLOAT = 'float'
    BOOL = 'bool'


@unique
class PrimitiveType(Enum):
    """ Fixed-width primitive types.

    Each member carries its label, width in bytes, kind, signedness and `struct` format character.
    """

    U8 = ('u8', 1, PrimitiveKind.INT, False, 'B')
    I8 = ('i8', 1, PrimitiveKind.INT, True, 'b')
    U16 = ('u16', 2, PrimitiveKind.INT, False, 'H')
    I16 = ('i16', 2, PrimitiveKind.INT, True, 'h')
    U32 = ('u32', 4, PrimitiveKind.INT, False, 'I')
    I32 = ('i32', 4, PrimitiveKind.INT, True, 'i')
    U64 = ('u64', 8, PrimitiveKind.INT, False, 'Q')
    I64 = ('i64', 8, PrimitiveKind.INT, True, 'q')
    F32 = ('f32', 4, PrimitiveKind.FLOAT, True, 'f')
    F64 = ('f64', 8, PrimitiveKind.FLOAT, True, 'd')
    # a bool travels as a single unsigned byte, see `primio.serialization.encoding.bool`
    BOOL = ('bool', 1, PrimitiveKind.BOOL, False, 'B')

    label: str
    width: int
    kind: PrimitiveKind
    signed: bool
    _code: str

    def __init__(self, label: str, width: int, kind: PrimitiveKind, signed: bool, code: str) -> None:
        self.label = label
        self.width = width
        self.kind = kind
        self.signed = signed
        self._code = code

    def __repr__(self) -> str:
        return f'<{type(self).__name__}.{self.name}>'

    @classmethod
    def from_label(cls, label: str) -> PrimitiveType:
        for type_ in cls:
            if type_.label == label:
                return type_
        raise ValueError(f'unknown primitive type: {label!r}')

    def struct_format(self, byte_order: ByteOrder = ByteOrder.NATIVE) -> str:
        """Format string for `struct` covering exactly `self.width` bytes."""
        return byte_order.struct_prefix() + self._code

    def wire_format(self, byte_order: ByteOrder = ByteOrder.NATIVE) -> str:
        """ Format string for the value returned by `to_wire`.

        Same as `struct_format` except for f32, which travels as its bit pattern in an unsigned 32-bit integer.
        """
        if self is PrimitiveType.F32:
            return byte_order.struct_prefix() + 'I'
        return self.struct_format(byte_order)

    def to_wire(self, value: Any) -> Any:
        """Raw value to pack with `wire_format`, `value` must have passed `check_value`."""
        match self.kind:
            case PrimitiveKind.BOOL:
                return bool_to_byte(value)
            case PrimitiveKind.FLOAT if self is PrimitiveType.F32:
                return f32_to_bits(float(value))
            case _:
                return value

    def from_wire(self, raw: Any) -> Any:
        """Inverse of `to_wire`, for a raw value unpacked with `wire_format`."""
        match self.kind:
            case PrimitiveKind.BOOL:
                return byte_to_bool(raw)
            case PrimitiveKind.FLOAT if self is PrimitiveType.F32:
                return f32_from_bits(raw)
            case _:
                return raw

    def upper_bound(self) -> int | None:
        if self.kind is not PrimitiveKind.INT:
            return None
        if self.signed:
            return 2**(self.width * 8 - 1) - 1
        else:
            return 2**(self.width * 8) - 1

    def lower_bound(self) -> int | None:
        if self.kind is not PrimitiveKind.INT:
            return None
        if self.signed:
            return -(2**(self.width * 8 - 1))
        else:
            return 0

    def check_value(self, value: Any) -> None:
        """Raise TypeError if `value` has the wrong Python type and ValueError if it cannot be represented."""
        match self.kind:
            case PrimitiveKind.INT:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise TypeError('expected integer')
                self._check_range(value)
            case PrimitiveKind.FLOAT:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise TypeError('expected float')
                self._to_float(value)
            case PrimitiveKind.BOOL:
                if not isinstance(value, bool):
                    raise TypeError('expected boolean')

    def _check_range(self, value: int) -> None:
        upper_bound = self.upper_bound()
        lower_bound = self.lower_bound()
        if upper_bound is not None and value > upper_bound:
            raise ValueError('above upper bound')
        if lower_bound is not None and value < lower_bound:
            raise ValueError('below lower bound')

    def _to_float(self, value: int | float) -> float:
        try:
            as_float = float(value)
        except OverflowError:
            raise ValueError(f'too big for {self.label}')
        if self is PrimitiveType.F32:
            # raises when a finite value does not fit
            f32_to_bits(as_float)
        return as_float

    def coerce(self, value: Any) -> Any:
        """ Check `value` and return it in canonical form.

        Integers come back as plain `int`, floats as `float` (rounded to the nearest single precision value for f32)
        and booleans unchanged.

        >>> PrimitiveType.F32.coerce(0.1)
        0.10000000149011612
        >>> PrimitiveType.F64.coerce(3)
        3.0
        """
        self.check_value(value)
        match self.kind:
            case PrimitiveKind.INT:
                return int(value)
            case PrimitiveKind.FLOAT:
                as_float = float(value)
                if self is PrimitiveType.F32:
                    return f32_from_bits(f32_to_bits(as_float))
                return as_float
            case PrimitiveKind.BOOL:
                return value

    def default(self) -> Any:
        """The zero value of this type."""
        match self.kind:
            case PrimitiveKind.INT:
                return 0
            case PrimitiveKind.FLOAT:
                return 0.0
            case PrimitiveKind.BOOL:
                return False


def width(type_: PrimitiveType) -> int:
    """Number of bytes a value of `type_` occupies."""
    return type_.width


def bool_to_byte(value: bool) -> int:
    """`True` is written as 0x01 and `False` as 0x00."""
    return 0x01 if value else 0x00


def byte_to_bool(byte: int) -> bool:
    """Only 0x01 reads as `True`, any other byte value reads as `False` (never an error)."""
    return byte == 0x01


_F32_SIGN_SHIFT = 31
_F32_EXPONENT_MASK = 0x7f800000
_F32_MANTISSA_MASK = 0x007fffff
_F32_QUIET_BIT = 0x00400000
_F64_SIGN_SHIFT = 63
_F64_EXPONENT_MASK = 0x7ff0000000000000
# the binary64 mantissa has 29 more bits than the binary32 one
_MANTISSA_SHIFT = 52 - 23


def f32_from_bits(bits: int) -> float:
    """ The float holding the binary32 value with bit pattern `bits`.

    NaNs are widened by hand: the platform conversion from single to double sets the quiet bit, which would turn a
    signalling NaN into a different (quiet) one. Done this way every NaN payload survives `f32_to_bits`.

    >>> f32_from_bits(0x3fc00000)
    1.5
    >>> hex(f32_to_bits(f32_from_bits(0x7f800001)))
    '0x7f800001'
    """
    if bits & _F32_EXPONENT_MASK == _F32_EXPONENT_MASK and bits & _F32_MANTISSA_MASK:
        double_bits = ((bits >> _F32_SIGN_SHIFT) << _F64_SIGN_SHIFT | _F64_EXPONENT_MASK
                       | (bits & _F32_MANTISSA_MASK) << _MANTISSA_SHIFT)
        value, = struct.unpack('<d', double_bits.to_bytes(8, 'little'))
        return value
    value, = struct.unpack('<f', bits.to_bytes(4, 'little'))
    return value


def f32_to_bits(value: float) -> int:
    """ Bit pattern of `value` as a binary32, rounded to the nearest single precision value.

    Raises ValueError for a finite value too big for f32. A NaN keeps its sign and the top 23 bits of its payload, a
    NaN whose payload only has lower bits set becomes the quiet NaN of the same sign.
    """
    if math.isnan(value):
        double_bits = int.from_bytes(struct.pack('<d', value), 'little')
        mantissa = (double_bits >> _MANTISSA_SHIFT) & _F32_MANTISSA_MASK
        # a zero mantissa would be an infinity
        return (double_bits >> _F64_SIGN_SHIFT) << _F32_SIGN_SHIFT | _F32_EXPONENT_MASK | (mantissa or _F32_QUIET_BIT)
    try:
        return int.from_bytes(struct.pack('<f', value), 'little')
    except OverflowError:
        raise ValueError('too big for f32')
