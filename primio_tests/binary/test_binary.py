import array
import math
import struct
import sys
from typing import Any

import pytest

from primio.binary import InsufficientCapacityError, decode_from, encode_into
from primio.primitives import ByteOrder, PrimitiveKind, PrimitiveType
from primio.utils.result import Err, Ok, UnwrapError

ALL_TYPES = list(PrimitiveType)

SAMPLE_VALUES: dict[PrimitiveType, list[Any]] = {
    PrimitiveType.U8: [0, 1, 0x7f, 0xff],
    PrimitiveType.I8: [0, -1, -128, 127],
    PrimitiveType.U16: [0, 0x1234, 0xffff],
    PrimitiveType.I16: [0, -2, -32768, 32767],
    PrimitiveType.U32: [0, 0x12345678, 0xffffffff],
    PrimitiveType.I32: [0, -1234567, -2**31, 2**31 - 1],
    PrimitiveType.U64: [0, 0x0102030405060708, 2**64 - 1],
    PrimitiveType.I64: [0, -1, -2**63, 2**63 - 1],
    PrimitiveType.F32: [0.0, -0.0, 1.5, -2.25, math.inf, -math.inf],
    PrimitiveType.F64: [0.0, -0.0, 1.5, 0.1, -1e300, math.inf, 5e-324],
    PrimitiveType.BOOL: [False, True],
}

FILL = 0xaa


def _sample(type_: PrimitiveType) -> Any:
    return SAMPLE_VALUES[type_][-1]


def _bits(type_: PrimitiveType, value: Any) -> bytes:
    return struct.pack(type_.struct_format(ByteOrder.LITTLE), value)


@pytest.mark.parametrize('byte_order', list(ByteOrder))
@pytest.mark.parametrize('type_', ALL_TYPES)
def test_round_trip_with_exact_buffer(type_: PrimitiveType, byte_order: ByteOrder) -> None:
    for value in SAMPLE_VALUES[type_]:
        buffer = bytearray(type_.width)
        assert encode_into(type_, value, buffer, byte_order=byte_order) == Ok(type_.width)
        result = decode_from(type_, buffer, byte_order=byte_order)
        assert result.is_ok()
        decoded = result.unwrap()
        assert _bits(type_, decoded) == _bits(type_, value)


@pytest.mark.parametrize('type_', ALL_TYPES)
def test_exact_width_buffer_succeeds(type_: PrimitiveType) -> None:
    sink = bytearray(type_.width)
    assert encode_into(type_, _sample(type_), sink) == Ok(type_.width)
    assert decode_from(type_, bytes(sink)).is_ok()


@pytest.mark.parametrize('type_', ALL_TYPES)
def test_one_byte_short_fails(type_: PrimitiveType) -> None:
    short = bytearray([FILL] * (type_.width - 1))

    result = decode_from(type_, bytes(short))
    assert result.is_err()
    assert isinstance(result.err(), InsufficientCapacityError)

    result = encode_into(type_, _sample(type_), short)
    assert result.is_err()
    assert isinstance(result.err(), InsufficientCapacityError)
    # no partial write
    assert short == bytearray([FILL] * (type_.width - 1))


@pytest.mark.parametrize('extra', [1, 2, 7, 64])
@pytest.mark.parametrize('type_', ALL_TYPES)
def test_larger_buffer_only_touches_width(type_: PrimitiveType, extra: int) -> None:
    sink = bytearray([FILL] * (type_.width + extra))
    assert encode_into(type_, _sample(type_), sink) == Ok(type_.width)
    assert sink[type_.width:] == bytearray([FILL] * extra)

    source = bytes(sink)
    result = decode_from(type_, source)
    assert _bits(type_, result.unwrap()) == _bits(type_, _sample(type_))
    assert source == bytes(sink)


@pytest.mark.parametrize('type_', ALL_TYPES)
def test_empty_buffer_fails(type_: PrimitiveType) -> None:
    assert decode_from(type_, b'').is_err()
    assert encode_into(type_, _sample(type_), bytearray()).is_err()


def test_offset() -> None:
    sink = bytearray([FILL] * 6)
    assert encode_into(PrimitiveType.U16, 0x0102, sink, offset=2, byte_order=ByteOrder.BIG) == Ok(2)
    assert sink == bytearray([FILL, FILL, 0x01, 0x02, FILL, FILL])
    assert decode_from(PrimitiveType.U16, sink, offset=2, byte_order=ByteOrder.BIG) == Ok(0x0102)

    # exactly enough room at the end of the buffer
    assert encode_into(PrimitiveType.U16, 0x0304, sink, offset=4, byte_order=ByteOrder.BIG) == Ok(2)
    assert sink[4:] == bytearray([0x03, 0x04])

    # not enough room, and an offset past the end
    assert decode_from(PrimitiveType.U16, sink, offset=5) == Err(InsufficientCapacityError('need 2 bytes, 1 available'))
    too_far = decode_from(PrimitiveType.U16, sink, offset=10)
    assert too_far == Err(InsufficientCapacityError('need 2 bytes, 0 available'))
    assert encode_into(PrimitiveType.U16, 0xffff, sink, offset=5).is_err()
    assert sink[4:] == bytearray([0x03, 0x04])


def test_negative_offset_is_rejected() -> None:
    with pytest.raises(ValueError):
        decode_from(PrimitiveType.U8, b'\x00', offset=-1)
    with pytest.raises(ValueError):
        encode_into(PrimitiveType.U8, 0, bytearray(1), offset=-1)


def test_read_only_sink_is_rejected() -> None:
    with pytest.raises(TypeError):
        encode_into(PrimitiveType.U8, 1, b'\x00')
    with pytest.raises(TypeError):
        encode_into(PrimitiveType.U8, 1, memoryview(bytearray(1)).toreadonly())


def test_invalid_value_raises_before_capacity_check() -> None:
    with pytest.raises(ValueError):
        encode_into(PrimitiveType.U8, 256, bytearray(1))
    with pytest.raises(ValueError):
        encode_into(PrimitiveType.I16, -32769, bytearray())
    with pytest.raises(TypeError):
        encode_into(PrimitiveType.BOOL, 1, bytearray(1))
    with pytest.raises(ValueError):
        encode_into(PrimitiveType.F32, 1e39, bytearray(4))


def test_other_buffer_types() -> None:
    sink = memoryview(bytearray(8))
    assert encode_into(PrimitiveType.I64, -5, sink[2:]).is_err()
    assert encode_into(PrimitiveType.U32, 7, sink[4:]) == Ok(4)
    assert decode_from(PrimitiveType.U32, sink[4:]) == Ok(7)

    # multi-byte item formats are handled as raw bytes
    words = array.array('H', [0, 0])
    assert encode_into(PrimitiveType.U32, 0x01020304, words, byte_order=ByteOrder.BIG) == Ok(4)
    assert words.tobytes() == bytes([1, 2, 3, 4])
    assert decode_from(PrimitiveType.U32, words, byte_order=ByteOrder.BIG) == Ok(0x01020304)


def test_bool_mapping() -> None:
    assert decode_from(PrimitiveType.BOOL, b'\x01') == Ok(True)
    assert decode_from(PrimitiveType.BOOL, b'\x00') == Ok(False)
    assert decode_from(PrimitiveType.BOOL, b'\x02') == Ok(False)
    assert decode_from(PrimitiveType.BOOL, b'\xff') == Ok(False)

    sink = bytearray([FILL])
    assert encode_into(PrimitiveType.BOOL, True, sink) == Ok(1)
    assert sink == b'\x01'
    assert encode_into(PrimitiveType.BOOL, False, sink) == Ok(1)
    assert sink == b'\x00'


@pytest.mark.skipif(sys.byteorder != 'little', reason='native byte order is big-endian')
def test_u32_native_layout_on_little_endian() -> None:
    sink = bytearray(4)
    assert encode_into(PrimitiveType.U32, 305419896, sink) == Ok(4)
    assert sink == bytes([0x78, 0x56, 0x34, 0x12])
    assert decode_from(PrimitiveType.U32, sink) == Ok(305419896)


def test_u32_fixed_byte_orders() -> None:
    sink = bytearray(4)
    encode_into(PrimitiveType.U32, 0x12345678, sink, byte_order=ByteOrder.LITTLE)
    assert sink == bytes([0x78, 0x56, 0x34, 0x12])
    encode_into(PrimitiveType.U32, 0x12345678, sink, byte_order=ByteOrder.BIG)
    assert sink == bytes([0x12, 0x34, 0x56, 0x78])
    expected_native = (0x12345678).to_bytes(4, sys.byteorder)
    encode_into(PrimitiveType.U32, 0x12345678, sink, byte_order=ByteOrder.NATIVE)
    assert sink == expected_native


def test_f64_exact_round_trip() -> None:
    sink = bytearray(8)
    assert encode_into(PrimitiveType.F64, 1.5, sink) == Ok(8)
    decoded = decode_from(PrimitiveType.F64, sink).unwrap()
    assert decoded == 1.5
    assert struct.pack('=d', decoded) == struct.pack('=d', 1.5)


def test_u64_from_seven_bytes_fails() -> None:
    result = decode_from(PrimitiveType.U64, bytes(7))
    assert result == Err(InsufficientCapacityError('need 8 bytes, 7 available'))
    with pytest.raises(UnwrapError) as e:
        result.unwrap()
    assert isinstance(e.value.__cause__, InsufficientCapacityError)
    with pytest.raises(InsufficientCapacityError):
        result.unwrap_or_raise()


@pytest.mark.parametrize('bits', ['7ff8000000000000', '7ff0000000000001', 'fff8000000000abc', '7ff4000000000000'])
def test_f64_nan_payloads_are_preserved(bits: str) -> None:
    source = bytes.fromhex(bits)
    value = decode_from(PrimitiveType.F64, source, byte_order=ByteOrder.BIG).unwrap()
    assert math.isnan(value)
    sink = bytearray(8)
    encode_into(PrimitiveType.F64, value, sink, byte_order=ByteOrder.BIG)
    assert bytes(sink) == source


@pytest.mark.parametrize(
    'bits',
    ['7fc00000', '7fc00001', 'ffc12345', '7fffffff', '7f800001', 'ff800123', '7fbfffff', 'ff800001'],
)
def test_f32_nan_payloads_are_preserved(bits: str) -> None:
    source = bytes.fromhex(bits)
    value = decode_from(PrimitiveType.F32, source, byte_order=ByteOrder.BIG).unwrap()
    assert math.isnan(value)
    sink = bytearray(4)
    encode_into(PrimitiveType.F32, value, sink, byte_order=ByteOrder.BIG)
    assert bytes(sink) == source


@pytest.mark.parametrize('type_', [PrimitiveType.F32, PrimitiveType.F64])
def test_signed_zero_is_preserved(type_: PrimitiveType) -> None:
    sink = bytearray(type_.width)
    encode_into(type_, -0.0, sink)
    value = decode_from(type_, sink).unwrap()
    assert value == 0.0
    assert math.copysign(1.0, value) == -1.0


def test_decoded_value_kinds() -> None:
    for type_ in PrimitiveType:
        value = decode_from(type_, bytes(type_.width)).unwrap()
        match type_.kind:
            case PrimitiveKind.INT:
                assert type(value) is int
            case PrimitiveKind.FLOAT:
                assert type(value) is float
            case PrimitiveKind.BOOL:
                assert value is False
