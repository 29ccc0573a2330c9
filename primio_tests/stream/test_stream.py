import io
import math
import struct
import sys
from typing import Any, Optional

import pytest

from primio import stream
from primio.primitives import ByteOrder, PrimitiveType
from primio.serialization import Deserializer, OutOfDataError, Serializer, WriteZeroError

ALL_TYPES = list(PrimitiveType)

SAMPLE_VALUES: dict[PrimitiveType, list[Any]] = {
    PrimitiveType.U8: [0, 0xff],
    PrimitiveType.I8: [-128, 127],
    PrimitiveType.U16: [0x1234, 0xffff],
    PrimitiveType.I16: [-32768, 32767],
    PrimitiveType.U32: [0x12345678, 0xffffffff],
    PrimitiveType.I32: [-2**31, 2**31 - 1],
    PrimitiveType.U64: [0x0102030405060708, 2**64 - 1],
    PrimitiveType.I64: [-2**63, 2**63 - 1],
    PrimitiveType.F32: [-0.0, 1.5, -math.inf],
    PrimitiveType.F64: [-0.0, 0.1, 1.5, 5e-324],
    PrimitiveType.BOOL: [False, True],
}


class TrickleWriter(io.RawIOBase):
    """Accepts a single byte per write call."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.calls = 0

    def writable(self) -> bool:
        return True

    def write(self, b: Any) -> int:
        self.calls += 1
        chunk = bytes(memoryview(b)[:1])
        self.data += chunk
        return len(chunk)


class TrickleReader(io.RawIOBase):
    """Returns a single byte per read call."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> bytes:
        chunk = self._data[self._pos:self._pos + 1]
        self._pos += len(chunk)
        return chunk


class FullWriter(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, b: Any) -> int:
        return 0


class WouldBlockWriter(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, b: Any) -> None:  # type: ignore[override]
        return None


class BrokenPipeWriter(io.RawIOBase):
    def writable(self) -> bool:
        return True

    def write(self, b: Any) -> int:
        raise BrokenPipeError(32, 'Broken pipe')


class FailingReader(io.RawIOBase):
    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> bytes:
        raise ConnectionResetError(104, 'Connection reset by peer')


def _bits(type_: PrimitiveType, value: Any) -> bytes:
    return struct.pack(type_.struct_format(ByteOrder.LITTLE), value)


@pytest.mark.parametrize('byte_order', list(ByteOrder))
@pytest.mark.parametrize('type_', ALL_TYPES)
def test_round_trip_through_bytes_serializer(type_: PrimitiveType, byte_order: ByteOrder) -> None:
    for value in SAMPLE_VALUES[type_]:
        se = Serializer.build_bytes_serializer()
        stream.encode(type_, value, se, byte_order=byte_order)
        assert se.cur_pos() == type_.width
        data = bytes(se.finalize())
        assert len(data) == type_.width

        de = Deserializer.build_bytes_deserializer(data)
        decoded = stream.decode(type_, de, byte_order=byte_order)
        assert _bits(type_, decoded) == _bits(type_, value)
        de.finalize()


@pytest.mark.parametrize('type_', ALL_TYPES)
def test_round_trip_through_file_object(type_: PrimitiveType) -> None:
    fp = io.BytesIO()
    for value in SAMPLE_VALUES[type_]:
        stream.encode(type_, value, fp)
    assert fp.tell() == type_.width * len(SAMPLE_VALUES[type_])

    fp.seek(0)
    for value in SAMPLE_VALUES[type_]:
        position = fp.tell()
        decoded = stream.decode(type_, fp)
        assert fp.tell() - position == type_.width
        assert _bits(type_, decoded) == _bits(type_, value)
    assert fp.read() == b''


@pytest.mark.parametrize('type_', ALL_TYPES)
def test_same_bytes_as_buffer_codec(type_: PrimitiveType) -> None:
    from primio.binary import encode_into
    for byte_order in ByteOrder:
        for value in SAMPLE_VALUES[type_]:
            buffer = bytearray(type_.width)
            encode_into(type_, value, buffer, byte_order=byte_order)
            fp = io.BytesIO()
            stream.encode(type_, value, fp, byte_order=byte_order)
            assert fp.getvalue() == bytes(buffer)


@pytest.mark.parametrize('type_', ALL_TYPES)
def test_short_stream_fails(type_: PrimitiveType) -> None:
    data = bytes(type_.width - 1)

    with pytest.raises(OutOfDataError):
        stream.decode(type_, io.BytesIO(data))

    with pytest.raises(OutOfDataError):
        stream.decode(type_, Deserializer.build_bytes_deserializer(data))

    # it's also an EOFError for callers that only know about the standard library
    with pytest.raises(EOFError):
        stream.decode(type_, TrickleReader(data))


def test_short_writes_are_completed() -> None:
    fp = TrickleWriter()
    stream.encode(PrimitiveType.U64, 0x0102030405060708, fp, byte_order=ByteOrder.BIG)
    assert bytes(fp.data) == bytes([1, 2, 3, 4, 5, 6, 7, 8])
    assert fp.calls == 8


def test_short_reads_are_completed() -> None:
    fp = TrickleReader(bytes([1, 2, 3, 4, 5, 6, 7, 8, 9]))
    assert stream.decode(PrimitiveType.U64, fp, byte_order=ByteOrder.BIG) == 0x0102030405060708
    assert stream.decode(PrimitiveType.U8, fp) == 9


def test_write_without_progress_fails() -> None:
    with pytest.raises(WriteZeroError):
        stream.encode(PrimitiveType.U32, 1, FullWriter())
    with pytest.raises(OSError):
        stream.encode(PrimitiveType.U32, 1, FullWriter())


def test_non_blocking_writer_fails() -> None:
    with pytest.raises(BlockingIOError):
        stream.encode(PrimitiveType.U16, 1, WouldBlockWriter())


def test_stream_errors_are_not_wrapped() -> None:
    with pytest.raises(BrokenPipeError) as write_error:
        stream.encode(PrimitiveType.I32, -1, BrokenPipeWriter())
    assert write_error.value.errno == 32
    assert write_error.value.__cause__ is None

    with pytest.raises(ConnectionResetError) as read_error:
        stream.decode(PrimitiveType.I32, FailingReader())
    assert read_error.value.errno == 104
    assert read_error.value.__cause__ is None


def test_invalid_value_writes_nothing() -> None:
    fp = io.BytesIO()
    with pytest.raises(ValueError):
        stream.encode(PrimitiveType.I8, 128, fp)
    with pytest.raises(TypeError):
        stream.encode(PrimitiveType.BOOL, 0, fp)
    with pytest.raises(ValueError):
        stream.encode(PrimitiveType.F32, 1e39, fp)
    assert fp.getvalue() == b''


def test_bool_mapping() -> None:
    assert stream.decode(PrimitiveType.BOOL, io.BytesIO(b'\x02')) is False
    assert stream.decode(PrimitiveType.BOOL, io.BytesIO(b'\xff')) is False
    assert stream.decode(PrimitiveType.BOOL, io.BytesIO(b'\x00')) is False
    assert stream.decode(PrimitiveType.BOOL, io.BytesIO(b'\x01')) is True

    fp = io.BytesIO()
    stream.encode(PrimitiveType.BOOL, True, fp)
    stream.encode(PrimitiveType.BOOL, False, fp)
    assert fp.getvalue() == b'\x01\x00'


@pytest.mark.skipif(sys.byteorder != 'little', reason='native byte order is big-endian')
def test_u32_native_layout_on_little_endian() -> None:
    fp = io.BytesIO()
    stream.encode(PrimitiveType.U32, 305419896, fp)
    assert fp.getvalue() == bytes([0x78, 0x56, 0x34, 0x12])
    fp.seek(0)
    assert stream.decode(PrimitiveType.U32, fp) == 305419896


@pytest.mark.parametrize('bits', ['7ff8000000000000', '7ff0000000000001', 'fff8000000000abc'])
def test_f64_nan_payloads_are_preserved(bits: str) -> None:
    source = bytes.fromhex(bits)
    value = stream.decode(PrimitiveType.F64, io.BytesIO(source), byte_order=ByteOrder.BIG)
    assert math.isnan(value)
    fp = io.BytesIO()
    stream.encode(PrimitiveType.F64, value, fp, byte_order=ByteOrder.BIG)
    assert fp.getvalue() == source


def test_values_follow_each_other_in_a_stream() -> None:
    fp = io.BytesIO()
    se = Serializer.build_io_serializer(fp)
    stream.encode(PrimitiveType.U8, 1, se)
    stream.encode(PrimitiveType.I16, -2, se)
    stream.encode(PrimitiveType.F32, 0.5, se)
    stream.encode(PrimitiveType.BOOL, True, se)
    assert se.cur_pos() == 1 + 2 + 4 + 1

    fp.seek(0)
    de = Deserializer.build_io_deserializer(fp)
    assert stream.decode(PrimitiveType.U8, de) == 1
    assert stream.decode(PrimitiveType.I16, de) == -2
    assert stream.decode(PrimitiveType.F32, de) == 0.5
    assert stream.decode(PrimitiveType.BOOL, de) is True
    de.finalize()


@pytest.mark.parametrize('bits', ['7fc00001', 'ffc12345', '7f800001', 'ff800123', '7fbfffff'])
def test_f32_nan_payloads_are_preserved(bits: str) -> None:
    source = bytes.fromhex(bits)
    value = stream.decode(PrimitiveType.F32, io.BytesIO(source), byte_order=ByteOrder.BIG)
    assert math.isnan(value)
    fp = io.BytesIO()
    stream.encode(PrimitiveType.F32, value, fp, byte_order=ByteOrder.BIG)
    assert fp.getvalue() == source

    # little-endian carries the same bits, reversed
    fp = io.BytesIO()
    stream.encode(PrimitiveType.F32, value, fp, byte_order=ByteOrder.LITTLE)
    assert fp.getvalue() == source[::-1]
    fp.seek(0)
    again = stream.decode(PrimitiveType.F32, fp, byte_order=ByteOrder.LITTLE)
    assert struct.pack('<d', again) == struct.pack('<d', value)
