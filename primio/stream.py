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
Stream codec: read or write a primitive value through a blocking byte stream.

The stream is either a `Serializer`/`Deserializer` or a binary file object, which gets wrapped with
`Serializer.build_io_serializer`/`Deserializer.build_io_deserializer`. Exactly `type_.width` bytes are requested from
or handed to the stream. Whatever the stream raises (`OutOfDataError` on a premature end, `WriteZeroError`, any
`OSError` from a file object) reaches the caller unchanged, nothing is retried.

>>> import io
>>> fp = io.BytesIO()
>>> encode(PrimitiveType.I16, -2, fp, byte_order=ByteOrder.BIG)
>>> encode(PrimitiveType.BOOL, True, fp)
>>> fp.getvalue()
b'\xff\xfe\x01'
>>> _ = fp.seek(0)
>>> decode(PrimitiveType.I16, fp, byte_order=ByteOrder.BIG), decode(PrimitiveType.BOOL, fp)
(-2, True)
>>> decode(PrimitiveType.U8, fp)
Traceback (most recent call last):
    ...
primio.serialization.exceptions.OutOfDataError: failed to fill whole buffer
"""

from typing import Any, BinaryIO, Optional, Union

from primio.conf.get_settings import resolve_byte_order
from primio.primitives import ByteOrder, PrimitiveKind, PrimitiveType
from primio.serialization import Deserializer, Serializer
from primio.serialization.encoding.bool import decode_bool, encode_bool
from primio.serialization.encoding.float import decode_float, encode_float
from primio.serialization.encoding.int import decode_int, encode_int

Source = Union[Deserializer, BinaryIO]
Sink = Union[Serializer, BinaryIO]


def as_deserializer(source: Source) -> Deserializer:
    if isinstance(source, Deserializer):
        return source
    return Deserializer.build_io_deserializer(source)


def as_serializer(sink: Sink) -> Serializer:
    if isinstance(sink, Serializer):
        return sink
    return Serializer.build_io_serializer(sink)


def decode(type_: PrimitiveType, source: Source, *, byte_order: Optional[ByteOrder] = None) -> Any:
    """ Read exactly `type_.width` bytes from `source` and return the decoded value.
    """
    deserializer = as_deserializer(source)
    match type_.kind:
        case PrimitiveKind.INT:
            return decode_int(
                deserializer,
                length=type_.width,
                signed=type_.signed,
                byte_order=resolve_byte_order(byte_order),
            )
        case PrimitiveKind.FLOAT:
            return decode_float(deserializer, length=type_.width, byte_order=resolve_byte_order(byte_order))
        case PrimitiveKind.BOOL:
            return decode_bool(deserializer)
        case _:
            raise NotImplementedError(type_)


def encode(type_: PrimitiveType, value: Any, sink: Sink, *, byte_order: Optional[ByteOrder] = None) -> None:
    """ Write `value` as `type_` to `sink`, exactly `type_.width` bytes.

    An invalid value raises TypeError/ValueError before anything is written.
    """
    type_.check_value(value)
    serializer = as_serializer(sink)
    match type_.kind:
        case PrimitiveKind.INT:
            encode_int(
                serializer,
                value,
                length=type_.width,
                signed=type_.signed,
                byte_order=resolve_byte_order(byte_order),
            )
        case PrimitiveKind.FLOAT:
            encode_float(serializer, value, length=type_.width, byte_order=resolve_byte_order(byte_order))
        case PrimitiveKind.BOOL:
            encode_bool(serializer, value)
        case _:
            raise NotImplementedError(type_)
