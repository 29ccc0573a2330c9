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
This module implements encoding of IEEE-754 binary floats, either 4 bytes (single precision) or 8 bytes (double).

The bits are copied as they are: NaN payloads (signalling ones included) and the sign of zero are kept. A single
precision value goes through its bit pattern, see `primio.primitives.f32_from_bits`.

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, 1.5, length=8, byte_order=ByteOrder.BIG)
>>> encode_float(se, -0.0, length=4, byte_order=ByteOrder.LITTLE)
>>> bytes(se.finalize()).hex()
'3ff800000000000000000080'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('3ff800000000000000000080'))
>>> decode_float(de, length=8, byte_order=ByteOrder.BIG)
1.5
>>> decode_float(de, length=4, byte_order=ByteOrder.LITTLE)
-0.0
"""

import struct

from primio.primitives import ByteOrder, f32_from_bits, f32_to_bits
from primio.serialization import Deserializer, Serializer


def _check_length(length: int) -> None:
    if length not in (4, 8):
        raise ValueError(f'unsupported float length: {length}')


def encode_float(serializer: Serializer, value: float, *, length: int, byte_order: ByteOrder) -> None:
    """ Encode a float using the given byte-length (4 or 8) and byte order.
    """
    _check_length(length)
    try:
        if length == 4:
            data = struct.pack(byte_order.struct_prefix() + 'I', f32_to_bits(float(value)))
        else:
            data = struct.pack(byte_order.struct_prefix() + 'd', value)
    except OverflowError:
        raise ValueError('too big to encode')
    serializer.write_bytes(data)


def decode_float(deserializer: Deserializer, *, length: int, byte_order: ByteOrder) -> float:
    """ Decode a float using the given byte-length (4 or 8) and byte order.
    """
    _check_length(length)
    data = deserializer.read_bytes(length)
    if length == 4:
        bits, = struct.unpack(byte_order.struct_prefix() + 'I', data)
        return f32_from_bits(bits)
    value, = struct.unpack(byte_order.struct_prefix() + 'd', data)
    return value
