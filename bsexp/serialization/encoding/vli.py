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

"""
This module implements VLI (Variable-Length Integer) for unsigned 64-bit integers.

VLI is based on unsigned LEB128: the value is split in 7-bit groups, least significant first, and every byte carries a
continuation bit (MSB) that is set when more bytes follow. The difference is that VLI is capped at 9 bytes: after 8
bytes with a continuation bit (56 bits of payload) the 9th byte carries the 8 remaining bits verbatim and is always the
last one. That way every value in `[0, 2**64)` fits in at most 9 bytes and no byte is wasted on the last group.

The encoding length is always the minimum for the value, so equal values always have equal encodings:

    value < 2**7   -> 1 byte
    value < 2**14  -> 2 bytes
    ...
    value < 2**56  -> 8 bytes
    otherwise      -> 9 bytes

>>> se = Serializer.build_bytes_serializer()
>>> se.write_bytes(b'test')  # writes 74657374
>>> encode_vli(se, 0)  # writes 00
>>> encode_vli(se, 624485)  # writes e58e26
>>> encode_vli(se, 2**56)  # writes 808080808080808001
>>> bytes(se.finalize()).hex()
'7465737400e58e26808080808080808001'

>>> data = bytes.fromhex('00 e58e26 808080808080808001 ffffffffffffffffff 74657374')
>>> de = Deserializer.build_bytes_deserializer(data)
>>> decode_vli(de).unwrap()  # reads 00
0
>>> decode_vli(de).unwrap()  # reads e58e26
624485
>>> decode_vli(de).unwrap() == 2**56  # reads 808080808080808001
True
>>> decode_vli(de).unwrap() == 2**64 - 1  # reads ffffffffffffffffff
True
>>> bytes(de.read_all().unwrap())  # reads 74657374
b'test'
>>> de.finalize()
Ok(None)

Running out of data before the terminating byte is an error:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('e58e'))
>>> decode_vli(de)
Err(TruncatedInputError('not enough bytes to read'))
"""

from bsexp.serialization import Deserializer, SerializationError, Serializer
from bsexp.utils.result import Ok, Result, propagate_result

VLI_MAX_VALUE = 2**64 - 1

# number of bytes that carry a continuation bit, the byte after them (if any) is a full 8-bit group
_CONTINUATION_BYTES = 8
_GROUP_BITS = 7
_GROUP_MASK = 0b0111_1111
_CONTINUATION_FLAG = 0b1000_0000


def vli_size(value: int) -> int:
    """ Number of bytes `encode_vli` uses for the given value.

    >>> [vli_size(n) for n in (0, 127, 128, 16383, 16384, 2**56 - 1, 2**56, 2**64 - 1)]
    [1, 1, 2, 2, 3, 8, 9, 9]
    """
    _check_range(value)
    size = 1
    value >>= _GROUP_BITS
    while value and size < _CONTINUATION_BYTES + 1:
        size += 1
        value >>= _GROUP_BITS
    return size


def encode_vli(serializer: Serializer, value: int) -> None:
    """ Encodes an unsigned 64-bit integer using VLI.

    This module's docstring has more details on VLI and examples.
    """
    _check_range(value)
    for _ in range(_CONTINUATION_BYTES):
        byte = value & _GROUP_MASK
        value >>= _GROUP_BITS
        if value == 0:
            serializer.write_byte(byte)
            return
        serializer.write_byte(byte | _CONTINUATION_FLAG)
    # at this point value < 2**8 because of the range check
    serializer.write_byte(value)


@propagate_result
def decode_vli(deserializer: Deserializer) -> Result[int, SerializationError]:
    """ Decodes a VLI-encoded unsigned integer.

    Non-minimal encodings (like `80 00` for 0) are accepted.

    This module's docstring has more details on VLI and examples.
    """
    result = 0
    shift = 0
    for _ in range(_CONTINUATION_BYTES):
        byte = deserializer.read_byte().unwrap_or_propagate()
        result |= (byte & _GROUP_MASK) << shift
        shift += _GROUP_BITS
        if (byte & _CONTINUATION_FLAG) == 0:
            return Ok(result)
    assert shift == _CONTINUATION_BYTES * _GROUP_BITS
    byte = deserializer.read_byte().unwrap_or_propagate()
    return Ok(result | (byte << shift))


def _check_range(value: int) -> None:
    if value < 0:
        raise ValueError('cannot encode value <0 as VLI')
    if value > VLI_MAX_VALUE:
        raise ValueError('cannot encode value >=2**64 as VLI')
