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

from bsexp.serialization import Deserializer, SerializationError, Serializer
from bsexp.serialization.encoding.vli import decode_vli, encode_vli
from bsexp.utils.result import Ok, Result, propagate_result


def encode_unsigned(value: int) -> bytes:
    """
    Receive an unsigned integer and return its VLI-encoded bytes.

    >>> encode_unsigned(0) == bytes([0x00])
    True
    >>> encode_unsigned(624485) == bytes([0xE5, 0x8E, 0x26])
    True
    >>> encode_unsigned(2**64 - 1) == bytes([0xFF] * 9)
    True
    >>> encode_unsigned(2**64)
    Traceback (most recent call last):
     ...
    ValueError: cannot encode value >=2**64 as VLI
    """
    serializer: Serializer = Serializer.build_bytes_serializer()
    encode_vli(serializer, value)
    return bytes(serializer.finalize())


@propagate_result
def decode_unsigned(data: bytes) -> Result[tuple[int, bytes], SerializationError]:
    """
    Receive and consume a buffer returning a tuple of the unpacked
    VLI-encoded unsigned integer and the reamining buffer.

    >>> decode_unsigned(bytes([0x00]) + b'test')
    Ok((0, b'test'))
    >>> decode_unsigned(bytes([0xE5, 0x8E, 0x26]) + b'test')
    Ok((624485, b'test'))
    >>> decode_unsigned(bytes([0xE5, 0x8E]))
    Err(TruncatedInputError('not enough bytes to read'))
    """
    deserializer = Deserializer.build_bytes_deserializer(data)
    value = decode_vli(deserializer).unwrap_or_propagate()
    remaining_data = bytes(deserializer.read_all().unwrap_or_propagate())
    deserializer.finalize().unwrap_or_propagate()
    return Ok((value, remaining_data))
