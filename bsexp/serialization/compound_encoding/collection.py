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

r"""
A collection is basically any value that has a known size and is iterable.

Layout: [N: VLI][value_0]...[value_N]

>>> from bsexp.serialization.encoding.bytes import encode_bytes, decode_bytes
>>> se = Serializer.build_bytes_serializer()
>>> value = [b'foobar', b'pi', b'', b'test']
>>> encode_collection(se, value, encode_bytes)
>>> bytes(se.finalize()).hex()
'0406666f6f626172027069000474657374'

Breakdown of the result:

    04: 4 in VLI, the total length
    06666f6f626172: b'foobar' (with length prefix)
    027069: b'pi' (with length prefix)
    00: b'' (with length prefix)
    0474657374: b'test' (with length prefix)

When decoding, the builder can be any compabile collection, in the previous example a `list` was encoded, but when
decoding a `tuple` could be used, it only matters that the collection can be initialized with an `Iterable[T]`.

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0406666f6f626172027069000474657374'))
>>> decode_collection(de, decode_bytes, tuple)
Ok((b'foobar', b'pi', b'', b'test'))
>>> de.finalize()
Ok(None)

A failure on any item fails the whole collection:

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0406666f6f626172027069'))
>>> decode_collection(de, decode_bytes, tuple)
Err(TruncatedInputError('not enough bytes to read'))
"""

from collections.abc import Collection, Iterable
from typing import Callable, TypeVar

from bsexp.serialization import Deserializer, SerializationError, Serializer
from bsexp.serialization.encoding.vli import decode_vli, encode_vli
from bsexp.utils.result import Ok, Result, propagate_result

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R', bound=Collection)


def encode_collection(serializer: Serializer, values: Collection[T], encoder: Encoder[T]) -> None:
    encode_vli(serializer, len(values))
    for value in values:
        encoder(serializer, value)


@propagate_result
def decode_collection(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
) -> Result[R, SerializationError]:
    length = decode_vli(deserializer).unwrap_or_propagate()
    return Ok(builder(decoder(deserializer).unwrap_or_propagate() for _ in range(length)))
