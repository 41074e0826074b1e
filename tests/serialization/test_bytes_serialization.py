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

import pytest

from bsexp.serialization import Deserializer, SerializationError, Serializer, TrailingDataError, TruncatedInputError
from bsexp.serialization.compound_encoding.collection import decode_collection, encode_collection
from bsexp.serialization.encoding.bytes import decode_bytes, encode_bytes


def test_serializer_tracks_position():
    se = Serializer.build_bytes_serializer()
    assert se.cur_pos() == 0
    se.write_byte(0x01)
    se.write_bytes(b'abc')
    se.write_bytes(bytearray(b'de'))
    assert se.cur_pos() == 6
    assert bytes(se.finalize()) == b'\x01abcde'


def test_serializer_rejects_invalid_byte():
    se = Serializer.build_bytes_serializer()
    with pytest.raises(OverflowError):
        se.write_byte(256)


def test_deserializer_reads():
    de = Deserializer.build_bytes_deserializer(b'\x01abcdef')
    assert de.remaining() == 7
    assert de.peek_byte().unwrap() == 1
    assert de.read_byte().unwrap() == 1
    assert bytes(de.peek_bytes(2).unwrap()) == b'ab'
    assert bytes(de.read_bytes(3).unwrap()) == b'abc'
    assert de.remaining() == 3
    assert bytes(de.read_bytes(10, exact=False).unwrap()) == b'def'
    assert de.is_empty()
    assert de.finalize().is_ok()


def test_deserializer_out_of_data():
    de = Deserializer.build_bytes_deserializer(b'ab')
    assert isinstance(de.read_bytes(3).err(), TruncatedInputError)
    # a failed read doesn't consume anything
    assert de.remaining() == 2
    assert bytes(de.read_all().unwrap()) == b'ab'
    assert isinstance(de.read_byte().err(), TruncatedInputError)
    assert isinstance(de.peek_byte().err(), TruncatedInputError)


def test_deserializer_negative_length():
    de = Deserializer.build_bytes_deserializer(b'ab')
    err = de.read_bytes(-1).err()
    assert isinstance(err, SerializationError)
    assert not isinstance(err, TruncatedInputError)


def test_deserializer_trailing_data():
    de = Deserializer.build_bytes_deserializer(b'abc')
    de.read_byte().unwrap()
    assert isinstance(de.finalize().err(), TrailingDataError)


def test_bytes_round_trip():
    values = [b'', b'x', b'\x00' * 127, b'\xff' * 128, bytes(range(256)) * 100]
    se = Serializer.build_bytes_serializer()
    for value in values:
        encode_bytes(se, value)
    de = Deserializer.build_bytes_deserializer(se.finalize())
    for value in values:
        assert decode_bytes(de).unwrap() == value
    assert de.finalize().is_ok()


def test_bytes_huge_declared_length():
    # 2**63 declared bytes, there is no way to read that and it must not try to allocate it
    de = Deserializer.build_bytes_deserializer(bytes.fromhex('808080808080808080') + b'abc')
    assert isinstance(decode_bytes(de).err(), TruncatedInputError)


def test_collection_builder():
    se = Serializer.build_bytes_serializer()
    encode_collection(se, (b'a', b'b', b'a'), encode_bytes)
    data = bytes(se.finalize())
    assert data.hex() == '03016101620161'
    de = Deserializer.build_bytes_deserializer(data)
    assert decode_collection(de, decode_bytes, frozenset).unwrap() == frozenset({b'a', b'b'})


def test_empty_collection():
    se = Serializer.build_bytes_serializer()
    encode_collection(se, [], encode_bytes)
    data = bytes(se.finalize())
    assert data == b'\x00'
    de = Deserializer.build_bytes_deserializer(data)
    assert decode_collection(de, decode_bytes, list).unwrap() == []
