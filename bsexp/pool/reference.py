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
Tagged references, the only way the wire format points at table entries.

A reference is packed into a single unsigned integer as `(index << 1) | tag`, bit 0 selects the table:

    tag 0: atom table
    tag 1: node table

>>> Reference.node(3).tagged
7
>>> Reference.from_tagged(6)
Reference(kind=<RefKind.ATOM: 0>, index=3)
"""

from enum import IntEnum
from typing import NamedTuple

from bsexp.serialization import Deserializer, SerializationError, Serializer
from bsexp.serialization.encoding.vli import decode_vli, encode_vli
from bsexp.utils.result import Ok, Result, propagate_result


class RefKind(IntEnum):
    ATOM = 0
    NODE = 1


class Reference(NamedTuple):
    kind: RefKind
    index: int

    @classmethod
    def atom(cls, index: int) -> 'Reference':
        return cls(RefKind.ATOM, index)

    @classmethod
    def node(cls, index: int) -> 'Reference':
        return cls(RefKind.NODE, index)

    @classmethod
    def from_tagged(cls, tagged: int) -> 'Reference':
        return cls(RefKind(tagged & 1), tagged >> 1)

    @property
    def tagged(self) -> int:
        return (self.index << 1) | self.kind


def encode_reference(serializer: Serializer, ref: Reference) -> None:
    encode_vli(serializer, ref.tagged)


@propagate_result
def decode_reference(deserializer: Deserializer) -> Result[Reference, SerializationError]:
    return Ok(Reference.from_tagged(decode_vli(deserializer).unwrap_or_propagate()))
