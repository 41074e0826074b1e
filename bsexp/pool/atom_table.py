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
The atom table stores every distinct atom content exactly once.

Indexes are given in first-seen order starting at 0, matching is byte-exact (no normalization of any kind).

Layout of the serialized table: ([len: VLI][bytes]){N}, in index order, N is stored elsewhere.

>>> table = AtomTable()
>>> table.intern(b'foo'), table.intern(b'bar'), table.intern(b'foo')
(0, 1, 0)
>>> len(table)
2
>>> table.to_bytes().hex()
'03666f6f03626172'
>>> decode_atom_buffer(bytes.fromhex('03666f6f03626172'), 2)
Ok([b'foo', b'bar'])
"""

from collections.abc import Iterator

from bsexp.serialization import Deserializer, SerializationError, Serializer
from bsexp.serialization.encoding.bytes import decode_bytes, encode_bytes
from bsexp.serialization.types import Buffer
from bsexp.utils.result import Ok, Result, propagate_result


class AtomTable:
    """Content-addressed store of atom byte strings."""

    def __init__(self) -> None:
        self._index: dict[bytes, int] = {}
        self._entries: list[bytes] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> bytes:
        return self._entries[index]

    def intern(self, content: bytes) -> int:
        """Return the index of `content`, adding it to the table if it's new."""
        index = self._index.get(content)
        if index is None:
            index = len(self._entries)
            self._index[content] = index
            self._entries.append(content)
        return index

    def serialize(self, serializer: Serializer) -> None:
        for content in self._entries:
            encode_bytes(serializer, content)

    def to_bytes(self) -> bytes:
        serializer = Serializer.build_bytes_serializer()
        self.serialize(serializer)
        return bytes(serializer.finalize())


@propagate_result
def decode_atom_buffer(data: Buffer, count: int) -> Result[list[bytes], SerializationError]:
    """Parse exactly `count` atoms that must use up the whole `data`."""
    deserializer = Deserializer.build_bytes_deserializer(data)
    atoms = [decode_bytes(deserializer).unwrap_or_propagate() for _ in range(count)]
    deserializer.finalize().unwrap_or_propagate()
    return Ok(atoms)
