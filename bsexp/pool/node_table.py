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
The node table stores every distinct list exactly once, identified by the exact sequence of references to its children.

Because children are always interned before their parent, two structurally equal sub-lists end up with equal reference
sequences and collapse into a single entry: the input tree becomes a DAG. It also means a node can only reference
nodes with a strictly lower index, which rules out cycles and lets the decoder build nodes in index order.

Layout of the serialized table: ([count: VLI]([tagged reference: VLI]){count}){N}, in index order.

>>> table = NodeTable()
>>> a, b = Reference.atom(0), Reference.atom(1)
>>> table.intern((a, b)), table.intern((Reference.node(0), a)), table.intern((a, b))
(0, 1, 0)
>>> table.to_bytes().hex()
'020002020100'
>>> nodes = decode_node_buffer(bytes.fromhex('020002020100'), 2).unwrap()
>>> [[ref.tagged for ref in children] for children in nodes]
[[0, 2], [1, 0]]
"""

from collections.abc import Iterator

from bsexp.serialization import Deserializer, SerializationError, Serializer
from bsexp.serialization.compound_encoding.collection import decode_collection, encode_collection
from bsexp.serialization.types import Buffer
from bsexp.utils.result import Ok, Result, propagate_result

from .reference import RefKind, Reference, decode_reference, encode_reference

Children = tuple[Reference, ...]


class NodeTable:
    """Content-addressed store of list nodes, keyed by their children references."""

    def __init__(self) -> None:
        self._index: dict[Children, int] = {}
        self._entries: list[Children] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Children]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Children:
        return self._entries[index]

    def intern(self, children: Children) -> int:
        """Return the index of the node with these children, adding it to the table if it's new.

        Every node reference in `children` must already be in the table.
        """
        index = self._index.get(children)
        if index is None:
            index = len(self._entries)
            assert all(ref.index < index for ref in children if ref.kind is RefKind.NODE), 'unresolved child'
            self._index[children] = index
            self._entries.append(children)
        return index

    def serialize(self, serializer: Serializer) -> None:
        for children in self._entries:
            encode_collection(serializer, children, encode_reference)

    def to_bytes(self) -> bytes:
        serializer = Serializer.build_bytes_serializer()
        self.serialize(serializer)
        return bytes(serializer.finalize())


@propagate_result
def decode_node_buffer(data: Buffer, count: int) -> Result[list[Children], SerializationError]:
    """Parse exactly `count` nodes that must use up the whole `data`.

    References are not validated here, only parsed.
    """
    deserializer = Deserializer.build_bytes_deserializer(data)
    nodes = [decode_collection(deserializer, decode_reference, tuple).unwrap_or_propagate() for _ in range(count)]
    deserializer.finalize().unwrap_or_propagate()
    return Ok(nodes)
