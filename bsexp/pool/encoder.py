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
Pool encoder: turns a sequence of expressions into the binary container.

Every expression is resolved post-order, children left-to-right before their parent, atoms are interned in the atom
table and lists in the node table. The resulting references to the top-level expressions are the roots. The layout is:

    [atom count: VLI][atom buffer length: VLI][atom buffer]
    [root count: VLI]([root: tagged reference VLI]){root count}
    [node count: VLI][node buffer length: VLI][node buffer]

>>> from bsexp.expr import sexp
>>> encode([sexp('a'), sexp(['b', 'c'])]).hex()
'03060161016201630200010103020204'

Breakdown of the result:

    03: 3 atoms
    06: atom buffer is 6 bytes long
    016101620163: b'a', b'b' and b'c' with length prefix
    02: 2 roots
    00: atom 0
    01: node 0
    01: 1 node
    03: node buffer is 3 bytes long
    020204: node with 2 children, atom 1 and atom 2

Repeated content is stored only once:

>>> encoder = PoolEncoder()
>>> encoder.add_all([sexp([['x', 'x'], ['x', 'x']])])
>>> encoder.stats()
PoolStats(atoms=1, nodes=2, roots=1)
"""

from collections.abc import Iterable
from typing import NamedTuple

from structlog import get_logger

from bsexp.expr import Atom, Expression, List
from bsexp.serialization import Serializer
from bsexp.serialization.compound_encoding.collection import encode_collection
from bsexp.serialization.encoding.vli import encode_vli

from .atom_table import AtomTable
from .node_table import NodeTable
from .reference import Reference, encode_reference

logger = get_logger()


class PoolStats(NamedTuple):
    atoms: int
    nodes: int
    roots: int


class PoolEncoder:
    """Owns the tables of a single encoding, it is not meant to be shared or reused after serializing."""

    def __init__(self) -> None:
        self.log = logger.new()
        self.atoms = AtomTable()
        self.nodes = NodeTable()
        self.roots: list[Reference] = []
        # id(expr) -> (expr, reference), the expression is kept so its id can't be reused during the encoding
        self._resolved: dict[int, tuple[List, Reference]] = {}

    def add(self, expr: Expression) -> Reference:
        """Add a top-level expression, returning its root reference."""
        if not isinstance(expr, (Atom, List)):
            raise TypeError(f'cannot encode {type(expr).__name__}, expected an expression')
        ref = self._resolve(expr)
        self.roots.append(ref)
        return ref

    def add_all(self, exprs: Iterable[Expression]) -> None:
        for expr in exprs:
            self.add(expr)

    def stats(self) -> PoolStats:
        return PoolStats(atoms=len(self.atoms), nodes=len(self.nodes), roots=len(self.roots))

    def _resolve(self, expr: Expression) -> Reference:
        if isinstance(expr, Atom):
            return Reference.atom(self.atoms.intern(expr.value))
        known = self._resolved.get(id(expr))
        if known is not None:
            return known[1]

        # explicit stack instead of recursion, nesting depth is only bounded by the input
        stack: list[tuple[List, Iterable[Expression], list[Reference]]] = [(expr, iter(expr.items), [])]
        while True:
            node, children, resolved = stack[-1]
            for child in children:
                if isinstance(child, Atom):
                    resolved.append(Reference.atom(self.atoms.intern(child.value)))
                    continue
                known = self._resolved.get(id(child))
                if known is not None:
                    resolved.append(known[1])
                    continue
                stack.append((child, iter(child.items), []))
                break
            else:
                stack.pop()
                ref = Reference.node(self.nodes.intern(tuple(resolved)))
                self._resolved[id(node)] = (node, ref)
                if not stack:
                    return ref
                stack[-1][2].append(ref)

    def serialize(self, serializer: Serializer) -> None:
        atom_buffer = self.atoms.to_bytes()
        encode_vli(serializer, len(self.atoms))
        encode_vli(serializer, len(atom_buffer))
        serializer.write_bytes(atom_buffer)

        encode_collection(serializer, self.roots, encode_reference)

        node_buffer = self.nodes.to_bytes()
        encode_vli(serializer, len(self.nodes))
        encode_vli(serializer, len(node_buffer))
        serializer.write_bytes(node_buffer)

    def to_bytes(self) -> bytes:
        serializer = Serializer.build_bytes_serializer()
        self.serialize(serializer)
        data = bytes(serializer.finalize())
        self.log.debug('pool encoded', atoms=len(self.atoms), nodes=len(self.nodes), roots=len(self.roots),
                       size=len(data))
        return data


def encode(exprs: Iterable[Expression]) -> bytes:
    """Encode the expressions, in order, as a single pool container."""
    encoder = PoolEncoder()
    encoder.add_all(exprs)
    return encoder.to_bytes()
