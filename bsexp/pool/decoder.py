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
Pool decoder: parses a container produced by the encoder back into expressions.

Nodes are materialized in index order, each exactly once, and kept in a table indexed by node index. Since a node can
only reference nodes with a lower index, all of its children are ready by the time it is built. Every reference to an
already built node reuses the same (immutable) value, so the work is proportional to the size of the container and not
to the size of the fully expanded trees.

>>> decode(bytes.fromhex('03060161016201630200010103020204'))
Ok([Atom(value=b'a'), List(items=(Atom(value=b'b'), Atom(value=b'c')))])

Any structural problem is reported as an error, never as a partial result:

>>> decode(bytes.fromhex('0306016101620163020001010302'))
Err(TruncatedInputError('not enough bytes to read: wanted 3, have 1'))
>>> decode(bytes.fromhex('0000010101020103'))
Err(InvalidReferenceError('node 0 references node 1, only nodes before it can be referenced'))
"""

from typing import NamedTuple, Optional

from structlog import get_logger

from bsexp.conf.settings import BsexpSettings
from bsexp.expr import Atom, Expression, List
from bsexp.serialization import Deserializer, InvalidReferenceError, SerializationError, TooLongError
from bsexp.serialization.compound_encoding.collection import decode_collection
from bsexp.serialization.encoding.vli import decode_vli
from bsexp.serialization.types import Buffer
from bsexp.utils.result import Err, Ok, Result, is_err, propagate_result

from .atom_table import decode_atom_buffer
from .encoder import PoolStats
from .node_table import Children, decode_node_buffer
from .reference import RefKind, Reference, decode_reference

logger = get_logger()


class PoolDecoder:
    def __init__(self, *, settings: Optional[BsexpSettings] = None) -> None:
        if settings is None:
            from bsexp.conf.get_settings import get_global_settings
            settings = get_global_settings()
        self.log = logger.new()
        self._settings = settings

    def decode(self, data: Buffer) -> Result[list[Expression], SerializationError]:
        """Decode every root expression of the container, in order."""
        result = self._decode(memoryview(data))
        if is_err(result):
            self.log.debug('pool decoding failed', error=repr(result.err()))
        return result

    @propagate_result
    def _decode(self, view: memoryview) -> Result[list[Expression], SerializationError]:
        self._check_limit('input bytes', view.nbytes, self._settings.DECODE_MAX_INPUT_BYTES).unwrap_or_propagate()
        atom_count, atom_buffer, roots, node_count, node_buffer = _read_sections(view).unwrap_or_propagate()
        self._check_limit('atoms', atom_count, self._settings.DECODE_MAX_ATOMS).unwrap_or_propagate()
        self._check_limit('nodes', node_count, self._settings.DECODE_MAX_NODES).unwrap_or_propagate()

        atoms = [Atom(content) for content in decode_atom_buffer(atom_buffer, atom_count).unwrap_or_propagate()]
        nodes = decode_node_buffer(node_buffer, node_count).unwrap_or_propagate()
        values = self._materialize(atoms, nodes).unwrap_or_propagate()

        exprs = [_resolve(ref, atoms, values, len(values), 'root').unwrap_or_propagate() for ref in roots]
        self.log.debug('pool decoded', atoms=len(atoms), nodes=len(values), roots=len(exprs), size=view.nbytes)
        return Ok(exprs)

    @propagate_result
    def _materialize(self, atoms: list[Atom], nodes: list[Children]) -> Result[list[List], SerializationError]:
        values: list[List] = []
        for index, children in enumerate(nodes):
            # only nodes [0, index) are available, which is exactly what's already in `values`
            items = [_resolve(ref, atoms, values, index, f'node {index}').unwrap_or_propagate() for ref in children]
            values.append(List(items))
        return Ok(values)

    @staticmethod
    def _check_limit(what: str, value: int, limit: Optional[int]) -> Result[None, SerializationError]:
        if limit is not None and value > limit:
            return Err(TooLongError(f'too many {what}: {value} > {limit}'))
        return Ok(None)


class _Sections(NamedTuple):
    atom_count: int
    atom_buffer: memoryview
    roots: list[Reference]
    node_count: int
    node_buffer: memoryview


@propagate_result
def _read_sections(data: Buffer) -> Result[_Sections, SerializationError]:
    """Split a container in its parts, the atom and node buffers are sliced but not parsed."""
    deserializer = Deserializer.build_bytes_deserializer(data)

    atom_count = decode_vli(deserializer).unwrap_or_propagate()
    atom_buffer_length = decode_vli(deserializer).unwrap_or_propagate()
    atom_buffer = deserializer.read_bytes(atom_buffer_length).unwrap_or_propagate()

    roots = decode_collection(deserializer, decode_reference, list).unwrap_or_propagate()

    node_count = decode_vli(deserializer).unwrap_or_propagate()
    node_buffer_length = decode_vli(deserializer).unwrap_or_propagate()
    node_buffer = deserializer.read_bytes(node_buffer_length).unwrap_or_propagate()

    deserializer.finalize().unwrap_or_propagate()
    return Ok(_Sections(atom_count, atom_buffer, roots, node_count, node_buffer))


def _resolve(
    ref: Reference,
    atoms: list[Atom],
    values: list[List],
    node_limit: int,
    referrer: str,
) -> Result[Expression, SerializationError]:
    if ref.kind is RefKind.ATOM:
        if ref.index >= len(atoms):
            return Err(InvalidReferenceError(f'{referrer} references atom {ref.index}, there are only {len(atoms)}'))
        return Ok(atoms[ref.index])
    if ref.index >= node_limit:
        if referrer == 'root':
            return Err(InvalidReferenceError(f'root references node {ref.index}, there are only {node_limit}'))
        return Err(InvalidReferenceError(
            f'{referrer} references node {ref.index}, only nodes before it can be referenced'
        ))
    return Ok(values[ref.index])


def decode(data: Buffer, *, settings: Optional[BsexpSettings] = None) -> Result[list[Expression], SerializationError]:
    """Decode a pool container, see `PoolDecoder.decode`."""
    return PoolDecoder(settings=settings).decode(data)


def decode_or_raise(data: Buffer, *, settings: Optional[BsexpSettings] = None) -> list[Expression]:
    """Same as `decode` but raises the `SerializationError` instead of returning it."""
    return decode(data, settings=settings).unwrap_or_raise()


@propagate_result
def read_stats(data: Buffer) -> Result[PoolStats, SerializationError]:
    """ Table sizes as declared by the container, without validating or building anything.

    Only the layout is checked, use `decode` to know whether the container is valid.

    >>> read_stats(bytes.fromhex('02 04 0161 0161 01 00 00 00'))
    Ok(PoolStats(atoms=2, nodes=0, roots=1))
    """
    sections = _read_sections(data).unwrap_or_propagate()
    return Ok(PoolStats(atoms=sections.atom_count, nodes=sections.node_count, roots=len(sections.roots)))
