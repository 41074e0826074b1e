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
In-memory model of binary S-expressions.

An expression is either an `Atom`, an immutable byte string, or a `List` of expressions. Both are frozen value objects
compared structurally, no sharing between subtrees is ever visible at this level.

>>> fib = sexp(['fib', ['-', 'n', '1']])
>>> fib
List(items=(Atom(value=b'fib'), List(items=(Atom(value=b'-'), Atom(value=b'n'), Atom(value=b'1')))))
>>> print(fib)
(fib (- n 1))
>>> fib == List([Atom(b'fib'), List([Atom(b'-'), Atom(b'n'), Atom(b'1')])])
True
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional, TypeAlias, Union


@dataclass(slots=True, frozen=True)
class Atom:
    """A leaf holding an opaque byte string."""
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, bytes):
            raise TypeError(f'atom value must be bytes, got {type(self.value).__name__}')

    def __str__(self) -> str:
        return render(self)


@dataclass(slots=True, frozen=True)
class List:
    """An ordered sequence of sub-expressions, any iterable is stored as a tuple."""
    items: tuple['Expression', ...] = ()

    def __post_init__(self) -> None:
        items = tuple(self.items)
        for item in items:
            if not isinstance(item, (Atom, List)):
                raise TypeError(f'list items must be expressions, got {type(item).__name__}')
        object.__setattr__(self, 'items', items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator['Expression']:
        return iter(self.items)

    def __getitem__(self, index: int) -> 'Expression':
        return self.items[index]

    def __str__(self) -> str:
        return render(self)


Expression: TypeAlias = Union[Atom, List]


def sexp(value: Any) -> Expression:
    """ Build an expression from Python literals.

    Strings become UTF-8 atoms, bytes become atoms as they are, lists and tuples become lists, expressions are kept.

    >>> sexp('a')
    Atom(value=b'a')
    >>> print(sexp(['define', ['square', 'x'], ['*', 'x', 'x']]))
    (define (square x) (* x x))
    >>> sexp(1)
    Traceback (most recent call last):
     ...
    TypeError: cannot build an expression from int
    """
    match value:
        case Atom() | List():
            return value
        case str():
            return Atom(value.encode('utf-8'))
        case bytes():
            return Atom(value)
        case list() | tuple():
            return List(sexp(item) for item in value)
        case _:
            raise TypeError(f'cannot build an expression from {type(value).__name__}')


def render_atom(value: bytes) -> str:
    """ Text of a single atom: its UTF-8 decoding when possible, otherwise its byte values.

    >>> render_atom(b'foo')
    'foo'
    >>> render_atom(bytes([0xff, 0x00, 0x10]))
    '255 0 16'
    """
    try:
        return value.decode('utf-8')
    except UnicodeDecodeError:
        return ' '.join(str(b) for b in value)


def render(expr: Expression) -> str:
    """ Compact single-line rendering.

    >>> render(sexp(['a', [], ['b', 'c']]))
    '(a () (b c))'
    """
    if isinstance(expr, Atom):
        return render_atom(expr.value)
    return '(' + ' '.join(render(item) for item in expr.items) + ')'


def render_pretty(expr: Expression, *, width: Optional[int] = None, indent: Optional[int] = None) -> str:
    """ Multi-line rendering, lists whose compact text is shorter than `width` bytes (UTF-8) stay on a single line.

    When `width` or `indent` are not given they're taken from the global settings.

    >>> print(render_pretty(sexp(['let', [['x', '1'], ['y', '2']], ['+', 'x', 'y']]), width=12, indent=1))
    (let
     (
      (x 1)
      (y 2))
     (+ x y))
    """
    if width is None or indent is None:
        from bsexp.conf.get_settings import get_global_settings
        settings = get_global_settings()
        width = settings.PRETTY_WIDTH if width is None else width
        indent = settings.PRETTY_INDENT if indent is None else indent
    parts: list[str] = []
    _render_pretty_into(parts, expr, 0, width, indent)
    return ''.join(parts)


def _render_pretty_into(parts: list[str], expr: Expression, depth: int, width: int, indent: int) -> None:
    padding = ' ' * (depth * indent)
    compact = render(expr)
    # width is measured in UTF-8 bytes
    if isinstance(expr, Atom) or len(compact.encode('utf-8')) < width:
        parts.append(padding + compact)
        return
    parts.append(padding + '(')
    items = iter(expr.items)
    first = next(items, None)
    if isinstance(first, Atom):
        parts.append(render(first))
    elif first is not None:
        parts.append('\n')
        _render_pretty_into(parts, first, depth + 1, width, indent)
    for item in items:
        parts.append('\n')
        _render_pretty_into(parts, item, depth + 1, width, indent)
    parts.append(')')


def iter_atoms(expr: Expression) -> Iterator[bytes]:
    """ Yield every atom value in left-to-right order, without recursion.

    >>> list(iter_atoms(sexp(['a', ['b', ['c']], 'd'])))
    [b'a', b'b', b'c', b'd']
    """
    stack: list[Expression] = [expr]
    while stack:
        current = stack.pop()
        if isinstance(current, Atom):
            yield current.value
        else:
            stack.extend(reversed(current.items))
