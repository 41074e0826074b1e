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

from dataclasses import FrozenInstanceError

import pytest

from bsexp.expr import Atom, List, iter_atoms, render, render_atom, render_pretty, sexp

FIBONACCI = sexp([
    'define', ['fibonacci', 'n'],
    ['define', ['fib-iter', 'a', 'b', 'count'],
     ['if', ['=', 'count', '0'], 'a', ['fib-iter', 'b', ['+', 'a', 'b'], ['-', 'count', '1']]]],
    ['fib-iter', '0', '1', 'n'],
])


def test_sexp():
    assert sexp('abc') == Atom(b'abc')
    assert sexp(b'\x00\x01') == Atom(b'\x00\x01')
    assert sexp([]) == List()
    assert sexp(('a', ['b'])) == List([Atom(b'a'), List([Atom(b'b')])])
    assert sexp('é') == Atom(b'\xc3\xa9')
    atom = Atom(b'x')
    assert sexp(atom) is atom


@pytest.mark.parametrize('value', [1, None, 1.5, {'a': 'b'}, ['a', 2]])
def test_sexp_invalid(value):
    with pytest.raises(TypeError):
        sexp(value)


def test_invalid_items():
    with pytest.raises(TypeError):
        Atom('text')  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        List([b'raw'])  # type: ignore[list-item]


def test_immutable():
    atom = Atom(b'a')
    with pytest.raises(FrozenInstanceError):
        atom.value = b'b'  # type: ignore[misc]
    lst = List([atom])
    assert isinstance(lst.items, tuple)
    with pytest.raises(FrozenInstanceError):
        lst.items = ()  # type: ignore[misc]


def test_structural_equality():
    assert sexp(['a', ['b']]) == sexp(['a', ['b']])
    assert sexp(['a', ['b']]) != sexp(['a', 'b'])
    assert sexp(['a']) != sexp('a')
    assert hash(sexp(['a', ['b']])) == hash(sexp(['a', ['b']]))


def test_list_sequence_protocol():
    lst = sexp(['a', 'b', ['c']])
    assert len(lst) == 3
    assert list(lst) == [Atom(b'a'), Atom(b'b'), List([Atom(b'c')])]
    assert lst[-1] == sexp(['c'])


def test_render():
    assert render(sexp('foo')) == 'foo'
    assert render(sexp([])) == '()'
    assert render(sexp(['a', [[]], ['b', 'c']])) == '(a (()) (b c))'
    assert str(sexp(['x', ''])) == '(x )'


def test_render_non_utf8_atom():
    assert render_atom(b'\xff') == '255'
    assert render(List([Atom(b'ok'), Atom(b'\x80\x01')])) == '(ok 128 1)'


def test_render_pretty_short_stays_on_one_line():
    assert render_pretty(sexp(['a', ['b', 'c']]), width=60, indent=1) == '(a (b c))'
    assert render_pretty(sexp('atom'), width=1, indent=4) == 'atom'


def test_render_pretty_fibonacci():
    expected = '\n'.join([
        '(define',
        ' (fibonacci n)',
        ' (define',
        '  (fib-iter a b count)',
        '  (if (= count 0) a (fib-iter b (+ a b) (- count 1))))',
        ' (fib-iter 0 1 n))',
    ])
    assert render_pretty(FIBONACCI, width=60, indent=1) == expected
    # defaults come from the settings
    assert render_pretty(FIBONACCI) == expected


def test_render_pretty_indent():
    expected = '\n'.join([
        '(a',
        '  b',
        '  (c',
        '    d))',
    ])
    assert render_pretty(sexp(['a', 'b', ['c', 'd']]), width=2, indent=2) == expected


def test_iter_atoms():
    assert list(iter_atoms(FIBONACCI))[:4] == [b'define', b'fibonacci', b'n', b'define']
    assert list(iter_atoms(sexp([]))) == []


def test_render_pretty_width_counts_utf8_bytes():
    expr = List([Atom('é'.encode('utf-8'))] * 20)
    # 41 characters but 61 bytes
    assert len(render(expr)) == 41
    assert render_pretty(expr, width=60, indent=1) == '(é' + '\n é' * 19 + ')'
    assert render_pretty(expr, width=62, indent=1) == render(expr)
