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

import json
import logging
import sys

import pytest
import structlog
from structlog.testing import capture_logs

from bsexp.cli import decode, encode, stats
from bsexp.cli.main import CliManager
from bsexp.cli.util import LoggingOptions, LoggingOutput, process_logging_options, process_logging_output, setup_logging
from bsexp.expr import sexp
from bsexp.pool import decode_or_raise
from bsexp.pool import encode as encode_pool

PROGRAM = ['define', ['square', 'x'], ['*', 'x', 'x']]


@pytest.fixture(autouse=True)
def logs():
    with capture_logs() as captured:
        yield captured


@pytest.fixture
def run(monkeypatch, capsys):
    def _run(module, *args: str) -> tuple[int, str]:
        monkeypatch.setattr(sys, 'argv', ['bsexp-cli', *args])
        code = module.main()
        return code, capsys.readouterr().out
    return _run


def test_encode(run, logs, tmp_path):
    source = tmp_path / 'input.json'
    source.write_text(json.dumps(['atom', PROGRAM, PROGRAM]))
    output = tmp_path / 'output.bsexp'

    code, _ = run(encode, str(source), str(output))

    assert code == 0
    exprs = decode_or_raise(output.read_bytes())
    assert exprs == [sexp('atom'), sexp(PROGRAM), sexp(PROGRAM)]
    written, = [log for log in logs if log['event'] == 'container written']
    assert written['atoms'] == 5
    assert written['nodes'] == 3
    assert written['roots'] == 3


@pytest.mark.parametrize('contents', ['{"a": 1}', '[1, 2]', 'not json'])
def test_encode_invalid_input(run, tmp_path, contents):
    source = tmp_path / 'input.json'
    source.write_text(contents)
    output = tmp_path / 'output.bsexp'

    code, out = run(encode, str(source), str(output))

    assert code == 1
    assert out.startswith('error: ')
    assert not output.exists()


def test_encode_missing_input(run, tmp_path):
    code, out = run(encode, str(tmp_path / 'missing.json'), str(tmp_path / 'output.bsexp'))

    assert code == 1
    assert out.startswith('error: ')


def test_decode(run, tmp_path):
    container = tmp_path / 'container.bsexp'
    container.write_bytes(encode_pool([sexp('a'), sexp(PROGRAM)]))

    code, out = run(decode, str(container))

    assert code == 0
    assert out == 'a\n(define (square x) (* x x))\n'


def test_decode_pretty(run, tmp_path):
    container = tmp_path / 'container.bsexp'
    container.write_bytes(encode_pool([sexp(PROGRAM)]))

    code, out = run(decode, str(container), '--pretty', '--width', '12')

    assert code == 0
    assert out == '(define\n (square x)\n (* x x))\n'


def test_decode_invalid(run, tmp_path):
    container = tmp_path / 'container.bsexp'
    container.write_bytes(encode_pool([sexp(PROGRAM)])[:-1])

    code, out = run(decode, str(container))

    assert code == 1
    assert out.startswith('error: not enough bytes to read')


def test_stats(run, tmp_path):
    container = tmp_path / 'container.bsexp'
    data = encode_pool([sexp(['x', 'x']), sexp(['x', 'x'])])
    container.write_bytes(data)

    code, out = run(stats, str(container))

    assert code == 0
    assert out.splitlines() == [
        f'size:      {len(data)}',
        'atoms:     1',
        'nodes:     1',
        'roots:     2',
        'canonical: yes',
    ]


def test_stats_not_canonical(run, tmp_path):
    # the same single atom container, but with a 2 byte VLI for the atom count
    container = tmp_path / 'container.bsexp'
    container.write_bytes(bytes.fromhex('8100 02 0161 01 00 00 00'))

    code, out = run(stats, str(container))

    assert code == 0
    assert out.splitlines()[-1] == 'canonical: no'


def test_stats_reports_declared_tables(run, tmp_path):
    # two atom entries with the same content, the canonical form would have a single one
    container = tmp_path / 'container.bsexp'
    container.write_bytes(bytes.fromhex('02 04 0161 0161 01 00 00 00'))

    code, out = run(stats, str(container))

    assert code == 0
    assert out.splitlines() == [
        'size:      10',
        'atoms:     2',
        'nodes:     0',
        'roots:     1',
        'canonical: no',
    ]


def test_manager_help(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['bsexp-cli'])

    assert CliManager().execute_from_command_line() == 0
    out = capsys.readouterr().out
    for cmd in ['encode', 'decode', 'stats']:
        assert cmd in out


def test_manager_unknown_command(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['bsexp-cli', 'compress'])

    assert CliManager().execute_from_command_line() == -1
    assert 'Unknown command: "compress"' in capsys.readouterr().out


@pytest.mark.parametrize('args, expected', [
    ([], LoggingOutput.PRETTY),
    (['--json-logs'], LoggingOutput.JSON),
    (['--disable-logs'], LoggingOutput.NULL),
])
def test_process_logging_output(args, expected):
    argv = ['bsexp-cli decode', 'input.bsexp', *args, '--pretty']

    assert process_logging_output(argv) == expected
    assert argv == ['bsexp-cli decode', 'input.bsexp', '--pretty']


def test_process_logging_options():
    argv = ['bsexp-cli stats', '--debug', 'input.bsexp']

    options = process_logging_options(argv)
    assert options.debug
    assert options.output is LoggingOutput.PRETTY
    assert argv == ['bsexp-cli stats', 'input.bsexp']

    options = process_logging_options(['bsexp-cli stats', '--json-logs', 'input.bsexp'])
    assert options == LoggingOptions(output=LoggingOutput.JSON, debug=False)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_setup_logging_json(restore_logging, capsys):
    setup_logging(LoggingOptions(output=LoggingOutput.JSON, debug=False))
    log = structlog.get_logger('bsexp.test')
    log.debug('hidden')
    log.info('shown', answer=42)

    lines = capsys.readouterr().err.splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event['event'] == 'shown'
    assert event['answer'] == 42
    assert event['level'] == 'info'
