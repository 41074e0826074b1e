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

""" Decode a pool container and print its expressions, one per line.
"""

from structlog import get_logger

from bsexp.expr import Expression
from bsexp.serialization import SerializationError
from bsexp.utils.result import Err, Ok, Result

logger = get_logger()


def load_container(path: str) -> Result[list[Expression], SerializationError]:
    from bsexp.pool import decode

    with open(path, 'rb') as fp:
        data = fp.read()
    return decode(data)


def main() -> int:
    from bsexp.cli.util import create_parser
    from bsexp.expr import render, render_pretty

    parser = create_parser()
    parser.add_argument('input', help='Path to a pool container')
    parser.add_argument('--pretty', action='store_true', help='Print expressions in multiple lines')
    parser.add_argument('--width', type=int, help='Line width used by --pretty')
    args = parser.parse_args()

    log = logger.new(input=args.input)
    match load_container(args.input):
        case Ok(exprs):
            pass
        case Err(error):
            log.warn('invalid container', error=repr(error))
            print('error: {}'.format(error))
            return 1

    for expr in exprs:
        if args.pretty:
            print(render_pretty(expr, width=args.width))
        else:
            print(render(expr))
    return 0
