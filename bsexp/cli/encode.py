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

""" Encode a JSON document into a pool container.

The document must be a list of top-level expressions, JSON strings are atoms (UTF-8 encoded) and JSON arrays are lists:

    ["atom", ["define", ["square", "x"], ["*", "x", "x"]]]
"""

import json

from structlog import get_logger

from bsexp.expr import Expression
from bsexp.utils.result import Err, Ok, as_result

logger = get_logger()


@as_result(OSError, ValueError, TypeError)
def load_json_expressions(path: str) -> list[Expression]:
    from bsexp.expr import sexp

    with open(path, 'r') as fp:
        document = json.load(fp)
    if not isinstance(document, list):
        raise ValueError('the JSON document must be a list of expressions')
    return [sexp(item) for item in document]


def main() -> int:
    from bsexp.cli.util import create_parser
    from bsexp.pool import PoolEncoder

    parser = create_parser()
    parser.add_argument('input', help='Path to a JSON file with a list of expressions')
    parser.add_argument('output', help='Path where the pool container will be written')
    args = parser.parse_args()

    log = logger.new(input=args.input)
    match load_json_expressions(args.input):
        case Ok(exprs):
            pass
        case Err(error):
            log.warn('invalid input', error=str(error))
            print('error: {}'.format(error))
            return 1

    encoder = PoolEncoder()
    encoder.add_all(exprs)
    data = encoder.to_bytes()
    with open(args.output, 'wb') as fp:
        fp.write(data)

    atoms, nodes, roots = encoder.stats()
    log.info('container written', output=args.output, size=len(data), atoms=atoms, nodes=nodes, roots=roots)
    return 0
