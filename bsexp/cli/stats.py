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

""" Print the table sizes declared by a pool container.

The container is also decoded and encoded again, which tells whether it's in the canonical form this encoder produces.
"""

from structlog import get_logger

from bsexp.utils.result import Err, Ok

logger = get_logger()


def main() -> int:
    from bsexp.cli.util import create_parser
    from bsexp.pool import decode, encode, read_stats

    parser = create_parser()
    parser.add_argument('input', help='Path to a pool container')
    args = parser.parse_args()

    log = logger.new(input=args.input)
    with open(args.input, 'rb') as fp:
        data = fp.read()

    match decode(data):
        case Ok(exprs):
            pass
        case Err(error):
            log.warn('invalid container', error=repr(error))
            print('error: {}'.format(error))
            return 1

    # a valid container always has a readable layout
    stats = read_stats(data).unwrap()
    canonical = encode(exprs)

    print('size:      {}'.format(len(data)))
    print('atoms:     {}'.format(stats.atoms))
    print('nodes:     {}'.format(stats.nodes))
    print('roots:     {}'.format(stats.roots))
    print('canonical: {}'.format('yes' if canonical == data else 'no'))
    return 0
