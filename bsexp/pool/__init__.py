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
Content-addressed pool encoding of expressions.

Atoms are deduplicated by content and lists by the references to their children, so repeated sub-lists are stored once
and the wire form is a DAG. See `encoder` and `decoder` for the layout.
"""

from bsexp.pool.decoder import PoolDecoder, decode, decode_or_raise, read_stats
from bsexp.pool.encoder import PoolEncoder, PoolStats, encode
from bsexp.pool.reference import RefKind, Reference

__all__ = [
    'PoolDecoder',
    'PoolEncoder',
    'PoolStats',
    'RefKind',
    'Reference',
    'decode',
    'decode_or_raise',
    'encode',
    'read_stats',
]
