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

class SerializationError(Exception):
    """Base class for every error found while (de)serializing."""
    pass


class TruncatedInputError(SerializationError):
    """Raised when a read runs past the end of the available data."""
    pass


class InvalidReferenceError(SerializationError):
    """Raised when a reference points outside its table, or to a node that is not strictly earlier."""
    pass


class TrailingDataError(SerializationError):
    """Raised when data is left over after everything that was declared has been read."""
    pass


class TooLongError(SerializationError):
    """Raised when a configured limit on the size of the input is exceeded."""
    pass
