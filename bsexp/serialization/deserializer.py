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

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..utils.result import Ok, Result, propagate_result
from .exceptions import SerializationError
from .types import Buffer

if TYPE_CHECKING:
    from .bytes_deserializer import BytesDeserializer


class Deserializer(ABC):
    """Source of bytes for decoders.

    Every read returns a `Result` instead of raising, running out of data is an expected outcome when parsing input
    that came from elsewhere. Decoders are expected to use `unwrap_or_propagate()` under `@propagate_result`.
    """

    def finalize(self) -> Result[None, SerializationError]:
        """Check that the deserializer was fully consumed, it cannot be reused after this."""
        raise TypeError('this deserializer does not support finalization')

    @abstractmethod
    def is_empty(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def remaining(self) -> int:
        """Number of bytes that can still be read."""
        raise NotImplementedError

    @abstractmethod
    def peek_byte(self) -> Result[int, SerializationError]:
        """Read a single byte but don't consume from buffer."""
        raise NotImplementedError

    @abstractmethod
    def peek_bytes(self, n: int, *, exact: bool = True) -> Result[Buffer, SerializationError]:
        """Read n single byte but don't consume from buffer."""
        raise NotImplementedError

    @abstractmethod
    def read_byte(self) -> Result[int, SerializationError]:
        """Read a single byte as unsigned int."""
        raise NotImplementedError

    @propagate_result
    @abstractmethod
    def read_bytes(self, n: int, *, exact: bool = True) -> Result[Buffer, SerializationError]:
        """Read n bytes, when exact=True it errors if there isn't enough data"""
        # XXX: it is recommended that implementors of Deserializer specialize this implementation
        data = bytearray()
        for _ in range(n):
            if not exact and self.is_empty():
                break
            data.append(self.read_byte().unwrap_or_propagate())
        return Ok(bytes(data))

    @abstractmethod
    def read_all(self) -> Result[Buffer, SerializationError]:
        """Read all bytes until the reader is empty."""
        raise NotImplementedError

    @staticmethod
    def build_bytes_deserializer(data: Buffer) -> BytesDeserializer:
        from .bytes_deserializer import BytesDeserializer
        return BytesDeserializer(data)
