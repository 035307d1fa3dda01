#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from __future__ import annotations

import struct
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, final

from .consts import DEFAULT_BYTES_MAX_LENGTH
from .exceptions import BadDataError, TooLongError
from .types import Buffer

if TYPE_CHECKING:
    from .bytes_deserializer import BytesDeserializer


class Deserializer(ABC):
    @staticmethod
    def build_bytes_deserializer(data: Buffer) -> BytesDeserializer:
        from .bytes_deserializer import BytesDeserializer
        return BytesDeserializer(data)

    @abstractmethod
    def finalize(self) -> None:
        """Check that all the data was consumed, raises an error if there is trailing data."""
        raise NotImplementedError

    @abstractmethod
    def is_empty(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def remaining(self) -> int:
        """Number of bytes that can still be read."""
        raise NotImplementedError

    @abstractmethod
    def peek_byte(self) -> int:
        """Read a single byte but don't consume from buffer."""
        raise NotImplementedError

    @abstractmethod
    def peek_bytes(self, n: int, *, exact: bool = True) -> memoryview:
        """Read n single byte but don't consume from buffer."""
        raise NotImplementedError

    def peek_struct(self, format: str) -> tuple[Any, ...]:
        size = struct.calcsize(format)
        data = self.peek_bytes(size)
        return struct.unpack(format, data)

    @abstractmethod
    def read_byte(self) -> int:
        """Read a single byte as unsigned int."""
        raise NotImplementedError

    @abstractmethod
    def _read_bytes(self, n: int) -> memoryview:
        # XXX: it is recommended that implementors of Deserializer specialize this implementation
        return memoryview(bytes(self.read_byte() for _ in range(n)))

    @final
    def read_bytes(self, n: int, *, max_bytes: int | None = DEFAULT_BYTES_MAX_LENGTH) -> memoryview:
        """Read n bytes, errors if there isn't enough data"""
        if max_bytes is not None and n > max_bytes:
            raise TooLongError('requested length exceeds maximum length')
        return self._read_bytes(n)

    @abstractmethod
    def read_all(self) -> memoryview:
        """Read all bytes until the reader is empty."""
        # XXX: it is recommended that implementors of Deserializer specialize this implementation
        def iter_bytes():
            while not self.is_empty():
                yield self.read_byte()
        return memoryview(bytes(iter_bytes()))

    def read_struct(self, format: str, *, max_bytes: int | None = DEFAULT_BYTES_MAX_LENGTH) -> tuple[Any, ...]:
        size = struct.calcsize(format)
        data = self.read_bytes(size, max_bytes=max_bytes)
        try:
            return struct.unpack_from(format, data)
        except struct.error as e:
            raise BadDataError(f'invalid data for {format!r}') from e

    def skip_zeroes(self, n: int) -> None:
        """Consume `n` bytes that are expected to be zero."""
        data = self.read_bytes(n)
        if any(data):
            raise BadDataError(f'expected {n} zero bytes, got {bytes(data).hex()}')
