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

from types import TracebackType
from typing import Generic, TypeVar, Union

from typing_extensions import Self, override

from dson.serialization.exceptions import SerializationError
from dson.serialization.serializer import Serializer

from ..types import Buffer

S = TypeVar('S', bound=Serializer)


class MaxBytesExceededError(SerializationError):
    """ Raised when more bytes than allowed are written through a `MaxBytesSerializer`.

    The adapter is unusable after this error, the inner serializer may hold part of the rejected write.
    """
    pass


class MaxBytesSerializer(Serializer, Generic[S]):
    """ Serializer adapter that fails as soon as more than `max_bytes` are written through it.

    Writes go to the inner serializer, so `cur_pos()` and `finalize()` are the inner ones. The DSON writer wraps the
    data block with this adapter so the block can never outgrow the length announced in the header.
    """

    inner: S

    def __init__(self, serializer: S, max_bytes: int) -> None:
        self.inner = serializer
        self._bytes_left = max_bytes

    @property
    def bytes_left(self) -> int:
        return self._bytes_left

    def _consume(self, size: int) -> None:
        self._bytes_left -= size
        if self._bytes_left < 0:
            raise MaxBytesExceededError(f'{-self._bytes_left} bytes over the limit')

    @override
    def finalize(self) -> Buffer:
        return self.inner.finalize()

    @override
    def cur_pos(self) -> int:
        return self.inner.cur_pos()

    @override
    def write_byte(self, data: int) -> None:
        self._consume(1)
        self.inner.write_byte(data)

    @override
    def _write_bytes(self, data: Buffer) -> None:
        view = memoryview(data)
        self._consume(len(view))
        self.inner.write_bytes(view, max_bytes=None)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Union[type[BaseException], None],
        exc_value: Union[BaseException, None],
        traceback: Union[TracebackType, None],
    ) -> None:
        pass
