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

from typing import Any


class SerializationError(ValueError):
    """Base class for errors raised while writing or reading bytes."""
    pass


class TooLongError(SerializationError):
    pass


class OutOfDataError(SerializationError):
    pass


class BadDataError(SerializationError):
    pass


class ValueShapeError(SerializationError):
    """ Raised by a value encoder when the runtime value does not have the shape its type tag requires.

    The encoder only knows the value, callers that know the field key are expected to re-raise with more context.
    """

    def __init__(self, expected_shape: str, actual: Any) -> None:
        self.expected_shape = expected_shape
        self.actual = actual
        super().__init__(f'expected {expected_shape}, got {type(actual).__name__}: {actual!r}')
