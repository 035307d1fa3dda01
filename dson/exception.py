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

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dson.field.data_type import DataType


class DsonError(Exception):
    """Base class for exceptions in DSON."""
    pass


class RevisionNotFoundError(DsonError):
    """Raised when the first field of a document is not the revision marker."""

    def __init__(self, actual_field_name: str, expected_field_name: str) -> None:
        self.actual_field_name = actual_field_name
        self.expected_field_name = expected_field_name
        super().__init__(f'expected "{expected_field_name}" as the first field; got "{actual_field_name}"')


class NoEncodeFuncError(DsonError):
    """Raised when there is no encoder registered for the type of a field."""

    def __init__(self, key: str, value_type: 'DataType | Any', value: Any) -> None:
        self.key = key
        self.value_type = value_type
        self.value = value
        super().__init__(
            f'no bytes encode function for key "{key}", value type "{value_type}", and value "{value!r}"'
        )


class ShapeMismatchError(DsonError):
    """Raised when the value of a field does not have the shape required by its type."""

    def __init__(self, key: str, value_type: 'DataType', expected_shape: str, actual: Any) -> None:
        self.key = key
        self.value_type = value_type
        self.expected_shape = expected_shape
        self.actual = actual
        super().__init__(
            f'field "{key}" of type "{value_type}" expects {expected_shape}, got {type(actual).__name__}: {actual!r}'
        )


class FieldNameTooLongError(DsonError):
    """Raised when a field name does not fit the name length bits of the field info."""

    def __init__(self, key: str, max_length: int) -> None:
        self.key = key
        self.max_length = max_length
        super().__init__(f'field name "{key}" is longer than {max_length} bytes')


class FieldCountMismatchError(DsonError):
    """Raised when per-field annotations do not have one entry per field."""

    def __init__(self, what: str, num_fields: int, num_values: int) -> None:
        self.num_fields = num_fields
        self.num_values = num_values
        super().__init__(f'{what}: got {num_values} values for {num_fields} fields')


class DuplicateFieldError(DsonError):
    """Raised when two sibling fields have the same name."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'duplicate field name among siblings: "{key}"')


class InvalidDocumentError(DsonError):
    """Raised when a document being read or written has inconsistent sizes, offsets or children counts."""
    pass


class InvalidFieldNameError(DsonError):
    """Raised when a field name cannot be stored as a zero-terminated name."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'field name must be non-empty and have no zero bytes: {key!r}')
