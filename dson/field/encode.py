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

from collections.abc import Sequence
from typing import Any

from dson.exception import FieldCountMismatchError, NoEncodeFuncError, ShapeMismatchError
from dson.field.data_type import DataType
from dson.field.encoding_field import EncodingField
from dson.field.registry import get_encoder
from dson.serialization import Serializer, ValueShapeError


def encode_value(key: str, value_type: DataType, value: Any) -> bytes:
    """ Encode the payload of a single field according to its type.

    Raises `NoEncodeFuncError` if there is no encoder for the type and `ShapeMismatchError` if the value does not have
    the shape the type requires.
    """
    encoder = get_encoder(value_type)
    if encoder is None:
        raise NoEncodeFuncError(key, value_type, value)
    serializer = Serializer.build_bytes_serializer()
    try:
        encoder(serializer, value)
    except ValueShapeError as e:
        raise ShapeMismatchError(key, value_type, e.expected_shape, e.actual) from e
    return bytes(serializer.finalize())


def encode_values(fields: Sequence[EncodingField]) -> list[EncodingField]:
    """Returns copies of the fields with their payload encoded and `is_object` set."""
    return [field.with_bytes(encode_value(field.key, field.value_type, field.value)) for field in fields]


def _check_same_length(what: str, fields: Sequence[EncodingField], values: Sequence[int]) -> None:
    if len(fields) != len(values):
        raise FieldCountMismatchError(what, len(fields), len(values))


def set_num_direct_children(
    fields: Sequence[EncodingField],
    nums_direct_children: Sequence[int],
) -> list[EncodingField]:
    _check_same_length('direct children counts', fields, nums_direct_children)
    return [
        field.with_children(num_direct_children=num_direct_children)
        for field, num_direct_children in zip(fields, nums_direct_children)
    ]


def set_num_all_children(fields: Sequence[EncodingField], nums_all_children: Sequence[int]) -> list[EncodingField]:
    _check_same_length('all children counts', fields, nums_all_children)
    return [
        field.with_children(num_all_children=num_all_children)
        for field, num_all_children in zip(fields, nums_all_children)
    ]
