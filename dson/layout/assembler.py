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

import math
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

from dson.consts import HEADER_LENGTH, MAX_REVISION, META1_ENTRY_SIZE, META2_ENTRY_SIZE, MIN_REVISION
from dson.exception import RevisionNotFoundError, ShapeMismatchError
from dson.field.data_type import DataType
from dson.field.encoding_field import EncodingField
from dson.layout.data import compute_data_length
from dson.layout.header import Header
from dson.serialization.encoding.int import is_number

if TYPE_CHECKING:
    from dson.conf.settings import DsonSettings


def _get_settings(settings: Optional[DsonSettings]) -> DsonSettings:
    if settings is not None:
        return settings
    from dson.conf.get_settings import get_global_settings
    return get_global_settings()


def split_revision_field(
    fields: Sequence[EncodingField],
    *,
    settings: Optional[DsonSettings] = None,
) -> tuple[EncodingField, list[EncodingField]]:
    """ Returns the revision field and the remaining fields, fails if the first field is not the revision.
    """
    revision_field_name = _get_settings(settings).REVISION_FIELD_NAME
    if not fields:
        raise RevisionNotFoundError('', revision_field_name)
    first_field = fields[0]
    if first_field.key != revision_field_name:
        raise RevisionNotFoundError(first_field.key, revision_field_name)
    return first_field, remove_revision_field(fields, settings=settings)


def remove_revision_field(
    fields: Sequence[EncodingField],
    *,
    settings: Optional[DsonSettings] = None,
) -> list[EncodingField]:
    revision_field_name = _get_settings(settings).REVISION_FIELD_NAME
    return [field for field in fields if field.key != revision_field_name]


def get_revision(revision_field: EncodingField) -> int:
    value = revision_field.value
    if not is_number(value) or (isinstance(value, float) and not math.isfinite(value)):
        raise ShapeMismatchError(revision_field.key, DataType.INT, 'number', value)
    revision = int(value)
    if not MIN_REVISION <= revision <= MAX_REVISION:
        raise ShapeMismatchError(revision_field.key, DataType.INT, 'int32', value)
    return revision


def create_header(fields: Sequence[EncodingField], *, settings: Optional[DsonSettings] = None) -> Header:
    """ Compute the header of a document from its already encoded fields, the revision field first.

    The revision field only lives in the header, it takes no room in the metadata or data blocks.
    """
    settings = _get_settings(settings)
    revision_field, fields_without_revision = split_revision_field(fields, settings=settings)

    num_meta1_entries = sum(1 for field in fields_without_revision if field.is_object)
    meta1_size = num_meta1_entries * META1_ENTRY_SIZE
    meta1_offset = HEADER_LENGTH

    num_meta2_entries = len(fields_without_revision)
    meta2_offset = meta1_offset + meta1_size
    meta2_size = num_meta2_entries * META2_ENTRY_SIZE

    return Header(
        magic_number=settings.MAGIC_NUMBER,
        revision=get_revision(revision_field),
        header_length=HEADER_LENGTH,
        meta1_size=meta1_size,
        num_meta1_entries=num_meta1_entries,
        meta1_offset=meta1_offset,
        num_meta2_entries=num_meta2_entries,
        meta2_offset=meta2_offset,
        data_length=compute_data_length(fields_without_revision),
        data_offset=HEADER_LENGTH + meta1_size + meta2_size,
    )
