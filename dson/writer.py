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

"""
Encoding of a whole DSON document: header, meta1 block, meta2 block and data block, in this order.

The input is a flattened field list (see `dson.field.flatten`), its first field must be the revision field.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

from structlog import get_logger

from dson.exception import InvalidDocumentError
from dson.field.encode import encode_values, set_num_all_children, set_num_direct_children
from dson.field.encoding_field import EncodingField
from dson.layout.assembler import create_header, remove_revision_field
from dson.layout.data import payload_offset
from dson.layout.header import Header, encode_header
from dson.layout.meta1 import create_meta1_block, encode_meta1_entry
from dson.layout.meta2 import create_meta2_block, encode_meta2_entry
from dson.serialization import Serializer
from dson.serialization.adapters import MaxBytesExceededError, MaxBytesSerializer

if TYPE_CHECKING:
    from dson.conf.settings import DsonSettings

logger = get_logger()


def encode_fields(
    fields: Sequence[EncodingField],
    nums_direct_children: Optional[Sequence[int]] = None,
    nums_all_children: Optional[Sequence[int]] = None,
    *,
    settings: Optional[DsonSettings] = None,
) -> tuple[Header, list[EncodingField]]:
    """ Encode the payload of every field and compute the document header.

    The children counts, when given, must have one entry per field (the revision field included) and replace the
    counts the fields already carry.
    """
    encoded_fields = encode_values(fields)
    header = create_header(encoded_fields, settings=settings)
    if nums_direct_children is not None:
        encoded_fields = set_num_direct_children(encoded_fields, nums_direct_children)
    if nums_all_children is not None:
        encoded_fields = set_num_all_children(encoded_fields, nums_all_children)
    return header, encoded_fields


def write_data_block(serializer: Serializer, fields: Sequence[EncodingField]) -> None:
    """ Write the name and payload of every field, the revision field must not be included.
    """
    offset = 0
    for field in fields:
        payload = field.encoded_bytes
        serializer.write_bytes(field.key.encode('utf-8') + b'\0')
        start = payload_offset(offset, field.name_length, len(payload))
        serializer.write_zeroes(start - offset - field.name_length)
        serializer.write_bytes(payload, max_bytes=None)
        offset = start + len(payload)


def encode_document(fields: Sequence[EncodingField], *, settings: Optional[DsonSettings] = None) -> bytes:
    """ Encode a flattened field list into a complete DSON document.
    """
    if settings is None:
        from dson.conf.get_settings import get_global_settings
        settings = get_global_settings()
    log = logger.new()

    header, encoded_fields = encode_fields(fields, settings=settings)
    fields_without_revision = remove_revision_field(encoded_fields, settings=settings)
    meta1_entries = create_meta1_block(fields_without_revision)
    meta2_entries = create_meta2_block(
        fields_without_revision,
        max_field_name_length=settings.MAX_FIELD_NAME_LENGTH,
    )
    log.debug(
        'encoding document',
        revision=header.revision,
        num_meta1_entries=header.num_meta1_entries,
        num_meta2_entries=header.num_meta2_entries,
        data_length=header.data_length,
    )

    serializer = Serializer.build_bytes_serializer()
    encode_header(serializer, header)
    for meta1_entry in meta1_entries:
        encode_meta1_entry(serializer, meta1_entry)
    for meta2_entry in meta2_entries:
        encode_meta2_entry(serializer, meta2_entry)
    assert serializer.cur_pos() == header.data_offset

    data_serializer = MaxBytesSerializer(serializer, header.data_length)
    try:
        with data_serializer:
            write_data_block(data_serializer, fields_without_revision)
    except MaxBytesExceededError as e:
        raise InvalidDocumentError(f'data block is longer than {header.data_length} bytes') from e
    if data_serializer.bytes_left != 0:
        raise InvalidDocumentError(f'data block is {data_serializer.bytes_left} bytes shorter than the header says')

    document = bytes(serializer.finalize())
    log.debug('document encoded', document_length=len(document))
    return document
