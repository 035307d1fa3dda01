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
Reading of a whole DSON document, the mirror of `dson.writer`.

Field types are not stored in a document, so reading gives each field its name and raw payload. Payloads are turned
into values with `DecodedDocument.to_encoding_fields`, given the type of every field.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

from structlog import get_logger

from dson.consts import DATA_ALIGNMENT
from dson.exception import InvalidDocumentError
from dson.field.data_type import DataType
from dson.field.decode import decode_value
from dson.field.encoding_field import EncodingField
from dson.layout.data import is_aligned_payload
from dson.layout.header import Header, decode_header
from dson.layout.meta1 import NO_PARENT, Meta1Entry, decode_meta1_entry
from dson.layout.meta2 import Meta2Entry, decode_meta2_entry
from dson.name_hash import hash_string
from dson.serialization import Deserializer, SerializationError
from dson.serialization.types import Buffer
from dson.utils.int import padding_to_multiple

if TYPE_CHECKING:
    from dson.conf.settings import DsonSettings

logger = get_logger()


@dataclass(slots=True, frozen=True, kw_only=True)
class DecodedField:
    key: str
    offset: int
    is_object: bool
    depth: int
    payload: bytes
    num_direct_children: int = 0
    num_all_children: int = 0


@dataclass(slots=True, frozen=True, kw_only=True)
class DecodedDocument:
    header: Header
    meta1_entries: list[Meta1Entry]
    meta2_entries: list[Meta2Entry]
    fields: list[DecodedField]

    @property
    def revision(self) -> int:
        return self.header.revision

    def to_encoding_fields(
        self,
        type_of: Callable[[DecodedField], DataType],
        *,
        revision_field_name: Optional[str] = None,
    ) -> list[EncodingField]:
        """ Decode the payload of every field, `type_of` gives the type of the non-object fields.

        The result starts with the revision field, like the input of `dson.writer.encode_document`.
        """
        if revision_field_name is None:
            from dson.conf.get_settings import get_global_settings
            revision_field_name = get_global_settings().REVISION_FIELD_NAME
        encoding_fields = [EncodingField(key=revision_field_name, value_type=DataType.INT, value=self.revision)]
        for field in self.fields:
            value_type = DataType.OBJECT if field.is_object else type_of(field)
            try:
                value = decode_value(value_type, field.payload)
            except SerializationError as e:
                raise InvalidDocumentError(f'field "{field.key}" is not a valid {value_type}: {e}') from e
            encoding_fields.append(EncodingField(
                key=field.key,
                value_type=value_type,
                value=value,
                data=field.payload,
                is_object=field.is_object,
                num_direct_children=field.num_direct_children,
                num_all_children=field.num_all_children,
            ))
        return encoding_fields


def _check_header(header: Header, document_length: int, settings: DsonSettings) -> None:
    if header.magic_number != settings.MAGIC_NUMBER:
        raise InvalidDocumentError(f'invalid magic number: {header.magic_number.hex()}')
    errors = header.get_layout_errors()
    if errors:
        raise InvalidDocumentError(f'invalid header: {"; ".join(errors)}')
    if header.document_length != document_length:
        raise InvalidDocumentError(
            f'document is {document_length} bytes long, the header says {header.document_length}'
        )


def _read_field(data: memoryview, start: int, end: int, entry: Meta2Entry) -> tuple[str, bytes]:
    """Returns the name and the payload of the field stored in `data[start:end]`."""
    field_info = entry.get_field_info()
    name_end = start + field_info.name_length
    if field_info.name_length < 1 or name_end > end:
        raise InvalidDocumentError(f'field at offset {start} has an invalid name length: {field_info.name_length}')
    if data[name_end - 1] != 0:
        raise InvalidDocumentError(f'name of the field at offset {start} is not zero-terminated')
    try:
        key = bytes(data[start:name_end - 1]).decode('utf-8')
    except UnicodeDecodeError as e:
        raise InvalidDocumentError(f'name of the field at offset {start} is not valid utf-8') from e
    if hash_string(key + '\0') != entry.name_hash:
        raise InvalidDocumentError(f'name hash of field "{key}" does not match')

    payload_start = name_end
    if is_aligned_payload(end - name_end):
        payload_start += padding_to_multiple(name_end, DATA_ALIGNMENT)
        if any(data[name_end:payload_start]):
            raise InvalidDocumentError(f'alignment padding of field "{key}" is not zeroed')
    return key, bytes(data[payload_start:end])


def read_document(data: Buffer, *, settings: Optional[DsonSettings] = None) -> DecodedDocument:
    """ Read a complete DSON document, raises `InvalidDocumentError` if it is malformed.
    """
    if settings is None:
        from dson.conf.get_settings import get_global_settings
        settings = get_global_settings()
    log = logger.new()

    data_view = memoryview(data)
    deserializer = Deserializer.build_bytes_deserializer(data_view)
    try:
        header = decode_header(deserializer)
        _check_header(header, len(data_view), settings)
        meta1_entries = [decode_meta1_entry(deserializer) for _ in range(header.num_meta1_entries)]
        meta2_entries = [decode_meta2_entry(deserializer) for _ in range(header.num_meta2_entries)]
    except SerializationError as e:
        raise InvalidDocumentError(f'truncated document: {e}') from e
    assert deserializer.remaining() == header.data_length
    log.debug('header read', revision=header.revision, num_fields=header.num_meta2_entries)

    block = data_view[header.data_offset:]
    offsets = [entry.offset for entry in meta2_entries] + [header.data_length]
    if offsets[0] != 0:
        raise InvalidDocumentError(f'data block starts with {offsets[0]} bytes that belong to no field')
    for i, (start, end) in enumerate(zip(offsets, offsets[1:])):
        if end <= start:
            raise InvalidDocumentError(f'field {i} ends at offset {end} before it starts at {start}')

    objects = {entry.meta2_entry_index: (meta1_index, entry) for meta1_index, entry in enumerate(meta1_entries)}
    fields = []
    num_objects = 0
    depth_of_meta1: dict[int, int] = {}
    for i, entry in enumerate(meta2_entries):
        key, payload = _read_field(block, offsets[i], offsets[i + 1], entry)
        field_info = entry.get_field_info()
        if field_info.num_objects_before != num_objects:
            raise InvalidDocumentError(f'field "{key}" says {field_info.num_objects_before} objects come before it')
        if field_info.is_object != (i in objects):
            raise InvalidDocumentError(f'field "{key}" does not agree with the meta1 block about being an object')
        if not field_info.is_object:
            fields.append(DecodedField(key=key, offset=offsets[i], is_object=False, depth=0, payload=payload))
            continue
        meta1_index, meta1_entry = objects[i]
        if meta1_index != num_objects:
            raise InvalidDocumentError(f'object "{key}" has meta1 entry {meta1_index}, expected {num_objects}')
        if meta1_entry.parent_index == NO_PARENT:
            depth = 0
        elif meta1_entry.parent_index in depth_of_meta1:
            depth = depth_of_meta1[meta1_entry.parent_index] + 1
        else:
            raise InvalidDocumentError(f'object "{key}" has an invalid parent: {meta1_entry.parent_index}')
        depth_of_meta1[meta1_index] = depth
        fields.append(DecodedField(
            key=key,
            offset=offsets[i],
            is_object=True,
            depth=depth,
            payload=payload,
            num_direct_children=meta1_entry.num_direct_children,
            num_all_children=meta1_entry.num_all_children,
        ))
        num_objects += 1
    if num_objects != header.num_meta1_entries:
        raise InvalidDocumentError(
            f'{header.num_meta1_entries} meta1 entries for {num_objects} objects, some point at no object field'
        )

    fields = _set_leaf_depths(fields)
    log.debug('document read', document_length=len(data_view))
    return DecodedDocument(header=header, meta1_entries=meta1_entries, meta2_entries=meta2_entries, fields=fields)


def _set_leaf_depths(fields: list[DecodedField]) -> list[DecodedField]:
    """Leaves are one level below their enclosing object, which is found from the objects' descendant counts."""
    result = []
    # (depth, index of the last descendant) of the objects enclosing the current field
    open_objects: list[tuple[int, int]] = []
    for i, field in enumerate(fields):
        while open_objects and open_objects[-1][1] < i:
            open_objects.pop()
        if field.is_object:
            result.append(field)
            open_objects.append((field.depth, i + field.num_all_children))
            continue
        depth = open_objects[-1][0] + 1 if open_objects else 0
        result.append(replace(field, depth=depth))
    return result
