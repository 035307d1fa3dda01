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
The meta2 block has one 12-byte entry per field (the revision field excluded), in field order:

    [name hash: uint32][offset in the data block: int32][field info: int32]

The field info packs 3 independent values in disjoint bit ranges:

- bit 0: whether the field is an object
- bits 2 to 10: length of the name, counting its zero terminator
- bits 11 to 30: number of object fields before this one, for an object it is the index of its meta1 entry

>>> info = FieldInfo(is_object=True, name_length=4, num_objects_before=2)
>>> bin(info.pack())
'0b1000000010001'
>>> FieldInfo.unpack(info.pack()) == info
True
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from typing_extensions import Self

from dson.exception import FieldNameTooLongError, InvalidFieldNameError
from dson.field.encoding_field import EncodingField
from dson.layout.data import compute_field_offsets
from dson.name_hash import hash_string
from dson.serialization import Deserializer, Serializer

FIELD_INFO_IS_OBJECT_MASK = 0b1

FIELD_INFO_NAME_LENGTH_SHIFT = 2
FIELD_INFO_NAME_LENGTH_MASK = (1 << 9) - 1

FIELD_INFO_NUM_OBJECTS_SHIFT = 11
FIELD_INFO_NUM_OBJECTS_MASK = (1 << 20) - 1


@dataclass(slots=True, frozen=True, kw_only=True)
class FieldInfo:
    is_object: bool
    name_length: int
    num_objects_before: int

    def pack(self) -> int:
        if not 0 <= self.name_length <= FIELD_INFO_NAME_LENGTH_MASK:
            raise ValueError(f'name length does not fit the field info: {self.name_length}')
        if not 0 <= self.num_objects_before <= FIELD_INFO_NUM_OBJECTS_MASK:
            raise ValueError(f'object count does not fit the field info: {self.num_objects_before}')
        field_info = 0
        if self.is_object:
            field_info |= FIELD_INFO_IS_OBJECT_MASK
        field_info |= self.name_length << FIELD_INFO_NAME_LENGTH_SHIFT
        field_info |= self.num_objects_before << FIELD_INFO_NUM_OBJECTS_SHIFT
        return field_info

    @classmethod
    def unpack(cls, field_info: int) -> Self:
        return cls(
            is_object=bool(field_info & FIELD_INFO_IS_OBJECT_MASK),
            name_length=(field_info >> FIELD_INFO_NAME_LENGTH_SHIFT) & FIELD_INFO_NAME_LENGTH_MASK,
            num_objects_before=(field_info >> FIELD_INFO_NUM_OBJECTS_SHIFT) & FIELD_INFO_NUM_OBJECTS_MASK,
        )


@dataclass(slots=True, frozen=True, kw_only=True)
class Meta2Entry:
    name_hash: int
    offset: int
    field_info: int

    def get_field_info(self) -> FieldInfo:
        return FieldInfo.unpack(self.field_info)


def encode_meta2_entry(serializer: Serializer, entry: Meta2Entry) -> None:
    serializer.write_struct('<Iii', entry.name_hash, entry.offset, entry.field_info)


def decode_meta2_entry(deserializer: Deserializer) -> Meta2Entry:
    name_hash, offset, field_info = deserializer.read_struct('<Iii')
    return Meta2Entry(name_hash=name_hash, offset=offset, field_info=field_info)


def create_meta2_entry(
    current_offset: int,
    current_num_object: int,
    field: EncodingField,
    *,
    max_field_name_length: Optional[int] = None,
) -> Meta2Entry:
    """ Build the meta2 entry of a field that starts at `current_offset` in the data block.

    `current_num_object` is the number of object fields encoded before this one.
    """
    if max_field_name_length is None:
        from dson.conf.get_settings import get_global_settings
        max_field_name_length = get_global_settings().MAX_FIELD_NAME_LENGTH
    if not field.key or '\0' in field.key:
        raise InvalidFieldNameError(field.key)
    if field.name_length - 1 > max_field_name_length:
        raise FieldNameTooLongError(field.key, max_field_name_length)
    field_info = FieldInfo(
        is_object=field.is_object,
        name_length=field.name_length,
        num_objects_before=current_num_object,
    )
    return Meta2Entry(
        name_hash=hash_string(field.key + '\0'),
        offset=current_offset,
        field_info=field_info.pack(),
    )


def create_meta2_block(
    fields: Sequence[EncodingField],
    *,
    max_field_name_length: Optional[int] = None,
) -> list[Meta2Entry]:
    """ Build the meta2 entries of already encoded fields, the revision field must not be included.
    """
    entries = []
    num_objects = 0
    for offset, field in zip(compute_field_offsets(fields), fields):
        entries.append(create_meta2_entry(offset, num_objects, field, max_field_name_length=max_field_name_length))
        if field.is_object:
            num_objects += 1
    return entries
