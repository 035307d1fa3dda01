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
The meta1 block has one 16-byte entry per object field, in field order:

    [parent index: int32][meta2 entry index: int32][direct children: int32][all children: int32]

The parent index is the meta1 index of the enclosing object, or -1 for top-level objects. The children counts come
from the tree flattening, an object's descendants are the `num_all_children` fields that follow it.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from dson.exception import InvalidDocumentError
from dson.field.encoding_field import EncodingField
from dson.serialization import Deserializer, Serializer

NO_PARENT = -1


@dataclass(slots=True, frozen=True, kw_only=True)
class Meta1Entry:
    parent_index: int
    meta2_entry_index: int
    num_direct_children: int
    num_all_children: int


def encode_meta1_entry(serializer: Serializer, entry: Meta1Entry) -> None:
    serializer.write_struct(
        '<iiii',
        entry.parent_index,
        entry.meta2_entry_index,
        entry.num_direct_children,
        entry.num_all_children,
    )


def decode_meta1_entry(deserializer: Deserializer) -> Meta1Entry:
    parent_index, meta2_entry_index, num_direct_children, num_all_children = deserializer.read_struct('<iiii')
    return Meta1Entry(
        parent_index=parent_index,
        meta2_entry_index=meta2_entry_index,
        num_direct_children=num_direct_children,
        num_all_children=num_all_children,
    )


def create_meta1_block(fields: Sequence[EncodingField]) -> list[Meta1Entry]:
    """ Build the meta1 entries of already encoded fields, the revision field must not be included.
    """
    entries: list[Meta1Entry] = []
    # (meta1 index, meta2 index of the last descendant) of the objects enclosing the current field
    open_objects: list[tuple[int, int]] = []
    for meta2_index, field in enumerate(fields):
        while open_objects and open_objects[-1][1] < meta2_index:
            open_objects.pop()
        if not field.is_object:
            continue
        last_descendant = meta2_index + field.num_all_children
        if last_descendant >= len(fields):
            raise InvalidDocumentError(
                f'object "{field.key}" claims {field.num_all_children} descendants but only '
                f'{len(fields) - meta2_index - 1} fields follow it'
            )
        parent_index = open_objects[-1][0] if open_objects else NO_PARENT
        meta1_index = len(entries)
        entries.append(Meta1Entry(
            parent_index=parent_index,
            meta2_entry_index=meta2_index,
            num_direct_children=field.num_direct_children,
            num_all_children=field.num_all_children,
        ))
        open_objects.append((meta1_index, last_descendant))
    return entries
