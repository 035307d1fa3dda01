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
Offsets of the fields inside the data block.

Each field is stored as its zero-terminated name followed by its payload. Payloads of 4 bytes or more start at a
multiple of 4 (relative to the start of the data block), the gap after the name is filled with zeroes. Shorter payloads
(a bool, a char) come right after the name. Nothing is written after the payload, the next field starts right away.

For a field named `foo` with a 1-byte payload followed by a field named `bar` with a 4-byte payload:

    offset 0: 'foo\\0' (4 bytes) then the payload (1 byte)
    offset 5: 'bar\\0' (4 bytes), ends at 9, padded to 12, then the payload (4 bytes)
    data length: 16
"""

from collections.abc import Iterable, Sequence

from dson.consts import ALIGNED_PAYLOAD_MIN_SIZE, DATA_ALIGNMENT
from dson.field.encoding_field import EncodingField
from dson.utils.int import round_up_to_multiple


def is_aligned_payload(payload_length: int) -> bool:
    return payload_length >= ALIGNED_PAYLOAD_MIN_SIZE


def payload_offset(field_offset: int, name_length: int, payload_length: int) -> int:
    """Offset of the payload of a field that starts at `field_offset`."""
    end_of_name = field_offset + name_length
    if is_aligned_payload(payload_length):
        return round_up_to_multiple(end_of_name, DATA_ALIGNMENT)
    return end_of_name


def next_field_offset(field_offset: int, field: EncodingField) -> int:
    """Offset right after the given field, which is where the next field starts."""
    payload_length = len(field.encoded_bytes)
    return payload_offset(field_offset, field.name_length, payload_length) + payload_length


def compute_field_offsets(fields: Sequence[EncodingField]) -> list[int]:
    """Offset of each field inside the data block."""
    offsets = []
    offset = 0
    for field in fields:
        offsets.append(offset)
        offset = next_field_offset(offset, field)
    return offsets


def compute_data_length(fields: Iterable[EncodingField]) -> int:
    """Length of the data block holding the given fields."""
    offset = 0
    for field in fields:
        offset = next_field_offset(offset, field)
    return offset
