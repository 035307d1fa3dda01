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
The 64-byte header at the start of every DSON document.

Layout (little-endian, sizes in bytes):

    offset  size  field
         0     4  magic number
         4     4  revision
         8     4  header length (64)
        12     4  reserved, zero
        16     4  meta1 block size
        20     4  number of meta1 entries
        24     4  meta1 block offset
        28     8  reserved, zero
        36     8  reserved, zero
        44     4  number of meta2 entries
        48     4  meta2 block offset
        52     4  reserved, zero
        56     4  data block length
        60     4  data block offset
"""

from dataclasses import dataclass

from dson.consts import HEADER_LENGTH, META1_ENTRY_SIZE, META2_ENTRY_SIZE
from dson.serialization import Deserializer, Serializer

MAGIC_NUMBER_SIZE = 4


@dataclass(slots=True, frozen=True, kw_only=True)
class Header:
    magic_number: bytes
    revision: int
    header_length: int
    meta1_size: int
    num_meta1_entries: int
    meta1_offset: int
    num_meta2_entries: int
    meta2_offset: int
    data_length: int
    data_offset: int

    @property
    def meta2_size(self) -> int:
        return self.num_meta2_entries * META2_ENTRY_SIZE

    @property
    def document_length(self) -> int:
        return self.data_offset + self.data_length

    def get_layout_errors(self) -> list[str]:
        """Returns a description of every size or offset that does not agree with the others."""
        errors = []
        if self.header_length != HEADER_LENGTH:
            errors.append(f'header length is {self.header_length}, expected {HEADER_LENGTH}')
        if self.meta1_offset != self.header_length:
            errors.append(f'meta1 offset is {self.meta1_offset}, expected {self.header_length}')
        if self.meta1_size != self.num_meta1_entries * META1_ENTRY_SIZE:
            errors.append(f'meta1 size is {self.meta1_size} for {self.num_meta1_entries} entries')
        if self.meta2_offset != self.meta1_offset + self.meta1_size:
            errors.append(f'meta2 offset is {self.meta2_offset}, expected {self.meta1_offset + self.meta1_size}')
        if self.data_offset != self.meta2_offset + self.meta2_size:
            errors.append(f'data offset is {self.data_offset}, expected {self.meta2_offset + self.meta2_size}')
        if self.num_meta1_entries < 0 or self.num_meta2_entries < 0:
            errors.append(f'negative number of entries: {self.num_meta1_entries}, {self.num_meta2_entries}')
        if self.num_meta1_entries > self.num_meta2_entries:
            errors.append(f'{self.num_meta1_entries} meta1 entries for {self.num_meta2_entries} fields')
        if self.data_length < 0:
            errors.append(f'data length is negative: {self.data_length}')
        return errors


def encode_header(serializer: Serializer, header: Header) -> None:
    assert len(header.magic_number) == MAGIC_NUMBER_SIZE
    serializer.write_bytes(header.magic_number)
    serializer.write_struct('<ii', header.revision, header.header_length)
    serializer.write_zeroes(4)
    serializer.write_struct('<iii', header.meta1_size, header.num_meta1_entries, header.meta1_offset)
    serializer.write_zeroes(8)
    serializer.write_zeroes(8)
    serializer.write_struct('<ii', header.num_meta2_entries, header.meta2_offset)
    serializer.write_zeroes(4)
    serializer.write_struct('<ii', header.data_length, header.data_offset)


def decode_header(deserializer: Deserializer) -> Header:
    """ Decode a header, the reserved regions are skipped without being checked.
    """
    magic_number = bytes(deserializer.read_bytes(MAGIC_NUMBER_SIZE))
    revision, header_length = deserializer.read_struct('<ii')
    deserializer.read_bytes(4)
    meta1_size, num_meta1_entries, meta1_offset = deserializer.read_struct('<iii')
    deserializer.read_bytes(8)
    deserializer.read_bytes(8)
    num_meta2_entries, meta2_offset = deserializer.read_struct('<ii')
    deserializer.read_bytes(4)
    data_length, data_offset = deserializer.read_struct('<ii')
    return Header(
        magic_number=magic_number,
        revision=revision,
        header_length=header_length,
        meta1_size=meta1_size,
        num_meta1_entries=num_meta1_entries,
        meta1_offset=meta1_offset,
        num_meta2_entries=num_meta2_entries,
        meta2_offset=meta2_offset,
        data_length=data_length,
        data_offset=data_offset,
    )
