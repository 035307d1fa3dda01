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

from dataclasses import dataclass, replace
from typing import Any, Optional

from typing_extensions import Self

from dson.field.data_type import DataType


@dataclass(slots=True, frozen=True, kw_only=True)
class EncodingField:
    """ One node of a flattened DSON document.

    `data` is None until the value is encoded, after that its length is what the layout is computed from. The children
    counts are set by the tree flattening, the encoder only carries them along.
    """
    key: str
    value_type: DataType
    value: Any = None
    data: Optional[bytes] = None
    is_object: bool = False
    num_direct_children: int = 0
    num_all_children: int = 0

    @property
    def encoded_bytes(self) -> bytes:
        assert self.data is not None, f'field "{self.key}" was not encoded yet'
        return self.data

    @property
    def name_length(self) -> int:
        """Length of the zero-terminated name as stored in the data block."""
        return len(self.key.encode('utf-8')) + 1

    def with_bytes(self, data: bytes) -> Self:
        return replace(self, data=data, is_object=self.value_type is DataType.OBJECT)

    def with_children(self, *, num_direct_children: int | None = None, num_all_children: int | None = None) -> Self:
        return replace(
            self,
            num_direct_children=self.num_direct_children if num_direct_children is None else num_direct_children,
            num_all_children=self.num_all_children if num_all_children is None else num_all_children,
        )
