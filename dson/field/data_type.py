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

from enum import Enum


class DataType(str, Enum):
    """ Kind of value stored in a DSON field, used as the dispatch key by the encoders and decoders.

    The values are the names used by the JSON front end.
    """
    UNKNOWN = 'unknown'
    BOOL = 'bool'
    CHAR = 'char'
    INT = 'int'
    FLOAT = 'float'
    STRING = 'string'
    INT_VECTOR = 'int_vector'
    FLOAT_VECTOR = 'float_vector'
    STRING_VECTOR = 'string_vector'
    HYBRID_VECTOR = 'hybrid_vector'
    TWO_BOOL = 'two_bool'
    TWO_INT = 'two_int'
    FILE_RAW = 'file_raw'
    FILE_DECODED = 'file_decoded'
    FILE_JSON = 'file_json'
    OBJECT = 'object'

    def __str__(self) -> str:
        return self.value

    def has_inline_payload(self) -> bool:
        """Whether fields of this type store their value in the data block."""
        return self not in _NO_INLINE_PAYLOAD


_NO_INLINE_PAYLOAD = frozenset({
    DataType.UNKNOWN,
    DataType.FILE_RAW,
    DataType.FILE_DECODED,
    DataType.FILE_JSON,
    DataType.OBJECT,
})
