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
Mapping from each `DataType` to the encoder of its payload.

The same runtime shape (a list) is encoded differently depending on the declared type, so dispatch is always done on
the type tag and never on the value. Vector encoders may still look at the elements to fall back to a more general
vector encoding, for instance an int vector that actually holds strings is written as a string vector.
"""

from collections.abc import Sequence
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from dson.field.data_type import DataType
from dson.serialization import Serializer, ValueShapeError
from dson.serialization.compound_encoding.collection import encode_collection
from dson.serialization.compound_encoding.tuple import encode_tuple
from dson.serialization.encoding.bool import encode_bool, encode_bool_slot
from dson.serialization.encoding.char import encode_char
from dson.serialization.encoding.float import encode_float
from dson.serialization.encoding.hybrid import encode_hybrid
from dson.serialization.encoding.int import encode_int, is_number
from dson.serialization.encoding.string import encode_string

ValueEncoder = Callable[[Serializer, Any], None]


def _check_sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ValueShapeError('sequence', value)
    return value


def encode_nothing(serializer: Serializer, value: Any) -> None:
    """Encoder for types that have no payload in the data block."""
    pass


def encode_int_vector(serializer: Serializer, value: Sequence[Any]) -> None:
    values = _check_sequence(value)
    if values and all(isinstance(i, str) for i in values):
        encode_string_vector(serializer, values)
    elif all(is_number(i) for i in values):
        encode_collection(serializer, values, encode_int)
    else:
        encode_hybrid_vector(serializer, values)


def encode_float_vector(serializer: Serializer, value: Sequence[float]) -> None:
    values = _check_sequence(value)
    for i in values:
        if not is_number(i):
            raise ValueShapeError('sequence of numbers', value)
    encode_collection(serializer, values, encode_float)


def encode_string_vector(serializer: Serializer, value: Sequence[Any]) -> None:
    values = _check_sequence(value)
    if all(isinstance(i, str) for i in values):
        encode_collection(serializer, values, encode_string)
    else:
        # mixed elements, same bytes a hybrid vector would have
        encode_hybrid_vector(serializer, values)


def encode_hybrid_vector(serializer: Serializer, value: Sequence[Any]) -> None:
    encode_collection(serializer, _check_sequence(value), encode_hybrid)


def encode_two_bool(serializer: Serializer, value: Sequence[Any]) -> None:
    encode_tuple(serializer, value, (encode_bool_slot, encode_bool_slot))


def encode_two_int(serializer: Serializer, value: Sequence[Any]) -> None:
    encode_tuple(serializer, value, (encode_int, encode_int))


ENCODERS: Mapping[DataType, ValueEncoder] = MappingProxyType({
    DataType.UNKNOWN: encode_nothing,
    DataType.BOOL: encode_bool,
    DataType.CHAR: encode_char,
    DataType.INT: encode_int,
    DataType.FLOAT: encode_float,
    DataType.STRING: encode_string,
    DataType.INT_VECTOR: encode_int_vector,
    DataType.FLOAT_VECTOR: encode_float_vector,
    DataType.STRING_VECTOR: encode_string_vector,
    DataType.HYBRID_VECTOR: encode_hybrid_vector,
    DataType.TWO_BOOL: encode_two_bool,
    DataType.TWO_INT: encode_two_int,
    DataType.FILE_RAW: encode_nothing,
    DataType.FILE_DECODED: encode_nothing,
    DataType.FILE_JSON: encode_nothing,
    DataType.OBJECT: encode_nothing,
})


def get_encoder(value_type: DataType) -> Optional[ValueEncoder]:
    """Returns the encoder registered for the given type, or None if there is none."""
    return ENCODERS.get(value_type)
