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
Decoders of field payloads, the mirror of `dson.field.registry`.

DSON does not store the type of a field, so the caller has to know it. Vectors are decoded as lists. A `###` string
field is decoded as the unsigned hash it was replaced with, inside a vector the hash comes back as a signed int.
"""

from types import MappingProxyType
from typing import Any, Callable, Mapping

from dson.exception import InvalidDocumentError
from dson.field.data_type import DataType
from dson.serialization import Deserializer
from dson.serialization.compound_encoding.collection import decode_collection
from dson.serialization.compound_encoding.tuple import decode_tuple
from dson.serialization.encoding.bool import decode_bool, decode_bool_slot
from dson.serialization.encoding.char import decode_char
from dson.serialization.encoding.float import decode_float
from dson.serialization.encoding.hybrid import decode_hybrid
from dson.serialization.encoding.int import INT_SIZE, decode_int
from dson.serialization.encoding.string import decode_string
from dson.serialization.types import Buffer

ValueDecoder = Callable[[Deserializer], Any]


def decode_nothing(deserializer: Deserializer) -> None:
    return None


def decode_string_or_reference(deserializer: Deserializer) -> str | int:
    # a text string takes at least 5 bytes, 4 bytes can only be a hashed reference
    if deserializer.remaining() == INT_SIZE:
        return decode_int(deserializer, signed=False)
    return decode_string(deserializer)


def decode_int_vector(deserializer: Deserializer) -> list[int]:
    return decode_collection(deserializer, decode_int, list)


def decode_float_vector(deserializer: Deserializer) -> list[float]:
    return decode_collection(deserializer, decode_float, list)


def decode_string_vector(deserializer: Deserializer) -> list[int | str]:
    # elements can be `###` references or numbers, the encoder writes them the way a hybrid vector does
    return decode_collection(deserializer, decode_hybrid, list)


def decode_hybrid_vector(deserializer: Deserializer) -> list[int | str]:
    return decode_collection(deserializer, decode_hybrid, list)


def decode_two_bool(deserializer: Deserializer) -> list[bool]:
    return list(decode_tuple(deserializer, (decode_bool_slot, decode_bool_slot)))


def decode_two_int(deserializer: Deserializer) -> list[int]:
    return list(decode_tuple(deserializer, (decode_int, decode_int)))


DECODERS: Mapping[DataType, ValueDecoder] = MappingProxyType({
    DataType.UNKNOWN: decode_nothing,
    DataType.BOOL: decode_bool,
    DataType.CHAR: decode_char,
    DataType.INT: decode_int,
    DataType.FLOAT: decode_float,
    DataType.STRING: decode_string_or_reference,
    DataType.INT_VECTOR: decode_int_vector,
    DataType.FLOAT_VECTOR: decode_float_vector,
    DataType.STRING_VECTOR: decode_string_vector,
    DataType.HYBRID_VECTOR: decode_hybrid_vector,
    DataType.TWO_BOOL: decode_two_bool,
    DataType.TWO_INT: decode_two_int,
    DataType.FILE_RAW: decode_nothing,
    DataType.FILE_DECODED: decode_nothing,
    DataType.FILE_JSON: decode_nothing,
    DataType.OBJECT: decode_nothing,
})


def decode_value(value_type: DataType, data: Buffer) -> Any:
    """ Decode the payload of a single field, all of `data` must be consumed.
    """
    decoder = DECODERS.get(value_type)
    if decoder is None:
        raise InvalidDocumentError(f'no decode function for value type "{value_type}"')
    deserializer = Deserializer.build_bytes_deserializer(data)
    value = decoder(deserializer)
    deserializer.finalize()
    return value
