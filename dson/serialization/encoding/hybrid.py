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
This module implements encoding of a single element of a hybrid vector, an element that is either a number or a string.

Numbers are encoded as ints and strings as strings, anything else is silently skipped and writes nothing.

>>> se = Serializer.build_bytes_serializer()
>>> encode_hybrid(se, 7)  # writes 07000000
>>> encode_hybrid(se, 'ab')  # writes 03000000 6162 00
>>> encode_hybrid(se, None)  # writes nothing
>>> bytes(se.finalize()).hex()
'0700000003000000616200'

The element type is not stored, so decoding relies on the shape of the data: a length prefix that is followed by
exactly that many bytes with a single zero byte at the end is read as a string, anything else as an int.

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0700000003000000616200'))
>>> decode_hybrid(de)
7
>>> decode_hybrid(de)
'ab'
>>> de.finalize()
"""

from typing import Any

from dson.serialization import Deserializer, Serializer

from .int import decode_int, encode_int, is_number
from .string import decode_string, encode_string

_PREFIX_SIZE = 4


def encode_hybrid(serializer: Serializer, value: Any) -> None:
    """ Encodes a number as an int or a string as a string, first match wins.
    """
    if is_number(value):
        encode_int(serializer, value)
    elif isinstance(value, str):
        encode_string(serializer, value)


def _looks_like_string(deserializer: Deserializer) -> bool:
    if deserializer.remaining() < _PREFIX_SIZE + 1:
        return False
    size, = deserializer.peek_struct('<I')
    if size == 0 or deserializer.remaining() < _PREFIX_SIZE + size:
        return False
    data = bytes(deserializer.peek_bytes(_PREFIX_SIZE + size)[_PREFIX_SIZE:])
    if data[-1] != 0 or 0 in data[:-1]:
        return False
    try:
        data[:-1].decode('utf-8')
    except UnicodeDecodeError:
        return False
    return True


def decode_hybrid(deserializer: Deserializer) -> int | str:
    """ Decodes an element of a hybrid vector, guessing whether it is a string or an int.
    """
    if _looks_like_string(deserializer):
        return decode_string(deserializer)
    return decode_int(deserializer)
