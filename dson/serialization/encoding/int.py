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
This module implements encoding of DSON integers, always 4 bytes little-endian.

Any number is accepted and coerced through an unsigned 32-bit integer: floats are truncated towards zero and negative
values wrap around, which gives the same bytes as a signed 32-bit two's complement encoding. The signedness is only
chosen when decoding.

>>> se = Serializer.build_bytes_serializer()
>>> encode_int(se, 1)  # writes 01000000
>>> encode_int(se, -1)  # writes ffffffff
>>> encode_int(se, 2.9)  # writes 02000000
>>> encode_int(se, 0x01b1)  # writes b1010000
>>> bytes(se.finalize()).hex()
'01000000ffffffff02000000b1010000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('01000000ffffffffffffffff'))
>>> decode_int(de)  # reads 01000000
1
>>> decode_int(de)  # reads ffffffff
-1
>>> decode_int(de, signed=False)  # reads ffffffff
4294967295
>>> de.finalize()

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_int(se, True)
... except ValueError as e:
...     print(*e.args)
expected number, got bool: True
"""

import math
from typing import Any

from dson.serialization import Deserializer, Serializer, ValueShapeError

INT_SIZE = 4

_UINT32_MASK = 0xFFFF_FFFF


def is_number(value: Any) -> bool:
    """ Whether the value is a number that can be encoded as a DSON int, booleans are not numbers here.
    """
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def encode_int(serializer: Serializer, value: int | float) -> None:
    """ Encode a number using 4 bytes.

    This modules's docstring has more details and examples.
    """
    if not is_number(value):
        raise ValueShapeError('number', value)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueShapeError('finite number', value)
    serializer.write_struct('<I', int(value) & _UINT32_MASK)


def decode_int(deserializer: Deserializer, *, signed: bool = True) -> int:
    """ Decode a 4-byte integer.

    This modules's docstring has more details and examples.
    """
    value, = deserializer.read_struct('<i' if signed else '<I')
    return value
