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
This module implements encoding of DSON floats: the value is narrowed to IEEE-754 binary32 and written little-endian.

Values too large for binary32 become an infinity of the same sign.

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, 1.0)  # writes 0000803f
>>> encode_float(se, 0.5)  # writes 0000003f
>>> encode_float(se, -2)  # writes 000000c0
>>> encode_float(se, 1e39)  # writes 0000807f
>>> bytes(se.finalize()).hex()
'0000803f0000003f000000c00000807f'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0000803f000000c0'))
>>> decode_float(de)
1.0
>>> decode_float(de)
-2.0
>>> de.finalize()
"""

import math

from dson.serialization import Deserializer, Serializer, ValueShapeError

from .int import is_number

FLOAT_SIZE = 4


def encode_float(serializer: Serializer, value: float) -> None:
    """ Encode a number as a 4-byte float.
    """
    if not is_number(value):
        raise ValueShapeError('number', value)
    value = float(value)
    try:
        serializer.write_struct('<f', value)
    except ValueError:
        # struct refuses finite values out of binary32 range
        serializer.write_struct('<f', math.copysign(math.inf, value))


def decode_float(deserializer: Deserializer) -> float:
    """ Decode a 4-byte float.
    """
    value, = deserializer.read_struct('<f')
    return value
