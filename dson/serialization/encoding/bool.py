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

r"""
This module implements encoding a boolean value, either using 1 byte or using a 4-byte slot.

The 1-byte format is trivial and extremely simple:

- `False` maps to `b'\x00'`
- `True` maps to `b'\x01'`
- any other byte value is invalid

The 4-byte slot is used by pairs of booleans, only the low byte is meaningful and the other 3 bytes are zero.

>>> se = Serializer.build_bytes_serializer()
>>> encode_bool(se, False)
>>> bytes(se.finalize())
b'\x00'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bool(se, True)
>>> bytes(se.finalize())
b'\x01'

>>> se = Serializer.build_bytes_serializer()
>>> encode_bool_slot(se, True)
>>> encode_bool_slot(se, 0)
>>> bytes(se.finalize()).hex()
'0100000000000000'

>>> de = Deserializer.build_bytes_deserializer(b'\x00')
>>> decode_bool(de)
False
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'\x01')
>>> decode_bool(de)
True
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(b'\x02')
>>> try:
...     decode_bool(de)
... except ValueError as e:
...     print(*e.args)
b'\x02' is not a valid boolean

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('01000000'))
>>> decode_bool_slot(de)
True
>>> de.finalize()
"""

from typing import Any

from dson.serialization import BadDataError, Deserializer, Serializer, ValueShapeError

_SLOT_PADDING = bytes(3)


def encode_bool(serializer: Serializer, value: bool) -> None:
    """ Encodes a boolean value using 1 byte.
    """
    if not isinstance(value, bool):
        raise ValueShapeError('bool', value)
    serializer.write_byte(0x01 if value else 0x00)


def decode_bool(deserializer: Deserializer) -> bool:
    """ Decodes a boolean value from 1 byte.
    """
    i = deserializer.read_byte()
    if i == 0:
        return False
    elif i == 1:
        return True
    else:
        raw = bytes([i])
        raise BadDataError(f'{raw!r} is not a valid boolean')


def encode_bool_slot(serializer: Serializer, value: Any) -> None:
    """ Encodes a boolean value in a 4-byte slot, numbers are coerced to booleans.
    """
    if not isinstance(value, (bool, int, float)):
        raise ValueShapeError('bool', value)
    encode_bool(serializer, bool(value))
    serializer.write_bytes(_SLOT_PADDING)


def decode_bool_slot(deserializer: Deserializer) -> bool:
    """ Decodes a boolean value from a 4-byte slot.
    """
    value = decode_bool(deserializer)
    deserializer.skip_zeroes(len(_SLOT_PADDING))
    return value
