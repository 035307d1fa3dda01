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
This module implements encoding of a DSON char, the first byte of a string.

>>> se = Serializer.build_bytes_serializer()
>>> encode_char(se, 'a')
>>> encode_char(se, 'xyz')  # only the first byte is kept
>>> bytes(se.finalize())
b'ax'

>>> de = Deserializer.build_bytes_deserializer(b'a')
>>> decode_char(de)
'a'
>>> de.finalize()

Only ASCII characters come back unchanged, a character that takes more than one byte in UTF-8 keeps just its first
byte, which decodes as a different character:

>>> se = Serializer.build_bytes_serializer()
>>> encode_char(se, '\u00e9')  # writes c3
>>> bytes(se.finalize()).hex()
'c3'
>>> decode_char(Deserializer.build_bytes_deserializer(bytes([0xc3]))) == '\u00c3'
True
"""

from dson.serialization import Deserializer, Serializer, ValueShapeError


def encode_char(serializer: Serializer, value: str) -> None:
    """ Encodes the first byte of a non-empty string.
    """
    if not isinstance(value, str) or not value:
        raise ValueShapeError('non-empty str', value)
    serializer.write_byte(value.encode('utf-8')[0])


def decode_char(deserializer: Deserializer) -> str:
    """ Decodes a single byte as a 1-character string.
    """
    return chr(deserializer.read_byte())
