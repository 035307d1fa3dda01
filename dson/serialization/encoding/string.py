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
This module implements DSON string encoding: a 4-byte length prefix, the utf-8 bytes and a trailing zero byte.

The length prefix counts the trailing zero byte. A string that starts with `###` is not stored as text, it is a
reference to a name and is encoded as the 4-byte int hash of the rest of the string.

>>> se = Serializer.build_bytes_serializer()
>>> encode_string(se, 'foo')  # writes 04000000 666f6f 00
>>> encode_string(se, '')  # writes 01000000 00
>>> encode_string(se, '###a')  # writes 61000000, the hash of 'a'
>>> bytes(se.finalize()).hex()
'04000000666f6f00010000000061000000'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('04000000666f6f000100000000'))
>>> decode_string(de)
'foo'
>>> decode_string(de)
''
>>> de.finalize()

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('03000000666f6f'))
>>> try:
...     decode_string(de)
... except ValueError as e:
...     print(*e.args)
string is not zero-terminated
"""

from dson.consts import HASHED_STRING_PREFIX
from dson.name_hash import hash_string
from dson.serialization import BadDataError, Deserializer, Serializer, ValueShapeError

from .int import encode_int


def is_hashed_string(value: str) -> bool:
    return value.startswith(HASHED_STRING_PREFIX)


def encode_string(serializer: Serializer, value: str) -> None:
    """ Encodes a string, or the hash of the referenced name for `###`-prefixed strings.

    This modules's docstring has more details and examples.
    """
    if not isinstance(value, str):
        raise ValueShapeError('str', value)
    if is_hashed_string(value):
        encode_int(serializer, hash_string(value[len(HASHED_STRING_PREFIX):]))
        return
    data = value.encode('utf-8')
    # +1 to account for the last zero byte
    serializer.write_struct('<I', len(data) + 1)
    serializer.write_bytes(data)
    serializer.write_byte(0)


def decode_string(deserializer: Deserializer) -> str:
    """ Decodes a length-prefixed zero-terminated string.

    Hashed references cannot be told apart from ints, they should be decoded with `decode_int`.
    """
    size, = deserializer.read_struct('<I')
    if size == 0:
        raise BadDataError('string length must count the trailing zero byte')
    data = deserializer.read_bytes(size)
    if data[-1] != 0:
        raise BadDataError('string is not zero-terminated')
    try:
        return bytes(data[:-1]).decode('utf-8')
    except UnicodeDecodeError as e:
        raise BadDataError('string is not valid utf-8') from e
