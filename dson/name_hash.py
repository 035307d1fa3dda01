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
Name hash used by DSON to resolve fields by name and to store `###`-prefixed strings as references.

The hash is multiplicative with base 53 over the UTF-8 bytes of the string, wrapping at 32 bits:

>>> hash_string('')
0
>>> hash_string('a')
97
>>> hash_string('ab')  # 97 * 53 + 98
5239
>>> hash_string('a\\0')  # 97 * 53 + 0
5141
"""

_HASH_BASE = 53
_UINT32_MASK = 0xFFFF_FFFF


def hash_string(value: str) -> int:
    """ Hash a string into an unsigned 32-bit integer.
    """
    result = 0
    for byte in value.encode('utf-8'):
        result = (result * _HASH_BASE + byte) & _UINT32_MASK
    return result
