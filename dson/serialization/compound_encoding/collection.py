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
A collection is any sequence of values written as a DSON vector.

Layout: [N: 4-byte little-endian count][value_0]...[value_N]

>>> from dson.serialization.encoding.string import encode_string, decode_string
>>> se = Serializer.build_bytes_serializer()
>>> value = ['a', 'bc']
>>> encode_collection(se, value, encode_string)
>>> bytes(se.finalize()).hex()
'0200000002000000610003000000626300'

Breakdown of the result:

    02000000: 2, the total length
    020000006100: 'a' (with length prefix and trailing zero)
    03000000626300: 'bc' (with length prefix and trailing zero)

When decoding, the builder can be any compatible collection, in the previous example a `list` was encoded, but when
decoding a `tuple` could be used, it only matters that the collection can be initialized with an `Iterable[T]`.

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0200000002000000610003000000626300'))
>>> decode_collection(de, decode_string, tuple)
('a', 'bc')
>>> de.finalize()
"""

from collections.abc import Iterable, Sequence
from typing import Callable, TypeVar

from dson.serialization import Deserializer, Serializer, ValueShapeError

from . import Decoder, Encoder

T = TypeVar('T')
R = TypeVar('R')


def encode_collection(serializer: Serializer, values: Sequence[T], encoder: Encoder[T]) -> None:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise ValueShapeError('sequence', values)
    serializer.write_struct('<I', len(values))
    for value in values:
        encoder(serializer, value)


def decode_collection(
    deserializer: Deserializer,
    decoder: Decoder[T],
    builder: Callable[[Iterable[T]], R],
) -> R:
    length, = deserializer.read_struct('<I')
    return builder(decoder(deserializer) for _ in range(length))
