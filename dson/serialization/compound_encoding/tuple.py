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
Fixed-length tuples, used by the DSON pairs (two bools, two ints).

There actually isn't a "format" per-se, the encoding of `(A, B)` is just the encoding of A concatenated with the
encoding of B, no length prefix is written. The number of values must match the number of encoders.

>>> from dson.serialization.encoding.int import encode_int, decode_int
>>> se = Serializer.build_bytes_serializer()
>>> encode_tuple(se, [1, 2], (encode_int, encode_int))
>>> bytes(se.finalize()).hex()
'0100000002000000'

>>> se = Serializer.build_bytes_serializer()
>>> try:
...     encode_tuple(se, [1, 2, 3], (encode_int, encode_int))
... except ValueError as e:
...     print(*e.args)
expected sequence of 2 elements, got list: [1, 2, 3]

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('0100000002000000'))
>>> decode_tuple(de, (decode_int, decode_int))
(1, 2)
"""

from collections.abc import Sequence
from typing import Any

from dson.serialization import Deserializer, Serializer, ValueShapeError

from . import Decoder, Encoder


def encode_tuple(serializer: Serializer, values: Sequence[Any], encoders: tuple[Encoder[Any], ...]) -> None:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence) or len(values) != len(encoders):
        raise ValueShapeError(f'sequence of {len(encoders)} elements', values)
    for value, encoder in zip(values, encoders):
        encoder(serializer, value)


def decode_tuple(deserializer: Deserializer, decoders: tuple[Decoder[Any], ...]) -> tuple[Any, ...]:
    return tuple(decoder(deserializer) for decoder in decoders)
