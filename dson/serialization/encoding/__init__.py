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
This module was made to hold simple encoding implementations of DSON scalar payloads.

Simple in this context means "not compound". For compound types (vectors, pairs, ...) the encoder should be in the
`compound_encoding` module.

The general organization should be that each submodule `x` deals with a single type and look like this:

    def encode_x(serializer: Serializer, value: ValueType) -> None:
        ...

    def decode_x(deserializer: Deserializer) -> ValueType:
        ...

Encoders raise `ValueShapeError` when the value given does not have the expected shape. Submodules should not have to
take into consideration how type tags are mapped to encoders, that is done by `dson.field.registry`.
"""
