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

from pathlib import Path
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator

from dson.utils.yaml import dict_from_extended_yaml

# (len(key) + 1) is stored in 9 bits of the field info
_MAX_ENCODABLE_FIELD_NAME_LENGTH = (1 << 9) - 2


def _hex_to_bytes(value: Any) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return bytes.fromhex(value)
    raise ValueError(f'expected bytes or hex string, got {type(value).__name__}')


class DsonSettings(BaseModel):
    """ Settings of the encoder, loaded from a YAML file by `dson.conf.get_settings.get_global_settings()`.

    Unknown keys are rejected and instances are immutable.
    """
    model_config = ConfigDict(extra='forbid', frozen=True)

    # Magic number written at offset 0 of every document
    MAGIC_NUMBER: bytes = bytes.fromhex('01b10000')

    # Name of the mandatory first field of every document, its value is the document revision
    REVISION_FIELD_NAME: str = '__revision_dont_touch'

    # Revision used by the CLI when the input does not set one
    DEFAULT_REVISION: int = 0

    # Longest field name accepted by the encoder, in bytes
    MAX_FIELD_NAME_LENGTH: int = _MAX_ENCODABLE_FIELD_NAME_LENGTH

    @field_validator('MAGIC_NUMBER', mode='before')
    @classmethod
    def _parse_magic_number(cls, value: Any) -> bytes:
        magic_number = _hex_to_bytes(value)
        if len(magic_number) != 4:
            raise ValueError('MAGIC_NUMBER must have exactly 4 bytes')
        return magic_number

    @field_validator('REVISION_FIELD_NAME')
    @classmethod
    def _validate_revision_field_name(cls, value: str) -> str:
        if not value:
            raise ValueError('REVISION_FIELD_NAME cannot be empty')
        return value

    @field_validator('MAX_FIELD_NAME_LENGTH')
    @classmethod
    def _validate_max_field_name_length(cls, value: int) -> int:
        if not 0 < value <= _MAX_ENCODABLE_FIELD_NAME_LENGTH:
            raise ValueError(f'MAX_FIELD_NAME_LENGTH must be between 1 and {_MAX_ENCODABLE_FIELD_NAME_LENGTH}')
        return value

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'DsonSettings':
        """Takes a filepath to a yaml file and returns a validated DsonSettings instance."""
        settings_dict = dict_from_extended_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
