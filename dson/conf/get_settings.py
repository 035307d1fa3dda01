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

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from dson import conf
from dson.conf.settings import DsonSettings

logger = get_logger()


class _SettingsMetadata(NamedTuple):
    source: str
    settings: DsonSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> DsonSettings:
    """
    Returns the configuration model.

    Loads it from the yaml filepath in the 'DSON_CONFIG_YAML' env var, or from the packaged default settings if it is
    not set. The file is only read the first time, later calls return the same instance.
    """
    settings_yaml_filepath = os.environ.get('DSON_CONFIG_YAML', conf.DEFAULT_SETTINGS_FILEPATH)
    return _load_settings_singleton(settings_yaml_filepath)


def get_settings_source() -> str:
    """ Returns the path of the YAML file that was loaded.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    global _settings_singleton
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def _load_settings_singleton(source: str) -> DsonSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')

        return _settings_singleton.settings

    log = logger.new()
    log.debug('loading settings', source=source)
    _settings_singleton = _SettingsMetadata(
        source=source,
        settings=DsonSettings.from_yaml(filepath=source),
    )

    return _settings_singleton.settings
