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
Loading of YAML settings files.

A settings file may set `extends` to the path of another file, relative to its own directory. The extended file is
loaded first (it may extend another file in turn) and the keys of the extending file are merged over it:

>>> merged_dict(dict(a=1, b=dict(c=2, d=3)), dict(b=dict(d=4), e=5)) == dict(a=1, b=dict(c=2, d=4), e=5)
True
"""

import os
from pathlib import Path
from typing import Any, Union

import yaml

EXTENDS_KEY = 'extends'


def merged_dict(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Returns a new dict with `override` merged over `base`, nested dicts are merged key by key."""
    result = dict(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merged_dict(result[key], value)
        else:
            result[key] = value
    return result


def dict_from_yaml(*, filepath: Union[Path, str]) -> dict[str, Any]:
    """Takes a filepath to a yaml file and returns a dictionary with its contents."""
    if not os.path.isfile(filepath):
        raise ValueError(f"'{filepath}' is not a file")

    with open(filepath, 'r') as file:
        contents = yaml.safe_load(file)

    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f"'{filepath}' cannot be parsed as a dictionary")
    return contents


def dict_from_extended_yaml(*, filepath: Union[Path, str]) -> dict[str, Any]:
    """ Like `dict_from_yaml()`, following the `extends` key, which is not part of the result.
    """
    return _load_extended(Path(filepath), seen=frozenset())


def _load_extended(filepath: Path, *, seen: frozenset[Path]) -> dict[str, Any]:
    resolved = filepath.resolve()
    if resolved in seen:
        raise ValueError(f"'{filepath}' is extended more than once in the same chain")

    contents = dict_from_yaml(filepath=filepath)
    base_file = contents.pop(EXTENDS_KEY, None)
    if not base_file:
        return contents

    base = _load_extended(filepath.parent / str(base_file), seen=seen | {resolved})
    return merged_dict(base, contents)
