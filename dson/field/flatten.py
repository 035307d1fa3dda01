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
Flattening of a document tree into the ordered field list the encoder works on.

A tree node is a mapping with a `key` and a `type` (a `DataType` value). Leaves carry a `value`, objects carry their
children in `fields`:

    {"key": "base_root", "type": "object", "fields": [
        {"key": "foo", "type": "bool", "value": true}
    ]}

Fields are listed in pre-order (an object comes right before its descendants) after the revision field, and every
field is annotated with its number of direct children and of all descendants.

>>> fields = flatten_tree([
...     {'key': 'root', 'type': 'object', 'fields': [
...         {'key': 'a', 'type': 'int', 'value': 1},
...         {'key': 'inner', 'type': 'object', 'fields': [{'key': 'b', 'type': 'bool', 'value': True}]},
...     ]},
... ], revision=7, revision_field_name='__revision')
>>> [(f.key, f.num_direct_children, f.num_all_children) for f in fields]
[('__revision', 0, 0), ('root', 2, 3), ('a', 0, 0), ('inner', 1, 1), ('b', 0, 0)]
"""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

from dson.exception import DuplicateFieldError, InvalidFieldNameError
from dson.field.data_type import DataType
from dson.field.encoding_field import EncodingField


def _parse_node(node: Any) -> tuple[str, DataType]:
    if not isinstance(node, Mapping):
        raise ValueError(f'tree node must be a mapping, got {type(node).__name__}')
    key = node.get('key')
    if not isinstance(key, str) or not key:
        raise ValueError(f'tree node must have a non-empty "key", got {key!r}')
    if '\0' in key:
        raise InvalidFieldNameError(key)
    try:
        value_type = DataType(node.get('type'))
    except ValueError as e:
        raise ValueError(f'field "{key}" has an invalid type: {node.get("type")!r}') from e
    return key, value_type


def _flatten_nodes(nodes: Sequence[Any], out: list[EncodingField]) -> int:
    """Append the fields of `nodes` and their descendants to `out`, returns how many fields were appended."""
    seen_keys: set[str] = set()
    total = 0
    for node in nodes:
        key, value_type = _parse_node(node)
        if key in seen_keys:
            raise DuplicateFieldError(key)
        seen_keys.add(key)

        if value_type is not DataType.OBJECT:
            out.append(EncodingField(key=key, value_type=value_type, value=node.get('value')))
            total += 1
            continue

        children = node.get('fields', [])
        if not isinstance(children, Sequence) or isinstance(children, str):
            raise ValueError(f'field "{key}" must have a list of "fields"')
        position = len(out)
        out.append(EncodingField(key=key, value_type=value_type))
        num_all_children = _flatten_nodes(children, out)
        out[position] = out[position].with_children(
            num_direct_children=len(children),
            num_all_children=num_all_children,
        )
        total += 1 + num_all_children
    return total


def flatten_tree(
    nodes: Sequence[Any],
    *,
    revision: int,
    revision_field_name: Optional[str] = None,
) -> list[EncodingField]:
    """ Flatten the top-level nodes of a document into a field list that starts with the revision field.

    This module's docstring has more details and an example.
    """
    if revision_field_name is None:
        from dson.conf.get_settings import get_global_settings
        revision_field_name = get_global_settings().REVISION_FIELD_NAME

    fields = [EncodingField(key=revision_field_name, value_type=DataType.INT, value=revision)]
    _flatten_nodes(nodes, fields)
    return fields
