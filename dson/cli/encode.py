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
Encode a JSON document tree into a DSON file.

The input is either a list of top-level tree nodes or an object with the nodes in `fields` and an optional `revision`:

    {"revision": 2, "fields": [
        {"key": "base_root", "type": "object", "fields": [
            {"key": "gold", "type": "int", "value": 1500}
        ]}
    ]}
"""

import json
import os
import sys
from argparse import ArgumentParser, Namespace
from typing import Any

from structlog import get_logger

logger = get_logger()


def create_parser() -> ArgumentParser:
    from dson.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('input', help='JSON file with the document tree')
    parser.add_argument('output', help='Path of the DSON file to write')
    parser.add_argument('--revision', type=int, help='Revision of the document, overrides the one in the input')
    parser.add_argument('--config-yaml', type=str, help='Configuration yaml filepath')
    return parser


def load_tree(tree: Any, *, default_revision: int) -> tuple[int, list[Any]]:
    """Returns the revision and the top-level nodes of a parsed JSON input."""
    if isinstance(tree, list):
        return default_revision, tree
    if isinstance(tree, dict) and isinstance(tree.get('fields'), list):
        revision = tree.get('revision', default_revision)
        if not isinstance(revision, int) or isinstance(revision, bool):
            raise ValueError(f'revision must be an integer, got {revision!r}')
        return revision, tree['fields']
    raise ValueError('input must be a list of fields or an object with a list of "fields"')


def execute(args: Namespace) -> int:
    from dson.cli.util import check_or_exit
    from dson.conf.get_settings import get_global_settings
    from dson.exception import DsonError
    from dson.field.flatten import flatten_tree
    from dson.writer import encode_document

    if args.config_yaml:
        os.environ['DSON_CONFIG_YAML'] = args.config_yaml
    settings = get_global_settings()
    log = logger.new(input=args.input, output=args.output)

    check_or_exit(os.path.isfile(args.input), f'input file not found: {args.input}')
    try:
        with open(args.input, 'r') as fp:
            tree = json.load(fp)
        revision, nodes = load_tree(tree, default_revision=settings.DEFAULT_REVISION)
        if args.revision is not None:
            revision = args.revision
        fields = flatten_tree(nodes, revision=revision, revision_field_name=settings.REVISION_FIELD_NAME)
        document = encode_document(fields, settings=settings)
    except (DsonError, ValueError) as e:
        log.error('cannot encode document', error=str(e))
        return 1

    with open(args.output, 'wb') as fp:
        fp.write(document)
    log.info('document written', num_fields=len(fields) - 1, length=len(document))
    return 0


def main():
    parser = create_parser()
    args = parser.parse_args(sys.argv[1:])
    return execute(args)
