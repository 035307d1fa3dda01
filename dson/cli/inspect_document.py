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
import sys
from argparse import ArgumentParser, Namespace
from typing import TextIO

from structlog import get_logger

from dson.reader import DecodedDocument

logger = get_logger()

HEADER_ATTRIBUTES = (
    'revision',
    'header_length',
    'meta1_size',
    'num_meta1_entries',
    'meta1_offset',
    'num_meta2_entries',
    'meta2_offset',
    'data_length',
    'data_offset',
)


def create_parser() -> ArgumentParser:
    from dson.cli.util import create_parser
    parser = create_parser()
    parser.add_argument('file', help='DSON file to inspect')
    parser.add_argument('--fields', action='store_true', help='Also list every field with its raw payload')
    parser.add_argument('--config-yaml', type=str, help='Configuration yaml filepath')
    return parser


def print_document(document: DecodedDocument, *, fields: bool, out: TextIO) -> None:
    header = document.header
    print('magic_number:', header.magic_number.hex(), file=out)
    for name in HEADER_ATTRIBUTES:
        print(f'{name}:', getattr(header, name), file=out)
    if not fields:
        return
    print(file=out)
    for field in document.fields:
        indent = '    ' * field.depth
        if field.is_object:
            print(f'{indent}{field.key}/ @{field.offset} children={field.num_direct_children}', file=out)
        else:
            print(f'{indent}{field.key} @{field.offset} = {field.payload.hex()}', file=out)


def execute(args: Namespace, *, out: TextIO = sys.stdout) -> int:
    from dson.cli.util import check_or_exit
    from dson.conf.get_settings import get_global_settings
    from dson.exception import InvalidDocumentError
    from dson.reader import read_document

    if args.config_yaml:
        os.environ['DSON_CONFIG_YAML'] = args.config_yaml
    settings = get_global_settings()
    log = logger.new(file=args.file)

    check_or_exit(os.path.isfile(args.file), f'file not found: {args.file}')
    with open(args.file, 'rb') as fp:
        data = fp.read()

    try:
        document = read_document(data, settings=settings)
    except InvalidDocumentError as e:
        log.error('invalid document', error=str(e))
        return 1

    print_document(document, fields=args.fields, out=out)
    return 0


def main():
    parser = create_parser()
    args = parser.parse_args(sys.argv[1:])
    return execute(args)
