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
Entry point of `dson-cli`, dispatches `dson-cli <command> [args]` to the `main()` of the command module.

Every command also accepts the logging arguments `--debug`, `--json-logs` and `--disable-logs`.
"""

import os
import sys
from types import ModuleType
from typing import NamedTuple

from structlog import get_logger

logger = get_logger()


class Command(NamedTuple):
    module: ModuleType
    description: str


class CliManager:
    def __init__(self) -> None:
        self.program: str = os.path.basename(sys.argv[0])
        self.command_list: dict[str, Command] = {}

        from dson.cli import encode, inspect_document

        self.add_cmd('encode', encode, 'Encode a JSON document tree into a DSON file')
        self.add_cmd('inspect', inspect_document, 'Print the header and the fields of a DSON file')

    def add_cmd(self, name: str, module: ModuleType, description: str = '') -> None:
        assert name not in self.command_list, f'command {name} registered twice'
        self.command_list[name] = Command(module=module, description=description)

    def help(self) -> None:
        from colorama import Fore, Style

        width = max(len(name) for name in self.command_list)
        print()
        print('Available subcommands:')
        print()
        print(Fore.RED + Style.BRIGHT + '[dson]' + Style.RESET_ALL)
        for name, command in sorted(self.command_list.items()):
            print(f'    {name.ljust(width)}   {command.description}')
        print()

    def execute_from_command_line(self) -> int:
        from dson.cli.util import process_logging_args, setup_logging

        if len(sys.argv) < 2 or sys.argv[1] == 'help':
            self.help()
            return 0

        name = sys.argv.pop(1)
        command = self.command_list.get(name)
        if command is None:
            print(f'Unknown command: "{name}"')
            print(f'Type "{self.program} help" for usage.')
            return -1

        # usage messages show the command name
        sys.argv[0] = f'{sys.argv[0]} {name}'
        logging_output, logging_options = process_logging_args(sys.argv)
        setup_logging(logging_output=logging_output, logging_options=logging_options)
        return command.module.main()


def main():
    try:
        sys.exit(CliManager().execute_from_command_line())
    except KeyboardInterrupt:
        logger.warning('interrupted')
        sys.exit(1)
    except Exception:
        logger.exception('uncaught exception')
        sys.exit(2)


if __name__ == '__main__':
    main()
