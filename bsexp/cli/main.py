# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Entry point of `bsexp-cli`: `bsexp-cli <command> [--json-logs|--disable-logs] [--debug] ...`.
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
    """Registry of the available commands, each one a module with a `main() -> int` function."""

    def __init__(self) -> None:
        from . import decode, encode, stats

        self.basename = os.path.basename(sys.argv[0])
        self.commands: dict[str, Command] = {
            'encode': Command(encode, 'Encode a JSON list of expressions into a pool container'),
            'decode': Command(decode, 'Decode a pool container and print its expressions'),
            'stats': Command(stats, 'Print the table sizes of a pool container'),
        }

    def help(self) -> None:
        from colorama import Fore, Style

        width = max(map(len, self.commands))
        print()
        print(Style.BRIGHT + 'Usage: {} <command> [options]'.format(self.basename) + Style.RESET_ALL)
        print()
        print('Available commands:')
        for name, command in sorted(self.commands.items()):
            print('    {}{}   {}'.format(Fore.GREEN + name + Style.RESET_ALL, ' ' * (width - len(name)),
                                         command.description))
        print()

    def execute_from_command_line(self) -> int:
        from bsexp.cli.util import process_logging_options, setup_logging

        if len(sys.argv) < 2 or sys.argv[1] in ('help', '-h', '--help'):
            self.help()
            return 0

        name = sys.argv.pop(1)
        command = self.commands.get(name)
        if command is None:
            print('Unknown command: "{}"'.format(name))
            print('Type "{} help" for usage.'.format(self.basename))
            return -1

        sys.argv[0] = '{} {}'.format(sys.argv[0], name)
        setup_logging(process_logging_options(sys.argv))
        return command.module.main()


def main() -> None:
    try:
        sys.exit(CliManager().execute_from_command_line())
    except KeyboardInterrupt:
        logger.warn('Aborting and exiting...')
        sys.exit(1)
    except Exception:
        logger.exception('Uncaught exception:')
        sys.exit(2)


if __name__ == '__main__':
    main()
