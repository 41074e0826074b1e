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
Helpers shared by the `bsexp-cli` commands: argument parsing and logging setup.

Logging flags are taken out of argv before a command parses its own arguments, so every command accepts them:

    --json-logs      one JSON object per log line
    --disable-logs   no log output at all
    --debug          include debug events (encode/decode summaries)
"""

import logging
import logging.config
from enum import Enum
from typing import Any, NamedTuple

import configargparse
import structlog


def create_parser(*, add_help: bool = True) -> configargparse.ArgumentParser:
    """Argument parser where every option can also be set by a `BSEXP_<OPTION>` environment variable."""
    return configargparse.ArgumentParser(auto_env_var_prefix='bsexp_', add_help=add_help)


def get_level_styles() -> dict[str, str]:
    from colorama import Back, Fore, Style
    return {
        'critical': Style.BRIGHT + Fore.RED,
        'exception': Fore.RED,
        'error': Fore.RED,
        'warn': Fore.YELLOW,
        'warning': Fore.YELLOW,
        'info': Fore.GREEN,
        'debug': Style.BRIGHT + Fore.CYAN,
        'notset': Back.RED,
    }


class LoggingOutput(Enum):
    NULL = 'null'
    PRETTY = 'pretty'
    JSON = 'json'


class LoggingOptions(NamedTuple):
    output: LoggingOutput
    debug: bool


def _pop_known_args(parser: configargparse.ArgumentParser, argv: list[str]) -> Any:
    args, remaining_argv = parser.parse_known_args(argv)
    argv[:] = remaining_argv
    return args


def process_logging_output(argv: list[str]) -> LoggingOutput:
    """Remove `--json-logs`/`--disable-logs` from argv, returning the chosen output."""
    parser = create_parser(add_help=False)
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--json-logs', action='store_true')
    group.add_argument('--disable-logs', action='store_true')
    args = _pop_known_args(parser, argv)

    if args.json_logs:
        return LoggingOutput.JSON
    if args.disable_logs:
        return LoggingOutput.NULL
    return LoggingOutput.PRETTY


def process_logging_options(argv: list[str]) -> LoggingOptions:
    """Remove every logging flag from argv."""
    output = process_logging_output(argv)
    parser = create_parser(add_help=False)
    parser.add_argument('--debug', action='store_true')
    args = _pop_known_args(parser, argv)
    return LoggingOptions(output=output, debug=args.debug)


def setup_logging(options: LoggingOptions) -> None:
    """Route structlog through the stdlib `logging` module, rendering to stderr as configured by `options`."""
    timestamper = structlog.processors.TimeStamper(fmt='%Y-%m-%d %H:%M:%S')
    foreign_pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        timestamper,
    ]

    renderer: Any
    if options.output is LoggingOutput.PRETTY:
        renderer = structlog.dev.ConsoleRenderer(colors=True, level_styles=get_level_styles())
    else:
        renderer = structlog.processors.JSONRenderer()
    handler: dict[str, Any]
    if options.output is LoggingOutput.NULL:
        handler = {'class': 'logging.NullHandler'}
    else:
        handler = {'class': 'logging.StreamHandler', 'formatter': 'default'}

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                '()': structlog.stdlib.ProcessorFormatter,
                'processor': renderer,
                'foreign_pre_chain': foreign_pre_chain,
            },
        },
        'handlers': {
            'default': handler,
        },
        'root': {
            'handlers': ['default'],
            'level': logging.DEBUG if options.debug else logging.INFO,
        },
    })

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
