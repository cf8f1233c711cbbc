#  Copyright 2026 Hathor Labs
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

"""Argument parsing and logging setup shared by the commands."""

import logging
import logging.config
from argparse import ArgumentParser
from enum import Enum
from typing import Any, NamedTuple

import configargparse
import structlog

ENV_VAR_PREFIX = 'oasforge_'


def create_parser(*, add_help: bool = True) -> ArgumentParser:
    """A parser whose options can also come from env vars, e.g. `--config-yaml` from `OASFORGE_CONFIG_YAML`."""
    return configargparse.ArgumentParser(auto_env_var_prefix=ENV_VAR_PREFIX, add_help=add_help)


class LogFormat(Enum):
    PRETTY = 'pretty'
    JSON = 'json'
    NULL = 'null'


class LoggingConfig(NamedTuple):
    log_format: LogFormat
    debug: bool


def pop_logging_args(argv: list[str]) -> LoggingConfig:
    """Take the logging flags out of `argv`, so logging is set up before the command parses the rest."""
    parser = create_parser(add_help=False)
    formats = parser.add_mutually_exclusive_group()
    formats.add_argument('--json-logs', action='store_true')
    formats.add_argument('--disable-logs', action='store_true')
    parser.add_argument('--debug', action='store_true')

    args, remaining = parser.parse_known_args(argv)
    argv[:] = remaining

    if args.json_logs:
        log_format = LogFormat.JSON
    elif args.disable_logs:
        log_format = LogFormat.NULL
    else:
        log_format = LogFormat.PRETTY
    return LoggingConfig(log_format=log_format, debug=args.debug)


def setup_logging(config: LoggingConfig) -> None:
    """Send structlog and stdlib records to stderr, rendered in the chosen format."""
    timestamper = structlog.processors.TimeStamper(fmt='%Y-%m-%d %H:%M:%S')

    # applied to records of stdlib loggers before rendering
    foreign_pre_chain: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        timestamper,
    ]

    renderers = {
        LogFormat.PRETTY: structlog.dev.ConsoleRenderer(colors=True),
        LogFormat.JSON: structlog.processors.JSONRenderer(),
    }
    formatters = {
        log_format.value: {
            '()': structlog.stdlib.ProcessorFormatter,
            'processor': renderer,
            'foreign_pre_chain': foreign_pre_chain,
        }
        for log_format, renderer in renderers.items()
    }

    handler: dict[str, Any]
    if config.log_format is LogFormat.NULL:
        handler = {'class': 'logging.NullHandler'}
    else:
        handler = {'class': 'logging.StreamHandler', 'formatter': config.log_format.value}

    # See: https://docs.python.org/3/library/logging.config.html#configuration-dictionary-schema
    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': formatters,
        'handlers': {'default': handler},
        'root': {
            'handlers': ['default'],
            'level': 'DEBUG' if config.debug else 'INFO',
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

    logging.captureWarnings(True)
