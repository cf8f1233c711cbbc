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

"""CLI command to generate the OpenAPI document of the endpoints registered with @api_endpoint.

Usage:
    oasforge-openapi [--module app.resources ...] [--config-yaml FILE] [--base FILE] [--indent N] [output_file]

Modules given with --module are imported before generating, so their decorated handlers are registered.
"""

import argparse
import importlib
import json
import sys
from typing import Any, Optional

from structlog import get_logger

from oasforge.api.generator import OpenAPIGenerator
from oasforge.cli.util import create_parser, pop_logging_args, setup_logging
from oasforge.conf.get_settings import get_global_settings, load_settings
from oasforge.conf.settings import GeneratorSettings
from oasforge.exception import GenerationFailed

logger = get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = create_parser()
    parser.add_argument('--config-yaml', help='Settings file, overrides the OASFORGE_CONFIG_YAML env var')
    parser.add_argument('--module', '-m', action='append', default=[],
                        help='Module registering endpoints, may be repeated')
    parser.add_argument('--base', help='Document (JSON or YAML) to add the endpoints to')
    parser.add_argument('--title', help='Title of the document')
    parser.add_argument('--api-version', help='Version of the documented API')
    parser.add_argument('--fail-on-errors', action='store_true',
                        help='Exit with an error when documentation errors are found')
    parser.add_argument('--indent', type=int, default=None, help='Number of spaces to use for indentation')
    parser.add_argument('out', type=argparse.FileType('w', encoding='UTF-8'), default='-', nargs='?',
                        help='Output file where the OpenAPI json will be written')
    return parser


def get_settings(args: argparse.Namespace) -> GeneratorSettings:
    settings = load_settings(args.config_yaml) if args.config_yaml else get_global_settings()
    updates: dict[str, Any] = {}
    if args.title:
        updates['TITLE'] = args.title
    if args.api_version:
        updates['VERSION'] = args.api_version
    if args.base:
        updates['BASE_DOCUMENT'] = args.base
    if args.fail_on_errors:
        updates['FAIL_ON_ERRORS'] = True
    return settings.model_copy(update=updates)


def get_openapi_dict(settings: GeneratorSettings, modules: list[str]) -> dict[str, Any]:
    """ Imports the modules and returns the generated OpenAPI dict
    """
    for module in modules:
        importlib.import_module(module)
    return OpenAPIGenerator(settings).generate_dict()


def main(argv: Optional[list[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    setup_logging(pop_logging_args(argv))

    args = build_parser().parse_args(argv)
    log = logger.new(modules=args.module)

    try:
        openapi = get_openapi_dict(get_settings(args), args.module)
    except GenerationFailed as e:
        log.error('documentation errors found', count=len(e.errors))
        return 1

    json.dump(openapi, args.out, indent=args.indent)
    args.out.write('\n')
    args.out.flush()
    log.info('openapi document written', paths=len(openapi.get('paths', {})))
    return 0


if __name__ == '__main__':
    sys.exit(main())
