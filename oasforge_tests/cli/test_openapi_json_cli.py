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

import json
import textwrap

from oasforge.api import api_endpoint
from oasforge.cli.openapi_json import build_parser, get_settings, main
from oasforge.conf import GeneratorSettings

ENDPOINTS_MODULE = '''
from oasforge.api import api_endpoint
from oasforge.api.schemas import ResponseModel


class Stock(ResponseModel):
    count: int


class StockResource:
    @api_endpoint(
        path='/stock/{item_id}',
        method='GET',
        operation_id='get_stock',
        summary='Stock of an item',
        response_model=Stock,
        docs=lambda op: op.parameter('item_id', lambda p: p.description('The item')),
    )
    def render_GET(self, request):
        pass
'''


def test_generates_document_from_modules(tmp_path, monkeypatch):
    (tmp_path / 'stock_endpoints.py').write_text(textwrap.dedent(ENDPOINTS_MODULE))
    monkeypatch.syspath_prepend(str(tmp_path))
    out = tmp_path / 'openapi.json'

    assert main(['--disable-logs', '--module', 'stock_endpoints', '--title', 'Stock', '--indent', '2', str(out)]) == 0

    openapi = json.loads(out.read_text())
    assert openapi['info'] == {'title': 'Stock', 'version': '0.1.0'}
    operation = openapi['paths']['/stock/{item_id}']['get']
    assert operation['parameters'][0]['description'] == 'The item'
    assert operation['responses']['200']['content']['application/json']['schema'] == {
        '$ref': '#/components/schemas/Stock',
    }
    assert out.read_text().endswith('}\n')


def test_fail_on_errors(tmp_path):
    class _Resource:
        @api_endpoint(
            path='/items',
            method='GET',
            operation_id='list_items',
            summary='List',
            docs=lambda op: op.parameter('offset', lambda p: p),
        )
        def render_GET(self, request):
            pass

    out = tmp_path / 'openapi.json'
    assert main(['--disable-logs', str(out)]) == 0
    assert '/items' in json.loads(out.read_text())['paths']

    assert main(['--disable-logs', '--fail-on-errors', str(tmp_path / 'failed.json')]) == 1


def test_settings_from_args(tmp_path):
    settings_file = tmp_path / 'settings.yml'
    settings_file.write_text('TITLE: Shop\nSERVERS:\n  - "https://shop.example.com"\n')
    base_file = tmp_path / 'base.yml'

    args = build_parser().parse_args([
        '--config-yaml', str(settings_file),
        '--api-version', '3.2.1',
        '--base', str(base_file),
        str(tmp_path / 'openapi.json'),
    ])
    settings = get_settings(args)

    assert settings == GeneratorSettings(
        TITLE='Shop',
        VERSION='3.2.1',
        SERVERS=['https://shop.example.com'],
        BASE_DOCUMENT=str(base_file),
    )
