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

import pytest

from oasforge.utils.yaml import load_extended_mapping, load_mapping, merge_mappings


def test_merge_mappings_keeps_inputs():
    base = {'info': {'title': 'Shop', 'version': '1.0.0'}, 'servers': ['a']}
    overrides = {'info': {'version': '2.0.0'}, 'servers': ['b']}

    assert merge_mappings(base, overrides) == {'info': {'title': 'Shop', 'version': '2.0.0'}, 'servers': ['b']}
    assert base == {'info': {'title': 'Shop', 'version': '1.0.0'}, 'servers': ['a']}


def test_load_json_and_yaml(tmp_path):
    (tmp_path / 'doc.json').write_text(json.dumps({'openapi': '3.1.0'}))
    (tmp_path / 'doc.yml').write_text('openapi: 3.0.3\n')
    (tmp_path / 'empty.yml').write_text('')
    (tmp_path / 'list.yml').write_text('- a\n- b\n')

    assert load_mapping(tmp_path / 'doc.json') == {'openapi': '3.1.0'}
    assert load_mapping(str(tmp_path / 'doc.yml')) == {'openapi': '3.0.3'}
    assert load_mapping(tmp_path / 'empty.yml') == {}
    with pytest.raises(ValueError, match='cannot be parsed as a dictionary'):
        load_mapping(tmp_path / 'list.yml')
    with pytest.raises(ValueError, match='is not a file'):
        load_mapping(tmp_path / 'missing.yml')


def test_extension_chain(tmp_path):
    (tmp_path / 'shared').mkdir()
    (tmp_path / 'shared' / 'root.yml').write_text('TITLE: Root\nVERSION: 0.0.1\nSERVERS: [a]\n')
    (tmp_path / 'middle.yml').write_text('extends: shared/root.yml\nVERSION: 1.0.0\n')
    (tmp_path / 'leaf.yml').write_text('extends: middle.yml\nTITLE: Leaf\n')

    assert load_extended_mapping(tmp_path / 'leaf.yml') == {'TITLE': 'Leaf', 'VERSION': '1.0.0', 'SERVERS': ['a']}


def test_extension_from_custom_root(tmp_path):
    (tmp_path / 'root').mkdir()
    (tmp_path / 'root' / 'defaults.yml').write_text('TITLE: Defaults\n')
    (tmp_path / 'project.yml').write_text('extends: defaults.yml\nVERSION: 2.0.0\n')

    mapping = load_extended_mapping(tmp_path / 'project.yml', custom_root=tmp_path / 'root')
    assert mapping == {'TITLE': 'Defaults', 'VERSION': '2.0.0'}


def test_circular_extensions(tmp_path):
    (tmp_path / 'a.yml').write_text('extends: b.yml\n')
    (tmp_path / 'b.yml').write_text('extends: a.yml\n')

    with pytest.raises(ValueError, match='circular extensions'):
        load_extended_mapping(tmp_path / 'a.yml')
