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

from pathlib import Path

import pytest
from pydantic import ValidationError

from oasforge.conf import GeneratorSettings
from oasforge.conf.get_settings import CONFIG_YAML_ENV_VAR, get_global_settings, get_settings_source, load_settings

FIXTURES = Path(__file__).parent / 'fixtures'


def test_default_settings():
    settings = load_settings(None)
    assert settings == GeneratorSettings()
    assert settings.TITLE == 'API'
    assert settings.OPENAPI_VERSION == '3.1.0'
    assert settings.INFER_RESPONSES and settings.ALL_ERROR_RESPONSES and settings.EXTRACT_SCHEMAS
    assert not settings.FAIL_ON_ERRORS


@pytest.mark.parametrize('filepath', ['valid_generator_settings_fixture.yml'])
def test_valid_generator_settings_from_yaml(filepath):
    expected = GeneratorSettings(
        TITLE='Shop',
        VERSION='2.0.0',
        DESCRIPTION='Sells things.',
        OPENAPI_VERSION='3.0.3',
        SERVERS=['https://shop.example.com'],
        ALL_ERROR_RESPONSES=False,
        FAIL_ON_ERRORS=True,
    )

    assert expected == load_settings(str(FIXTURES / filepath))


@pytest.mark.parametrize(
    ['filepath', 'error'],
    [
        (
            'invalid_version_generator_settings_fixture.yml',
            'Value error, only OpenAPI 3.x documents are supported, got 2.0',
        ),
        ('unknown_field_generator_settings_fixture.yml', 'Extra inputs are not permitted'),
    ]
)
def test_invalid_generator_settings_from_yaml(filepath, error):
    with pytest.raises(ValidationError) as e:
        load_settings(str(FIXTURES / filepath))

    errors = e.value.errors()
    assert errors[0]['msg'] == error


def test_missing_settings_file():
    with pytest.raises(ValueError):
        load_settings(str(FIXTURES / 'missing_generator_settings_fixture.yml'))


def test_settings_are_frozen():
    settings = GeneratorSettings()
    with pytest.raises(ValidationError):
        settings.TITLE = 'Other'  # type: ignore[misc]


def test_global_settings_from_env(monkeypatch):
    filepath = str(FIXTURES / 'valid_generator_settings_fixture.yml')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, filepath)

    settings = get_global_settings()
    assert settings.TITLE == 'Shop'
    assert get_global_settings() is settings
    assert get_settings_source() == filepath

    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(FIXTURES / 'base_generator_settings_fixture.yml'))
    with pytest.raises(Exception, match='loading config twice with a different file'):
        get_global_settings()


def test_global_settings_defaults():
    settings = get_global_settings()
    assert settings == GeneratorSettings()
    assert get_settings_source() is None
