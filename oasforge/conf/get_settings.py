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

import os
from typing import NamedTuple, Optional

from structlog import get_logger

from oasforge.conf.settings import GeneratorSettings
from oasforge.utils.yaml import model_from_extended_yaml

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'OASFORGE_CONFIG_YAML'


class _SettingsMetadata(NamedTuple):
    source: Optional[str]
    settings: GeneratorSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> GeneratorSettings:
    """
    Returns the generator settings.

    They are read from the yaml filepath in the 'OASFORGE_CONFIG_YAML' env var. If it is not set, the defaults are
    used. Settings are loaded once, later calls return the same instance.
    """
    return _load_settings_singleton(os.environ.get(CONFIG_YAML_ENV_VAR))


def get_settings_source() -> Optional[str]:
    """ Returns the path of the YAML file that was loaded, or None for the defaults.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def load_settings(filepath: Optional[str]) -> GeneratorSettings:
    """Load settings from a yaml file (the 'extends' key is supported), or the defaults when there is none."""
    if filepath is None:
        return GeneratorSettings()
    return model_from_extended_yaml(GeneratorSettings, filepath=filepath)


def _load_settings_singleton(source: Optional[str]) -> GeneratorSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')

        return _settings_singleton.settings

    log = logger.new(source=source)
    log.debug('loading settings')
    _settings_singleton = _SettingsMetadata(source=source, settings=load_settings(source))

    return _settings_singleton.settings


def reset_global_settings() -> None:
    """Forget the loaded settings. Useful for testing."""
    global _settings_singleton
    _settings_singleton = None
