import pytest

from oasforge.api.decorators import clear_endpoint_registry
from oasforge.conf.get_settings import CONFIG_YAML_ENV_VAR, reset_global_settings
from oasforge.gen import reset_context


@pytest.fixture(autouse=True)
def _isolated_generation(monkeypatch):
    monkeypatch.delenv(CONFIG_YAML_ENV_VAR, raising=False)
    reset_context()
    reset_global_settings()
    clear_endpoint_registry()
    yield
    reset_context()
    reset_global_settings()
    clear_endpoint_registry()
