"""
Where: services/function_web/tests/test_function_web_config.py
What: Validate FunctionWebConfig defaults and environment overrides.
Why: Keep config defaults stable as environment defaults evolve.
"""

from services.function_web.config import FunctionWebConfig

CONFIG_ENV = [
    "FUNCTION_DEFINITION",
    "FUNCTION_WEB_DEBUG",
    "CLOUDEVENT_SOURCE",
    "CLOUDEVENT_TYPE",
    "EXPORTER_ENABLED",
    "EXPORTER_SINK_URL",
    "EXPORTER_SINK_HEADERS",
    "APPLICATION_NAME",
]


def _clear_env(monkeypatch) -> None:
    for name in CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear_env(monkeypatch)

    config = FunctionWebConfig(_env_file=None)

    assert config.FUNCTION_DEFINITION is None
    assert config.FUNCTION_WEB_DEBUG is False
    assert config.CLOUDEVENT_SOURCE is None
    assert config.CLOUDEVENT_SOURCE_PREFIX == "http://spring.io/"
    assert config.CLOUDEVENT_DEFAULT_TYPE == "spring.io.DefaultEventType"
    assert config.CONTEXT_ID == "application"
    assert config.EXPORTER_ENABLED is False
    assert config.EXPORTER_AUTO_STARTUP is True
    assert config.EXPORTER_SINK_HEADERS == {}


def test_environment_overrides(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("FUNCTION_DEFINITION", "uppercase")
    monkeypatch.setenv("FUNCTION_WEB_DEBUG", "true")
    monkeypatch.setenv("EXPORTER_ENABLED", "1")
    monkeypatch.setenv("EXPORTER_SINK_URL", "http://sink/{destination}")
    monkeypatch.setenv("EXPORTER_SINK_HEADERS", '{"x-api-key": "secret"}')
    monkeypatch.setenv("APPLICATION_NAME", "orders")

    config = FunctionWebConfig(_env_file=None)

    assert config.FUNCTION_DEFINITION == "uppercase"
    assert config.FUNCTION_WEB_DEBUG is True
    assert config.EXPORTER_ENABLED is True
    assert config.EXPORTER_SINK_URL == "http://sink/{destination}"
    assert config.EXPORTER_SINK_HEADERS == {"x-api-key": "secret"}
    assert config.APPLICATION_NAME == "orders"
