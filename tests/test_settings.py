"""Tests for type_registry.settings.Settings behavior."""

import pytest

from type_registry import TypeRegistry
from type_registry.settings import Settings, get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    """Defaults should be stable even if external env or .env sets values."""
    for var in [
        "TYPE_REGISTRY_LOG_LEVEL",
        "TYPE_REGISTRY_DEFAULT_LAZY",
        "TYPE_REGISTRY_SHARE_LAZY_INSTANCES",
    ]:
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)  # ignore project .env file if present
    assert s.log_level == "INFO"
    assert s.default_lazy is True
    assert s.share_lazy_instances is False


def test_env_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TYPE_REGISTRY_DEFAULT_LAZY", "false")
    monkeypatch.setenv("TYPE_REGISTRY_SHARE_LAZY_INSTANCES", "true")
    monkeypatch.setenv("TYPE_REGISTRY_LOG_LEVEL", "debug")
    s = Settings()
    assert s.default_lazy is False
    assert s.share_lazy_instances is True
    assert s.log_level == "DEBUG"


def test_case_insensitive_env_name(monkeypatch: pytest.MonkeyPatch):
    # lower-case variable name should still be picked up due to case_sensitive=False
    monkeypatch.setenv("type_registry_share_lazy_instances", "1")  # type: ignore[arg-type]
    s = Settings()
    assert s.share_lazy_instances is True


def test_invalid_log_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        Settings(log_level="verbose")


def test_get_settings_singleton():
    a = get_settings()
    b = get_settings()
    assert a is b


def test_registry_defaults_follow_settings(monkeypatch: pytest.MonkeyPatch):
    """Registry options left unset are read from the cached settings."""
    monkeypatch.setattr(
        "type_registry.registry.get_settings",
        lambda: Settings(_env_file=None, default_lazy=False, share_lazy_instances=True),
    )

    class Eager:
        pass

    with TypeRegistry() as registry:
        registry.register(Eager)
        assert registry.is_initialized(Eager)


def test_registry_arguments_override_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        "type_registry.registry.get_settings",
        lambda: Settings(_env_file=None, default_lazy=False),
    )

    class Lazy:
        pass

    with TypeRegistry(default_lazy=True) as registry:
        registry.register(Lazy)
        assert not registry.is_initialized(Lazy)
