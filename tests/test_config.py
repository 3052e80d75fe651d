"""
Tests for loading and validating settings from the environment.
"""

import pytest
from pydantic import ValidationError

from microservice.config import ConfigurationError, load_settings


def test_defaults_with_only_secret():
    """Only JWT_SECRET set should yield every documented default."""
    settings = load_settings(env_file=None)

    assert settings.node_env == "development"
    assert settings.port == 3000
    assert settings.host == "0.0.0.0"
    assert settings.database_url is None
    assert settings.redis_url is None
    assert settings.jwt_secret == "test-secret"
    assert settings.jwt_expires_in == "7d"
    assert settings.rate_limit_max == 100
    assert settings.rate_limit_window == 900000
    assert settings.log_level == "info"
    assert settings.enable_metrics is True
    assert settings.metrics_path == "/metrics"
    assert settings.bcrypt_rounds == 12


def test_values_are_coerced_from_text(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "production")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("DATABASE_URL", "postgres://db/app")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379")
    monkeypatch.setenv("RATE_LIMIT_MAX", "5")
    monkeypatch.setenv("RATE_LIMIT_WINDOW", "60000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ENABLE_METRICS", "false")
    monkeypatch.setenv("BCRYPT_ROUNDS", "10")

    settings = load_settings(env_file=None)

    assert settings.is_production
    assert settings.port == 8080
    assert settings.host == "127.0.0.1"
    assert settings.database_url == "postgres://db/app"
    assert settings.redis_url == "redis://cache:6379"
    assert settings.rate_limit_max == 5
    assert settings.rate_limit_window_seconds == 60.0
    assert settings.log_level == "debug"
    assert settings.enable_metrics is False
    assert settings.bcrypt_rounds == 10


def test_missing_secret_fails(monkeypatch):
    monkeypatch.delenv("JWT_SECRET")
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(env_file=None)
    assert "JWT_SECRET" in str(exc_info.value)


def test_empty_secret_fails(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "")
    with pytest.raises(ConfigurationError):
        load_settings(env_file=None)


def test_non_numeric_port_fails(monkeypatch):
    monkeypatch.setenv("PORT", "abc")
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(env_file=None)
    assert [name for name, _ in exc_info.value.errors] == ["PORT"]


def test_unknown_environment_fails(monkeypatch):
    monkeypatch.setenv("NODE_ENV", "staging")
    with pytest.raises(ConfigurationError):
        load_settings(env_file=None)


def test_unknown_log_level_fails(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ConfigurationError):
        load_settings(env_file=None)


def test_every_invalid_field_is_reported(monkeypatch):
    monkeypatch.delenv("JWT_SECRET")
    monkeypatch.setenv("PORT", "abc")
    monkeypatch.setenv("NODE_ENV", "staging")

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(env_file=None)

    names = {name for name, _ in exc_info.value.errors}
    assert names == {"JWT_SECRET", "PORT", "NODE_ENV"}


def test_loading_is_idempotent(monkeypatch):
    monkeypatch.setenv("PORT", "4000")
    assert load_settings(env_file=None) == load_settings(env_file=None)


def test_settings_are_immutable():
    settings = load_settings(env_file=None)
    with pytest.raises(ValidationError):
        settings.port = 1


def test_secret_is_hidden_from_repr():
    assert "test-secret" not in repr(load_settings(env_file=None))


def test_env_file_only_fills_gaps(tmp_path):
    """Process environment wins over .env; the file supplies missing values."""
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=4000\nJWT_SECRET=from-file\nUNRELATED=1\n", encoding="utf-8")

    settings = load_settings(env_file=str(env_file))

    assert settings.port == 4000
    assert settings.jwt_secret == "test-secret"


def test_env_file_can_supply_secret(tmp_path, monkeypatch):
    monkeypatch.delenv("JWT_SECRET")
    env_file = tmp_path / ".env"
    env_file.write_text("JWT_SECRET=from-file\n", encoding="utf-8")

    assert load_settings(env_file=str(env_file)).jwt_secret == "from-file"
