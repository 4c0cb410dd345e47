"""Tests for configuration loading."""

from datetime import timedelta

import pytest

from device_console.config import Config, DEFAULT_DATABASE_URL


def test_defaults_for_local_development():
    config = Config.from_env({})

    assert config.admin_password == "admin123"
    assert config.api_password == "panda"
    assert config.database_url == DEFAULT_DATABASE_URL
    assert config.cors_origins == ["*"]
    assert config.session_lifetime == timedelta(hours=24)
    assert config.debug is False
    assert config.frontend_dist is None


def test_values_from_environment():
    config = Config.from_env({
        "ADMIN_PASSWORD": "s3cret",
        "API_PASSWORD": "device-pass",
        "DATABASE_URL": "postgres://user:pw@db:5432/devices",
        "CORS_ORIGINS": "https://a.example, https://b.example",
        "LOG_LEVEL": "debug",
        "DEBUG": "True",
    })

    assert config.admin_password == "s3cret"
    assert config.api_password == "device-pass"
    assert config.database_url == "postgresql://user:pw@db:5432/devices"
    assert config.cors_origins == ["https://a.example", "https://b.example"]
    assert config.log_level == "DEBUG"
    assert config.debug is True


def test_empty_secret_is_rejected():
    with pytest.raises(ValueError):
        Config(admin_password="", api_password="panda")


def test_repr_hides_secrets():
    config = Config(admin_password="s3cret", api_password="device-pass")

    assert "s3cret" not in repr(config)
    assert "device-pass" not in repr(config)
