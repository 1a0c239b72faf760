"""Tests for installation defaults and their environment overrides"""

from pathlib import Path

import pytest

from pruefungsplaner_auth.exceptions import ConfigurationError
from pruefungsplaner_auth.settings import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_KEYS_DIR,
    EMPTY_CONFIG_SENTINEL,
    StartupSettings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CONFIG_DIR", "KEYS_DIR", "KEY_BACKEND"):
        monkeypatch.delenv(f"PRUEFUNGSPLANER_AUTH_{name}", raising=False)


def test_installation_defaults():
    settings = StartupSettings.from_env()

    assert settings.config_files == (DEFAULT_CONFIG_DIR / "config.toml", EMPTY_CONFIG_SENTINEL)
    assert settings.private_key_path == DEFAULT_KEYS_DIR / "private_key.pem"
    assert settings.public_key_path == DEFAULT_KEYS_DIR / "public_key.pem"
    assert settings.key_backend == "cryptography"
    assert settings.default_address == "0.0.0.0"
    assert settings.default_port == 80


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PRUEFUNGSPLANER_AUTH_CONFIG_DIR", str(tmp_path / "conf"))
    monkeypatch.setenv("PRUEFUNGSPLANER_AUTH_KEYS_DIR", str(tmp_path / "keys"))
    monkeypatch.setenv("PRUEFUNGSPLANER_AUTH_KEY_BACKEND", "OpenSSL")

    settings = StartupSettings.from_env()

    assert settings.config_files[0] == tmp_path / "conf" / "config.toml"
    assert settings.private_key_path == tmp_path / "keys" / "private_key.pem"
    assert settings.key_backend == "openssl"


def test_custom_prefix(monkeypatch, tmp_path):
    monkeypatch.setenv("MYAUTH_KEYS_DIR", str(tmp_path))

    settings = StartupSettings.from_env(prefix="MYAUTH")

    assert settings.public_key_path == tmp_path / "public_key.pem"


def test_empty_sentinel_is_last_and_optional(tmp_path):
    with_sentinel = StartupSettings.for_directories(tmp_path, tmp_path)
    without_sentinel = StartupSettings.for_directories(
        tmp_path, tmp_path, include_empty_sentinel=False
    )

    assert with_sentinel.config_files[-1] == EMPTY_CONFIG_SENTINEL
    assert without_sentinel.config_files == (tmp_path / "config.toml",)


def test_unknown_backend_rejected():
    with pytest.raises(ConfigurationError, match="Unknown key backend"):
        StartupSettings.for_directories(Path("/etc"), Path("/keys"), key_backend="gpg")
