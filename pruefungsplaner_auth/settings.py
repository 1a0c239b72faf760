"""Installation defaults for the startup configuration

Default locations are plain data passed into the resolver, so tests can point
them at temporary directories. Environment variables override the installation
defaults for packaged deployments:

    PRUEFUNGSPLANER_AUTH_CONFIG_DIR   directory holding config.toml
    PRUEFUNGSPLANER_AUTH_KEYS_DIR     directory holding private_key.pem / public_key.pem
    PRUEFUNGSPLANER_AUTH_KEY_BACKEND  "cryptography" (default) or "openssl"
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from pruefungsplaner_auth.exceptions import ConfigurationError

ENV_PREFIX = "PRUEFUNGSPLANER_AUTH"

DEFAULT_CONFIG_DIR = Path("/etc/pruefungsplaner-auth")
DEFAULT_KEYS_DIR = Path("/usr/share/pruefungsplaner-auth/keys")
CONFIG_FILE_NAME = "config.toml"
PRIVATE_KEY_FILE_NAME = "private_key.pem"
PUBLIC_KEY_FILE_NAME = "public_key.pem"

# Always exists and parses as an empty document, so every field falls back
# to its default when no real configuration file is installed.
EMPTY_CONFIG_SENTINEL = Path(os.devnull)

DEFAULT_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 80
KEY_BACKENDS = ("cryptography", "openssl")


@dataclass(frozen=True)
class StartupSettings:
    """Default paths consulted when neither CLI nor config file supplies a value"""

    config_files: Tuple[Path, ...]
    private_key_path: Path
    public_key_path: Path
    key_backend: str = "cryptography"
    default_address: str = DEFAULT_ADDRESS
    default_port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if self.key_backend not in KEY_BACKENDS:
            raise ConfigurationError(
                f"Unknown key backend {self.key_backend!r}, expected one of {', '.join(KEY_BACKENDS)}"
            )

    @classmethod
    def for_directories(
        cls,
        config_dir: Path,
        keys_dir: Path,
        key_backend: str = "cryptography",
        include_empty_sentinel: bool = True,
    ) -> "StartupSettings":
        """
        Build settings rooted at a config directory and a keys directory

        Args:
            config_dir: Directory searched for config.toml
            keys_dir: Directory holding the default key files
            key_backend: Name of the key backend to use
            include_empty_sentinel: Append the empty-file sentinel to the search path

        Returns:
            StartupSettings instance
        """
        config_files: Tuple[Path, ...] = (Path(config_dir) / CONFIG_FILE_NAME,)
        if include_empty_sentinel:
            config_files += (EMPTY_CONFIG_SENTINEL,)
        return cls(
            config_files=config_files,
            private_key_path=Path(keys_dir) / PRIVATE_KEY_FILE_NAME,
            public_key_path=Path(keys_dir) / PUBLIC_KEY_FILE_NAME,
            key_backend=key_backend,
        )

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "StartupSettings":
        """Load settings from environment variables, falling back to installation defaults"""
        config_dir = _env_path(f"{prefix}_CONFIG_DIR") or DEFAULT_CONFIG_DIR
        keys_dir = _env_path(f"{prefix}_KEYS_DIR") or DEFAULT_KEYS_DIR
        key_backend = os.environ.get(f"{prefix}_KEY_BACKEND", "cryptography").strip().lower()
        return cls.for_directories(config_dir, keys_dir, key_backend=key_backend)


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value) if value else None
