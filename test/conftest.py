"""Pytest configuration and fixtures

Provides temporary installation directories, pre-generated key pairs and a
capturing logger shared by all tests.
"""

import sys
from pathlib import Path

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import io
from typing import Callable, Tuple

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pruefungsplaner_auth.logger import DefaultLogger
from pruefungsplaner_auth.settings import StartupSettings


def _generate_pem_pair() -> Tuple[bytes, bytes]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


@pytest.fixture(scope="session")
def pem_pair() -> Tuple[bytes, bytes]:
    """One RSA key pair (private PEM, public PEM) generated per test session"""
    return _generate_pem_pair()


@pytest.fixture(scope="session")
def other_pem_pair() -> Tuple[bytes, bytes]:
    """A second, unrelated RSA key pair"""
    return _generate_pem_pair()


@pytest.fixture(scope="function")
def config_dir(tmp_path) -> Path:
    directory = tmp_path / "etc"
    directory.mkdir()
    return directory


@pytest.fixture(scope="function")
def keys_dir(tmp_path) -> Path:
    directory = tmp_path / "keys"
    directory.mkdir()
    return directory


@pytest.fixture(scope="function")
def key_files(keys_dir, pem_pair) -> Tuple[Path, Path]:
    """Matching key pair written to the default key locations"""
    private_key = keys_dir / "private_key.pem"
    public_key = keys_dir / "public_key.pem"
    private_key.write_bytes(pem_pair[0])
    public_key.write_bytes(pem_pair[1])
    return private_key, public_key


@pytest.fixture(scope="function")
def mismatched_key_files(tmp_path, pem_pair, other_pem_pair) -> Tuple[Path, Path]:
    """Private key of one pair next to the public key of another"""
    directory = tmp_path / "mismatched"
    directory.mkdir()
    private_key = directory / "private_key.pem"
    public_key = directory / "public_key.pem"
    private_key.write_bytes(pem_pair[0])
    public_key.write_bytes(other_pem_pair[1])
    return private_key, public_key


@pytest.fixture(scope="function")
def settings(config_dir, keys_dir) -> StartupSettings:
    """
    Settings rooted in temporary directories

    The empty-file sentinel is left out so a missing config.toml is reported.
    """
    return StartupSettings.for_directories(config_dir, keys_dir, include_empty_sentinel=False)


@pytest.fixture(scope="function")
def write_config(config_dir) -> Callable[..., Path]:
    """Factory writing TOML text to <config_dir>/<name>"""

    def _write(content: str, name: str = "config.toml") -> Path:
        path = config_dir / name
        path.write_text(content)
        return path

    return _write


@pytest.fixture(scope="function")
def log_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture(scope="function")
def capture_logger(log_output) -> DefaultLogger:
    """Logger writing into log_output"""
    return DefaultLogger(output=log_output, include_timestamp=False)
