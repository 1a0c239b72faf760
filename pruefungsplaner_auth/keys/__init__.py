"""RSA key material

Provides the key-pair lifecycle manager and the interchangeable backends
that actually generate and inspect keys.
"""

from typing import Optional

from pruefungsplaner_auth.keys.backend import DEFAULT_KEY_SIZE, KeyBackend
from pruefungsplaner_auth.keys.cryptography_backend import CryptographyKeyBackend
from pruefungsplaner_auth.keys.manager import KeyMaterialManager
from pruefungsplaner_auth.keys.openssl_backend import OpenSSLKeyBackend
from pruefungsplaner_auth.logger import Logger


def create_key_backend(name: str, logger: Optional[Logger] = None) -> KeyBackend:
    """
    Create a key backend by name

    Args:
        name: "cryptography" or "openssl"
        logger: Logger passed to the backend

    Returns:
        KeyBackend instance

    Raises:
        ValueError: If the name is unknown
        KeyMaterialError: If the openssl executable is missing
    """
    if name == "cryptography":
        return CryptographyKeyBackend(logger=logger)
    if name == "openssl":
        return OpenSSLKeyBackend(logger=logger)
    raise ValueError(f"Unknown key backend: {name}")


__all__ = [
    "DEFAULT_KEY_SIZE",
    "KeyBackend",
    "CryptographyKeyBackend",
    "OpenSSLKeyBackend",
    "KeyMaterialManager",
    "create_key_backend",
]
