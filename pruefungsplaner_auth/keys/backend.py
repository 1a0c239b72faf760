"""Key backend interface

Defines the operations the key material manager needs from a cryptographic
toolchain. Every operation reports plain success or failure; the manager
decides which failure message to raise.
"""

from abc import ABC, abstractmethod
from pathlib import Path

DEFAULT_KEY_SIZE = 2048


class KeyBackend(ABC):
    """Abstract base class for RSA key toolchains"""

    name: str = "abstract"

    @abstractmethod
    def generate_private_key(self, private_key_path: Path, key_size: int = DEFAULT_KEY_SIZE) -> bool:
        """
        Write a new unencrypted RSA private key in PEM format

        Args:
            private_key_path: Target file; it already exists and is empty
            key_size: Modulus size in bits

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def derive_public_key(self, private_key_path: Path, public_key_path: Path) -> bool:
        """
        Write the PEM public key belonging to a private key

        Args:
            private_key_path: Existing private key file
            public_key_path: Target file; it already exists and is empty

        Returns:
            True on success
        """
        pass

    @abstractmethod
    def validate_private_key(self, private_key_path: Path) -> bool:
        """Check that the file holds a consistent RSA private key"""
        pass

    @abstractmethod
    def validate_public_key(self, public_key_path: Path) -> bool:
        """Check that the file holds a PEM RSA public key"""
        pass

    @abstractmethod
    def keys_match(self, private_key_path: Path, public_key_path: Path) -> bool:
        """Check that the public key belongs to the private key"""
        pass
