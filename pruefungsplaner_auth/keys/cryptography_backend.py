"""In-process key backend built on the cryptography package"""

import logging
import os
from pathlib import Path
from typing import Optional

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pruefungsplaner_auth.keys.backend import DEFAULT_KEY_SIZE, KeyBackend
from pruefungsplaner_auth.logger import ConsoleLogger, Logger

_LOAD_ERRORS = (OSError, ValueError, TypeError, UnsupportedAlgorithm)

# Claims signed with the private key and verified with the public key when
# checking that two key files belong together.
_PAIRING_CLAIMS = {"sub": "pruefungsplaner-auth-key-pairing-check"}


class CryptographyKeyBackend(KeyBackend):
    """RSA key operations without spawning external processes"""

    name = "cryptography"

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger or ConsoleLogger(name="key_backend", level=logging.INFO)

    def _load_private_key(self, private_key_path: Path) -> rsa.RSAPrivateKey:
        key = serialization.load_pem_private_key(Path(private_key_path).read_bytes(), password=None)
        if not isinstance(key, rsa.RSAPrivateKey):
            raise ValueError(f"{private_key_path} does not hold an RSA private key")
        return key

    def _load_public_key(self, public_key_path: Path) -> rsa.RSAPublicKey:
        key = serialization.load_pem_public_key(Path(public_key_path).read_bytes())
        if not isinstance(key, rsa.RSAPublicKey):
            raise ValueError(f"{public_key_path} does not hold an RSA public key")
        return key

    def generate_private_key(self, private_key_path: Path, key_size: int = DEFAULT_KEY_SIZE) -> bool:
        try:
            key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
            pem = key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            fd = os.open(private_key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(pem)
        except (OSError, ValueError) as e:
            self.logger.error("Private key generation failed", path=str(private_key_path), error=str(e))
            return False
        return True

    def derive_public_key(self, private_key_path: Path, public_key_path: Path) -> bool:
        try:
            pem = self._load_private_key(private_key_path).public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
            with open(public_key_path, "wb") as f:
                f.write(pem)
        except _LOAD_ERRORS as e:
            self.logger.error("Public key derivation failed", path=str(public_key_path), error=str(e))
            return False
        return True

    def validate_private_key(self, private_key_path: Path) -> bool:
        try:
            self._load_private_key(private_key_path)
        except _LOAD_ERRORS as e:
            self.logger.debug("Private key rejected", path=str(private_key_path), error=str(e))
            return False
        return True

    def validate_public_key(self, public_key_path: Path) -> bool:
        try:
            self._load_public_key(public_key_path)
        except _LOAD_ERRORS as e:
            self.logger.debug("Public key rejected", path=str(public_key_path), error=str(e))
            return False
        return True

    def keys_match(self, private_key_path: Path, public_key_path: Path) -> bool:
        try:
            private_key = self._load_private_key(private_key_path)
            public_key = self._load_public_key(public_key_path)
        except _LOAD_ERRORS as e:
            self.logger.debug("Key pair could not be loaded", error=str(e))
            return False

        if private_key.public_key().public_numbers() != public_key.public_numbers():
            return False

        token = jwt.encode(_PAIRING_CLAIMS, private_key, algorithm="RS256")
        try:
            jwt.decode(token, public_key, algorithms=["RS256"])
        except jwt.InvalidTokenError as e:
            self.logger.debug("Pairing check signature rejected", error=str(e))
            return False
        return True
