"""RSA key material lifecycle

Makes sure a private/public key pair exists, is well formed and belongs
together, then loads both files as PEM text. Only the private key is ever
generated from nothing; a missing public key is always derived from the
private key. Existing files are never overwritten.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from pruefungsplaner_auth.exceptions import KeyMaterialError
from pruefungsplaner_auth.keys.backend import DEFAULT_KEY_SIZE, KeyBackend
from pruefungsplaner_auth.logger import ConsoleLogger, Logger
from pruefungsplaner_auth.models import KeyPair

PathLike = Union[str, Path]

# Owner read/write only; the private key signs every token
PRIVATE_KEY_MODE = 0o600


class KeyMaterialManager:
    """Resolves a key pair on disk through a KeyBackend"""

    def __init__(
        self,
        backend: KeyBackend,
        logger: Optional[Logger] = None,
        key_size: int = DEFAULT_KEY_SIZE,
    ):
        self.backend = backend
        self.logger = logger or ConsoleLogger(name="key_material", level=logging.INFO)
        self.key_size = key_size

    def resolve(self, private_key_path: PathLike, public_key_path: PathLike) -> KeyPair:
        """
        Ensure a usable key pair exists and load it

        Steps run strictly in this order: generate the private key if missing,
        validate it, derive the public key if missing, validate it, check the
        pair matches, read both files.

        Args:
            private_key_path: Private key PEM file
            public_key_path: Public key PEM file

        Returns:
            KeyPair with both paths and PEM contents

        Raises:
            KeyMaterialError: On the first step that fails
        """
        private_path = Path(private_key_path)
        public_path = Path(public_key_path)
        self.logger.debug(
            "Resolving key material",
            private_key=str(private_path),
            public_key=str(public_path),
            backend=self.backend.name,
        )

        if not private_path.exists():
            self._generate_private_key(private_path)
        self._check_private_key(private_path)

        if not public_path.exists():
            self._derive_public_key(private_path, public_path)
        self._check_public_key(public_path)

        self._check_keys_match(private_path, public_path)

        key_pair = KeyPair(
            private_key_path=private_path,
            public_key_path=public_path,
            private_key_pem=self._read_key(private_path, "private"),
            public_key_pem=self._read_key(public_path, "public"),
        )
        self.logger.info(
            "Key material ready", private_key=str(private_path), public_key=str(public_path)
        )
        return key_pair

    def _generate_private_key(self, private_path: Path) -> None:
        try:
            # Exclusive create: never clobber a key that appeared in the meantime
            os.close(os.open(private_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, PRIVATE_KEY_MODE))
        except FileExistsError:
            raise KeyMaterialError(
                f"Cannot generate new private key, because the file {private_path} already exists."
            )
        except OSError:
            raise KeyMaterialError(
                f"Failed to generate private key, because the file {private_path} cannot be created."
            )

        self.logger.info(
            "Generating private key", path=str(private_path), bits=self.key_size, backend=self.backend.name
        )
        if not self.backend.generate_private_key(private_path, key_size=self.key_size):
            raise KeyMaterialError("Failed to generate private key.", {"path": str(private_path)})

    def _derive_public_key(self, private_path: Path, public_path: Path) -> None:
        if not private_path.exists():
            raise KeyMaterialError(
                "Cannot generate new public key, because there is no private key specified."
            )

        try:
            with open(private_path, "rb"):
                pass
        except OSError:
            raise KeyMaterialError(
                f"Failed to generate public key, because the private key file {private_path} cannot be opened."
            )

        try:
            with open(public_path, "x"):
                pass
        except OSError:
            raise KeyMaterialError(
                f"Failed to generate public key, because the file {public_path} cannot be created."
            )

        self.logger.info(
            "Deriving public key", path=str(public_path), private_key=str(private_path)
        )
        if not self.backend.derive_public_key(private_path, public_path):
            raise KeyMaterialError("Failed to generate public key.", {"path": str(public_path)})

    def _check_readable(self, path: Path, label: str) -> None:
        if not path.exists():
            raise KeyMaterialError(f"{label} key file does not exist {path}.")
        try:
            with open(path, "rb"):
                pass
        except OSError:
            raise KeyMaterialError(f"{label} key file {path} cannot be read.")

    def _check_private_key(self, private_path: Path) -> None:
        self._check_readable(private_path, "Private")
        if not self.backend.validate_private_key(private_path):
            raise KeyMaterialError("Private key file is invalid.", {"path": str(private_path)})
        self.logger.debug("Private key is valid", path=str(private_path))

    def _check_public_key(self, public_path: Path) -> None:
        self._check_readable(public_path, "Public")
        if not self.backend.validate_public_key(public_path):
            raise KeyMaterialError("Public key file is invalid.", {"path": str(public_path)})
        self.logger.debug("Public key is valid", path=str(public_path))

    def _check_keys_match(self, private_path: Path, public_path: Path) -> None:
        if not self.backend.keys_match(private_path, public_path):
            raise KeyMaterialError(
                "The public key seems not to belong to the private key.",
                {"private_key": str(private_path), "public_key": str(public_path)},
            )
        self.logger.debug("Key pair matches")

    def _read_key(self, path: Path, kind: str) -> str:
        try:
            with open(path, "r") as f:
                return f.read()
        except OSError:
            raise KeyMaterialError(f"Failed to read {kind} key from {path}")
