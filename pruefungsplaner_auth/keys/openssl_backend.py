"""Key backend that shells out to the openssl command line tool

Only exit statuses are interpreted. Calls block until openssl returns; there
is no timeout.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from pruefungsplaner_auth.exceptions import KeyMaterialError
from pruefungsplaner_auth.keys.backend import DEFAULT_KEY_SIZE, KeyBackend
from pruefungsplaner_auth.logger import ConsoleLogger, Logger


class OpenSSLKeyBackend(KeyBackend):
    """RSA key operations delegated to the system openssl binary"""

    name = "openssl"

    def __init__(self, executable: str = "openssl", logger: Optional[Logger] = None):
        self.logger = logger or ConsoleLogger(name="key_backend", level=logging.INFO)
        resolved = shutil.which(executable)
        if resolved is None:
            raise KeyMaterialError(f"The openssl executable {executable} was not found.")
        self.executable = resolved

    def _run(self, *args: str, capture: bool = False) -> subprocess.CompletedProcess:
        command: List[str] = [self.executable, *args]
        self.logger.debug("Running openssl", command=" ".join(command))
        return subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )

    def _succeeds(self, *args: str) -> bool:
        result = self._run(*args)
        if result.returncode != 0:
            self.logger.debug("openssl failed", code=result.returncode, command=args[0])
        return result.returncode == 0

    def generate_private_key(self, private_key_path: Path, key_size: int = DEFAULT_KEY_SIZE) -> bool:
        return self._succeeds(
            "genpkey",
            "-algorithm",
            "RSA",
            "-out",
            str(private_key_path),
            "-pkeyopt",
            f"rsa_keygen_bits:{key_size}",
        )

    def derive_public_key(self, private_key_path: Path, public_key_path: Path) -> bool:
        return self._succeeds(
            "rsa", "-pubout", "-in", str(private_key_path), "-out", str(public_key_path)
        )

    def validate_private_key(self, private_key_path: Path) -> bool:
        return self._succeeds("rsa", "-in", str(private_key_path), "-check", "-noout")

    def validate_public_key(self, public_key_path: Path) -> bool:
        return self._succeeds(
            "pkey", "-inform", "PEM", "-pubin", "-in", str(public_key_path), "-noout"
        )

    def keys_match(self, private_key_path: Path, public_key_path: Path) -> bool:
        derived = self._run(
            "rsa", "-in", str(private_key_path), "-outform", "PEM", "-pubout", capture=True
        )
        on_disk = self._run(
            "pkey", "-inform", "PEM", "-pubin", "-in", str(public_key_path), capture=True
        )
        if derived.returncode != 0 or on_disk.returncode != 0:
            return False
        return derived.stdout == on_disk.stdout
