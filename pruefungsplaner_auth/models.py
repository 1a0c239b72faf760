"""Value objects produced by the startup configuration"""

import hmac
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from pruefungsplaner_auth.users import UserRegistry


@dataclass(frozen=True)
class User:
    """A statically configured user

    password_record is opaque credential material taken verbatim from the
    configuration file.
    """

    name: str
    password_record: str
    claims: Tuple[str, ...] = ()

    @classmethod
    def unknown(cls, name: str) -> "User":
        """User returned for names that are not configured: no password, no claims"""
        return cls(name=name, password_record="", claims=())

    def check_password(self, candidate: str) -> bool:
        """Constant-time comparison; an empty record never matches"""
        if not self.password_record:
            return False
        return hmac.compare_digest(self.password_record.encode(), candidate.encode())

    def has_claim(self, claim: str) -> bool:
        return claim in self.claims


@dataclass(frozen=True)
class KeyPair:
    """Paths and PEM contents of a checked, matching RSA key pair"""

    private_key_path: Path
    public_key_path: Path
    private_key_pem: str = field(repr=False)
    public_key_pem: str


@dataclass(frozen=True)
class Configuration:
    """Fully resolved and validated server configuration"""

    address: str
    port: int
    private_key_pem: str = field(repr=False)
    public_key_pem: str
    users: "UserRegistry"
    config_file: Optional[Path] = None
    private_key_path: Optional[Path] = None
    public_key_path: Optional[Path] = None

    def get_user(self, name: str) -> User:
        """Look up a user; unknown names yield User.unknown(name)"""
        return self.users.lookup(name)
