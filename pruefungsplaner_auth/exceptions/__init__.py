"""Custom exceptions for the pruefungsplaner-auth server.

Library code raises these; the entry point is the only place that turns
them into a message on stderr and a non-zero exit code.
"""

from typing import Any, Dict, Optional


class AuthServerError(Exception):
    """Base exception for all pruefungsplaner-auth errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(AuthServerError):
    """The server cannot start with the supplied configuration"""


class ConfigFileError(ConfigurationError):
    """The configuration file is unreadable, malformed or incomplete"""


class KeyMaterialError(ConfigurationError):
    """The RSA key pair is missing, invalid, mismatched or unreadable"""


__all__ = [
    "AuthServerError",
    "ConfigurationError",
    "ConfigFileError",
    "KeyMaterialError",
]
