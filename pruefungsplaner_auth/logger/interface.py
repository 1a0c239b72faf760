"""Logger interface used by every startup component

Components accept any Logger through their constructor, so tests can pass
a DefaultLogger writing into a StringIO and inspect what was reported.
Structured fields are passed as keyword arguments; fields that carry
credentials or key material are masked before they reach any output.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

# Field names whose values never appear in log output
SECRET_FIELDS = frozenset({"password", "password_record", "private_key_pem"})
MASK = "***"


def render_fields(fields: Dict[str, Any]) -> str:
    """Render fields as space separated key=value pairs, masking secrets"""
    return " ".join(f"{k}={MASK if k in SECRET_FIELDS else v}" for k, v in fields.items())


class Logger(ABC):
    """
    Sink for everything the configuration bootstrap reports

    Levels as used by the startup code:
        debug: a key or file check that passed, an error handed to the exit path
        info: a key file generated, the configuration file selected
        warning: a usable but suspicious configuration, e.g. no users
        error/critical: reserved for callers embedding the resolver
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def get_session_id(self) -> str:
        """Startup id shared by all messages of one server start"""
        pass
