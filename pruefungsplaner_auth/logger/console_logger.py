import logging as python_logging
import uuid
from typing import Any
from .interface import Logger, render_fields


class ConsoleLogger(Logger):
    """
    Startup logger on top of the logging module

    All messages of one process start share an eight character startup id, so
    key generation and config file selection can be told apart from earlier
    starts in the same journal. Secret fields are masked.
    """

    def __init__(
        self,
        name: str = "pruefungsplaner_auth",
        level: int = python_logging.INFO,
        format_string: str = "%(asctime)s [%(levelname)s] [%(name)s] [startup:%(session_id)s] %(message)s",
    ):
        """
        Initialize the console logger

        Args:
            name: Logger name, e.g. "pruefungsplaner_auth" or "key_material"
            level: Logging level (logging.DEBUG, logging.INFO, etc.)
            format_string: Log format string (must include %(session_id)s)
        """
        self._session_id = str(uuid.uuid4())[:8]
        self._logger = python_logging.getLogger(name)
        self._logger.setLevel(level)

        # Only add handler if none exist (avoid duplicate handlers)
        if not self._logger.handlers:
            handler = python_logging.StreamHandler()
            handler.setLevel(level)
            handler.setFormatter(python_logging.Formatter(format_string))
            self._logger.addHandler(handler)
        else:
            for handler in self._logger.handlers:
                handler.setLevel(level)

    def get_session_id(self) -> str:
        return self._session_id

    def _format_extra(self, **kwargs: Any) -> str:
        if not kwargs:
            return ""
        return " " + render_fields(kwargs)

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        self._logger.log(
            level, message + self._format_extra(**kwargs), extra={"session_id": self._session_id}
        )

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(python_logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(python_logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(python_logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(python_logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(python_logging.CRITICAL, message, **kwargs)
