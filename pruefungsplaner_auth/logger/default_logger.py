import sys
import uuid
from datetime import datetime, timezone
from typing import Any, List, TextIO
from .interface import Logger, render_fields

_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class DefaultLogger(Logger):
    """
    Stream logger without the logging module

    Writes one line per message to a text stream, stderr by default. Tests
    hand it a StringIO to assert on warnings such as an empty user list.
    Secret fields are masked.
    """

    def __init__(
        self, output: TextIO = sys.stderr, include_timestamp: bool = True, min_level: str = "DEBUG"
    ):
        """
        Initialize the default logger

        Args:
            output: Output stream (default: stderr)
            include_timestamp: Whether to include timestamps in log messages
            min_level: Messages below this level are dropped
        """
        self._session_id = str(uuid.uuid4())
        self._output = output
        self._include_timestamp = include_timestamp
        self._min_level = _LEVELS.index(min_level.upper())

    def get_session_id(self) -> str:
        return self._session_id

    def _format_message(self, level: str, message: str, **kwargs: Any) -> str:
        parts: List[str] = []

        if self._include_timestamp:
            parts.append(datetime.now(timezone.utc).isoformat())

        parts.append(f"[{level}]")
        parts.append(f"[startup:{self._session_id[:8]}]")
        parts.append(message)

        if kwargs:
            parts.append(f"({render_fields(kwargs)})")

        return " ".join(parts)

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        if _LEVELS.index(level) < self._min_level:
            return
        print(self._format_message(level, message, **kwargs), file=self._output, flush=True)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log("ERROR", message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log("CRITICAL", message, **kwargs)
