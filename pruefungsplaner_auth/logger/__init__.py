"""
Logger module for pruefungsplaner-auth

Every startup component takes a Logger; pass your own implementation to
redirect or capture what the configuration bootstrap reports.

Usage:
    from pruefungsplaner_auth.logger import ConsoleLogger, DefaultLogger

    logger = ConsoleLogger(name="pruefungsplaner_auth")
    logger.info("Configuration loaded", port=8080)
"""

from .interface import Logger
from .default_logger import DefaultLogger
from .console_logger import ConsoleLogger

__all__ = [
    "Logger",
    "DefaultLogger",
    "ConsoleLogger",
]
