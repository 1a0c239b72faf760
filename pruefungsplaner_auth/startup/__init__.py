"""Startup utilities for the authentication server

Provides centralized configuration resolution run once before the server starts.
"""

from .resolver import ConfigResolver, build_parser, resolve_configuration

__all__ = ["ConfigResolver", "build_parser", "resolve_configuration"]
