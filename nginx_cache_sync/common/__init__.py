"""
Common Utilities

Shared modules used by the sync loop and the entry point:
- config.py - Settings loaded from the environment
- exceptions.py - Custom exception classes
- logging_setup.py - Structured logging setup
- state.py - Local marker file
"""

from .config import Settings, load_settings, split_host, MARKER_OPTION_NAME
from .exceptions import (
    CacheSyncError,
    ConfigError,
    MarkerSourceError,
    DatabaseConnectionError,
    MarkerQueryError,
    StateError,
)
from .logging_setup import configure_logging, get_logger, log_fields, JsonFormatter, TextFormatter
from .state import MarkerStore

__all__ = [
    # Config
    "Settings",
    "load_settings",
    "split_host",
    "MARKER_OPTION_NAME",
    # Exceptions
    "CacheSyncError",
    "ConfigError",
    "MarkerSourceError",
    "DatabaseConnectionError",
    "MarkerQueryError",
    "StateError",
    # Logging
    "configure_logging",
    "get_logger",
    "log_fields",
    "JsonFormatter",
    "TextFormatter",
    # State
    "MarkerStore",
]
