"""
Custom Exception Classes for nginx-cache-sync

Hierarchical exception structure for error handling in the sync loop.
Anything marked recoverable only ends the current cycle.
"""


class CacheSyncError(Exception):
    """Base exception for all nginx-cache-sync errors"""

    def __init__(self, message: str, recoverable: bool = True):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)


class ConfigError(CacheSyncError):
    """Configuration-related errors (fatal at startup)"""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(f"Config Error: {message}", recoverable=False)


class MarkerSourceError(CacheSyncError):
    """Remote marker could not be read from the database"""

    def __init__(self, message: str, host: str | None = None):
        self.host = host
        super().__init__(message, recoverable=True)


class DatabaseConnectionError(MarkerSourceError):
    """Database unreachable or login rejected"""

    def __init__(self, message: str, host: str | None = None):
        super().__init__(f"DB connection error: {message}", host)


class MarkerQueryError(MarkerSourceError):
    """Marker lookup query failed or returned nothing usable"""

    def __init__(self, message: str, host: str | None = None, table: str | None = None):
        self.table = table
        super().__init__(f"Query error: {message}", host)


class StateError(CacheSyncError):
    """Local state file could not be written"""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"State Error: {message}", recoverable=True)
