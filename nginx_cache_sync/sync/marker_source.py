"""
Remote Marker Source

Reads the cache-clear marker that WordPress writes to its options table.
Every fetch opens a fresh connection and closes it before returning, so no
connection outlives a cycle.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool

from ..common.config import MARKER_OPTION_NAME
from ..common.exceptions import DatabaseConnectionError, MarkerQueryError
from ..common.logging_setup import get_logger, log_fields

logger = get_logger("sync.source")


class MarkerSource:
    """
    Fixed read-only lookup of the remote marker.

    Args:
        url: SQLAlchemy database URL
        table: Options table name (already validated as an identifier)
        connect_timeout: Driver connect timeout in seconds (None = no timeout)
    """

    def __init__(
        self,
        url: str | URL,
        table: str = "wp_options",
        connect_timeout: int | None = None,
    ):
        self.table = table
        connect_args = {}
        if connect_timeout is not None:
            connect_args["connect_timeout"] = connect_timeout

        self._engine: Engine = create_engine(
            url,
            poolclass=NullPool,
            connect_args=connect_args,
        )
        self._query = text(
            f"SELECT option_value FROM {table} WHERE option_name = :name"
        )

    @property
    def host(self) -> str | None:
        return self._engine.url.host

    def fetch(self) -> str:
        """
        Fetch the current remote marker.

        Raises:
            DatabaseConnectionError: Could not connect
            MarkerQueryError: Query failed, no row, or NULL value
        """
        try:
            conn = self._engine.connect()
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(str(e), host=self.host) from e

        with conn:
            try:
                row = conn.execute(self._query, {"name": MARKER_OPTION_NAME}).first()
            except SQLAlchemyError as e:
                raise MarkerQueryError(str(e), host=self.host, table=self.table) from e

        if row is None:
            raise MarkerQueryError(
                f"no row for option '{MARKER_OPTION_NAME}' in {self.table}",
                host=self.host,
                table=self.table,
            )

        value = row[0]
        if value is None:
            raise MarkerQueryError(
                f"option '{MARKER_OPTION_NAME}' is NULL",
                host=self.host,
                table=self.table,
            )
        if isinstance(value, (bytes, bytearray)):
            try:
                value = bytes(value).decode("utf-8")
            except UnicodeDecodeError as e:
                raise MarkerQueryError(
                    f"option '{MARKER_OPTION_NAME}' is not valid UTF-8: {e}",
                    host=self.host,
                    table=self.table,
                ) from e

        logger.debug("Fetched remote marker", extra=log_fields(host=self.host, marker=value))
        return str(value)

    def close(self) -> None:
        """Release the engine"""
        self._engine.dispose()
