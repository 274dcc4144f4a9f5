"""
Local Marker State

Single-slot "last processed" cursor persisted in a plain text file.
The file holds the last remote marker this daemon acted upon, so a restart
does not force a redundant cache clear.
"""

from pathlib import Path

from .exceptions import StateError
from .logging_setup import get_logger, log_fields

logger = get_logger("state")


class MarkerStore:
    """
    File-backed local marker.

    Writes overwrite in place; there is no write-and-rename step.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        """
        Read the local marker.

        Returns:
            Marker with surrounding whitespace stripped, or "" if the file
            is absent or unreadable
        """
        try:
            return self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return ""
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                f"Could not read state file, treating as empty: {e}",
                extra=log_fields(path=str(self.path)),
            )
            return ""

    def write(self, marker: str) -> None:
        """
        Persist the marker, creating the parent directory if needed.

        The value is stored as given while read() strips it, so a remote
        marker with surrounding whitespace never compares equal and is
        acted on every cycle.

        Raises:
            StateError: The file could not be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(marker, encoding="utf-8")
        except OSError as e:
            raise StateError(str(e), path=str(self.path)) from e
