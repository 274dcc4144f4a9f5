"""
Cache Purger

Deletes every regular file under the nginx cache directory while keeping
the directory tree itself. Two methods are available:

- native: walk the tree in-process and unlink regular files
- find: run `find <path> -type f -delete` and capture its output

Neither method raises for filesystem problems; the outcome is returned as a
PurgeResult so the sync loop can log it and carry on.
"""

import os
import stat
import subprocess
from dataclasses import dataclass

from ..common.logging_setup import get_logger, log_fields

logger = get_logger("sync.purger")

PURGE_METHODS = ("native", "find")

# Cap on per-file errors kept in the result output
MAX_REPORTED_ERRORS = 20


@dataclass
class PurgeResult:
    """Outcome of a single cache-clear action"""
    success: bool
    path: str
    method: str
    files_removed: int | None = None  # unknown for the find method
    output: str = ""


class CachePurger:
    """Recursive regular-file deletion under a cache path"""

    def __init__(
        self,
        cache_path: str,
        method: str = "native",
        timeout: int | None = None,
    ):
        if method not in PURGE_METHODS:
            raise ValueError(f"Unknown purge method: {method}")
        self.cache_path = cache_path
        self.method = method
        self.timeout = timeout

    def purge(self) -> PurgeResult:
        if self.method == "find":
            return self._purge_with_find()
        return self._purge_native()

    def _purge_native(self) -> PurgeResult:
        if not os.path.isdir(self.cache_path):
            return PurgeResult(
                success=False,
                path=self.cache_path,
                method="native",
                files_removed=0,
                output=f"{self.cache_path}: No such directory",
            )

        removed = 0
        errors: list[str] = []

        def on_error(err: OSError) -> None:
            errors.append(f"{err.filename}: {err.strerror}")

        for dirpath, _dirnames, filenames in os.walk(
            self.cache_path, onerror=on_error, followlinks=False
        ):
            for name in filenames:
                path = os.path.join(dirpath, name)
                try:
                    # Only regular files; links and special files stay
                    if not stat.S_ISREG(os.lstat(path).st_mode):
                        continue
                    os.unlink(path)
                    removed += 1
                except FileNotFoundError:
                    # Removed underneath us (nginx cache manager)
                    continue
                except OSError as e:
                    errors.append(f"{path}: {e.strerror}")

        output = "\n".join(errors[:MAX_REPORTED_ERRORS])
        if len(errors) > MAX_REPORTED_ERRORS:
            output += f"\n... {len(errors) - MAX_REPORTED_ERRORS} more errors"

        logger.debug(
            f"Walked {self.cache_path}: removed={removed}, errors={len(errors)}",
            extra=log_fields(path=self.cache_path),
        )

        return PurgeResult(
            success=not errors,
            path=self.cache_path,
            method="native",
            files_removed=removed,
            output=output,
        )

    def _purge_with_find(self) -> PurgeResult:
        try:
            result = subprocess.run(
                ["find", self.cache_path, "-type", "f", "-delete"],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return PurgeResult(
                success=False,
                path=self.cache_path,
                method="find",
                output=f"find timed out after {self.timeout}s",
            )
        except FileNotFoundError:
            return PurgeResult(
                success=False,
                path=self.cache_path,
                method="find",
                output="find command not available",
            )
        except OSError as e:
            # e.g. find on PATH but not executable
            return PurgeResult(
                success=False,
                path=self.cache_path,
                method="find",
                output=f"could not run find: {e}",
            )

        output = (result.stdout or "").strip()
        if result.returncode != 0:
            return PurgeResult(
                success=False,
                path=self.cache_path,
                method="find",
                output=output or f"find exited with status {result.returncode}",
            )

        return PurgeResult(success=True, path=self.cache_path, method="find", output=output)
