"""
Sync Service - Cache Invalidation Loop

Responsible for:
- Polling the remote marker once per interval
- Comparing it with the local marker
- Clearing the nginx cache when they differ
- Persisting the new marker so a restart does not clear again

The loop is strictly sequential: a cycle runs to completion before the
sleep starts, and failures only end the current cycle.
"""

import time
from enum import Enum
from typing import Callable, Protocol

from ..common.config import Settings
from ..common.exceptions import MarkerSourceError, StateError
from ..common.logging_setup import get_logger, log_fields
from ..common.state import MarkerStore
from .cache_purger import CachePurger, PurgeResult
from .marker_source import MarkerSource

logger = get_logger("sync")

# Granularity at which a sleeping loop notices a stop request
STOP_POLL_SECONDS = 1.0


class CycleOutcome(str, Enum):
    """Result of one poll/compare/act/persist cycle"""
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


class RemoteMarkerSource(Protocol):
    def fetch(self) -> str: ...


class Purger(Protocol):
    def purge(self) -> PurgeResult: ...


class SyncService:
    """
    Poll, compare, act, persist, sleep.

    Collaborators can be injected (tests); by default they are built from
    settings.
    """

    def __init__(
        self,
        settings: Settings,
        source: RemoteMarkerSource | None = None,
        purger: Purger | None = None,
        store: MarkerStore | None = None,
        sleep: Callable[[float], object] | None = None,
    ):
        self.settings = settings
        self.interval = settings.check_interval

        self.source = source or MarkerSource(
            settings.database_url,
            table=settings.options_table,
            connect_timeout=settings.db_connect_timeout,
        )
        self.purger = purger or CachePurger(
            settings.cache_path,
            method=settings.clear_method,
            timeout=settings.clear_timeout,
        )
        self.store = store or MarkerStore(settings.state_file)

        # Plain flag: stop() is called from signal handlers, which must not
        # take locks the interrupted main thread may already hold
        self._stop_requested = False
        self._sleep = sleep or self._wait

        # Observability counters
        self._cycle_count = 0
        self._clear_count = 0
        self._clear_failure_count = 0
        self._source_failure_count = 0
        self._error_count = 0
        self._last_outcome: CycleOutcome | None = None
        self._last_cycle_time: float = 0

    def run_cycle(self) -> CycleOutcome:
        """Run one cycle and return its outcome; never raises"""
        start = time.monotonic()
        try:
            outcome = self._cycle()
        except Exception:
            self._error_count += 1
            logger.exception("Unexpected error in sync cycle")
            outcome = CycleOutcome.FAILED
        finally:
            self._last_cycle_time = time.monotonic() - start
            self._cycle_count += 1

        self._last_outcome = outcome
        return outcome

    def _cycle(self) -> CycleOutcome:
        try:
            remote = self.source.fetch()
        except MarkerSourceError as e:
            self._source_failure_count += 1
            logger.error(e.message, extra=log_fields(host=e.host))
            return CycleOutcome.FAILED

        local = self.store.read()
        if remote == local:
            logger.info("No cache change detected", extra=log_fields(marker=remote))
            return CycleOutcome.UNCHANGED

        logger.info(
            "Detected cache clear signal, clearing cache",
            extra=log_fields(
                path=self.settings.cache_path,
                remote_marker=remote,
                local_marker=local,
            ),
        )
        self._clear_count += 1
        self._log_purge(self._purge())

        # The marker advances even when the purge failed; only a later
        # remote change triggers another attempt.
        try:
            self.store.write(remote)
        except StateError as e:
            logger.error(e.message, extra=log_fields(path=e.path))

        return CycleOutcome.CHANGED

    def _purge(self) -> PurgeResult:
        try:
            return self.purger.purge()
        except Exception as e:
            logger.exception("Cache-clear action raised")
            return PurgeResult(
                success=False,
                path=self.settings.cache_path,
                method=self.settings.clear_method,
                output=f"{type(e).__name__}: {e}",
            )

    def _log_purge(self, result: PurgeResult) -> None:
        if result.success:
            logger.info(
                "Cache cleared successfully",
                extra=log_fields(
                    path=result.path,
                    method=result.method,
                    files_removed=result.files_removed,
                ),
            )
        else:
            self._clear_failure_count += 1
            logger.error(
                "Error clearing cache",
                extra=log_fields(
                    path=result.path,
                    method=result.method,
                    output=result.output,
                ),
            )

    def _wait(self, seconds: float) -> None:
        """Sleep for the interval, returning early once a stop is requested"""
        deadline = time.monotonic() + seconds
        while not self._stop_requested:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            time.sleep(min(remaining, STOP_POLL_SECONDS))

    def run(self, max_cycles: int | None = None) -> None:
        """
        Run cycles until stopped.

        Args:
            max_cycles: Stop after this many cycles (None = forever)
        """
        logger.info(
            f"Sync loop started (interval {self.interval}s)",
            extra=log_fields(**self.settings.summary()),
        )

        cycles = 0
        while not self._stop_requested:
            self.run_cycle()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            if self._stop_requested:
                break
            self._sleep(self.interval)

        logger.info("Sync loop stopped", extra=log_fields(**self.get_stats()))

    def stop(self) -> None:
        """Request a stop; takes effect after the current cycle"""
        self._stop_requested = True

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    def get_stats(self) -> dict:
        """Get loop statistics for observability."""
        return {
            "cycle_count": self._cycle_count,
            "clear_count": self._clear_count,
            "clear_failure_count": self._clear_failure_count,
            "source_failure_count": self._source_failure_count,
            "error_count": self._error_count,
            "last_outcome": self._last_outcome.value if self._last_outcome else None,
            "last_cycle_s": round(self._last_cycle_time, 3),
        }

    def close(self) -> None:
        close = getattr(self.source, "close", None)
        if close:
            close()
