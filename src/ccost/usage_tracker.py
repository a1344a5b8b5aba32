from __future__ import annotations

import logging
import os
import threading
import time
from datetime import datetime, tzinfo
from typing import Callable, Optional

from .aggregator import aggregate
from .config import CcostConfig
from .errors import CcostError, ParseError
from .models import Granularity, UsageSnapshot
from .shell import build_command, run_command
from .summary import summarize_models, window_totals
from .utils import resolve_zone

DEBUG_MODE = os.getenv("CCOST_DEBUG")
logger = logging.getLogger("ccost")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[ccost] %(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

Runner = Callable[[str], str]
Clock = Callable[[], datetime]
RefreshCallback = Callable[[Optional[UsageSnapshot], Optional[BaseException]], None]


class UsageTracker:
    """Holds the latest usage snapshot and runs refreshes one at a time.

    A refresh fetches ``ccusage`` output, aggregates it and swaps in a new
    :class:`UsageSnapshot` in a single assignment. A failed refresh leaves the
    previous snapshot in place and records the error.
    """

    def __init__(
        self,
        config: CcostConfig,
        runner: Runner = run_command,
        clock: Optional[Clock] = None,
    ):
        self.config = config
        self._runner = runner
        self._tz = resolve_zone(config.display_timezone)
        self._clock: Clock = clock or (lambda: datetime.now(self._tz))
        self._snapshot: Optional[UsageSnapshot] = None
        self._last_error: Optional[CcostError] = None
        self._state_lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self._refresh_thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Optional[UsageSnapshot]:
        with self._state_lock:
            return self._snapshot

    @property
    def last_error(self) -> Optional[CcostError]:
        with self._state_lock:
            return self._last_error

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    @property
    def granularity(self) -> Granularity:
        return self.config.granularity

    def is_loading(self) -> bool:
        return self._refresh_lock.locked()

    def set_granularity(self, granularity: Granularity) -> None:
        if granularity is self.config.granularity:
            return
        self.config.granularity = granularity
        with self._state_lock:
            self._snapshot = None
            self._last_error = None

    def refresh(self) -> UsageSnapshot:
        """Run one blocking refresh and return the new snapshot.

        Raises :class:`CcostError` subclasses on failure. When another refresh
        is already running the call waits for it to finish first.
        """

        with self._refresh_lock:
            return self._refresh_locked()

    def refresh_async(self, on_done: Optional[RefreshCallback] = None) -> bool:
        """Start a background refresh; ``False`` if one is already in flight."""

        if not self._refresh_lock.acquire(blocking=False):
            logger.debug("refresh already in flight; dropping request")
            return False

        def worker() -> None:
            snapshot: Optional[UsageSnapshot] = None
            error: Optional[BaseException] = None
            try:
                snapshot = self._refresh_locked()
            except CcostError as exc:
                error = exc
            except Exception as exc:
                logger.exception("refresh thread failed")
                error = ParseError(str(exc) or type(exc).__name__)
            finally:
                self._refresh_lock.release()
            if on_done is not None:
                on_done(snapshot, error)

        logger.debug("scheduling ccusage refresh thread")
        self._refresh_thread = threading.Thread(target=worker, name="ccusage-refresh", daemon=True)
        self._refresh_thread.start()
        return True

    def wait(self, timeout: Optional[float] = None) -> None:
        thread = self._refresh_thread
        if thread is not None:
            thread.join(timeout)

    def _refresh_locked(self) -> UsageSnapshot:
        granularity = self.config.granularity
        command = build_command(self.config.ccusage_command, granularity)
        started = time.perf_counter()
        logger.debug("refreshing %s usage…", granularity.value)
        try:
            raw = self._runner(command)
            entries = aggregate(
                raw,
                granularity,
                now=self._clock(),
                tz=self._tz,
                daily_days=self.config.daily_window_days,
                weekly_weeks=self.config.weekly_window_weeks,
            )
            snapshot = UsageSnapshot(
                granularity=granularity,
                entries=entries,
                model_summaries=summarize_models(entries),
                totals=window_totals(entries),
                refreshed_at=self._clock(),
            )
        except CcostError as exc:
            self._record_failure(granularity, exc)
            raise
        except Exception as exc:
            logger.exception("unexpected error while reading %s usage", granularity.value)
            error = ParseError(f"Could not read ccusage output: {exc}")
            self._record_failure(granularity, error)
            raise error from exc

        with self._state_lock:
            if granularity is not self.config.granularity:
                logger.debug("granularity changed during refresh; discarding result")
                return snapshot
            self._snapshot = snapshot
            self._last_error = None
        logger.debug(
            "refreshed %s usage: %s entries in %.2fs",
            granularity.value,
            len(entries),
            time.perf_counter() - started,
        )
        return snapshot

    def _record_failure(self, granularity: Granularity, error: CcostError) -> None:
        logger.info("ccusage %s refresh failed: %s", granularity.value, error)
        with self._state_lock:
            if granularity is not self.config.granularity:
                return
            self._last_error = error


__all__ = ["UsageTracker"]
