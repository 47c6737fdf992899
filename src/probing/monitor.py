"""Target monitor — runs one health check per tick until cancelled.

Each monitor owns a daemon thread and a threading.Event used as a one-shot
stop signal. Checks for a single target never overlap: a slow check delays
the next tick instead of queueing extra ones.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from src.probing.status import StatusTracker

logger = logging.getLogger(__name__)

# descriptor -> (healthy, remote_timestamp); raising counts as a failure
CheckFn = Callable[[Any], tuple[bool, Any]]


class TargetMonitor:
    """Periodic check loop for a single target.

    Lifecycle:
        monitor = TargetMonitor("db", 5.0, "http://db:8080/health", check, tracker)
        monitor.start()
        ...
        monitor.stop()   # fire-and-forget
    """

    def __init__(
        self,
        target_id: str,
        interval: float,
        descriptor: Any,
        check: CheckFn,
        tracker: StatusTracker,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"Probing interval must be positive, got {interval}")
        self.target_id = target_id
        self.interval = float(interval)
        self.descriptor = descriptor
        self.check = check
        self.tracker = tracker
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"probe-{target_id}",
            daemon=True,
        )

    @property
    def stopped(self) -> bool:
        """True once the stop signal has fired."""
        return self._stop.is_set()

    def start(self) -> None:
        """Start the ticking loop. A monitor is never restarted."""
        self._thread.start()
        logger.debug("Monitor started: %s (every %.3fs)", self.target_id, self.interval)

    def stop(self) -> None:
        """Signal the loop to stop. Does not wait for an in-flight check."""
        self._stop.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop thread to exit. Returns True if it has."""
        if self._thread.ident is not None:
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        deadline = time.monotonic() + self.interval
        # wait() is True once stopped, even when a tick is already due
        while not self._stop.wait(max(0.0, deadline - time.monotonic())):
            self._check_once()

            deadline += self.interval
            now = time.monotonic()
            if deadline < now:
                # Overdue: fire once now, don't replay the missed ticks
                deadline = now
        logger.debug("Monitor stopped: %s", self.target_id)

    def _check_once(self) -> None:
        """Run a single check and record its outcome."""
        t0 = time.perf_counter()
        try:
            healthy, remote_timestamp = self.check(self.descriptor)
        except Exception as e:
            logger.debug("Check failed for %s: %s: %s", self.target_id, type(e).__name__, e)
            self.tracker.record_failure()
            return

        if not healthy:
            logger.debug("Check for %s reported not healthy", self.target_id)
            self.tracker.record_failure()
            return

        latency_ms = (time.perf_counter() - t0) * 1000
        self.tracker.record_success(latency_ms, remote_timestamp)
