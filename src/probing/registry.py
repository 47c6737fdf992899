"""Probe registry — map of target id to its monitor and status tracker.

All structural operations (add/remove/reset/status) run under one lock that
is held only for the map operation, never while a check is in flight.

Usage:
    registry = ProbeRegistry()
    registry.add_http("api", 5.0, "http://api:8000/health")
    snap = registry.status("api")
    registry.remove("api")
    registry.close()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any

from src.probing.checks import http_check
from src.probing.monitor import CheckFn, TargetMonitor
from src.probing.status import StatusSnapshot, StatusTracker

logger = logging.getLogger(__name__)


class ProbeError(Exception):
    """Base class for registry errors."""


class TargetNotFoundError(ProbeError):
    """Raised when an operation references an id with no active target."""

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(f"Target '{target_id}' not found")


class TargetExistsError(ProbeError):
    """Raised when adding an id that is already active."""

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(f"Target '{target_id}' already exists")


@dataclass
class _Entry:
    monitor: TargetMonitor
    tracker: StatusTracker


class ProbeRegistry:
    """Tracks a dynamic set of targets, each polled by its own monitor."""

    def __init__(self, check: CheckFn | None = None) -> None:
        self._check = check or http_check
        self._targets: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def add(
        self,
        target_id: str,
        interval: float,
        descriptor: Any,
        check: CheckFn | None = None,
    ) -> None:
        """Start probing ``descriptor`` every ``interval`` seconds.

        Returns as soon as the monitor is started; the first check runs one
        interval later. Raises ``TargetExistsError`` if the id is active.
        """
        if not target_id:
            raise ValueError("Target id is required")

        tracker = StatusTracker()
        monitor = TargetMonitor(target_id, interval, descriptor, check or self._check, tracker)

        with self._lock:
            if target_id in self._targets:
                raise TargetExistsError(target_id)
            monitor.start()
            self._targets[target_id] = _Entry(monitor=monitor, tracker=tracker)

        logger.info("Added target '%s' (every %ss)", target_id, interval)

    def add_http(self, target_id: str, interval: float, endpoint: str) -> None:
        """Probe an HTTP health endpoint (see ``http_check``)."""
        self.add(target_id, interval, endpoint, check=http_check)

    def remove(self, target_id: str) -> None:
        """Stop probing a target and forget it.

        Does not wait for an in-flight check; that check may still finish
        and write to the now-unreachable tracker.
        """
        with self._lock:
            entry = self._targets.pop(target_id, None)
            if entry is None:
                raise TargetNotFoundError(target_id)
            entry.monitor.stop()

        logger.info("Removed target '%s'", target_id)

    def reset(self, target_id: str) -> None:
        """Zero a target's status without touching its ticking cadence."""
        with self._lock:
            entry = self._targets.get(target_id)
            if entry is None:
                raise TargetNotFoundError(target_id)
            entry.tracker.reset()

        logger.info("Reset status of target '%s'", target_id)

    def status(self, target_id: str) -> StatusSnapshot:
        """Return a snapshot of a target's current status."""
        with self._lock:
            entry = self._targets.get(target_id)
            if entry is None:
                raise TargetNotFoundError(target_id)
            return entry.tracker.snapshot()

    def statuses(self) -> dict[str, StatusSnapshot]:
        """Snapshot every active target."""
        with self._lock:
            trackers = {tid: e.tracker for tid, e in self._targets.items()}
        return {tid: t.snapshot() for tid, t in trackers.items()}

    def ids(self) -> list[str]:
        with self._lock:
            return sorted(self._targets)

    def close(self) -> None:
        """Stop every monitor and empty the registry."""
        with self._lock:
            entries = list(self._targets.values())
            self._targets.clear()
        for entry in entries:
            entry.monitor.stop()
        if entries:
            logger.info("Registry closed: %d targets stopped", len(entries))

    def __contains__(self, target_id: object) -> bool:
        with self._lock:
            return target_id in self._targets

    def __len__(self) -> int:
        with self._lock:
            return len(self._targets)

    def __enter__(self) -> ProbeRegistry:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
