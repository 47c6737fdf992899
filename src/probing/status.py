"""Per-target status tracking — thread-safe record of one target's check history.

Written by exactly one TargetMonitor, read by any number of callers through
``snapshot()``. The lock is held only for the field update or copy, never
across a check.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

# Weight of the newest sample in the smoothed round-trip time
SRTT_ALPHA = 0.125


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StatusSnapshot:
    """Immutable copy of a tracker's fields at a point in time."""

    started_at: datetime
    last_check_at: datetime | None = None
    last_success_at: Any = None  # remote-reported, stored verbatim
    last_latency_ms: float = 0.0
    srtt_ms: float = 0.0
    total_checks: int = 0
    total_failures: int = 0
    consecutive_failures: int = 0
    healthy: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("started_at", "last_check_at", "last_success_at"):
            value = data[key]
            if isinstance(value, datetime):
                data[key] = value.isoformat()
        data["last_latency_ms"] = round(self.last_latency_ms, 1)
        data["srtt_ms"] = round(self.srtt_ms, 1)
        return data


class StatusTracker:
    """Thread-safe health history for a single target."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._init_fields(_utcnow())

    def _init_fields(self, now: datetime) -> None:
        self._started_at = now
        self._last_check_at: datetime | None = None
        self._last_success_at: Any = None
        self._last_latency_ms = 0.0
        self._srtt_ms = 0.0
        self._total_checks = 0
        self._total_failures = 0
        self._consecutive_failures = 0
        self._healthy = False

    def record_success(self, latency_ms: float, remote_timestamp: Any) -> None:
        """Record a successful check.

        ``remote_timestamp`` is the time reported by the target itself; it is
        stored as-is and never compared with the local clock.
        """
        now = _utcnow()
        with self._lock:
            self._last_check_at = now
            self._last_latency_ms = latency_ms
            self._last_success_at = remote_timestamp
            self._srtt_ms = (1 - SRTT_ALPHA) * self._srtt_ms + SRTT_ALPHA * latency_ms
            self._total_checks += 1
            self._consecutive_failures = 0
            self._healthy = True

    def record_failure(self) -> None:
        """Record a failed check. Last-success fields are left untouched."""
        now = _utcnow()
        with self._lock:
            self._last_check_at = now
            self._total_checks += 1
            self._total_failures += 1
            self._consecutive_failures += 1
            self._healthy = False

    def reset(self) -> None:
        """Reinitialize every field as if the tracker had just been created."""
        now = _utcnow()
        with self._lock:
            self._init_fields(now)

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return StatusSnapshot(
                started_at=self._started_at,
                last_check_at=self._last_check_at,
                last_success_at=self._last_success_at,
                last_latency_ms=self._last_latency_ms,
                srtt_ms=self._srtt_ms,
                total_checks=self._total_checks,
                total_failures=self._total_failures,
                consecutive_failures=self._consecutive_failures,
                healthy=self._healthy,
            )
