"""Tests for the StatusTracker."""

from __future__ import annotations

import threading
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from src.probing.status import SRTT_ALPHA, StatusSnapshot, StatusTracker

REMOTE_TS = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestInitialState:
    def test_zero_values(self) -> None:
        snap = StatusTracker().snapshot()
        assert snap.total_checks == 0
        assert snap.total_failures == 0
        assert snap.consecutive_failures == 0
        assert snap.last_check_at is None
        assert snap.last_success_at is None
        assert snap.last_latency_ms == 0.0
        assert snap.srtt_ms == 0.0
        assert snap.healthy is False
        assert snap.started_at.tzinfo is not None

    def test_snapshot_is_immutable(self) -> None:
        snap = StatusTracker().snapshot()
        with pytest.raises(FrozenInstanceError):
            snap.total_checks = 5  # type: ignore[misc]


class TestRecording:
    def test_success(self) -> None:
        t = StatusTracker()
        t.record_success(12.5, REMOTE_TS)
        snap = t.snapshot()
        assert snap.total_checks == 1
        assert snap.total_failures == 0
        assert snap.last_latency_ms == 12.5
        assert snap.last_success_at == REMOTE_TS
        assert snap.last_check_at is not None
        assert snap.healthy is True

    def test_failure(self) -> None:
        t = StatusTracker()
        t.record_failure()
        t.record_failure()
        snap = t.snapshot()
        assert snap.total_checks == 2
        assert snap.total_failures == 2
        assert snap.consecutive_failures == 2
        assert snap.last_check_at is not None
        assert snap.last_success_at is None
        assert snap.healthy is False

    def test_last_success_fields_are_sticky(self) -> None:
        t = StatusTracker()
        t.record_success(20.0, REMOTE_TS)
        for _ in range(3):
            t.record_failure()
        snap = t.snapshot()
        assert snap.last_latency_ms == 20.0
        assert snap.last_success_at == REMOTE_TS
        assert snap.consecutive_failures == 3
        assert snap.total_checks == 4
        assert snap.healthy is False

    def test_success_resets_consecutive_failures(self) -> None:
        t = StatusTracker()
        t.record_failure()
        t.record_failure()
        t.record_success(5.0, REMOTE_TS)
        snap = t.snapshot()
        assert snap.consecutive_failures == 0
        assert snap.total_failures == 2
        assert snap.total_checks == 3

    def test_last_check_at_advances(self) -> None:
        t = StatusTracker()
        t.record_failure()
        first = t.snapshot().last_check_at
        t.record_success(1.0, REMOTE_TS)
        second = t.snapshot().last_check_at
        assert first is not None and second is not None
        assert second >= first

    def test_remote_timestamp_stored_verbatim(self) -> None:
        t = StatusTracker()
        t.record_success(1.0, "not-even-a-date")
        assert t.snapshot().last_success_at == "not-even-a-date"

    def test_srtt_smoothing(self) -> None:
        t = StatusTracker()
        t.record_success(100.0, REMOTE_TS)
        assert t.snapshot().srtt_ms == pytest.approx(SRTT_ALPHA * 100.0)
        t.record_success(100.0, REMOTE_TS)
        expected = (1 - SRTT_ALPHA) * SRTT_ALPHA * 100.0 + SRTT_ALPHA * 100.0
        assert t.snapshot().srtt_ms == pytest.approx(expected)

    def test_failure_does_not_touch_srtt(self) -> None:
        t = StatusTracker()
        t.record_success(80.0, REMOTE_TS)
        before = t.snapshot().srtt_ms
        t.record_failure()
        assert t.snapshot().srtt_ms == before


class TestReset:
    def test_reset_restores_creation_state(self) -> None:
        t = StatusTracker()
        created = t.snapshot().started_at
        t.record_success(10.0, REMOTE_TS)
        t.record_failure()

        t.reset()
        snap = t.snapshot()
        assert snap.total_checks == 0
        assert snap.total_failures == 0
        assert snap.consecutive_failures == 0
        assert snap.last_success_at is None
        assert snap.last_check_at is None
        assert snap.last_latency_ms == 0.0
        assert snap.srtt_ms == 0.0
        assert snap.healthy is False
        assert snap.started_at >= created

    def test_counting_restarts_after_reset(self) -> None:
        t = StatusTracker()
        t.record_failure()
        t.reset()
        t.record_failure()
        assert t.snapshot().total_checks == 1


class TestConcurrency:
    def test_invariants_hold_under_concurrent_reads(self) -> None:
        t = StatusTracker()
        done = threading.Event()
        violations: list[StatusSnapshot] = []

        def writer() -> None:
            for i in range(2000):
                if i % 3:
                    t.record_failure()
                else:
                    t.record_success(1.0, REMOTE_TS)
            done.set()

        def reader() -> None:
            while not done.is_set():
                s = t.snapshot()
                if not (s.consecutive_failures <= s.total_failures <= s.total_checks):
                    violations.append(s)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for r in readers:
            r.start()
        writer()
        for r in readers:
            r.join()

        assert violations == []
        assert t.snapshot().total_checks == 2000


class TestToDict:
    def test_iso_timestamps(self) -> None:
        t = StatusTracker()
        t.record_success(12.345, REMOTE_TS)
        data = t.snapshot().to_dict()
        assert data["last_success_at"] == REMOTE_TS.isoformat()
        datetime.fromisoformat(data["started_at"])
        assert data["last_latency_ms"] == 12.3
        assert data["total_checks"] == 1

    def test_none_timestamps(self) -> None:
        data = StatusTracker().snapshot().to_dict()
        assert data["last_check_at"] is None
        assert data["last_success_at"] is None
