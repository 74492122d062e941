"""Bounded in-memory history of health reports."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import replace

from loguru import logger

from rhm.health.models import HealthReport


class HistoryTracker:
    """
    FIFO buffer of the last ``capacity`` health reports.

    A single lock guards the buffer. Reports are frozen and stored whole, so a
    reader sees either a complete entry or none at all.

    Example:
        history = HistoryTracker(capacity=24)
        history.record(report)
        latest = history.snapshot(limit=5)  # most recent first
    """

    def __init__(self, capacity: int = 24):
        """
        Initialize the tracker.

        Args:
            capacity: Maximum number of retained reports (must be >= 1)
        """
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: deque[HealthReport] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(self, report: HealthReport) -> None:
        """Append a report, evicting the oldest one at capacity."""
        entry = self._entry(report)
        with self._lock:
            self._entries.append(entry)
        logger.debug(f"Recorded health report ({entry.status.value}) at {entry.timestamp.isoformat()}")

    def record_and_snapshot(self, report: HealthReport, limit: int | None = None) -> tuple[HealthReport, ...]:
        """
        Append a report and read the history in one step.

        With a positive limit the returned tuple starts with ``report``, even
        when other threads record concurrently.

        Args:
            report: Report to append
            limit: Maximum entries to return (default: capacity)
        """
        entry = self._entry(report)
        with self._lock:
            self._entries.append(entry)
            entries = list(self._entries)
        logger.debug(f"Recorded health report ({entry.status.value}) at {entry.timestamp.isoformat()}")
        return self._latest(entries, limit)

    def snapshot(self, limit: int | None = None) -> tuple[HealthReport, ...]:
        """
        Return up to ``limit`` most recent reports, most recent first.

        Args:
            limit: Maximum entries to return (default: capacity)
        """
        with self._lock:
            entries = list(self._entries)
        return self._latest(entries, limit)

    def _entry(self, report: HealthReport) -> HealthReport:
        return replace(report, history=None) if report.history is not None else report

    def _latest(self, entries: list[HealthReport], limit: int | None) -> tuple[HealthReport, ...]:
        if limit is None:
            limit = self._capacity
        if limit <= 0:
            return ()
        return tuple(reversed(entries[-limit:]))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"<HistoryTracker(entries={len(self)}, capacity={self._capacity})>"
