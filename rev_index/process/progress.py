# Path: rev_index/process/progress.py
"""
Progress Tracking

Counts processed revisions and produces a report every buffer_size
revisions: elapsed clock time, milliseconds since the previous report,
cumulative count and resident memory.

Reports are observational only. They never influence sink buffering.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import psutil

from rev_index.constants import BYTES_TO_MB, MSG_PROGRESS


MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


def to_clock(millis: int) -> str:
    """
    Format a duration as clock time.

    Args:
        millis: Duration in milliseconds

    Returns:
        'H:MM:SS.mmm' (hours are not capped at 24)

    Example:
        to_clock(3723004)  # '1:02:03.004'
    """
    millis = max(0, int(millis))
    hours, rest = divmod(millis, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds, ms = divmod(rest, MS_PER_SECOND)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{ms:03d}"


def current_memory_mb() -> float:
    """Resident memory of this process in MB."""
    return psutil.Process().memory_info().rss / BYTES_TO_MB


@dataclass(frozen=True)
class ProgressReport:
    """
    One progress report.

    Attributes:
        count: Revisions processed so far
        elapsed_ms: Milliseconds since the run started
        delta_ms: Milliseconds since the previous report
        memory_mb: Resident memory when the report was taken
    """
    count: int
    elapsed_ms: int
    delta_ms: int
    memory_mb: Optional[float] = None

    def format(self) -> str:
        """Render as the tab separated progress line."""
        line = MSG_PROGRESS.format(
            clock=to_clock(self.elapsed_ms),
            delta=self.delta_ms,
            count=self.count,
        )
        if self.memory_mb is not None:
            line += f"\t{self.memory_mb:.1f} MB"
        return line


class ProgressTracker:
    """
    Revision counter with periodic reports.

    Owned by one IndexGenerator; reset at the start of every run.

    Example:
        tracker = ProgressTracker(buffer_size=15000)
        tracker.start()
        for revision in source:
            ...
            report = tracker.increment()
            if report:
                logger.info(report.format())
    """

    def __init__(
        self,
        buffer_size: int,
        clock: Callable[[], float] = time.monotonic,
        memory_probe: Optional[Callable[[], float]] = current_memory_mb,
    ):
        """
        Initialize tracker.

        Args:
            buffer_size: Revisions between reports
            clock: Seconds source (monotonic)
            memory_probe: Returns memory in MB; None disables it
        """
        self.buffer_size = buffer_size
        self._clock = clock
        self._memory_probe = memory_probe
        self.count = 0
        self.reports_emitted = 0
        self._start = 0.0
        self._last_report_ms = 0

    def start(self) -> None:
        """Reset counters and start the clock."""
        self.count = 0
        self.reports_emitted = 0
        self._last_report_ms = 0
        self._start = self._clock()

    def elapsed_ms(self) -> int:
        """Milliseconds since start()."""
        return int((self._clock() - self._start) * MS_PER_SECOND)

    def increment(self) -> Optional[ProgressReport]:
        """
        Count one processed revision.

        Returns:
            ProgressReport when count reached a multiple of buffer_size,
            None otherwise
        """
        self.count += 1
        if self.count % self.buffer_size != 0:
            return None

        now = self.elapsed_ms()
        report = ProgressReport(
            count=self.count,
            elapsed_ms=now,
            delta_ms=now - self._last_report_ms,
            memory_mb=self._memory_probe() if self._memory_probe else None,
        )
        self._last_report_ms = now
        self.reports_emitted += 1
        return report


__all__ = ['to_clock', 'current_memory_mb', 'ProgressReport', 'ProgressTracker']
