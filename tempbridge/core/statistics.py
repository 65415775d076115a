"""Running counters of bridge iterations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional


class IterationOutcome(Enum):
    """Result tag of one bridge loop iteration."""
    PUBLISHED = "published"
    READ_FAILED = "read_failed"
    SKIPPED = "skipped"
    DROPPED = "dropped"


@dataclass
class BridgeStats:
    """Counts iteration outcomes and derives the effective publish rate.

    Only counters are kept; no readings are retained.
    """
    published: int = 0
    read_failed: int = 0
    skipped: int = 0
    dropped: int = 0
    clock: Callable[[], float] = field(default=time.perf_counter, repr=False)
    _start_time: Optional[float] = field(default=None, repr=False)

    def record(self, outcome: IterationOutcome) -> None:
        if self._start_time is None:
            self._start_time = self.clock()
        if outcome is IterationOutcome.PUBLISHED:
            self.published += 1
        elif outcome is IterationOutcome.READ_FAILED:
            self.read_failed += 1
        elif outcome is IterationOutcome.SKIPPED:
            self.skipped += 1
        elif outcome is IterationOutcome.DROPPED:
            self.dropped += 1

    @property
    def iterations(self) -> int:
        return self.published + self.read_failed + self.skipped + self.dropped

    def get_publish_rate(self) -> float:
        """Published messages per second since the first iteration.

        Returns:
            Rate in Hz, or 0 if fewer than two messages were published
        """
        if self.published < 2 or self._start_time is None:
            return 0.0

        elapsed = self.clock() - self._start_time
        if elapsed > 0:
            return self.published / elapsed
        return 0.0

    def summary(self) -> str:
        return (
            f"published={self.published}, "
            f"read_failed={self.read_failed}, "
            f"skipped={self.skipped}, "
            f"dropped={self.dropped}, "
            f"rate={self.get_publish_rate():.2f} Hz"
        )
