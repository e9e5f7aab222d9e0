"""Since-last-observation deltas over absolute counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class DeltaTracker:
    """Turns an absolute, monotonically growing value into a delta.

    The first call returns the absolute value itself (baseline is zero).
    Not thread-safe: one reader owns one tracker.

    If the absolute value goes backwards (the counter was reset, e.g. a
    sub-component restarted) the delta is clamped to zero and the
    baseline moves to the new value.
    """

    def __init__(self, name: str = "", baseline: int = 0):
        self.name = name
        self._last = baseline

    @property
    def last(self) -> int:
        return self._last

    def next(self, absolute: int) -> int:
        delta = absolute - self._last
        if delta < 0:
            logger.warning(
                "DELTA_REGRESSION tracker=%s last=%s current=%s",
                self.name, self._last, absolute,
            )
            delta = 0
        self._last = absolute
        return delta


@dataclass(frozen=True)
class Deltas:
    """Deltas of the five tracked pipeline quantities for one window."""
    input_events: int = 0
    input_bytes: int = 0
    output_events: int = 0
    output_bytes: int = 0
    read_ops: int = 0
