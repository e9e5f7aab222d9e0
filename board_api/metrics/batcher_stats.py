"""Batcher statistics: dense report of committed batches per wait bucket."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence, Tuple

from .models import BatcherCounter, BatcherReport

# Umbrales de espera (segundos), en orden de presentación.
BATCHER_TIME_KEYS: Tuple[int, ...] = (0, 1, 2, 5, 10, 20, 30, 60, 120, 300, 600)


def bucket_for_wait(wait_seconds: float, time_keys: Sequence[int] = BATCHER_TIME_KEYS) -> int:
    """Smallest bucket whose threshold is >= the wait; the last one absorbs the rest."""
    for key in time_keys:
        if wait_seconds <= key:
            return key
    return time_keys[-1]


def reduce_batcher_stats(
    committed: Optional[Mapping[int, int]],
    min_wait: Optional[float],
    max_wait: Optional[float],
    time_keys: Sequence[int] = BATCHER_TIME_KEYS,
) -> BatcherReport:
    """Expand a sparse bucket -> count mapping into one entry per bucket.

    ``committed`` may be None (no batcher or nothing committed yet); the
    result is still one zero entry per bucket. Unknown keys are ignored.
    Waits pass through unchanged.
    """
    committed = committed or {}
    counters = [
        BatcherCounter(seconds=key, batches_committed=int(committed.get(key, 0)))
        for key in time_keys
    ]
    return BatcherReport(counters=counters, min_wait=min_wait, max_wait=max_wait)
