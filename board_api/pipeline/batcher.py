"""Observability hooks for an output plugin's batcher.

The batcher itself lives in the output plugin; it only reports here how
long each committed batch waited before being flushed.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Sequence

from ..metrics.batcher_stats import BATCHER_TIME_KEYS, bucket_for_wait
from .plugins import BatcherInformation, ObservabilityInfo

logger = logging.getLogger(__name__)


class BatcherObservability:
    """Counts committed batches per wait bucket. Thread-safe.

    Uso:
        obs = BatcherObservability()
        obs.record_commit(wait_seconds=0.4)   # counted in bucket 1
        obs.observability_info()
    """

    def __init__(self, time_keys: Sequence[int] = BATCHER_TIME_KEYS):
        self._time_keys = tuple(time_keys)
        self._committed: Dict[int, int] = {}
        self._min_wait: Optional[float] = None
        self._max_wait: Optional[float] = None
        self._lock = threading.Lock()

    def record_commit(self, wait_seconds: float) -> None:
        if wait_seconds < 0:
            logger.warning("BATCHER_NEGATIVE_WAIT wait=%.3f, clamped to 0", wait_seconds)
            wait_seconds = 0.0

        bucket = bucket_for_wait(wait_seconds, self._time_keys)
        with self._lock:
            self._committed[bucket] = self._committed.get(bucket, 0) + 1
            if self._min_wait is None or wait_seconds < self._min_wait:
                self._min_wait = wait_seconds
            if self._max_wait is None or wait_seconds > self._max_wait:
                self._max_wait = wait_seconds

    @property
    def committed(self) -> int:
        with self._lock:
            return sum(self._committed.values())

    def observability_info(self) -> ObservabilityInfo:
        with self._lock:
            committed = dict(self._committed) if self._committed else None
            info = BatcherInformation(
                committed_counters=committed,
                min_wait=self._min_wait,
                max_wait=self._max_wait,
            )
        return ObservabilityInfo(batcher_information=info)
