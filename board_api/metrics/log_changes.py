"""Per-interval change accounting for a pipeline.

Every snapshot closes a window: the aggregator turns the window's deltas
into rates, keeps running totals and logs a one-line summary.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from .delta_tracker import Deltas
from .models import LogChanges

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


class LogChangesAggregator:
    """Summarizes the deltas of consecutive windows for one pipeline."""

    def __init__(self, pipeline_name: str, clock: Callable[[], float] = time.monotonic):
        self._pipeline_name = pipeline_name
        self._clock = clock
        self._last_ts = clock()
        self._total_events = 0
        self._total_bytes = 0
        self._lock = threading.Lock()

    def summarize(self, deltas: Deltas) -> LogChanges:
        with self._lock:
            now = self._clock()
            interval = max(now - self._last_ts, 0.0)
            self._last_ts = now

            self._total_events += deltas.output_events
            self._total_bytes += deltas.output_bytes

            if interval > 0:
                events_rate = deltas.output_events / interval
                bytes_rate = deltas.output_bytes / interval
                reads_rate = deltas.read_ops / interval
            else:
                events_rate = bytes_rate = reads_rate = 0.0

            avg_size = (
                deltas.output_bytes // deltas.output_events
                if deltas.output_events > 0 else 0
            )

            changes = LogChanges(
                interval_seconds=round(interval, 3),
                input_events=deltas.input_events,
                input_bytes=deltas.input_bytes,
                output_events=deltas.output_events,
                output_bytes=deltas.output_bytes,
                read_ops=deltas.read_ops,
                events_per_sec=round(events_rate, 2),
                bytes_per_sec=round(bytes_rate, 2),
                read_ops_per_sec=round(reads_rate, 2),
                avg_event_size=avg_size,
                total_events=self._total_events,
                total_bytes=self._total_bytes,
            )

        logger.info(
            "PIPELINE_STATS pipeline=%s interval=%.1fs out=%d|%.1fMB "
            "rate=%.0f/s|%.1fMB/s read_ops=%.0f/s total=%d|%.1fMB avg_size=%d",
            self._pipeline_name,
            changes.interval_seconds,
            changes.output_events,
            changes.output_bytes / _MB,
            changes.events_per_sec,
            changes.bytes_per_sec / _MB,
            changes.read_ops_per_sec,
            changes.total_events,
            changes.total_bytes / _MB,
            changes.avg_event_size,
        )
        return changes
