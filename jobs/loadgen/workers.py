"""Synthetic pipeline workers for the demo board.

Each worker thread reads fake events, runs them through the pipeline's
action plugins (bumping their status counters) and hands the survivors to
a batching output. Nothing here is part of the board; it only exercises
the counters the board reads.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import List, Optional

from board_api.metrics.counter_store import EventStatus
from board_api.pipeline.batcher import BatcherObservability
from board_api.pipeline.plugins import ObservabilityInfo
from board_api.pipeline.registry import Pipeline

from .config import LoadGeneratorConfig

logger = logging.getLogger(__name__)

# Probabilidades de cada resultado por acción.
_OUTCOMES = (
    (EventStatus.PASSED, 0.80),
    (EventStatus.NOT_MATCHED, 0.10),
    (EventStatus.DISCARDED, 0.05),
    (EventStatus.COLLAPSE, 0.03),
    (EventStatus.HOLD, 0.02),
)


class BatchingOutput:
    """Output plugin that commits batches by size or by age."""

    def __init__(self, pipeline: Optional[Pipeline], batch_size: int, flush_interval_sec: float):
        self._pipeline = pipeline
        self._batch_size = batch_size
        self._flush_interval = flush_interval_sec
        self._batch: List[int] = []
        self._batch_started: Optional[float] = None
        self._lock = threading.Lock()
        self.observability = BatcherObservability()

    def bind(self, pipeline: Pipeline) -> None:
        self._pipeline = pipeline

    def get_observability_info(self) -> ObservabilityInfo:
        return self.observability.observability_info()

    def out(self, size: int) -> None:
        with self._lock:
            if self._batch_started is None:
                self._batch_started = time.monotonic()
            self._batch.append(size)
            if len(self._batch) >= self._batch_size:
                self._commit_locked()

    def maybe_flush(self) -> None:
        with self._lock:
            if self._batch_started is None:
                return
            if time.monotonic() - self._batch_started >= self._flush_interval:
                self._commit_locked()

    def _commit_locked(self) -> None:
        wait = time.monotonic() - self._batch_started
        events = len(self._batch)
        size = sum(self._batch)
        self._batch = []
        self._batch_started = None

        self.observability.record_commit(wait)
        if self._pipeline is not None:
            self._pipeline.counters.on_output(events, size)


def _pick_outcome(rng: random.Random) -> EventStatus:
    roll = rng.random()
    acc = 0.0
    for status, p in _OUTCOMES:
        acc += p
        if roll < acc:
            return status
    return EventStatus.PASSED


def process_event(pipeline: Pipeline, output: BatchingOutput, rng: random.Random) -> None:
    """Run one synthetic event through the pipeline."""
    size = rng.randint(64, 2048)
    pipeline.counters.on_read()
    pipeline.counters.on_input(1, size)

    for info in pipeline.action_infos:
        if not info.tracked:
            continue
        pipeline.store.increment(info.metric_name, EventStatus.RECEIVED)
        outcome = _pick_outcome(rng)
        pipeline.store.increment(info.metric_name, outcome)
        if outcome in (EventStatus.DISCARDED, EventStatus.COLLAPSE, EventStatus.HOLD):
            return

    output.out(size)


class WorkerPool:
    """Background threads feeding one pipeline."""

    def __init__(self, pipeline: Pipeline, output: BatchingOutput, config: LoadGeneratorConfig):
        self._pipeline = pipeline
        self._output = output
        self._config = config
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    def start(self) -> None:
        for i in range(self._config.workers):
            t = threading.Thread(
                target=self._run,
                args=(random.Random(self._config.seed + i),),
                name=f"{self._pipeline.name}-worker-{i}",
                daemon=True,
            )
            t.start()
            self._threads.append(t)
        logger.info(
            "WORKERS_STARTED pipeline=%s workers=%d rate=%.1f/s",
            self._pipeline.name, self._config.workers, self._config.events_per_sec,
        )

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        for t in self._threads:
            t.join(timeout)
        self._threads = []

    def _run(self, rng: random.Random) -> None:
        delay = 1.0 / self._config.events_per_sec if self._config.events_per_sec > 0 else 0
        while not self._stop.is_set():
            process_event(self._pipeline, self._output, rng)
            self._output.maybe_flush()
            if delay:
                self._stop.wait(delay)
