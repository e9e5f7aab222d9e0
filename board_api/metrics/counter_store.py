"""Per-action event counters.

Action plugins that declare a metric name get one increment-only counter
per event status. Workers increment from any thread; the snapshot builder
reads each counter individually, so a read across statuses is not a
consistent cut.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Dict, Iterator, Optional

from prometheus_client import Counter

logger = logging.getLogger(__name__)


class EventStatus(str, Enum):
    """Estados de evento reconocidos, en orden de presentación."""
    RECEIVED = "received"
    DISCARDED = "discarded"
    PASSED = "passed"
    NOT_MATCHED = "not_matched"
    COLLAPSE = "collapse"
    HOLD = "hold"

    @property
    def color(self) -> str:
        return STATUS_COLORS[self]


STATUS_COLORS: Dict[EventStatus, str] = {
    EventStatus.RECEIVED: "#0d8bf0",
    EventStatus.DISCARDED: "red",
    EventStatus.PASSED: "green",
    EventStatus.NOT_MATCHED: "#8bc34a",
    EventStatus.COLLAPSE: "#009688",
    EventStatus.HOLD: "#f050f0",
}


class AtomicCounter:
    """Unsigned increment-only counter safe to share between threads."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> int:
        if n < 0:
            raise ValueError("AtomicCounter only supports non-negative increments")
        with self._lock:
            self._value += n
            return self._value

    def load(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self._value})"


class ActionMetric:
    """Counters of a single named metric, one per event status."""

    def __init__(
        self,
        name: str,
        exported: Optional[Counter] = None,
        const_labels: Optional[Dict[str, str]] = None,
    ):
        self.name = name
        self._totals: Dict[str, AtomicCounter] = {}
        self._children: Dict[str, Counter] = {}
        self._lock = threading.Lock()
        self._exported = exported
        self._const_labels = const_labels or {}

    def _counter(self, status: str) -> AtomicCounter:
        counter = self._totals.get(status)
        if counter is None:
            with self._lock:
                counter = self._totals.get(status)
                if counter is None:
                    # The labeled child is resolved once per status;
                    # labels() takes the exported metric's lock.
                    if self._exported is not None:
                        self._children[status] = self._exported.labels(
                            **self._const_labels, metric=self.name, status=status
                        )
                    counter = AtomicCounter()
                    self._totals[status] = counter
        return counter

    def inc(self, status: str, n: int = 1) -> None:
        self._counter(status).inc(n)
        child = self._children.get(status)
        if child is not None:
            child.inc(n)

    def get(self, status: str) -> Optional[AtomicCounter]:
        return self._totals.get(status)

    def snapshot(self) -> Dict[str, int]:
        # dict() copies the mapping so a concurrent first increment
        # of a new status can't break the iteration.
        return {status: counter.load() for status, counter in dict(self._totals).items()}


class CounterStore:
    """Registry of named action metrics for one pipeline.

    Constructed when the pipeline starts and handed both to the plugins
    (writers) and to the snapshot builder (reader). Metrics are never
    removed.

    Uso:
        store = CounterStore()
        store.increment("geoip", EventStatus.RECEIVED)
        store.snapshot("geoip")  # {"received": 1}
    """

    def __init__(
        self,
        exported: Optional[Counter] = None,
        const_labels: Optional[Dict[str, str]] = None,
    ):
        self._metrics: Dict[str, ActionMetric] = {}
        self._lock = threading.Lock()
        self._exported = exported
        self._const_labels = const_labels or {}

    def register(self, metric_name: str) -> ActionMetric:
        """Get or create the metric; safe to call more than once."""
        metric = self._metrics.get(metric_name)
        if metric is not None:
            return metric
        with self._lock:
            metric = self._metrics.get(metric_name)
            if metric is None:
                metric = ActionMetric(
                    metric_name,
                    exported=self._exported,
                    const_labels=self._const_labels,
                )
                self._metrics[metric_name] = metric
                logger.debug("METRIC_REGISTERED name=%s", metric_name)
        return metric

    def lookup(self, metric_name: str) -> Optional[ActionMetric]:
        return self._metrics.get(metric_name)

    def increment(self, metric_name: str, status: EventStatus | str, n: int = 1) -> None:
        if isinstance(status, EventStatus):
            status = status.value
        self.register(metric_name).inc(status, n)

    def count(self, metric_name: str, status: EventStatus | str) -> int:
        if isinstance(status, EventStatus):
            status = status.value
        metric = self._metrics.get(metric_name)
        if metric is None:
            return 0
        counter = metric.get(status)
        return counter.load() if counter is not None else 0

    def snapshot(self, metric_name: str) -> Dict[str, int]:
        metric = self._metrics.get(metric_name)
        if metric is None:
            return {}
        return metric.snapshot()

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._metrics))

    def __len__(self) -> int:
        return len(self._metrics)
