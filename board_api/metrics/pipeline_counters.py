"""Pipeline-level absolute counters and their Prometheus export.

Workers bump the absolute counters on the hot path. ``PipelineMetrics``
reads them at scrape time through a collector on its own registry, so
``/metrics`` is current whether or not anyone looks at the board. The
snapshot builder only turns them into deltas for ``log_changes``.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, Optional

from prometheus_client import CollectorRegistry, Counter
from prometheus_client.core import CounterMetricFamily, Metric

from .counter_store import AtomicCounter

logger = logging.getLogger(__name__)

# (exported name, PipelineCounters attribute, help)
PIPELINE_COUNTERS = (
    ("pipeline_input_events", "input_events", "Events read by the input plugin"),
    ("pipeline_input_bytes", "input_bytes", "Bytes read by the input plugin"),
    ("pipeline_output_events", "output_events", "Events delivered by the output plugin"),
    ("pipeline_output_bytes", "output_bytes", "Bytes delivered by the output plugin"),
    ("pipeline_read_ops", "read_ops", "Read operations performed by the input plugin"),
)


class PipelineCounters:
    """Absolute counters written by pipeline workers."""

    def __init__(self):
        self.input_events = AtomicCounter()
        self.input_bytes = AtomicCounter()
        self.output_events = AtomicCounter()
        self.output_bytes = AtomicCounter()
        self.read_ops = AtomicCounter()

    def on_input(self, events: int = 1, size: int = 0) -> None:
        self.input_events.inc(events)
        self.input_bytes.inc(size)

    def on_output(self, events: int = 1, size: int = 0) -> None:
        self.output_events.inc(events)
        self.output_bytes.inc(size)

    def on_read(self, n: int = 1) -> None:
        self.read_ops.inc(n)


class _PipelineCountersCollector:
    """Exposes every attached ``PipelineCounters`` as labeled counters."""

    def __init__(self):
        self._pipelines: Dict[str, PipelineCounters] = {}
        self._lock = threading.Lock()

    def attach(self, pipeline: str, counters: PipelineCounters) -> None:
        with self._lock:
            self._pipelines[pipeline] = counters

    def collect(self) -> Iterator[Metric]:
        with self._lock:
            pipelines = list(self._pipelines.items())

        for name, attr, help_text in PIPELINE_COUNTERS:
            family = CounterMetricFamily(name, help_text, labels=["pipeline"])
            for pipeline, counters in pipelines:
                family.add_metric([pipeline], getattr(counters, attr).load())
            yield family


class PipelineMetrics:
    """Prometheus metrics shared by every pipeline of one board.

    The registry is owned by the caller (one per application) so tests
    and multiple boards never collide in the global default registry.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self._pipelines = _PipelineCountersCollector()
        self.registry.register(self._pipelines)

        self.action_events = Counter(
            "pipeline_action_events",
            "Events seen by action plugins, by status",
            ["pipeline", "metric", "status"],
            registry=self.registry,
        )

    def attach(self, pipeline: str, counters: PipelineCounters) -> None:
        """Export ``counters`` under ``pipeline`` from now on."""
        self._pipelines.attach(pipeline, counters)
        logger.debug("PIPELINE_COUNTERS_EXPORTED pipeline=%s", pipeline)
