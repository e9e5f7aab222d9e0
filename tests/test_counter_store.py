"""Tests del Counter Store.

Ejecutar:
    pytest tests/test_counter_store.py -v
"""

import threading
from unittest.mock import patch

import pytest
from prometheus_client import CollectorRegistry, Counter

from board_api.metrics.counter_store import (
    STATUS_COLORS,
    AtomicCounter,
    CounterStore,
    EventStatus,
)
from board_api.metrics.pipeline_counters import PipelineCounters, PipelineMetrics


# =============================================================================
# ATOMIC COUNTER
# =============================================================================

class TestAtomicCounter:

    def test_starts_at_zero(self):
        assert AtomicCounter().load() == 0

    def test_inc_returns_new_value(self):
        c = AtomicCounter()
        assert c.inc() == 1
        assert c.inc(5) == 6
        assert c.load() == 6

    def test_negative_increment_rejected(self):
        c = AtomicCounter(3)
        with pytest.raises(ValueError):
            c.inc(-1)
        assert c.load() == 3


# =============================================================================
# EVENT STATUS
# =============================================================================

class TestEventStatus:

    def test_fixed_order(self):
        assert [s.value for s in EventStatus] == [
            "received", "discarded", "passed", "not_matched", "collapse", "hold",
        ]

    def test_every_status_has_a_color(self):
        assert set(STATUS_COLORS) == set(EventStatus)
        assert EventStatus.RECEIVED.color == "#0d8bf0"
        assert EventStatus.DISCARDED.color == "red"
        assert EventStatus.PASSED.color == "green"
        assert EventStatus.NOT_MATCHED.color == "#8bc34a"
        assert EventStatus.COLLAPSE.color == "#009688"
        assert EventStatus.HOLD.color == "#f050f0"


# =============================================================================
# COUNTER STORE
# =============================================================================

class TestCounterStore:

    def test_unknown_metric_yields_empty_snapshot(self):
        store = CounterStore()
        assert store.snapshot("missing") == {}
        assert store.count("missing", EventStatus.RECEIVED) == 0

    def test_only_incremented_statuses_are_present(self):
        store = CounterStore()
        store.increment("geoip", EventStatus.RECEIVED)
        store.increment("geoip", EventStatus.RECEIVED)
        store.increment("geoip", "passed")

        assert store.snapshot("geoip") == {"received": 2, "passed": 1}
        assert store.count("geoip", EventStatus.DISCARDED) == 0

    def test_register_is_idempotent(self):
        store = CounterStore()
        first = store.register("geoip")
        second = store.register("geoip")
        assert first is second
        assert len(store) == 1
        assert store.snapshot("geoip") == {}

    def test_metrics_are_isolated_by_name(self):
        store = CounterStore()
        store.increment("a", EventStatus.RECEIVED, 3)
        store.increment("b", EventStatus.RECEIVED, 1)
        assert store.count("a", "received") == 3
        assert store.count("b", "received") == 1
        assert sorted(store) == ["a", "b"]

    def test_concurrent_increments_are_not_lost(self):
        """N threads x M increments = N*M en el snapshot."""
        store = CounterStore()
        threads_n, per_thread = 8, 5000
        start = threading.Barrier(threads_n)

        def worker():
            start.wait()
            for _ in range(per_thread):
                store.increment("geoip", EventStatus.RECEIVED)
                store.increment("geoip", EventStatus.PASSED)

        threads = [threading.Thread(target=worker) for _ in range(threads_n)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.snapshot("geoip") == {
            "received": threads_n * per_thread,
            "passed": threads_n * per_thread,
        }

    def test_increments_mirrored_to_prometheus(self):
        registry = CollectorRegistry()
        exported = Counter(
            "test_action_events", "test", ["pipeline", "metric", "status"],
            registry=registry,
        )
        store = CounterStore(exported=exported, const_labels={"pipeline": "p1"})
        store.increment("geoip", EventStatus.DISCARDED, 4)

        value = registry.get_sample_value(
            "test_action_events_total",
            {"pipeline": "p1", "metric": "geoip", "status": "discarded"},
        )
        assert value == 4.0

    def test_labeled_child_resolved_once_per_status(self):
        """labels() solo se resuelve la primera vez de cada status."""
        registry = CollectorRegistry()
        exported = Counter(
            "test_hot_events", "test", ["pipeline", "metric", "status"],
            registry=registry,
        )
        store = CounterStore(exported=exported, const_labels={"pipeline": "p1"})

        with patch.object(exported, "labels", wraps=exported.labels) as labels:
            for _ in range(50):
                store.increment("geoip", EventStatus.RECEIVED)
            store.increment("geoip", EventStatus.PASSED, 3)

        assert labels.call_count == 2
        assert registry.get_sample_value(
            "test_hot_events_total",
            {"pipeline": "p1", "metric": "geoip", "status": "received"},
        ) == 50.0


# =============================================================================
# PIPELINE METRICS (PROMETHEUS)
# =============================================================================

class TestPipelineMetrics:

    def test_counters_read_at_scrape_time(self):
        """Los contadores absolutos se exportan sin construir ningún snapshot."""
        metrics = PipelineMetrics()
        counters = PipelineCounters()
        metrics.attach("p1", counters)

        counters.on_input(3, 30)
        counters.on_read()
        labels = {"pipeline": "p1"}
        assert metrics.registry.get_sample_value("pipeline_input_events_total", labels) == 3.0
        assert metrics.registry.get_sample_value("pipeline_read_ops_total", labels) == 1.0

        counters.on_input(2, 20)
        counters.on_output(4, 40)
        assert metrics.registry.get_sample_value("pipeline_input_events_total", labels) == 5.0
        assert metrics.registry.get_sample_value("pipeline_input_bytes_total", labels) == 50.0
        assert metrics.registry.get_sample_value("pipeline_output_bytes_total", labels) == 40.0

    def test_one_sample_per_attached_pipeline(self):
        metrics = PipelineMetrics()
        a, b = PipelineCounters(), PipelineCounters()
        metrics.attach("a", a)
        metrics.attach("b", b)
        a.on_output(1, 10)
        b.on_output(2, 20)

        reg = metrics.registry
        assert reg.get_sample_value("pipeline_output_events_total", {"pipeline": "a"}) == 1.0
        assert reg.get_sample_value("pipeline_output_events_total", {"pipeline": "b"}) == 2.0

    def test_no_pipelines_no_samples(self):
        metrics = PipelineMetrics()
        assert metrics.registry.get_sample_value(
            "pipeline_input_events_total", {"pipeline": "p1"}
        ) is None
