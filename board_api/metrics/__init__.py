"""Metrics module for pipeline board observability.

Counter store, delta trackers and batcher reducer feed the snapshot
builder; models holds the resulting snapshot.
"""

from .counter_store import STATUS_COLORS, ActionMetric, AtomicCounter, CounterStore, EventStatus
from .delta_tracker import Deltas, DeltaTracker
from .batcher_stats import BATCHER_TIME_KEYS, bucket_for_wait, reduce_batcher_stats
from .models import (
    ActionReport,
    ActionStatusEntry,
    BatcherCounter,
    BatcherReport,
    BoardSnapshot,
    InputReport,
    LogChanges,
    OutputReport,
)
from .pipeline_counters import PipelineCounters, PipelineMetrics
from .log_changes import LogChangesAggregator
from .snapshot import SnapshotBuilder

__all__ = [
    "STATUS_COLORS",
    "ActionMetric",
    "AtomicCounter",
    "CounterStore",
    "EventStatus",
    "Deltas",
    "DeltaTracker",
    "BATCHER_TIME_KEYS",
    "bucket_for_wait",
    "reduce_batcher_stats",
    "ActionReport",
    "ActionStatusEntry",
    "BatcherCounter",
    "BatcherReport",
    "BoardSnapshot",
    "InputReport",
    "LogChanges",
    "OutputReport",
    "PipelineCounters",
    "PipelineMetrics",
    "LogChangesAggregator",
    "SnapshotBuilder",
]
