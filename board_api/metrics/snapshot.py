"""Snapshot builder for the pipeline board.

Pulls the pipeline counters, the per-action counter store and the output
plugin's batcher payload into one ``BoardSnapshot``. Counters keep being
written while the snapshot is built; no lock is taken across the reads,
so the result is a near-simultaneous view, not a consistent cut.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence

from .batcher_stats import reduce_batcher_stats
from .counter_store import CounterStore, EventStatus
from .delta_tracker import Deltas, DeltaTracker
from .log_changes import LogChangesAggregator
from .models import (
    ActionReport,
    ActionStatusEntry,
    BoardSnapshot,
    InputReport,
    OutputReport,
)
from .pipeline_counters import PipelineCounters
from ..pipeline.plugins import (
    ActionPluginStaticInfo,
    InputPluginInfo,
    ObservabilityInfo,
    OutputPlugin,
    OutputPluginInfo,
)

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """Builds board snapshots for one pipeline.

    Owns one delta tracker per tracked quantity, so each build consumes
    the window since the previous one. Builds are serialized among
    themselves (two requests must not interleave tracker updates) but
    never block the workers writing the counters.
    """

    def __init__(
        self,
        pipeline_name: str,
        counters: PipelineCounters,
        store: CounterStore,
        output: Optional[OutputPlugin] = None,
        log_changes: Optional[LogChangesAggregator] = None,
    ):
        self._counters = counters
        self._store = store
        self._output = output
        self._log_changes = log_changes or LogChangesAggregator(pipeline_name)

        self._input_events = DeltaTracker("input_events")
        self._input_bytes = DeltaTracker("input_bytes")
        self._output_events = DeltaTracker("output_events")
        self._output_bytes = DeltaTracker("output_bytes")
        self._read_ops = DeltaTracker("read_ops")

        self._build_lock = threading.Lock()

    def build(
        self,
        input_info: InputPluginInfo,
        action_infos: Sequence[ActionPluginStaticInfo],
        output_info: OutputPluginInfo,
    ) -> BoardSnapshot:
        with self._build_lock:
            deltas = self._consume_deltas()
            log_changes = self._log_changes.summarize(deltas)

        return BoardSnapshot(
            input=InputReport(plugin_name=input_info.type),
            output=self._build_output(output_info),
            actions=self._build_actions(action_infos),
            log_changes=log_changes,
        )

    def _consume_deltas(self) -> Deltas:
        return Deltas(
            input_events=self._input_events.next(self._counters.input_events.load()),
            input_bytes=self._input_bytes.next(self._counters.input_bytes.load()),
            output_events=self._output_events.next(self._counters.output_events.load()),
            output_bytes=self._output_bytes.next(self._counters.output_bytes.load()),
            read_ops=self._read_ops.next(self._counters.read_ops.load()),
        )

    def _build_output(self, output_info: OutputPluginInfo) -> OutputReport:
        if self._output is not None:
            obs_info = self._output.get_observability_info()
        else:
            obs_info = ObservabilityInfo()

        batcher = obs_info.batcher_information
        report = reduce_batcher_stats(
            batcher.committed_counters,
            batcher.min_wait,
            batcher.max_wait,
        )
        return OutputReport(
            plugin_name=output_info.type,
            batcher_counters=report.counters,
            batcher_min_wait=report.min_wait,
            batcher_max_wait=report.max_wait,
        )

    def _build_actions(self, action_infos: Sequence[ActionPluginStaticInfo]) -> List[ActionReport]:
        actions = []
        for info in action_infos:
            if not info.metric_name:
                actions.append(ActionReport(plugin_name=info.type))
                continue

            metric = self._store.lookup(info.metric_name)
            statuses = []
            for status in EventStatus:
                counter = metric.get(status.value) if metric is not None else None
                count = counter.load() if counter is not None else 0
                statuses.append(
                    ActionStatusEntry(name=status.value, count=count, color=status.color)
                )

            actions.append(
                ActionReport(
                    plugin_name=info.type,
                    metric_name=info.metric_name,
                    tracked=True,
                    statuses=tuple(statuses),
                )
            )
        return actions
