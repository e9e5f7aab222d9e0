"""Pipelines known to the board.

A ``Pipeline`` bundles the static plugin identities with the counters its
workers write, and the builder that reads them. The registry is created
by the application at startup and lives as long as the process.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence

from ..metrics.counter_store import CounterStore
from ..metrics.models import BoardSnapshot
from ..metrics.pipeline_counters import PipelineCounters, PipelineMetrics
from ..metrics.snapshot import SnapshotBuilder
from .plugins import (
    ActionPluginStaticInfo,
    InputPluginInfo,
    OutputPlugin,
    OutputPluginInfo,
)

logger = logging.getLogger(__name__)


class PipelineNotFoundError(Exception):
    """Excepción cuando el pipeline no está registrado."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Pipeline '{name}' is not registered")


class DuplicatePipelineError(Exception):
    """Excepción cuando ya existe un pipeline con ese nombre."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Pipeline '{name}' is already registered")


class Pipeline:
    """One running pipeline as seen by the board."""

    def __init__(
        self,
        name: str,
        input_info: InputPluginInfo,
        action_infos: Sequence[ActionPluginStaticInfo],
        output_info: OutputPluginInfo,
        output: Optional[OutputPlugin] = None,
        metrics: Optional[PipelineMetrics] = None,
    ):
        self.name = name
        self.input_info = input_info
        self.action_infos = tuple(action_infos)
        self.output_info = output_info
        self.output = output

        self.counters = PipelineCounters()
        self.store = CounterStore(
            exported=metrics.action_events if metrics is not None else None,
            const_labels={"pipeline": name},
        )
        # Tracked actions register their metric when the pipeline is built.
        for info in self.action_infos:
            if info.tracked:
                self.store.register(info.metric_name)

        self.builder = SnapshotBuilder(
            pipeline_name=name,
            counters=self.counters,
            store=self.store,
            output=output,
        )
        if metrics is not None:
            metrics.attach(name, self.counters)

    def board_info(self) -> BoardSnapshot:
        return self.builder.build(self.input_info, self.action_infos, self.output_info)


class PipelineRegistry:
    """Name -> Pipeline map shared by the HTTP handlers."""

    def __init__(self, metrics: Optional[PipelineMetrics] = None):
        self.metrics = metrics or PipelineMetrics()
        self._pipelines: Dict[str, Pipeline] = {}
        self._lock = threading.Lock()

    def create(
        self,
        name: str,
        input_info: InputPluginInfo,
        action_infos: Sequence[ActionPluginStaticInfo],
        output_info: OutputPluginInfo,
        output: Optional[OutputPlugin] = None,
    ) -> Pipeline:
        pipeline = Pipeline(
            name=name,
            input_info=input_info,
            action_infos=action_infos,
            output_info=output_info,
            output=output,
            metrics=self.metrics,
        )
        self.add(pipeline)
        return pipeline

    def add(self, pipeline: Pipeline) -> None:
        with self._lock:
            if pipeline.name in self._pipelines:
                raise DuplicatePipelineError(pipeline.name)
            self._pipelines[pipeline.name] = pipeline
        logger.info(
            "PIPELINE_REGISTERED name=%s in=%s actions=%d out=%s",
            pipeline.name,
            pipeline.input_info.type,
            len(pipeline.action_infos),
            pipeline.output_info.type,
        )

    def get(self, name: str) -> Pipeline:
        pipeline = self._pipelines.get(name)
        if pipeline is None:
            raise PipelineNotFoundError(name)
        return pipeline

    def names(self) -> List[str]:
        return sorted(self._pipelines)

    def __contains__(self, name: str) -> bool:
        return name in self._pipelines

    def __len__(self) -> int:
        return len(self._pipelines)
