"""Plugin identities and the observability contract of output plugins."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol


@dataclass(frozen=True)
class InputPluginInfo:
    type: str


@dataclass(frozen=True)
class ActionPluginStaticInfo:
    """Action plugin as configured; an empty metric_name means untracked."""
    type: str
    metric_name: str = ""

    @property
    def tracked(self) -> bool:
        return bool(self.metric_name)


@dataclass(frozen=True)
class OutputPluginInfo:
    type: str


@dataclass(frozen=True)
class BatcherInformation:
    """Committed batches by wait bucket (seconds) plus observed min/max wait.

    ``committed_counters`` is None until the batcher commits something.
    """
    committed_counters: Optional[Dict[int, int]] = None
    min_wait: Optional[float] = None
    max_wait: Optional[float] = None


@dataclass(frozen=True)
class ObservabilityInfo:
    batcher_information: BatcherInformation = field(default_factory=BatcherInformation)


class OutputPlugin(Protocol):
    """What the board needs from an output plugin."""

    def get_observability_info(self) -> ObservabilityInfo:
        ...
