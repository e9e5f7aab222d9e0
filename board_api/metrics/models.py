"""Data models for the pipeline board snapshot.

Every request builds a fresh ``BoardSnapshot``; nothing here is persisted.
``to_dict`` produces the wire layout served by ``/pipelines/{name}/info``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class BatcherCounter:
    seconds: int
    batches_committed: int

    def to_dict(self) -> dict:
        return {"seconds": self.seconds, "batches_committed": self.batches_committed}


@dataclass(frozen=True)
class BatcherReport:
    """Dense bucket list plus the min/max wait observed by the batcher."""

    counters: Tuple[BatcherCounter, ...]
    min_wait: Optional[float] = None
    max_wait: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "counters", tuple(self.counters))


@dataclass(frozen=True)
class InputReport:
    plugin_name: str

    def to_dict(self) -> dict:
        return {"plugin_name": self.plugin_name}


@dataclass(frozen=True)
class OutputReport:
    plugin_name: str
    batcher_counters: Tuple[BatcherCounter, ...] = ()
    batcher_min_wait: Optional[float] = None
    batcher_max_wait: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "plugin_name": self.plugin_name,
            "batcher_counters": [c.to_dict() for c in self.batcher_counters],
            "batcher_min_wait": self.batcher_min_wait,
            "batcher_max_wait": self.batcher_max_wait,
        }


@dataclass(frozen=True)
class ActionStatusEntry:
    name: str
    count: int
    color: str

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count, "color": self.color}


@dataclass(frozen=True)
class ActionReport:
    """One action plugin; untracked plugins carry no metric name and no statuses."""

    plugin_name: str
    metric_name: str = ""
    tracked: bool = False
    statuses: Tuple[ActionStatusEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "plugin_name": self.plugin_name,
            "metric_name": self.metric_name,
            "tracked": self.tracked,
            "statuses": [s.to_dict() for s in self.statuses],
        }


@dataclass(frozen=True)
class LogChanges:
    """Summary of one log-change window (between two snapshots)."""

    interval_seconds: float = 0.0

    # Deltas of the window
    input_events: int = 0
    input_bytes: int = 0
    output_events: int = 0
    output_bytes: int = 0
    read_ops: int = 0

    # Rates over the window
    events_per_sec: float = 0.0
    bytes_per_sec: float = 0.0
    read_ops_per_sec: float = 0.0
    avg_event_size: int = 0

    # Running totals since the pipeline started
    total_events: int = 0
    total_bytes: int = 0

    def to_dict(self) -> dict:
        return {
            "interval_seconds": self.interval_seconds,
            "input_events": self.input_events,
            "input_bytes": self.input_bytes,
            "output_events": self.output_events,
            "output_bytes": self.output_bytes,
            "read_ops": self.read_ops,
            "events_per_sec": self.events_per_sec,
            "bytes_per_sec": self.bytes_per_sec,
            "read_ops_per_sec": self.read_ops_per_sec,
            "avg_event_size": self.avg_event_size,
            "total_events": self.total_events,
            "total_bytes": self.total_bytes,
        }


@dataclass(frozen=True)
class BoardSnapshot:
    """Point-in-time view of one pipeline's plugins."""

    input: InputReport
    output: OutputReport
    actions: Tuple[ActionReport, ...] = ()
    log_changes: LogChanges = field(default_factory=LogChanges)

    def __post_init__(self):
        object.__setattr__(self, "actions", tuple(self.actions))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "in": self.input.to_dict(),
            "out": self.output.to_dict(),
            "actions": [a.to_dict() for a in self.actions],
            "log_changes": self.log_changes.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardSnapshot":
        out = data["out"]
        return cls(
            input=InputReport(plugin_name=data["in"]["plugin_name"]),
            output=OutputReport(
                plugin_name=out["plugin_name"],
                batcher_counters=tuple(
                    BatcherCounter(**c) for c in out.get("batcher_counters") or []
                ),
                batcher_min_wait=out.get("batcher_min_wait"),
                batcher_max_wait=out.get("batcher_max_wait"),
            ),
            actions=tuple(
                ActionReport(
                    plugin_name=a["plugin_name"],
                    metric_name=a.get("metric_name", ""),
                    tracked=a.get("tracked", False),
                    statuses=tuple(ActionStatusEntry(**s) for s in a.get("statuses") or []),
                )
                for a in data.get("actions") or []
            ),
            log_changes=LogChanges(**(data.get("log_changes") or {})),
        )
