"""JSON and HTML adapters for board snapshots."""

from .render import (
    RenderFailed,
    build_environment,
    encode_snapshot,
    one_based,
    render_dashboard,
    render_or_report,
)

__all__ = [
    "RenderFailed",
    "build_environment",
    "encode_snapshot",
    "one_based",
    "render_dashboard",
    "render_or_report",
]
