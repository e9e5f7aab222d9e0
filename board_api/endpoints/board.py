"""Pipeline board endpoints.

- GET /pipelines               → registered pipeline names
- GET /pipelines/{name}        → HTML dashboard
- GET /pipelines/{name}/info   → JSON snapshot
- GET /metrics                 → Prometheus exposition

No authentication: the board only exposes aggregated counters.
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from jinja2 import Environment
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from common.config import Settings
from ..pipeline.registry import Pipeline, PipelineNotFoundError, PipelineRegistry
from ..presentation.render import (
    HTML_MEDIA_TYPE,
    JSON_MEDIA_TYPE,
    encode_snapshot,
    render_dashboard,
    render_or_report,
)

router = APIRouter(tags=["board"])
logger = logging.getLogger(__name__)


class PipelineList(BaseModel):
    pipelines: List[str]


def get_registry(request: Request) -> PipelineRegistry:
    return request.app.state.registry


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_environment(request: Request) -> Environment:
    return request.app.state.jinja_env


def get_pipeline(name: str, registry: PipelineRegistry = Depends(get_registry)) -> Pipeline:
    try:
        return registry.get(name)
    except PipelineNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/pipelines", response_model=PipelineList)
def list_pipelines(registry: PipelineRegistry = Depends(get_registry)) -> PipelineList:
    return PipelineList(pipelines=registry.names())


@router.get("/pipelines/{name}/info")
def pipeline_info_json(
    pipeline: Pipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings_dep),
) -> Response:
    """Snapshot of the pipeline plugins as JSON.

    Example response:
    ```json
    {
        "in": {"plugin_name": "file"},
        "out": {
            "plugin_name": "kafka",
            "batcher_counters": [{"seconds": 0, "batches_committed": 12}, ...],
            "batcher_min_wait": 0.002,
            "batcher_max_wait": 1.4
        },
        "actions": [
            {"plugin_name": "discard", "metric_name": "", "tracked": false, "statuses": []},
            {"plugin_name": "geoip", "metric_name": "geoip", "tracked": true,
             "statuses": [{"name": "received", "count": 10, "color": "#0d8bf0"}, ...]}
        ],
        "log_changes": {...}
    }
    ```
    """
    snapshot = pipeline.board_info()
    return render_or_report(
        lambda: encode_snapshot(snapshot),
        media_type=JSON_MEDIA_TYPE,
        strict=settings.strict_errors,
    )


@router.get("/pipelines/{name}")
def pipeline_dashboard(
    pipeline: Pipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings_dep),
    env: Environment = Depends(get_environment),
) -> Response:
    """HTML dashboard of the pipeline; the template is re-read on every request."""
    snapshot = pipeline.board_info()
    return render_or_report(
        lambda: render_dashboard(env, snapshot, pipeline.name),
        media_type=HTML_MEDIA_TYPE,
        strict=settings.strict_errors,
    )


@router.get("/metrics")
def prometheus_metrics(registry: PipelineRegistry = Depends(get_registry)) -> Response:
    return Response(
        content=generate_latest(registry.metrics.registry),
        media_type=CONTENT_TYPE_LATEST,
    )
