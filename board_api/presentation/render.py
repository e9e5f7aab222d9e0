"""Presentation adapters for board snapshots.

Both surfaces go through ``render_or_report``: a failure while encoding or
rendering never escapes as an exception; its text is written into the
response body instead. The status stays 200 unless ``strict=True``, which
turns it into a 500 with the same body.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Union

import orjson
from fastapi.responses import Response
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)
from markupsafe import escape

from ..metrics.models import BoardSnapshot

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
BOARD_TEMPLATE = "pipeline_info.html"

JSON_MEDIA_TYPE = "application/json"
HTML_MEDIA_TYPE = "text/html"
TEXT_MEDIA_TYPE = "text/plain"


class RenderFailed(Exception):
    """Fallo de presentación con el texto que se escribe en el body."""

    def __init__(self, body: str, media_type: str = TEXT_MEDIA_TYPE):
        self.body = body
        self.media_type = media_type
        super().__init__(body)


def one_based(index: int) -> int:
    """Shift a zero-based index to one-based for display."""
    return index + 1


def _mb(size: Union[int, float]) -> str:
    return f"{size / (1024 * 1024):.1f}MB"


def _seconds(value) -> str:
    if value is None:
        return "-"
    return f"{value:.3f}s"


def render_or_report(
    render: Callable[[], bytes],
    *,
    media_type: str,
    strict: bool = False,
) -> Response:
    """Run ``render`` and wrap the result, or the failure text, in a Response."""
    try:
        body = render()
    except RenderFailed as e:
        return Response(
            content=e.body,
            media_type=e.media_type,
            status_code=500 if strict else 200,
        )
    return Response(content=body, media_type=media_type)


def encode_snapshot(snapshot: BoardSnapshot) -> bytes:
    try:
        return orjson.dumps(snapshot.to_dict())
    except orjson.JSONEncodeError as e:
        logger.error("BOARD_RENDER_FAILED kind=json err=%s", e)
        raise RenderFailed(f"can't get json info: {e}") from e


def build_environment(template_dir: Union[str, Path] = TEMPLATES_DIR) -> Environment:
    """Jinja2 environment that re-reads and re-parses templates on every request."""
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        cache_size=0,
        auto_reload=True,
    )
    env.globals["one_based"] = one_based
    env.globals["title"] = one_based
    env.filters["mb"] = _mb
    env.filters["seconds"] = _seconds
    return env


def render_dashboard(env: Environment, snapshot: BoardSnapshot, pipeline_name: str) -> bytes:
    try:
        template = env.get_template(BOARD_TEMPLATE)
    except TemplateError as e:
        logger.error("BOARD_RENDER_FAILED kind=parse err=%s", e)
        raise RenderFailed(
            f"<html><body>can't parse html: {escape(str(e))}", media_type=HTML_MEDIA_TYPE
        ) from e

    try:
        html = template.render(board=snapshot, pipeline_name=pipeline_name)
    except Exception as e:
        logger.error("BOARD_RENDER_FAILED kind=render err=%s", e)
        raise RenderFailed(
            f"<html><body>can't render html: {escape(str(e))}", media_type=HTML_MEDIA_TYPE
        ) from e
    return html.encode("utf-8")
