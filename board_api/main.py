"""Board application factory.

Serve with ``uvicorn board_api.main:create_app --factory``; nothing is
read from the environment until the factory runs.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from common.config import Settings, get_settings
from .endpoints import board_router, health_router
from .pipeline.loader import load_pipelines
from .pipeline.registry import PipelineRegistry
from .presentation.render import TEMPLATES_DIR, build_environment

logger = logging.getLogger(__name__)


def create_app(
    registry: Optional[PipelineRegistry] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the board application.

    The registry is owned by the caller when given (the load generator
    shares it with its worker threads); otherwise one is created and
    filled from ``BOARD_PIPELINES_FILE`` if set.
    """
    settings = settings or get_settings()
    if registry is None:
        registry = PipelineRegistry()
        if settings.pipelines_file:
            load_pipelines(settings.pipelines_file, registry)

    # Empty BOARD_TEMPLATE_DIR = templates shipped with the package.
    template_dir = settings.template_dir or TEMPLATES_DIR

    app = FastAPI(title="Pipeline Board", version="0.1.0")
    app.state.settings = settings
    app.state.registry = registry
    app.state.jinja_env = build_environment(template_dir)

    app.include_router(health_router)
    app.include_router(board_router)

    logger.info(
        "BOARD_READY pipelines=%d strict_errors=%s template_dir=%s",
        len(registry),
        settings.strict_errors,
        template_dir,
    )
    return app
