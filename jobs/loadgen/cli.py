"""CLI entry point: demo pipelines under synthetic load + the board server."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from board_api.main import create_app
from board_api.pipeline.plugins import (
    ActionPluginStaticInfo,
    InputPluginInfo,
    OutputPluginInfo,
)
from board_api.pipeline.registry import PipelineRegistry
from common.config import get_settings
from common.logging_setup import configure_logging

from .config import LoadGeneratorConfig
from .workers import BatchingOutput, WorkerPool

logger = logging.getLogger(__name__)

DEMO_ACTIONS = [
    ActionPluginStaticInfo(type="json_decode"),
    ActionPluginStaticInfo(type="geoip", metric_name="geoip"),
    ActionPluginStaticInfo(type="discard", metric_name="discard_debug"),
    ActionPluginStaticInfo(type="rename"),
]


def build_demo(registry: PipelineRegistry, cfg: LoadGeneratorConfig) -> WorkerPool:
    output = BatchingOutput(None, cfg.batch_size, cfg.flush_interval_sec)
    pipeline = registry.create(
        name="demo",
        input_info=InputPluginInfo(type="http"),
        action_infos=DEMO_ACTIONS,
        output_info=OutputPluginInfo(type="kafka"),
        output=output,
    )
    output.bind(pipeline)
    return WorkerPool(pipeline, output, cfg)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    env_cfg = LoadGeneratorConfig.from_env()
    p = argparse.ArgumentParser(description="Pipeline board with a synthetic demo pipeline")
    p.add_argument("--workers", type=int, default=env_cfg.workers)
    p.add_argument("--events-per-sec", type=float, default=env_cfg.events_per_sec)
    p.add_argument("--batch-size", type=int, default=env_cfg.batch_size)
    p.add_argument("--flush-interval", type=float, default=env_cfg.flush_interval_sec)
    p.add_argument("--seed", type=int, default=env_cfg.seed)
    p.add_argument("--host", default=settings.host)
    p.add_argument("--port", type=int, default=settings.port)
    args = p.parse_args()

    cfg = LoadGeneratorConfig(
        workers=args.workers,
        events_per_sec=args.events_per_sec,
        batch_size=args.batch_size,
        flush_interval_sec=args.flush_interval,
        seed=args.seed,
    )

    registry = PipelineRegistry()
    pool = build_demo(registry, cfg)
    app = create_app(registry=registry, settings=settings)

    logger.info("Load generator started")
    logger.info(
        "Config: workers=%d, rate=%.1f/s, batch=%d, flush=%.1fs",
        cfg.workers, cfg.events_per_sec, cfg.batch_size, cfg.flush_interval_sec,
    )

    pool.start()
    try:
        uvicorn.run(app, host=args.host, port=args.port, log_level=settings.log_level.lower())
    finally:
        pool.stop()
        logger.info("Load generator stopped")


if __name__ == "__main__":
    main()
