"""Fixtures compartidos para los tests del board."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from board_api.main import create_app
from board_api.metrics.pipeline_counters import PipelineMetrics
from board_api.pipeline.batcher import BatcherObservability
from board_api.pipeline.plugins import (
    ActionPluginStaticInfo,
    InputPluginInfo,
    ObservabilityInfo,
    OutputPluginInfo,
)
from board_api.pipeline.registry import PipelineRegistry
from board_api.presentation.render import TEMPLATES_DIR
from common.config import Settings


class FakeOutput:
    """Output plugin con un batcher observable."""

    def __init__(self):
        self.observability = BatcherObservability()

    def get_observability_info(self) -> ObservabilityInfo:
        return self.observability.observability_info()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        host="127.0.0.1",
        port=9000,
        template_dir=str(TEMPLATES_DIR),
        strict_errors=False,
        pipelines_file="",
        log_level="INFO",
    )


@pytest.fixture
def action_infos():
    return [
        ActionPluginStaticInfo(type="json_decode"),
        ActionPluginStaticInfo(type="geoip", metric_name="geoip"),
        ActionPluginStaticInfo(type="rename"),
    ]


@pytest.fixture
def fake_output() -> FakeOutput:
    return FakeOutput()


@pytest.fixture
def registry() -> PipelineRegistry:
    return PipelineRegistry(metrics=PipelineMetrics())


@pytest.fixture
def pipeline(registry, action_infos, fake_output):
    return registry.create(
        name="demo",
        input_info=InputPluginInfo(type="http"),
        action_infos=action_infos,
        output_info=OutputPluginInfo(type="kafka"),
        output=fake_output,
    )


@pytest.fixture
def client(registry, pipeline, settings) -> TestClient:
    app = create_app(registry=registry, settings=settings)
    return TestClient(app)
