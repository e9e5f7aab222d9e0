"""Tests del registro de pipelines, el loader JSON y el generador de carga."""

import random

import pytest

from board_api.metrics.counter_store import EventStatus
from board_api.pipeline.loader import PipelineConfigError, load_pipelines, parse_definitions
from board_api.pipeline.plugins import (
    ActionPluginStaticInfo,
    InputPluginInfo,
    OutputPluginInfo,
)
from board_api.pipeline.registry import (
    DuplicatePipelineError,
    PipelineNotFoundError,
    PipelineRegistry,
)
from jobs.loadgen.workers import BatchingOutput, process_event


# =============================================================================
# REGISTRY
# =============================================================================

class TestPipelineRegistry:

    def test_tracked_actions_registered_at_build(self, pipeline):
        assert list(pipeline.store) == ["geoip"]

    def test_duplicate_name_rejected(self, registry, pipeline):
        with pytest.raises(DuplicatePipelineError):
            registry.create(
                name="demo",
                input_info=InputPluginInfo(type="file"),
                action_infos=[],
                output_info=OutputPluginInfo(type="devnull"),
            )

    def test_unknown_pipeline(self, registry):
        with pytest.raises(PipelineNotFoundError) as exc:
            registry.get("missing")
        assert exc.value.name == "missing"

    def test_board_info_uses_pipeline_identities(self, pipeline):
        snapshot = pipeline.board_info()
        assert snapshot.input.plugin_name == "http"
        assert snapshot.output.plugin_name == "kafka"
        assert len(snapshot.actions) == 3


# =============================================================================
# LOADER
# =============================================================================

class TestLoader:

    def test_load_file(self, tmp_path):
        path = tmp_path / "pipelines.json"
        path.write_text(
            '[{"name": "a", "input": "file", "output": "devnull",'
            ' "actions": [{"type": "discard"}, {"type": "geoip", "metric_name": "geoip"}]},'
            ' {"name": "b", "input": "http", "output": "kafka"}]'
        )
        registry = PipelineRegistry()
        pipelines = load_pipelines(path, registry)

        assert [p.name for p in pipelines] == ["a", "b"]
        assert registry.names() == ["a", "b"]
        assert registry.get("a").action_infos == (
            ActionPluginStaticInfo(type="discard"),
            ActionPluginStaticInfo(type="geoip", metric_name="geoip"),
        )
        assert registry.get("b").action_infos == ()

    def test_malformed_json(self):
        with pytest.raises(PipelineConfigError) as exc:
            parse_definitions(b"[{", source="bad.json")
        assert "bad.json" in str(exc.value)

    def test_top_level_must_be_list(self):
        with pytest.raises(PipelineConfigError):
            parse_definitions(b'{"name": "a"}')

    def test_missing_fields(self):
        with pytest.raises(PipelineConfigError):
            parse_definitions(b'[{"name": "a", "input": "file"}]')


# =============================================================================
# LOAD GENERATOR
# =============================================================================

class TestLoadGenerator:

    def test_batching_output_commits_by_size(self, pipeline):
        output = BatchingOutput(pipeline, batch_size=2, flush_interval_sec=60)
        output.out(100)
        assert output.observability.committed == 0

        output.out(50)
        assert output.observability.committed == 1
        assert pipeline.counters.output_events.load() == 2
        assert pipeline.counters.output_bytes.load() == 150

    def test_flush_by_age(self, pipeline):
        output = BatchingOutput(pipeline, batch_size=100, flush_interval_sec=0)
        output.out(10)
        output.maybe_flush()
        assert output.observability.committed == 1

    def test_process_event_counts_received_once_per_tracked_action(self, pipeline):
        output = BatchingOutput(pipeline, batch_size=1000, flush_interval_sec=60)
        rng = random.Random(7)
        for _ in range(200):
            process_event(pipeline, output, rng)

        assert pipeline.counters.input_events.load() == 200
        assert pipeline.counters.read_ops.load() == 200
        snap = pipeline.store.snapshot("geoip")
        assert snap["received"] == 200
        outcomes = sum(v for k, v in snap.items() if k != EventStatus.RECEIVED.value)
        assert outcomes == 200
