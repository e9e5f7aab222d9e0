"""Load pipeline definitions from a JSON file.

Formato:
    [
        {
            "name": "http_to_kafka",
            "input": "http",
            "actions": [{"type": "discard"}, {"type": "geoip", "metric_name": "geoip"}],
            "output": "kafka"
        }
    ]
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import orjson
from pydantic import BaseModel, Field, ValidationError

from .plugins import ActionPluginStaticInfo, InputPluginInfo, OutputPluginInfo
from .registry import Pipeline, PipelineRegistry

logger = logging.getLogger(__name__)


class ActionDefinition(BaseModel):
    type: str = Field(..., min_length=1)
    metric_name: str = ""


class PipelineDefinition(BaseModel):
    name: str = Field(..., min_length=1)
    input: str = Field(..., min_length=1)
    actions: List[ActionDefinition] = Field(default_factory=list)
    output: str = Field(..., min_length=1)


class PipelineConfigError(Exception):
    """Excepción cuando el archivo de pipelines no es válido."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid pipelines file '{path}': {reason}")


def parse_definitions(raw: bytes, source: str = "<memory>") -> List[PipelineDefinition]:
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise PipelineConfigError(source, f"malformed JSON ({e})") from e

    if not isinstance(data, list):
        raise PipelineConfigError(source, "top level must be a list of pipelines")

    try:
        return [PipelineDefinition(**item) for item in data]
    except (TypeError, ValidationError) as e:
        raise PipelineConfigError(source, str(e)) from e


def load_pipelines(path: Union[str, Path], registry: PipelineRegistry) -> List[Pipeline]:
    """Register every pipeline defined in ``path``; returns them in file order."""
    path = Path(path)
    definitions = parse_definitions(path.read_bytes(), source=str(path))

    pipelines = []
    for d in definitions:
        pipelines.append(
            registry.create(
                name=d.name,
                input_info=InputPluginInfo(type=d.input),
                action_infos=[
                    ActionPluginStaticInfo(type=a.type, metric_name=a.metric_name)
                    for a in d.actions
                ],
                output_info=OutputPluginInfo(type=d.output),
            )
        )
    logger.info("PIPELINES_LOADED path=%s count=%d", path, len(pipelines))
    return pipelines
