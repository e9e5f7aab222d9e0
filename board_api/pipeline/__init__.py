"""Pipeline-side collaborators of the board.

Estructura:
- plugins.py  → identidades de plugins y contrato de observabilidad
- batcher.py  → contadores de batches comprometidos por espera
- registry.py → pipelines registrados (importar directamente)
"""

from .plugins import (
    ActionPluginStaticInfo,
    BatcherInformation,
    InputPluginInfo,
    ObservabilityInfo,
    OutputPlugin,
    OutputPluginInfo,
)
from .batcher import BatcherObservability

__all__ = [
    "ActionPluginStaticInfo",
    "BatcherInformation",
    "InputPluginInfo",
    "ObservabilityInfo",
    "OutputPlugin",
    "OutputPluginInfo",
    "BatcherObservability",
]
