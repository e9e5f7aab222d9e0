"""Load generator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class LoadGeneratorConfig:
    """Configuración del generador de carga de demo."""
    workers: int = 4
    events_per_sec: float = 200.0  # por worker; 0 = sin límite
    batch_size: int = 64
    flush_interval_sec: float = 1.0
    seed: int = 0

    @classmethod
    def from_env(cls) -> "LoadGeneratorConfig":
        return cls(
            workers=int(os.getenv("LOADGEN_WORKERS", "4")),
            events_per_sec=float(os.getenv("LOADGEN_EVENTS_PER_SEC", "200")),
            batch_size=int(os.getenv("LOADGEN_BATCH_SIZE", "64")),
            flush_interval_sec=float(os.getenv("LOADGEN_FLUSH_INTERVAL_SEC", "1.0")),
            seed=int(os.getenv("LOADGEN_SEED", "0")),
        )
