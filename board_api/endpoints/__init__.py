"""Módulo de endpoints HTTP del board."""

from .health import router as health_router
from .board import router as board_router

__all__ = [
    "health_router",
    "board_router",
]
