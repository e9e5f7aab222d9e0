"""Load generator package — demo pipeline feeding the board.

Modules:
- config: LoadGeneratorConfig dataclass
- workers: synthetic worker threads and batching output
- cli: CLI entry point (main)
"""

from .config import LoadGeneratorConfig
from .workers import BatchingOutput, WorkerPool, process_event
from .cli import main

__all__ = ["LoadGeneratorConfig", "BatchingOutput", "WorkerPool", "process_event", "main"]
