from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    host: str
    port: int

    template_dir: str
    strict_errors: bool
    pipelines_file: str

    log_level: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("BOARD_ENV_FILE", ".env")
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    host = os.getenv("BOARD_HOST", "0.0.0.0")
    port = int(os.getenv("BOARD_PORT", "9000"))
    template_dir = os.getenv("BOARD_TEMPLATE_DIR", "")

    # Con strict=True los fallos de render devuelven 500 además del texto.
    strict_errors = _env_flag("BOARD_STRICT_ERRORS")

    # Optional JSON file with pipeline definitions (empty = none).
    pipelines_file = os.getenv("BOARD_PIPELINES_FILE", "")

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    return Settings(
        host=host,
        port=port,
        template_dir=template_dir,
        strict_errors=strict_errors,
        pipelines_file=pipelines_file,
        log_level=log_level,
    )
