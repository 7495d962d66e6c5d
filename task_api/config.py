"""Settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

ENV_PREFIX = "TASK_API"

DEFAULT_TABLE_NAME = "task_manager"
DEFAULT_REGION = "us-east-1"
DEFAULT_TIME_ZONE = "America/Guatemala"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True, slots=True)
class Settings:
    table_name: str = DEFAULT_TABLE_NAME
    region: str = DEFAULT_REGION
    dynamodb_endpoint: str | None = None
    time_zone: str = DEFAULT_TIME_ZONE
    log_level: str = "INFO"
    create_table: bool = False


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        table_name=_env(_k("TABLE_NAME"), DEFAULT_TABLE_NAME),
        region=_env("AWS_REGION", DEFAULT_REGION),
        dynamodb_endpoint=_env(_k("DYNAMODB_ENDPOINT")) or None,
        time_zone=_env(_k("TIME_ZONE"), DEFAULT_TIME_ZONE),
        log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        create_table=_env_bool(_k("CREATE_TABLE"), False),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return load_settings()
