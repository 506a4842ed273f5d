from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - DB_FILE: path to the sqlite db file. Default 'test.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root logging level (default: INFO)
    - DB_ECHO: 'true' to log every SQL statement emitted by SQLAlchemy (default: false)
    """

    db_file: str
    cors_allow_origins: List[str]
    log_level: str
    db_echo: bool


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    origins = _parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*"))
    if not origins:
        origins = ["*"]

    return Settings(
        db_file=_get_env("DB_FILE", "test.db").strip(),
        cors_allow_origins=origins,
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        db_echo=_parse_bool(_get_env("DB_ECHO", "false"), False),
    )
