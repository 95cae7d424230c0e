"""Settings loaded from environment variables (+ optional .env).

Every variable uses the ``TASKLIST_`` prefix. Missing or malformed values
fall back to defaults; nothing is required.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKLIST"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Logging ----
    log_level: str
    log_dir: Path

    # ---- Storage ----
    storage_path: Path
    storage_key: str

    # ---- Completion effects ----
    completion_sound: str
    confetti_count: int
    confetti_ttl_ms: int

    # ---- HTTP ----
    host: str
    port: int
    cors_origins: list[str]


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    load_dotenv(override=False)

    data_dir = _env_path(_k("DATA_DIR"), Path(".local") / "tasklist")
    return Settings(
        log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        log_dir=_env_path(_k("LOG_DIR"), data_dir),
        storage_path=_env_path(_k("STORAGE_PATH"), data_dir / "storage.json"),
        storage_key=_env(_k("STORAGE_KEY"), "todos"),
        completion_sound=_env(_k("COMPLETION_SOUND"), "complete"),
        confetti_count=max(0, _env_int(_k("CONFETTI_COUNT"), 20)),
        confetti_ttl_ms=max(0, _env_int(_k("CONFETTI_TTL_MS"), 1000)),
        host=_env(_k("HOST"), "127.0.0.1"),
        port=_env_int(_k("PORT"), 8000),
        cors_origins=_env_list(_k("CORS_ORIGINS"), ["http://localhost:3000"]),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, built once."""
    return load_settings()
