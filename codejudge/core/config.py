from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path)

DEFAULT_JUDGE0_URL = "http://localhost:2358"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def normalize_base_url(raw: str | None) -> str:
    """Return ``raw`` with a scheme and without a trailing slash."""
    base = (raw or "").strip()
    if not base:
        return DEFAULT_JUDGE0_URL
    # assume http if scheme omitted
    if not base.startswith("http://") and not base.startswith("https://"):
        base = "http://" + base
    return base.rstrip("/")


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Judge0
        self.judge0_url: str = normalize_base_url(os.getenv("JUDGE0_URL"))
        self.judge0_api_key: str | None = os.getenv("JUDGE0_API_KEY") or None
        self.judge0_timeout_s: float = _float_env("JUDGE0_TIMEOUT_S", 15.0)
        # Limits applied to every submission
        self.max_execution_time_ms: int = _int_env("MAX_EXECUTION_TIME", 5000)
        self.max_memory_limit_mb: int = _int_env("MAX_MEMORY_LIMIT", 512)
        # App meta
        self.app_name: str = os.getenv("APP_NAME", "codejudge")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        # Server
        self.env: str = os.getenv("ENV", "dev")
        self.port: int = _int_env("PORT", 8000)

    @property
    def is_dev(self) -> bool:
        return self.env == "dev"

    @property
    def host(self) -> str:
        return "127.0.0.1" if self.is_dev else "0.0.0.0"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
