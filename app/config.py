"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_TRANSCRIPTION_BASE_URL = "https://api.groq.com/openai/v1"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    for filename in (".env", ".env.local"):
        env_path = _PROJECT_ROOT / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(*names: str) -> str | None:
    """
    Return the first non-blank value among several environment variables.
    """

    _load_env_once()
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def normalize_postgres_url(url: str) -> str:
    """
    Normalize postgres URLs to SQLAlchemy's psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection settings for the snapshot/user/report database.
    """

    url: str | None
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle: int = 1800


@dataclass(frozen=True)
class SnapshotIngestionSettings:
    """
    Runtime settings for snapshot uploads.
    """

    default_layout: str = "single_row"
    insert_batch_size: int = 1000
    log_skipped_rows: bool = True


@dataclass(frozen=True)
class QuerySettings:
    """
    Runtime settings for query resolution and session memory.
    """

    page_size: int = 10
    history_cap: int = 50
    route_fetch_limit: int = 800
    timezone: str = "America/Lima"
    default_quota: float = 50.0
    assistant_name: str = "MondiAI"


@dataclass(frozen=True)
class LLMSettings:
    """
    Generative fallback adapter settings.
    """

    adapter: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: str | None = None
    base_url: str | None = None
    max_tokens: int = 2000
    timeout_seconds: float = 60.0


@dataclass(frozen=True)
class TranscriptionSettings:
    """
    Audio transcription adapter settings.
    """

    enabled: bool = True
    api_key: str | None = None
    base_url: str = DEFAULT_TRANSCRIPTION_BASE_URL
    model: str = "whisper-large-v3-turbo"
    language: str = "es"
    timeout_seconds: float = 30.0


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """
    Resolve database settings. DATABASE_URL wins over LOCAL_DATABASE_URL.
    """

    raw_url = _get_optional_str_env("DATABASE_URL", "LOCAL_DATABASE_URL")
    return DatabaseSettings(
        url=normalize_postgres_url(raw_url) if raw_url else None,
        echo=_get_bool_env("SQL_ECHO", False),
        pool_size=max(1, _get_int_env("DB_POOL_SIZE", 5)),
        max_overflow=max(0, _get_int_env("DB_MAX_OVERFLOW", 10)),
        pool_recycle=max(1, _get_int_env("DB_POOL_RECYCLE", 1800)),
    )


@lru_cache(maxsize=1)
def get_snapshot_ingestion_settings() -> SnapshotIngestionSettings:
    return SnapshotIngestionSettings(
        default_layout=_get_str_env("SNAPSHOT_DEFAULT_LAYOUT", "single_row").lower(),
        insert_batch_size=max(1, _get_int_env("SNAPSHOT_INSERT_BATCH_SIZE", 1000)),
        log_skipped_rows=_get_bool_env("SNAPSHOT_LOG_SKIPPED_ROWS", True),
    )


@lru_cache(maxsize=1)
def get_query_settings() -> QuerySettings:
    """
    Return cached query settings from environment variables.
    """

    return QuerySettings(
        page_size=max(1, _get_int_env("QUERY_PAGE_SIZE", 10)),
        history_cap=max(2, _get_int_env("QUERY_HISTORY_CAP", 50)),
        route_fetch_limit=max(1, _get_int_env("QUERY_ROUTE_FETCH_LIMIT", 800)),
        timezone=_get_str_env("QUERY_TIMEZONE", "America/Lima"),
        default_quota=_get_float_env("QUERY_DEFAULT_QUOTA", 50.0),
        assistant_name=_get_str_env("ASSISTANT_NAME", "MondiAI"),
    )


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Return cached generative adapter settings.

    LLM_API_KEY takes precedence over OPENAI_API_KEY.
    """

    return LLMSettings(
        adapter=_get_str_env("LLM_ADAPTER", "openai").lower(),
        model=_get_str_env("LLM_MODEL", "gpt-4o-mini"),
        api_key=_get_optional_str_env("LLM_API_KEY", "OPENAI_API_KEY"),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        max_tokens=max(1, _get_int_env("LLM_MAX_TOKENS", 2000)),
        timeout_seconds=max(1.0, _get_float_env("LLM_TIMEOUT_SECONDS", 60.0)),
    )


@lru_cache(maxsize=1)
def get_transcription_settings() -> TranscriptionSettings:
    return TranscriptionSettings(
        enabled=_get_bool_env("TRANSCRIPTION_ENABLED", True),
        api_key=_get_optional_str_env("TRANSCRIPTION_API_KEY", "GROQ_API_KEY"),
        base_url=_get_str_env("TRANSCRIPTION_BASE_URL", DEFAULT_TRANSCRIPTION_BASE_URL),
        model=_get_str_env("TRANSCRIPTION_MODEL", "whisper-large-v3-turbo"),
        language=_get_str_env("TRANSCRIPTION_LANGUAGE", "es"),
        timeout_seconds=max(1.0, _get_float_env("TRANSCRIPTION_TIMEOUT_SECONDS", 30.0)),
    )
