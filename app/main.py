from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import get_database_settings, get_llm_settings, load_env_files


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any service or database connection is initialised.
    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - A PostgreSQL database URL is required (DATABASE_URL or LOCAL_DATABASE_URL).
    - A missing LLM API key only logs a warning: queries that need the
      generative fallback then answer with the apology message.
    """

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    database_url = get_database_settings().url
    if not database_url:
        errors.append(
            "No database URL configured. Set DATABASE_URL or LOCAL_DATABASE_URL."
        )
    elif not database_url.startswith("postgresql"):
        errors.append("DATABASE_URL must point to PostgreSQL.")

    # --- LLM API key ----------------------------------------------------
    llm_settings = get_llm_settings()
    if llm_settings.adapter != "mock" and not llm_settings.api_key:
        logging.getLogger(__name__).warning(
            "LLM API key is not set (LLM_API_KEY / OPENAI_API_KEY); "
            "generative answers are disabled."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.
    Missing tables abort startup; run 'alembic upgrade head' first.

    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401 registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch: %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity and schema on boot."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    _check_schema()
    logging.getLogger(__name__).info("Database schema validated")
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()
    _validate_env()

    application = FastAPI(
        title="Route Inventory Assistant API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import query_router, routes_router, snapshot_upload_router, users_router

    application.include_router(snapshot_upload_router)
    application.include_router(query_router)
    application.include_router(routes_router)
    application.include_router(users_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "service": "route-inventory-assistant"}

    return application


app = create_app()
