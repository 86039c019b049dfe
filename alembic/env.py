"""
Alembic environment for the route snapshot, user and report tables.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from app.config import get_database_settings, normalize_postgres_url
from db.base import Base
from db.models import Report, RouteData, User  # noqa: F401  imports register Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _resolve_database_url() -> str:
    """
    ``-x db_url=...`` when given, otherwise the application database URL
    (DATABASE_URL, then LOCAL_DATABASE_URL).
    """

    override = context.get_x_argument(as_dictionary=True).get("db_url")
    url = normalize_postgres_url(override) if override else (get_database_settings().url or "")
    if not url.startswith("postgresql"):
        raise RuntimeError("Migrations need a PostgreSQL database URL.")
    return url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=_resolve_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _resolve_database_url()
    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
