"""Bring the Portal Hub schema to the latest Alembic revision on startup.

PostgreSQL deployments are upgraded automatically; SQLite databases (local
development, tests) get their tables from ``init_db`` instead. Set
``DISABLE_AUTO_MIGRATIONS`` to manage revisions by hand, or ``AUTO_MIGRATE`` to
force an upgrade for any URL.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def should_run_migrations(database_url: str) -> bool:
    if "PYTEST_CURRENT_TEST" in os.environ:
        return False
    if _env_flag("DISABLE_AUTO_MIGRATIONS"):
        return False
    if _env_flag("AUTO_MIGRATE"):
        return True
    return not database_url.strip().lower().startswith("sqlite")


def build_alembic_config(database_url: str) -> Config:
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def pending_revision(config: Config, database_url: str) -> str | None:
    """Head revision id when the database is behind it, otherwise ``None``."""

    head = ScriptDirectory.from_config(config).get_current_head()
    engine = create_engine(database_url, future=True)
    try:
        with engine.connect() as connection:
            current = MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()
    return None if current == head else head


def run_migrations_if_needed(*, database_url: str) -> bool:
    """Upgrade to ``head`` when enabled and behind; True when an upgrade ran."""

    if not should_run_migrations(database_url):
        logger.info("Skipping Alembic upgrade for this database")
        return False
    if not ALEMBIC_INI.exists():
        logger.warning("No alembic.ini at %s; schema left unchanged", ALEMBIC_INI)
        return False

    config = build_alembic_config(database_url)
    target = pending_revision(config, database_url)
    if target is None:
        logger.info("Database schema already at head")
        return False

    logger.info("Upgrading database schema to %s", target)
    command.upgrade(config, "head")
    return True


__all__ = ["build_alembic_config", "pending_revision", "run_migrations_if_needed", "should_run_migrations"]
