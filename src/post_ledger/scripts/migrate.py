# src/post_ledger/scripts/migrate.py
"""Apply Alembic migrations to the configured database.

``migrations/`` is not packaged; this runs from a source checkout or an editable install.
"""
from __future__ import annotations

import logging
import os

from alembic import command
from alembic.config import Config

from post_ledger.core.logging import configure_logging
from post_ledger.core.settings import settings

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def build_config(url: str | None = None) -> Config:
    """Return an Alembic config pointed at the project's migrations folder."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    cfg.set_main_option("sqlalchemy.url", url or settings.database_url_sync)
    return cfg


def run_upgrade_head(url: str | None = None) -> None:
    cfg = build_config(url)
    logger.info("Upgrading %s to head", cfg.get_main_option("sqlalchemy.url"))
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    configure_logging()
    run_upgrade_head()
