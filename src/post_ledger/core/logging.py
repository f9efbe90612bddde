"""Logging setup for command-line entry points."""

from __future__ import annotations

import logging

from post_ledger.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once using ``LOG_LEVEL`` unless overridden."""
    resolved = (level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.INFO), format=LOG_FORMAT)
