"""Database session configuration."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from post_ledger.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import post_ledger.models  # noqa: E402,F401

engine = create_engine(
    settings.effective_database_url,
    pool_pre_ping=True,
    echo=settings.sql_debug,
)


def make_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Return a session factory whose objects stay readable after commit."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


SessionLocal = make_session_factory(engine)


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=bind or engine)
