# src/post_ledger/db/__init__.py
"""Database configuration and utilities."""

from .session import Base, SessionLocal, create_tables, make_session_factory

__all__ = ["Base", "SessionLocal", "create_tables", "make_session_factory"]
