# src/post_ledger/services/__init__.py
"""Business logic services for the ledger."""

from .registry import Registry, get_registry
from .replay import LedgerProjection

__all__ = [
    "LedgerProjection",
    "Registry",
    "get_registry",
]
