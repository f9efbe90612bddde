"""Post Ledger: a minimal content registry for profiles, posts and likes."""

from post_ledger.core.errors import RegistryError
from post_ledger.services.registry import Registry

__all__ = ["Registry", "RegistryError"]
__version__ = "0.1.0"
