# src/post_ledger/models/__init__.py
"""SQLAlchemy models for the ledger state."""

from .like import PostLike
from .notification import Notification
from .post import Post
from .system import RegistryState
from .user import UserProfile

__all__ = [
    "Notification",
    "Post",
    "PostLike",
    "RegistryState",
    "UserProfile",
]
