# src/post_ledger/schemas/__init__.py
"""Pydantic view models returned by the registry."""

from .notification import NotificationKind, NotificationView
from .post import LikeState, PostView
from .stats import PlatformStats
from .user import UserProfileView

__all__ = [
    "LikeState",
    "NotificationKind",
    "NotificationView",
    "PlatformStats",
    "PostView",
    "UserProfileView",
]
