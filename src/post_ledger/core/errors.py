"""Rejections raised by registry operations.

Every error is detected before the operation writes anything; the caller must
resubmit with corrected input. ``code`` is stable and safe to match on.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base exception for all rejected registry operations."""

    code = "RegistryError"
    default_message = "Registry operation rejected"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class LedgerNotInitialized(RegistryError):
    """Raised when the store has never been deployed."""

    code = "LedgerNotInitialized"
    default_message = "Registry state has not been initialized"


class AlreadyRegistered(RegistryError):
    code = "AlreadyRegistered"
    default_message = "User already registered"


class NotRegistered(RegistryError):
    code = "NotRegistered"
    default_message = "User not registered"


class EmptyUsername(RegistryError):
    code = "EmptyUsername"
    default_message = "Username cannot be empty"


class UsernameTooLong(RegistryError):
    code = "UsernameTooLong"
    default_message = "Username too long"


class EmptyTitle(RegistryError):
    code = "EmptyTitle"
    default_message = "Title cannot be empty"


class TitleTooLong(RegistryError):
    code = "TitleTooLong"
    default_message = "Title too long"


class EmptyContent(RegistryError):
    code = "EmptyContent"
    default_message = "Content cannot be empty"


class InvalidPostId(RegistryError):
    code = "InvalidPostId"
    default_message = "Invalid post ID"


class InactivePost(RegistryError):
    code = "InactivePost"
    default_message = "Post is not active"


class NotAuthorized(RegistryError):
    code = "NotAuthorized"
    default_message = "Not authorized"


__all__ = [
    "RegistryError",
    "LedgerNotInitialized",
    "AlreadyRegistered",
    "NotRegistered",
    "EmptyUsername",
    "UsernameTooLong",
    "EmptyTitle",
    "TitleTooLong",
    "EmptyContent",
    "InvalidPostId",
    "InactivePost",
    "NotAuthorized",
]
