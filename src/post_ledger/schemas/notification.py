"""Notification schemas shared by the registry and its observers."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from post_ledger.models import notification as records


class NotificationKind(str, Enum):
    """Kinds of notifications, one per mutating operation outcome."""

    USER_REGISTERED = records.KIND_USER_REGISTERED
    POST_CREATED = records.KIND_POST_CREATED
    POST_LIKED = records.KIND_POST_LIKED
    POST_UNLIKED = records.KIND_POST_UNLIKED
    POST_DEACTIVATED = records.KIND_POST_DEACTIVATED
    PROFILE_UPDATED = records.KIND_PROFILE_UPDATED


class NotificationView(BaseModel):
    """A single entry of the notification log.

    Attributes:
        seq: Position in the log, starting at 1 with no gaps.
        kind: Which mutation produced the entry.
        post_id: Post concerned, absent for registrations.
        identity: Registrant, author, liker or unliker depending on ``kind``.
        detail: Username for registrations, title for post creation.
        recorded_at: Time the mutation committed.
    """

    seq: int = Field(..., ge=1)
    kind: NotificationKind
    post_id: int | None = None
    identity: str
    detail: str | None = None
    recorded_at: datetime

    model_config = ConfigDict(from_attributes=True, frozen=True)
