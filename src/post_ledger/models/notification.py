"""Append-only log of notifications emitted by successful mutations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from post_ledger.db.session import Base
from post_ledger.db.time import UTCDateTime

KIND_USER_REGISTERED = "UserRegistered"
KIND_POST_CREATED = "PostCreated"
KIND_POST_LIKED = "PostLiked"
KIND_POST_UNLIKED = "PostUnliked"
KIND_POST_DEACTIVATED = "PostDeactivated"
KIND_PROFILE_UPDATED = "ProfileUpdated"


class Notification(Base):
    """One record per successful mutating call, in commit order.

    ``identity`` is the subject of the event: the registrant, the author, the
    liker or unliker. ``detail`` carries the username or post title where the
    event has one.
    """

    __tablename__ = "notification"

    seq: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    post_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    identity: Mapped[str] = mapped_column(String(255), nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
