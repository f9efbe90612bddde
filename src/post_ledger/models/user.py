"""SQLAlchemy model for registered user profiles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from post_ledger.db.session import Base
from post_ledger.db.time import UTCDateTime


class UserProfile(Base):
    """Profile keyed by the caller identity; at most one per identity."""

    __tablename__ = "user_profile"
    __table_args__ = (
        CheckConstraint("post_count >= 0", name="ck_user_profile_post_count"),
        CheckConstraint("total_likes >= 0", name="ck_user_profile_total_likes"),
    )

    identity: Mapped[str] = mapped_column(String(255), primary_key=True)
    # Immutable after registration.
    username: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    profile_image_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Posts ever created; deactivation does not decrement it.
    post_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Current likes summed over every post this identity authored.
    total_likes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    registered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    registered_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
