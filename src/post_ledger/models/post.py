"""SQLAlchemy model for posts."""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from post_ledger.db.session import Base
from post_ledger.db.time import UTCDateTime


class Post(Base):
    """Content entry published by a registered identity.

    Posts are never deleted. ``active`` only ever moves from True to False, and
    ``like_count`` always equals the number of ``post_like`` rows for the post.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("id >= 1", name="ck_post_id_positive"),
        CheckConstraint("like_count >= 0", name="ck_post_like_count"),
        # Doubles as the author index: ids are sequential, so id order is creation order.
        Index("ix_post_author_id", "author", "id"),
    )

    # Assigned from registry_state.total_posts, never by the database.
    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    author: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("user_profile.identity"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # Opaque pointer into external storage (e.g. an IPFS CID); never interpreted.
    content_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    like_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
