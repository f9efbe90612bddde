"""Models capturing like membership on posts."""

from sqlalchemy import BigInteger, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from post_ledger.db.session import Base


class PostLike(Base):
    """Membership of one identity in a post's like set.

    Kept out of the post row so a post can be read without its like set.
    """

    __tablename__ = "post_like"
    __table_args__ = (Index("ix_post_like_post_id", "post_id"),)

    post_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("post.id"),
        primary_key=True,
    )

    # Composite primary key prevents duplicate likes from the same identity.
    identity: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("user_profile.identity"),
        primary_key=True,
    )
