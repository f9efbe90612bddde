"""Registry-wide bookkeeping models."""
from datetime import datetime

from sqlalchemy import BigInteger, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from post_ledger.db.session import Base
from post_ledger.db.time import UTCDateTime

REGISTRY_STATE_ID = 1


class RegistryState(Base):
    """Single-row table holding the owner and the global counters.

    ``total_posts`` doubles as the post id sequence: the next post id is always
    ``total_posts + 1`` and is allocated in the same transaction as the insert.
    """

    __tablename__ = "registry_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=REGISTRY_STATE_ID)
    owner: Mapped[str] = mapped_column(Text, nullable=False)
    total_posts: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_users: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Sequence of the last appended notification row.
    notification_seq: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
