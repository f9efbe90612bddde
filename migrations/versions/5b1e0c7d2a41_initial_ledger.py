"""initial ledger

Revision ID: 5b1e0c7d2a41
Revises:
Create Date: 2026-10-18 09:12:44.318020

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e0c7d2a41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create registry state, profiles, posts, likes and the notification log."""
    op.create_table(
        "registry_state",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner", sa.Text(), nullable=False),
        sa.Column("total_posts", sa.BigInteger(), nullable=False),
        sa.Column("total_users", sa.BigInteger(), nullable=False),
        sa.Column("notification_seq", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "user_profile",
        sa.Column("identity", sa.String(length=255), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=False),
        sa.Column("profile_image_ref", sa.Text(), nullable=False),
        sa.Column("post_count", sa.BigInteger(), nullable=False),
        sa.Column("total_likes", sa.BigInteger(), nullable=False),
        sa.Column("registered", sa.Boolean(), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("post_count >= 0", name="ck_user_profile_post_count"),
        sa.CheckConstraint("total_likes >= 0", name="ck_user_profile_total_likes"),
        sa.PrimaryKeyConstraint("identity"),
    )
    op.create_table(
        "post",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_ref", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("like_count", sa.BigInteger(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.CheckConstraint("id >= 1", name="ck_post_id_positive"),
        sa.CheckConstraint("like_count >= 0", name="ck_post_like_count"),
        sa.ForeignKeyConstraint(["author"], ["user_profile.identity"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_author_id", "post", ["author", "id"])
    op.create_table(
        "post_like",
        sa.Column("post_id", sa.BigInteger(), nullable=False),
        sa.Column("identity", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"]),
        sa.ForeignKeyConstraint(["identity"], ["user_profile.identity"]),
        sa.PrimaryKeyConstraint("post_id", "identity"),
    )
    op.create_index("ix_post_like_post_id", "post_like", ["post_id"])
    op.create_table(
        "notification",
        sa.Column("seq", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("post_id", sa.BigInteger(), nullable=True),
        sa.Column("identity", sa.String(length=255), nullable=False),
        sa.Column("detail", sa.Text(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("seq"),
    )


def downgrade() -> None:
    """Drop every ledger table."""
    op.drop_table("notification")
    op.drop_index("ix_post_like_post_id", table_name="post_like")
    op.drop_table("post_like")
    op.drop_index("ix_post_author_id", table_name="post")
    op.drop_table("post")
    op.drop_table("user_profile")
    op.drop_table("registry_state")
