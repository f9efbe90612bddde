# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")

from post_ledger.db.session import Base, make_session_factory
from post_ledger.models import Post, PostLike, UserProfile
from post_ledger.services.registry import Registry

TEST_DB_URL = "sqlite://"
OWNER = "owner"
ALICE = "0xA11CE"
BOB = "0xB0B"
CAROL = "0xCA401"


class FakeClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, tzinfo=UTC)
        self.last: datetime | None = None

    def __call__(self) -> datetime:
        self.last = self.current
        self.current = self.current + timedelta(seconds=1)
        return self.last


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def registry(session_factory: sessionmaker[Session], clock: FakeClock) -> Registry:
    """Return a registry deployed by ``OWNER`` over an empty in-memory store."""
    return Registry.deploy(session_factory, OWNER, clock=clock)


@pytest.fixture()
def alice(registry: Registry) -> str:
    registry.register_user(ALICE, "alice", "hello", "ipfs://alice")
    return ALICE


@pytest.fixture()
def bob(registry: Registry) -> str:
    registry.register_user(BOB, "bob")
    return BOB


@pytest.fixture()
def alice_post(registry: Registry, alice: str) -> int:
    """Create a baseline post authored by alice."""
    return registry.create_post(alice, "First post", "Hello ledger", "QmFirstPost")


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Raw session for inspecting stored rows directly."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def assert_ledger_consistent(session_factory: sessionmaker[Session]) -> None:
    """Check like-set sizes and per-author aggregates against the stored rows."""
    with session_factory() as db:
        posts = list(db.scalars(select(Post)))
        for post in posts:
            members = db.scalar(
                select(func.count()).select_from(PostLike).where(PostLike.post_id == post.id)
            )
            assert post.like_count == members, f"post {post.id} like_count drifted"

        for profile in db.scalars(select(UserProfile)):
            authored = [post for post in posts if post.author == profile.identity]
            assert profile.total_likes == sum(post.like_count for post in authored)
            assert profile.post_count == len(authored)
