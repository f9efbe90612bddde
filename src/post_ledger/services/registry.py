"""Registry state machine for profiles, posts and likes.

Every operation takes the caller identity explicitly and runs with exclusive
access to the whole ledger: a per-registry lock serializes callers inside the
process, and each mutation commits as a single database transaction in which
the ``registry_state`` row is locked for update. Rejections are raised before
anything is written, so a failed call leaves no trace.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from post_ledger.core.errors import (
    AlreadyRegistered,
    EmptyContent,
    EmptyTitle,
    EmptyUsername,
    InactivePost,
    InvalidPostId,
    LedgerNotInitialized,
    NotAuthorized,
    NotRegistered,
    RegistryError,
    TitleTooLong,
    UsernameTooLong,
)
from post_ledger.core.settings import settings
from post_ledger.db.session import SessionLocal
from post_ledger.db.time import utcnow
from post_ledger.models import Notification, Post, PostLike, RegistryState, UserProfile
from post_ledger.models import notification as records
from post_ledger.models.system import REGISTRY_STATE_ID
from post_ledger.schemas import (
    LikeState,
    NotificationView,
    PlatformStats,
    PostView,
    UserProfileView,
)

__all__ = ["NotificationListener", "Registry", "get_registry"]

logger = logging.getLogger(__name__)

NotificationListener = Callable[[NotificationView], None]
Clock = Callable[[], datetime]


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


class Registry:
    """Owns users, posts, like sets and the notification log.

    Args:
        session_factory: Factory producing sessions bound to the ledger store.
        clock: Source of timestamps for ``created_at`` and notifications.
        max_username_length: Upper bound on username size in UTF-8 bytes.
        max_title_length: Upper bound on title size in UTF-8 bytes.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Clock = utcnow,
        max_username_length: int | None = None,
        max_title_length: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._lock = threading.RLock()
        self._listeners: list[NotificationListener] = []
        self._pending: list[NotificationView] = []
        if max_username_length is None:
            max_username_length = settings.max_username_length
        if max_title_length is None:
            max_title_length = settings.max_title_length
        if max_username_length < 1 or max_title_length < 1:
            raise ValueError("Length limits must be at least 1")
        self.max_username_length = max_username_length
        self.max_title_length = max_title_length

    @classmethod
    def deploy(
        cls,
        session_factory: sessionmaker[Session],
        owner: str,
        *,
        clock: Clock = utcnow,
        max_username_length: int | None = None,
        max_title_length: int | None = None,
    ) -> Registry:
        """Initialize the ledger with ``owner`` and return a registry over it.

        The owner is recorded once. Deploying again over an initialized store
        keeps the original owner.
        """
        registry = cls(
            session_factory,
            clock=clock,
            max_username_length=max_username_length,
            max_title_length=max_title_length,
        )
        with registry._lock, session_factory.begin() as db:
            state = db.get(RegistryState, REGISTRY_STATE_ID)
            if state is None:
                db.add(
                    RegistryState(
                        id=REGISTRY_STATE_ID,
                        owner=owner,
                        total_posts=0,
                        total_users=0,
                        notification_seq=0,
                        created_at=registry._clock(),
                    )
                )
                logger.info("Deployed registry with owner %s", owner)
            elif state.owner != owner:
                logger.warning(
                    "Registry already deployed with owner %s; ignoring owner %s",
                    state.owner,
                    owner,
                )
        return registry

    # ------------------------------------------------------------------
    # Transaction plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _mutation(self) -> Iterator[Session]:
        with self._lock:
            emitted: list[NotificationView] = []
            self._pending = emitted
            try:
                with self._session_factory.begin() as db:
                    yield db
            except RegistryError as exc:
                logger.debug("Rejected operation: %s", exc.code)
                raise
            finally:
                self._pending = []
            # Listeners run before the lock is released so they observe log order.
            self._dispatch(emitted)

    @contextmanager
    def _snapshot(self) -> Iterator[Session]:
        with self._lock:
            db = self._session_factory()
            try:
                yield db
            finally:
                db.close()

    @staticmethod
    def _state(db: Session, *, for_update: bool = False) -> RegistryState:
        state = db.get(RegistryState, REGISTRY_STATE_ID, with_for_update=for_update)
        if state is None:
            raise LedgerNotInitialized()
        return state

    @staticmethod
    def _profile(db: Session, identity: str) -> UserProfile:
        profile = db.get(UserProfile, identity)
        if profile is None or not profile.registered:
            raise NotRegistered()
        return profile

    @staticmethod
    def _active_post(db: Session, state: RegistryState, post_id: int) -> Post:
        if not 1 <= post_id <= state.total_posts:
            raise InvalidPostId()
        post = db.get(Post, post_id)
        if post is None:
            raise InvalidPostId()
        if not post.active:
            raise InactivePost()
        return post

    def _emit(
        self,
        db: Session,
        state: RegistryState,
        kind: str,
        *,
        identity: str,
        at: datetime,
        post_id: int | None = None,
        detail: str | None = None,
    ) -> None:
        state.notification_seq += 1
        record = Notification(
            seq=state.notification_seq,
            kind=kind,
            post_id=post_id,
            identity=identity,
            detail=detail,
            recorded_at=at,
        )
        db.add(record)
        self._pending.append(NotificationView.model_validate(record))

    def _dispatch(self, emitted: list[NotificationView]) -> None:
        for notification in emitted:
            for listener in list(self._listeners):
                try:
                    listener(notification)
                except Exception:
                    logger.error(
                        "Notification listener failed for seq %d",
                        notification.seq,
                        exc_info=True,
                    )

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Register ``listener`` for every notification committed from now on.

        Returns:
            A callable that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def register_user(
        self,
        caller: str,
        username: str,
        bio: str = "",
        profile_image_ref: str = "",
    ) -> UserProfileView:
        """Create the caller's profile.

        Raises:
            AlreadyRegistered: The caller already has a profile.
            EmptyUsername: ``username`` is empty.
            UsernameTooLong: ``username`` exceeds the configured limit.
        """
        with self._mutation() as db:
            state = self._state(db, for_update=True)
            if db.get(UserProfile, caller) is not None:
                raise AlreadyRegistered()
            if not username:
                raise EmptyUsername()
            if _byte_length(username) > self.max_username_length:
                raise UsernameTooLong()

            now = self._clock()
            profile = UserProfile(
                identity=caller,
                username=username,
                bio=bio,
                profile_image_ref=profile_image_ref,
                post_count=0,
                total_likes=0,
                registered=True,
                registered_at=now,
            )
            db.add(profile)
            state.total_users += 1
            self._emit(
                db,
                state,
                records.KIND_USER_REGISTERED,
                identity=caller,
                detail=username,
                at=now,
            )
            view = UserProfileView.model_validate(profile)
        logger.info("Registered user %s as %r", caller, username)
        return view

    def create_post(self, caller: str, title: str, content: str, content_ref: str) -> int:
        """Publish a post and return its id.

        Ids are assigned 1, 2, 3, ... from ``total_posts`` in the same
        transaction that stores the post and bumps the counters.
        """
        with self._mutation() as db:
            state = self._state(db, for_update=True)
            author = self._profile(db, caller)
            if not title:
                raise EmptyTitle()
            if _byte_length(title) > self.max_title_length:
                raise TitleTooLong()
            if not content:
                raise EmptyContent()

            now = self._clock()
            post_id = state.total_posts + 1
            db.add(
                Post(
                    id=post_id,
                    author=caller,
                    title=title,
                    content=content,
                    content_ref=content_ref,
                    created_at=now,
                    like_count=0,
                    active=True,
                )
            )
            state.total_posts = post_id
            author.post_count += 1
            self._emit(
                db,
                state,
                records.KIND_POST_CREATED,
                identity=caller,
                post_id=post_id,
                detail=title,
                at=now,
            )
        logger.info("User %s created post %d", caller, post_id)
        return post_id

    def toggle_like(self, caller: str, post_id: int) -> LikeState:
        """Like the post, or remove the caller's like if already present.

        Liking one's own post is allowed.
        """
        with self._mutation() as db:
            state = self._state(db, for_update=True)
            self._profile(db, caller)
            post = self._active_post(db, state, post_id)
            author = self._profile(db, post.author)
            now = self._clock()

            existing = db.get(PostLike, (post_id, caller))
            if existing is not None:
                db.delete(existing)
                post.like_count -= 1
                author.total_likes -= 1
                outcome = LikeState.UNLIKED
                kind = records.KIND_POST_UNLIKED
            else:
                db.add(PostLike(post_id=post_id, identity=caller))
                post.like_count += 1
                author.total_likes += 1
                outcome = LikeState.LIKED
                kind = records.KIND_POST_LIKED
            self._emit(db, state, kind, identity=caller, post_id=post_id, at=now)
        logger.info("User %s %s post %d", caller, outcome.value, post_id)
        return outcome

    def deactivate_post(self, caller: str, post_id: int) -> None:
        """Soft-deactivate a post. Only its author or the owner may do so.

        Deactivation is terminal; counters and the author index are untouched.
        """
        with self._mutation() as db:
            state = self._state(db, for_update=True)
            post = self._active_post(db, state, post_id)
            if caller not in (post.author, state.owner):
                raise NotAuthorized()

            post.active = False
            self._emit(
                db,
                state,
                records.KIND_POST_DEACTIVATED,
                identity=post.author,
                post_id=post_id,
                at=self._clock(),
            )
        logger.info("User %s deactivated post %d", caller, post_id)

    def update_profile(self, caller: str, bio: str, profile_image_ref: str) -> UserProfileView:
        """Overwrite the caller's bio and profile image reference."""
        with self._mutation() as db:
            state = self._state(db, for_update=True)
            profile = self._profile(db, caller)
            profile.bio = bio
            profile.profile_image_ref = profile_image_ref
            self._emit(
                db,
                state,
                records.KIND_PROFILE_UPDATED,
                identity=caller,
                at=self._clock(),
            )
            view = UserProfileView.model_validate(profile)
        logger.info("User %s updated profile", caller)
        return view

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        """Identity recorded as owner at deployment."""
        with self._snapshot() as db:
            return self._state(db).owner

    def get_post(self, post_id: int) -> PostView:
        """Return a snapshot of an active post."""
        with self._snapshot() as db:
            post = self._active_post(db, self._state(db), post_id)
            return PostView.model_validate(post)

    def has_user_liked_post(self, post_id: int, identity: str) -> bool:
        with self._snapshot() as db:
            self._active_post(db, self._state(db), post_id)
            return db.get(PostLike, (post_id, identity)) is not None

    def get_user_posts(self, identity: str) -> list[int]:
        """Return ids authored by ``identity`` in creation order, inactive ones included."""
        with self._snapshot() as db:
            stmt = select(Post.id).where(Post.author == identity).order_by(Post.id)
            return list(db.scalars(stmt))

    def get_platform_stats(self) -> PlatformStats:
        with self._snapshot() as db:
            return PlatformStats.model_validate(self._state(db))

    def get_user_profile(self, identity: str) -> UserProfileView:
        with self._snapshot() as db:
            return UserProfileView.model_validate(self._profile(db, identity))

    def is_registered(self, identity: str) -> bool:
        with self._snapshot() as db:
            profile = db.get(UserProfile, identity)
            return profile is not None and profile.registered

    def get_notifications(self, after_seq: int = 0, limit: int | None = None) -> list[NotificationView]:
        """Return log entries with ``seq > after_seq`` in log order."""
        with self._snapshot() as db:
            stmt = select(Notification).where(Notification.seq > after_seq).order_by(Notification.seq)
            if limit is not None:
                stmt = stmt.limit(limit)
            return [NotificationView.model_validate(row) for row in db.scalars(stmt)]


_default_registry: Registry | None = None
_default_registry_lock = threading.Lock()


def get_registry() -> Registry:
    """Return the process-wide registry over the configured database.

    The store is deployed with ``REGISTRY_OWNER`` on first use.
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = Registry.deploy(SessionLocal, settings.registry_owner)
        return _default_registry
