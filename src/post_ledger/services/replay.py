"""Rebuild observable ledger state from the notification log alone.

Indexers and UIs that only see notifications use this to reconstruct usernames,
post ownership, like sets and aggregate counts. Events must be applied in log
order; anything else would let a like precede the post it refers to.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from post_ledger.schemas import NotificationKind, NotificationView, PlatformStats


@dataclass
class ProjectedPost:
    """What the log reveals about one post."""

    id: int
    author: str
    title: str
    active: bool = True
    liked_by: set[str] = field(default_factory=set)

    @property
    def like_count(self) -> int:
        return len(self.liked_by)


@dataclass
class LedgerProjection:
    """Materialized view of the ledger derived from notifications."""

    usernames: dict[str, str] = field(default_factory=dict)
    posts: dict[int, ProjectedPost] = field(default_factory=dict)
    last_seq: int = 0

    @classmethod
    def from_notifications(cls, notifications: Iterable[NotificationView]) -> LedgerProjection:
        projection = cls()
        for notification in notifications:
            projection.apply(notification)
        return projection

    def apply(self, notification: NotificationView) -> None:
        """Fold one notification into the projection.

        Raises:
            ValueError: If ``notification`` is not the next entry of the log, or
                refers to a post the projection has not seen.
        """
        if notification.seq != self.last_seq + 1:
            raise ValueError(
                f"Expected notification seq {self.last_seq + 1}, got {notification.seq}"
            )

        kind = notification.kind
        if kind is NotificationKind.USER_REGISTERED:
            self.usernames[notification.identity] = notification.detail or ""
        elif kind is NotificationKind.POST_CREATED:
            post_id = self._post_id(notification)
            self.posts[post_id] = ProjectedPost(
                id=post_id,
                author=notification.identity,
                title=notification.detail or "",
            )
        elif kind is NotificationKind.POST_LIKED:
            self._post(notification).liked_by.add(notification.identity)
        elif kind is NotificationKind.POST_UNLIKED:
            self._post(notification).liked_by.discard(notification.identity)
        elif kind is NotificationKind.POST_DEACTIVATED:
            self._post(notification).active = False
        # Profile updates carry no projected fields.

        self.last_seq = notification.seq

    def _post_id(self, notification: NotificationView) -> int:
        if notification.post_id is None:
            raise ValueError(f"Notification {notification.seq} has no post id")
        return notification.post_id

    def _post(self, notification: NotificationView) -> ProjectedPost:
        post_id = self._post_id(notification)
        try:
            return self.posts[post_id]
        except KeyError:
            raise ValueError(f"Notification {notification.seq} refers to unknown post {post_id}") from None

    def user_posts(self, identity: str) -> list[int]:
        return sorted(post.id for post in self.posts.values() if post.author == identity)

    def post_count(self, identity: str) -> int:
        return len(self.user_posts(identity))

    def total_likes(self, identity: str) -> int:
        return sum(post.like_count for post in self.posts.values() if post.author == identity)

    @property
    def stats(self) -> PlatformStats:
        return PlatformStats(total_posts=len(self.posts), total_users=len(self.usernames))
