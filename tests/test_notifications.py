"""Tests for the notification log, listeners and log replay."""

import pytest

from post_ledger.core.errors import EmptyTitle
from post_ledger.schemas import NotificationKind
from post_ledger.services.replay import LedgerProjection
from tests.conftest import ALICE, BOB, OWNER


def _kinds(registry) -> list[NotificationKind]:
    return [notification.kind for notification in registry.get_notifications()]


def test_each_mutation_appends_one_notification(registry) -> None:
    registry.register_user(ALICE, "alice")
    registry.register_user(BOB, "bob")
    post_id = registry.create_post(ALICE, "Hello", "content", "Qm1")
    registry.toggle_like(BOB, post_id)
    registry.toggle_like(BOB, post_id)
    registry.update_profile(ALICE, "bio", "img")
    registry.deactivate_post(OWNER, post_id)

    log = registry.get_notifications()
    assert [n.seq for n in log] == list(range(1, 8))
    assert _kinds(registry) == [
        NotificationKind.USER_REGISTERED,
        NotificationKind.USER_REGISTERED,
        NotificationKind.POST_CREATED,
        NotificationKind.POST_LIKED,
        NotificationKind.POST_UNLIKED,
        NotificationKind.PROFILE_UPDATED,
        NotificationKind.POST_DEACTIVATED,
    ]

    registered, _, created, liked, unliked, _, deactivated = log
    assert (registered.identity, registered.detail) == (ALICE, "alice")
    assert (created.post_id, created.identity, created.detail) == (post_id, ALICE, "Hello")
    assert (liked.post_id, liked.identity) == (post_id, BOB)
    assert (unliked.post_id, unliked.identity) == (post_id, BOB)
    # Deactivation names the author, not the caller.
    assert (deactivated.post_id, deactivated.identity) == (post_id, ALICE)


def test_get_notifications_cursor(registry, alice_post, bob) -> None:
    registry.toggle_like(bob, alice_post)

    tail = registry.get_notifications(after_seq=2)
    assert [n.seq for n in tail] == [3, 4]
    assert [n.seq for n in registry.get_notifications(after_seq=1, limit=2)] == [2, 3]
    assert registry.get_notifications(after_seq=10) == []


def test_listeners_receive_notifications_in_order(registry) -> None:
    received = []
    unsubscribe = registry.subscribe(received.append)

    registry.register_user(ALICE, "alice")
    registry.create_post(ALICE, "t", "c", "")
    assert [n.kind for n in received] == [
        NotificationKind.USER_REGISTERED,
        NotificationKind.POST_CREATED,
    ]
    assert received == registry.get_notifications()

    unsubscribe()
    registry.register_user(BOB, "bob")
    assert len(received) == 2


def test_listener_copy_equals_stored_entry(registry, clock) -> None:
    """Delivered notifications carry the same aware timestamp the log returns."""
    received = []
    registry.subscribe(received.append)

    registry.register_user(ALICE, "alice")
    post_id = registry.create_post(ALICE, "t", "c", "")
    registry.toggle_like(ALICE, post_id)
    registry.deactivate_post(ALICE, post_id)

    stored = registry.get_notifications()
    assert len(received) == 4
    for delivered, entry in zip(received, stored):
        assert delivered == entry
        assert entry.recorded_at.tzinfo is not None
    assert stored[-1].recorded_at == clock.last


def test_rejected_operation_notifies_nobody(registry, alice) -> None:
    received = []
    registry.subscribe(received.append)

    with pytest.raises(EmptyTitle):
        registry.create_post(alice, "", "c", "")

    assert received == []


def test_failing_listener_does_not_undo_mutation(registry, caplog) -> None:
    def broken(notification) -> None:
        raise RuntimeError("listener exploded")

    received = []
    registry.subscribe(broken)
    registry.subscribe(received.append)

    with caplog.at_level("ERROR", logger="post_ledger.services.registry"):
        registry.register_user(ALICE, "alice")

    assert registry.is_registered(ALICE)
    assert len(received) == 1
    assert "Notification listener failed" in caplog.text


def test_projection_rebuilds_state_from_log(registry, alice, bob) -> None:
    first = registry.create_post(alice, "one", "c", "")
    second = registry.create_post(bob, "two", "c", "")
    registry.toggle_like(bob, first)
    registry.toggle_like(alice, first)
    registry.toggle_like(alice, second)
    registry.toggle_like(bob, first)
    registry.deactivate_post(bob, second)

    projection = LedgerProjection.from_notifications(registry.get_notifications())

    assert projection.usernames == {ALICE: "alice", BOB: "bob"}
    assert projection.stats == registry.get_platform_stats()
    for identity in (ALICE, BOB):
        profile = registry.get_user_profile(identity)
        assert projection.total_likes(identity) == profile.total_likes
        assert projection.post_count(identity) == profile.post_count
        assert projection.user_posts(identity) == registry.get_user_posts(identity)
    assert projection.posts[first].liked_by == {ALICE}
    assert projection.posts[first].like_count == registry.get_post(first).like_count
    assert projection.posts[second].active is False


def test_projection_rejects_gaps(registry, alice_post) -> None:
    log = registry.get_notifications()
    with pytest.raises(ValueError):
        LedgerProjection.from_notifications(log[1:])


def test_deploy_keeps_original_owner(session_factory, registry, caplog) -> None:
    from post_ledger.services.registry import Registry

    with caplog.at_level("WARNING"):
        again = Registry.deploy(session_factory, "usurper")

    assert again.owner == OWNER
    assert "already deployed" in caplog.text
