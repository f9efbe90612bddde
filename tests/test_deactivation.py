"""Tests for soft-deactivation of posts."""

import pytest

from post_ledger.core.errors import InactivePost, InvalidPostId, NotAuthorized
from tests.conftest import ALICE, BOB, CAROL, OWNER


def test_author_can_deactivate(registry, alice_post) -> None:
    registry.deactivate_post(ALICE, alice_post)

    with pytest.raises(InactivePost):
        registry.get_post(alice_post)


def test_owner_can_deactivate_without_registering(registry, alice_post) -> None:
    """The owner needs no profile to deactivate someone else's post."""
    assert not registry.is_registered(OWNER)
    registry.deactivate_post(OWNER, alice_post)

    with pytest.raises(InactivePost):
        registry.get_post(alice_post)


def test_other_user_cannot_deactivate(registry, alice_post, bob) -> None:
    with pytest.raises(NotAuthorized):
        registry.deactivate_post(bob, alice_post)

    with pytest.raises(NotAuthorized):
        registry.deactivate_post(CAROL, alice_post)

    assert registry.get_post(alice_post).active is True


def test_deactivation_is_terminal(registry, alice_post, bob) -> None:
    """Inactive posts reject likes, queries and a second deactivation."""
    registry.deactivate_post(ALICE, alice_post)

    with pytest.raises(InactivePost):
        registry.deactivate_post(ALICE, alice_post)
    with pytest.raises(InactivePost):
        registry.deactivate_post(OWNER, alice_post)
    with pytest.raises(InactivePost):
        registry.toggle_like(bob, alice_post)
    with pytest.raises(InactivePost):
        registry.has_user_liked_post(alice_post, BOB)


def test_deactivation_keeps_counters_and_index(registry, alice_post, bob) -> None:
    """Counters, likes and the author index survive deactivation."""
    registry.toggle_like(bob, alice_post)
    registry.deactivate_post(ALICE, alice_post)

    profile = registry.get_user_profile(ALICE)
    assert profile.post_count == 1
    assert profile.total_likes == 1
    assert registry.get_user_posts(ALICE) == [alice_post]
    assert registry.get_platform_stats().total_posts == 1


def test_deactivate_invalid_post(registry, alice_post) -> None:
    with pytest.raises(InvalidPostId):
        registry.deactivate_post(ALICE, 5)


def test_validity_checked_before_authorization(registry, alice_post) -> None:
    """A stranger deactivating an inactive post sees InactivePost, not NotAuthorized."""
    registry.deactivate_post(ALICE, alice_post)

    with pytest.raises(InactivePost):
        registry.deactivate_post(CAROL, alice_post)


def test_new_posts_unaffected_by_deactivation(registry, alice_post, bob) -> None:
    registry.deactivate_post(ALICE, alice_post)
    second = registry.create_post(ALICE, "again", "content", "")

    assert second == 2
    registry.toggle_like(bob, second)
    assert registry.get_post(second).like_count == 1
