"""Tests for profile updates and profile queries."""

import pytest

from post_ledger.core.errors import NotRegistered
from tests.conftest import ALICE, CAROL


def test_update_profile_overwrites_mutable_fields(registry, alice, bob, alice_post) -> None:
    registry.toggle_like(bob, alice_post)

    updated = registry.update_profile(alice, "new bio", "QmNewAvatar")

    assert updated.bio == "new bio"
    assert updated.profile_image_ref == "QmNewAvatar"
    assert updated.username == "alice"
    assert updated.post_count == 1
    assert updated.total_likes == 1
    assert updated.registered is True
    assert registry.get_user_profile(ALICE) == updated


def test_update_profile_accepts_empty_values(registry, alice) -> None:
    registry.update_profile(alice, "", "")

    profile = registry.get_user_profile(ALICE)
    assert profile.bio == ""
    assert profile.profile_image_ref == ""


def test_update_profile_requires_registration(registry) -> None:
    with pytest.raises(NotRegistered):
        registry.update_profile(CAROL, "bio", "ref")

    assert not registry.is_registered(CAROL)


def test_get_user_profile_unknown(registry) -> None:
    with pytest.raises(NotRegistered):
        registry.get_user_profile(CAROL)


def test_owner_recorded_at_deploy(registry) -> None:
    assert registry.owner == "owner"
