"""Tests for resolving caller privilege."""

from __future__ import annotations

import uuid
from types import SimpleNamespace

import pytest

from casino.security import ANONYMOUS, AccountStatus, Privilege, Role, privilege_for


def _user(role: str = "player", status: str = "active", is_active: bool = True):
    return SimpleNamespace(
        id=uuid.uuid4(), role=role, status=status, is_active=is_active
    )


def test_missing_user_is_anonymous():
    assert privilege_for(None) == ANONYMOUS
    assert not ANONYMOUS.is_authenticated


def test_only_admins_see_unpublished_posts():
    assert privilege_for(_user("admin")).sees_unpublished
    for role in ("moderator", "author", "player", "vip"):
        assert not privilege_for(_user(role)).sees_unpublished


@pytest.mark.parametrize(
    "user",
    [
        _user(status=AccountStatus.INACTIVE.value),
        _user(status=AccountStatus.BANNED.value),
        _user(is_active=False),
        _user(role="croupier"),
    ],
)
def test_unusable_accounts_are_anonymous(user):
    assert privilege_for(user) == ANONYMOUS


def test_staff_roles():
    assert privilege_for(_user("admin")).is_staff
    assert privilege_for(_user("moderator")).is_staff
    assert not privilege_for(_user("author")).is_staff


def test_elevated_copy_sees_unpublished():
    moderator = privilege_for(_user("moderator"))
    elevated = moderator.elevated()
    assert elevated.sees_unpublished
    assert elevated.role is Role.MODERATOR
    assert not moderator.sees_unpublished


def test_can_modify():
    owner_id = uuid.uuid4()
    owner = Privilege(user_id=owner_id, role=Role.AUTHOR)
    stranger = Privilege(user_id=uuid.uuid4(), role=Role.MODERATOR)
    admin = Privilege(user_id=uuid.uuid4(), role=Role.ADMIN)

    assert owner.can_modify(owner_id)
    assert not stranger.can_modify(owner_id)
    assert admin.can_modify(owner_id)
    assert not ANONYMOUS.can_modify(None)
