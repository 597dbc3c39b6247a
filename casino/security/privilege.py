"""Per-request caller privilege.

A :class:`Privilege` is resolved once from the (optional) authenticated user
and handed explicitly to the code that needs it, so visibility and ownership
rules live in one place instead of being re-derived from the user object at
each call site.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from casino.models.user import User


class Role(str, Enum):
    """User roles, highest privilege first."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    AUTHOR = "author"
    PLAYER = "player"
    VIP = "vip"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"


STAFF_ROLES = frozenset({Role.ADMIN, Role.MODERATOR})


@dataclass(frozen=True, slots=True)
class Privilege:
    user_id: uuid.UUID | None = None
    role: Role | None = None
    sees_unpublished: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    def can_modify(self, author_id: uuid.UUID | None) -> bool:
        """Admins may modify anything, everyone else only what they authored."""
        if self.is_admin:
            return True
        return self.user_id is not None and self.user_id == author_id

    def elevated(self) -> Privilege:
        """Return a copy that sees drafts, archived and scheduled posts."""
        return replace(self, sees_unpublished=True)


ANONYMOUS = Privilege()


def privilege_for(user: User | None) -> Privilege:
    """Map an optional user to the privilege the request runs with.

    Missing users and accounts that are not active are treated as anonymous.
    Only admins see unpublished posts on public routes.
    """
    if user is None or not user.is_active:
        return ANONYMOUS
    if user.status != AccountStatus.ACTIVE.value:
        return ANONYMOUS
    try:
        role = Role(user.role)
    except ValueError:
        return ANONYMOUS
    return Privilege(user_id=user.id, role=role, sees_unpublished=role is Role.ADMIN)
