"""User schemas for fastapi-users routes and the admin back office."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi_users import schemas
from pydantic import Field

from casino.schemas.common import CamelModel
from casino.security.privilege import AccountStatus, Role


class UserRead(schemas.BaseUser[uuid.UUID]):
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str = Role.PLAYER.value
    status: str = AccountStatus.ACTIVE.value


class UserCreate(schemas.BaseUserCreate):
    # role and status are deliberately absent: self-registration never grants staff
    username: str | None = Field(None, min_length=3, max_length=50)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class UserUpdate(schemas.BaseUserUpdate):
    username: str | None = Field(None, min_length=3, max_length=50)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class AdminUserOut(CamelModel):
    id: uuid.UUID
    email: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: Role
    status: AccountStatus
    is_active: bool
    is_verified: bool
    created_at: datetime


class AdminUserUpdate(CamelModel):
    """Back-office edit; credentials are not editable here."""

    username: str | None = Field(None, min_length=3, max_length=50)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    role: Role | None = None
    status: AccountStatus | None = None


class UserStatusOut(CamelModel):
    id: uuid.UUID
    status: AccountStatus
