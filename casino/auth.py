import logging
import uuid
from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.manager import BaseUserManager
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from casino.config import settings
from casino.database_async import get_async_session
from casino.errors import ForbiddenError, UnauthorizedError
from casino.models.user import User
from casino.security.privilege import Privilege, Role, privilege_for

logger = logging.getLogger(__name__)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.secret_key
    verification_token_secret = settings.secret_key

    def __init__(self, user_db: SQLAlchemyUserDatabase[User, uuid.UUID]):
        super().__init__(user_db)

    async def on_after_register(
        self, user: User, request: Request | None = None
    ) -> None:
        logger.info("Registered user %s with role %s", user.id, user.role)


async def get_user_db(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[SQLAlchemyUserDatabase[User, uuid.UUID], None]:
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(
    user_db: SQLAlchemyUserDatabase[User, uuid.UUID] = Depends(get_user_db),
) -> AsyncGenerator[UserManager, None]:
    yield UserManager(user_db)


def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.secret_key,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        token_audience=["fastapi-users:auth"],
    )


bearer_transport = BearerTransport(tokenUrl="api/auth/jwt/login")

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

fastapi_users = FastAPIUsers[User, uuid.UUID](
    get_user_manager,
    [auth_backend],
)

current_active_user = fastapi_users.current_user(active=True)
optional_active_user = fastapi_users.current_user(active=True, optional=True)


def get_privilege(user: User | None = Depends(optional_active_user)) -> Privilege:
    """Resolve the caller's privilege once per request."""
    return privilege_for(user)


def require_authenticated(privilege: Privilege = Depends(get_privilege)) -> Privilege:
    if not privilege.is_authenticated:
        raise UnauthorizedError()
    return privilege


def require_staff(privilege: Privilege = Depends(require_authenticated)) -> Privilege:
    """Admins and moderators; back-office listings honor the status filter."""
    if not privilege.is_staff:
        raise ForbiddenError("Access denied. Required role: admin or moderator")
    return privilege.elevated()


def require_admin(privilege: Privilege = Depends(require_authenticated)) -> Privilege:
    if privilege.role is not Role.ADMIN:
        raise ForbiddenError("Access denied. Required role: admin")
    return privilege.elevated()
