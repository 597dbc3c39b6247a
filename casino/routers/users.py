"""Back-office user management (admins only)."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from casino.auth import require_admin
from casino.database import get_db
from casino.errors import ConflictError, NotFoundError
from casino.models.user import User
from casino.schemas.common import Envelope, MessageEnvelope, Page, page_payload
from casino.schemas.user import AdminUserOut, AdminUserUpdate, UserStatusOut
from casino.security import AccountStatus, Privilege
from casino.services.pagination import PageRequest, paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/users", tags=["admin"])

_USER_SORTS = {
    "-createdAt": (User.created_at.desc(),),
    "createdAt": (User.created_at.asc(),),
    "username": (User.username.asc(),),
    "-username": (User.username.desc(),),
    "email": (User.email.asc(),),
}


def _get_user(db: Session, user_id: uuid.UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=Envelope[Page[AdminUserOut]])
def list_users(
    search: str | None = Query(None),
    status: str | None = Query(None),
    role: str | None = Query(None),
    sort: str = Query("-createdAt"),
    page: int = Query(1),
    limit: int | None = Query(None),
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_admin),
):
    statement = select(User)
    term = (search or "").strip()
    if term:
        statement = statement.where(
            or_(
                User.username.icontains(term, autoescape=True),
                User.email.icontains(term, autoescape=True),
                User.first_name.icontains(term, autoescape=True),
                User.last_name.icontains(term, autoescape=True),
            )
        )
    if status:
        statement = statement.where(User.status == status)
    if role:
        statement = statement.where(User.role == role)
    ordering = _USER_SORTS.get(sort, _USER_SORTS["-createdAt"])
    statement = statement.order_by(*ordering, User.id)

    result = paginate(db, statement, PageRequest.build(page, limit))
    return {"data": page_payload(result)}


@router.get("/{user_id}", response_model=Envelope[AdminUserOut])
def get_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_admin),
):
    return {"data": _get_user(db, user_id)}


@router.put("/{user_id}", response_model=Envelope[AdminUserOut])
def update_user(
    user_id: uuid.UUID,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_admin),
):
    user = _get_user(db, user_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field in ("role", "status") and value is None:
            continue
        setattr(user, field, getattr(value, "value", value))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Username is already taken") from exc
    db.refresh(user)
    logger.info("User %s updated by %s", user.id, privilege.user_id)
    return {"data": user}


@router.delete("/{user_id}", response_model=MessageEnvelope)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_admin),
):
    user = _get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted by %s", user_id, privilege.user_id)
    return {"message": "User deleted successfully"}


@router.patch("/{user_id}/toggle-status", response_model=Envelope[UserStatusOut])
def toggle_user_status(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_admin),
):
    """Flip an account between active and inactive (banned becomes active)."""
    user = _get_user(db, user_id)
    if user.status == AccountStatus.ACTIVE.value:
        user.status = AccountStatus.INACTIVE.value
    else:
        user.status = AccountStatus.ACTIVE.value
    db.commit()
    return {"data": {"id": user.id, "status": user.status}}
