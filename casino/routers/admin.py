"""Back-office API: post management and dashboard figures."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from casino.auth import require_staff
from casino.database import get_db
from casino.errors import UnauthorizedError
from casino.models.user import User
from casino.schemas.blog import (
    BulkDeleteRequest,
    BulkUpdateRequest,
    DashboardStats,
    PostCreate,
    PostDetail,
    PostStatus,
    PostUpdate,
)
from casino.schemas.common import Envelope, MessageEnvelope, Page, page_payload
from casino.security import Privilege
from casino.services import post_service
from casino.services.pagination import PageRequest, paginate
from casino.services.post_query import PostFilters, build_post_query

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/dashboard/stats", response_model=Envelope[DashboardStats])
def dashboard_stats(
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    return {"data": post_service.dashboard_stats(db)}


@router.get("/posts", response_model=Envelope[Page[PostDetail]])
def admin_list_posts(
    search: str | None = Query(None),
    status: str | None = Query(None, description="draft, published, archived or all"),
    category: str | None = Query(None),
    author: str | None = Query(None),
    tags: str | None = Query(None),
    featured: bool = Query(False),
    trending: bool = Query(False),
    sort: str | None = Query("-createdAt"),
    page: int = Query(1),
    limit: int | None = Query(None),
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    """All posts regardless of status, newest first unless sorted otherwise."""
    filters = PostFilters.from_params(
        category=category,
        tags=tags,
        author=author,
        featured=featured,
        trending=trending,
        search=search,
        status=status,
        sort=sort,
    )
    query = build_post_query(filters, privilege, datetime.now(UTC))
    result = paginate(db, query.statement(), PageRequest.build(page, limit))
    return {"data": page_payload(result)}


# Bulk routes are registered before /posts/{post_id} so "bulk" is not an id
@router.patch("/posts/bulk", response_model=Envelope[dict[str, int]])
def bulk_update_posts(
    payload: BulkUpdateRequest,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    changes = payload.updates.model_dump(exclude_none=True)
    modified = post_service.bulk_update(db, payload.post_ids, changes, privilege)
    return {"data": {"modifiedCount": modified}}


@router.delete("/posts/bulk", response_model=Envelope[dict[str, int]])
def bulk_delete_posts(
    payload: BulkDeleteRequest,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    deleted = post_service.bulk_delete(db, payload.post_ids, privilege)
    return {"data": {"deletedCount": deleted}}


@router.get("/posts/{post_id}", response_model=Envelope[PostDetail])
def admin_get_post(
    post_id: int,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    return {"data": post_service.get_post(db, post_id)}


@router.post(
    "/posts",
    response_model=Envelope[PostDetail],
    status_code=status.HTTP_201_CREATED,
)
def admin_create_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    author = db.get(User, privilege.user_id)
    if author is None:
        raise UnauthorizedError("Token is not valid. User not found.")
    return {"data": post_service.create_post(db, payload, author)}


@router.put("/posts/{post_id}", response_model=Envelope[PostDetail])
def admin_update_post(
    post_id: int,
    payload: PostUpdate,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    changes = payload.model_dump(exclude_unset=True)
    return {"data": post_service.update_post(db, post_id, changes, privilege)}


@router.delete("/posts/{post_id}", response_model=MessageEnvelope)
def admin_delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    post_service.delete_post(db, post_id, privilege)
    return {"message": "Post deleted successfully"}


@router.patch("/posts/{post_id}/publish", response_model=Envelope[PostDetail])
def publish_post(
    post_id: int,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    post = post_service.set_status(db, post_id, PostStatus.PUBLISHED, privilege)
    return {"data": post}


@router.patch("/posts/{post_id}/unpublish", response_model=Envelope[PostDetail])
def unpublish_post(
    post_id: int,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_staff),
):
    post = post_service.set_status(db, post_id, PostStatus.DRAFT, privilege)
    return {"data": post}
