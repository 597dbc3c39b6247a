"""Public blog API."""

from datetime import UTC, datetime

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request
from sqlalchemy.orm import Session, sessionmaker

from casino.auth import get_privilege
from casino.config import settings
from casino.database import get_db, get_session_factory
from casino.schemas.blog import CategoryStat, PostDetail, PostSummary, TagStat
from casino.schemas.common import Envelope, Page, page_payload
from casino.security import Privilege, limiter
from casino.services import post_service
from casino.services.engagement import EngagementCounter, increment, record_view
from casino.services.pagination import PageRequest, paginate
from casino.services.post_query import PostFilters, build_post_query

router = APIRouter(prefix="/api/posts", tags=["blog"])


@router.get("", response_model=Envelope[Page[PostSummary]])
@limiter.limit(settings.public_read_limit)
def list_posts(
    request: Request,
    category: str | None = Query(None),
    tags: str | None = Query(None, description="Comma separated tag list"),
    featured: bool = Query(False),
    trending: bool = Query(False),
    search: str | None = Query(None),
    author: str | None = Query(None),
    status: str | None = Query(None, description="Only honored for admins"),
    sort: str | None = Query(None),
    page: int = Query(1),
    limit: int | None = Query(None),
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(get_privilege),
):
    """Paginated post listing; body content is left out of list items."""
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


@router.get("/categories", response_model=Envelope[list[CategoryStat]])
@limiter.limit(settings.public_read_limit)
def list_categories(request: Request, db: Session = Depends(get_db)):
    return {"data": post_service.category_stats(db)}


@router.get("/tags", response_model=Envelope[list[TagStat]])
@limiter.limit(settings.public_read_limit)
def list_tags(request: Request, db: Session = Depends(get_db)):
    return {"data": post_service.tag_stats(db)}


@router.get("/featured", response_model=Envelope[list[PostSummary]])
@limiter.limit(settings.public_read_limit)
def featured_posts(
    request: Request,
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(get_privilege),
):
    posts = post_service.list_featured(db, privilege, datetime.now(UTC), limit)
    return {"data": posts}


@router.get("/trending", response_model=Envelope[list[PostSummary]])
@limiter.limit(settings.public_read_limit)
def trending_posts(
    request: Request,
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(get_privilege),
):
    posts = post_service.list_trending(db, privilege, datetime.now(UTC), limit)
    return {"data": posts}


@router.get("/{post_id}/related", response_model=Envelope[list[PostSummary]])
@limiter.limit(settings.public_read_limit)
def related_posts(
    request: Request,
    post_id: int,
    limit: int = Query(4, ge=1, le=20),
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(get_privilege),
):
    posts = post_service.list_related(
        db, post_id, privilege, datetime.now(UTC), limit
    )
    return {"data": posts}


@router.post("/{post_id}/like", response_model=Envelope[dict[str, int]])
@limiter.limit(settings.engagement_limit)
def like_post(request: Request, post_id: int, db: Session = Depends(get_db)):
    likes = increment(db, post_id, EngagementCounter.LIKES)
    return {"data": {"likes": likes}}


@router.post("/{post_id}/share", response_model=Envelope[dict[str, int]])
@limiter.limit(settings.engagement_limit)
def share_post(request: Request, post_id: int, db: Session = Depends(get_db)):
    shares = increment(db, post_id, EngagementCounter.SHARES)
    return {"data": {"shares": shares}}


@router.get("/{slug}", response_model=Envelope[PostDetail])
@limiter.limit(settings.public_read_limit)
def get_post(
    request: Request,
    slug: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(get_privilege),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Single post by slug.

    The view counter is bumped in a background task once the response has
    been built; the returned ``views`` does not include this request.
    """
    post = post_service.get_visible_post_by_slug(
        db, slug, privilege, datetime.now(UTC)
    )
    body = PostDetail.model_validate(post)
    background_tasks.add_task(record_view, session_factory, post.id)
    return {"data": body}
