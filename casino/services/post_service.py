"""Post lifecycle: creation, edits, derived fields and listings helpers."""

from __future__ import annotations

import json
import logging
import math
from collections import Counter
from datetime import UTC, datetime
from typing import Any

from slugify import slugify
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from casino.config import settings
from casino.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from casino.models.post import Post
from casino.models.user import User
from casino.schemas.blog import CATEGORY_INFO, Category, PostCreate, PostStatus
from casino.security.privilege import Privilege
from casino.services.post_query import (
    PostFilters,
    build_post_query,
    tag_overlap,
    visibility_predicate,
)

logger = logging.getLogger(__name__)

META_TITLE_MAX = 60
META_DESCRIPTION_MAX = 160

# Columns that an update may never set to null
_REQUIRED_FIELDS = frozenset(
    {
        "title",
        "slug",
        "excerpt",
        "content",
        "category",
        "tags",
        "keywords",
        "status",
        "is_featured",
        "is_trending",
        "is_sticky",
        "comments_enabled",
    }
)
_LIST_FIELDS = ("tags", "keywords")


def generate_slug(title: str) -> str:
    """Generate URL-safe slug from title."""
    return slugify(title, max_length=200)


def calculate_reading_time(content: str, words_per_minute: int | None = None) -> int:
    """Estimated reading time in whole minutes, rounded up."""
    wpm = words_per_minute or settings.words_per_minute
    word_count = len(content.split())
    return math.ceil(word_count / wpm)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def refresh_derived_fields(
    post: Post,
    *,
    previous_title: str | None = None,
    previous_excerpt: str | None = None,
    content_changed: bool = True,
    now: datetime | None = None,
) -> None:
    """Recompute fields that follow from the rest of the post.

    Auto-generated meta fields follow title/excerpt edits; explicit ones are
    kept. ``published_at`` is stamped the first time the post is published and
    never cleared.
    """
    if content_changed:
        post.reading_time = calculate_reading_time(post.content)

    auto_title = previous_title is not None and post.meta_title == truncate(
        previous_title, META_TITLE_MAX
    )
    if not post.meta_title or auto_title:
        post.meta_title = truncate(post.title, META_TITLE_MAX)

    auto_description = previous_excerpt is not None and (
        post.meta_description == truncate(previous_excerpt, META_DESCRIPTION_MAX)
    )
    if not post.meta_description or auto_description:
        post.meta_description = truncate(post.excerpt, META_DESCRIPTION_MAX)

    if post.status == PostStatus.PUBLISHED.value and post.published_at is None:
        post.published_at = now or datetime.now(UTC)


def _ensure_slug_available(
    db: Session, slug: str, exclude_id: int | None = None
) -> None:
    query = select(Post.id).where(Post.slug == slug)
    if exclude_id is not None:
        query = query.where(Post.id != exclude_id)
    if db.scalar(query) is not None:
        raise ConflictError("Post with this slug already exists")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # Only the slug carries a uniqueness constraint on posts
        raise ConflictError("Post with this slug already exists") from exc


def get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def get_visible_post_by_slug(
    db: Session, slug: str, privilege: Privilege, now: datetime
) -> Post:
    """Load a post by slug, applying the caller's visibility rules."""
    statement = select(Post).where(
        Post.slug == slug, *visibility_predicate(privilege, now).clauses()
    )
    post = db.scalars(statement).first()
    if post is None:
        raise NotFoundError("Blog post not found")
    return post


def create_post(db: Session, payload: PostCreate, author: User) -> Post:
    """Create a post owned by ``author``."""
    data = payload.model_dump()
    slug = data.pop("slug") or generate_slug(data["title"])
    if not slug:
        raise ValidationFailedError(
            errors=[
                {"field": "slug", "message": "Slug could not be derived from title"}
            ]
        )
    _ensure_slug_available(db, slug)

    tags = data.pop("tags")
    keywords = data.pop("keywords")
    post = Post(
        **{key: _enum_value(value) for key, value in data.items()},
        slug=slug,
        author_id=author.id,
        author_name=author.display_name or author.email,
    )
    post.tag_list = tags
    post.keyword_list = keywords
    refresh_derived_fields(post)

    db.add(post)
    _commit(db)
    db.refresh(post)
    logger.info("Created post %s (%s) by %s", post.id, post.slug, author.id)
    return post


def apply_changes(db: Session, post: Post, changes: dict[str, Any]) -> Post:
    """Apply a partial update and re-derive dependent fields, without committing."""
    nulls = [
        field
        for field, value in changes.items()
        if value is None and field in _REQUIRED_FIELDS
    ]
    if nulls:
        raise ValidationFailedError(
            errors=[
                {"field": field, "message": "Field cannot be null"} for field in nulls
            ]
        )
    if "slug" in changes and changes["slug"] != post.slug:
        _ensure_slug_available(db, changes["slug"], exclude_id=post.id)

    previous_title, previous_excerpt = post.title, post.excerpt
    content_changed = "content" in changes
    for field, value in changes.items():
        if field in _LIST_FIELDS:
            value = json.dumps(value)
        setattr(post, field, _enum_value(value))

    refresh_derived_fields(
        post,
        previous_title=previous_title,
        previous_excerpt=previous_excerpt,
        content_changed=content_changed,
    )
    return post


def update_post(
    db: Session, post_id: int, changes: dict[str, Any], privilege: Privilege
) -> Post:
    post = get_post(db, post_id)
    if not privilege.can_modify(post.author_id):
        raise ForbiddenError("Not authorized to edit this post")
    apply_changes(db, post, changes)
    _commit(db)
    db.refresh(post)
    return post


def delete_post(db: Session, post_id: int, privilege: Privilege) -> None:
    post = get_post(db, post_id)
    if not privilege.can_modify(post.author_id):
        raise ForbiddenError("Not authorized to delete this post")
    db.delete(post)
    db.commit()
    logger.info("Deleted post %s", post_id)


def set_status(
    db: Session, post_id: int, status: PostStatus, privilege: Privilege
) -> Post:
    return update_post(db, post_id, {"status": status}, privilege)


def bulk_update(
    db: Session, post_ids: list[int], changes: dict[str, Any], privilege: Privilege
) -> int:
    """Apply ``changes`` to each post in turn; returns how many were modified.

    Each post is committed on its own, so a failure part way leaves the posts
    before it updated. Unknown ids and posts the caller may not modify are
    skipped.
    """
    modified = 0
    for post_id in dict.fromkeys(post_ids):
        post = db.get(Post, post_id)
        if post is None:
            continue
        if not privilege.can_modify(post.author_id):
            logger.warning(
                "Skipping post %s: not modifiable by %s", post_id, privilege.user_id
            )
            continue
        apply_changes(db, post, changes)
        _commit(db)
        modified += 1
    logger.info("Bulk updated %d of %d posts", modified, len(post_ids))
    return modified


def bulk_delete(db: Session, post_ids: list[int], privilege: Privilege) -> int:
    """Delete each post the caller may modify; returns how many were deleted."""
    deleted = 0
    for post_id in dict.fromkeys(post_ids):
        post = db.get(Post, post_id)
        if post is None:
            continue
        if not privilege.can_modify(post.author_id):
            logger.warning(
                "Skipping post %s: not modifiable by %s", post_id, privilege.user_id
            )
            continue
        db.delete(post)
        db.commit()
        deleted += 1
    logger.info("Bulk deleted %d of %d posts", deleted, len(post_ids))
    return deleted


def list_featured(
    db: Session, privilege: Privilege, now: datetime, limit: int
) -> list[Post]:
    query = build_post_query(PostFilters(featured=True), privilege, now)
    return list(db.scalars(query.statement().limit(limit)).all())


def list_trending(
    db: Session, privilege: Privilege, now: datetime, limit: int
) -> list[Post]:
    query = build_post_query(PostFilters(sort="-views"), privilege, now)
    return list(db.scalars(query.statement().limit(limit)).all())


def list_related(
    db: Session, post_id: int, privilege: Privilege, now: datetime, limit: int
) -> list[Post]:
    """Visible posts sharing the category or any tag with ``post_id``.

    The anchor post itself must be visible to the caller.
    """
    visible = visibility_predicate(privilege, now).clauses()
    current = db.scalars(select(Post).where(Post.id == post_id, *visible)).first()
    if current is None:
        raise NotFoundError("Blog post not found")
    related_to = [Post.category == current.category]
    if current.tag_list:
        related_to.append(tag_overlap(current.tag_list))
    statement = (
        select(Post)
        .where(
            Post.id != current.id,
            or_(*related_to),
            *visible,
        )
        .order_by(Post.published_at.desc().nulls_last(), Post.id.desc())
        .limit(limit)
    )
    return list(db.scalars(statement).all())


def category_stats(db: Session) -> list[dict[str, Any]]:
    """Published post counts per category, most populated first."""
    rows = db.execute(
        select(
            Post.category,
            func.count(Post.id).label("count"),
            func.max(Post.published_at).label("latest_post"),
        )
        .where(Post.status == PostStatus.PUBLISHED.value)
        .group_by(Post.category)
        .order_by(func.count(Post.id).desc(), Post.category)
    ).all()

    stats = []
    for row in rows:
        try:
            name, description = CATEGORY_INFO[Category(row.category)]
        except ValueError:
            name = description = None
        stats.append(
            {
                "category": row.category,
                "name": name,
                "description": description,
                "count": row.count,
                "latest_post": row.latest_post,
            }
        )
    return stats


def tag_stats(db: Session, limit: int = 50) -> list[dict[str, Any]]:
    """Most used tags across published posts."""
    counts: Counter[str] = Counter()
    for raw in db.scalars(
        select(Post.tags).where(Post.status == PostStatus.PUBLISHED.value)
    ):
        try:
            counts.update(json.loads(raw) if raw else [])
        except json.JSONDecodeError:
            logger.warning("Skipping malformed tags payload: %r", raw)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [{"name": name, "count": count} for name, count in ranked[:limit]]


def dashboard_stats(db: Session) -> dict[str, int]:
    by_status = dict(
        db.execute(select(Post.status, func.count(Post.id)).group_by(Post.status)).all()
    )
    totals = db.execute(
        select(
            func.coalesce(func.sum(Post.views), 0),
            func.coalesce(func.sum(Post.likes), 0),
            func.coalesce(func.sum(Post.shares), 0),
        )
    ).one()
    return {
        "total_posts": sum(by_status.values()),
        "published_posts": by_status.get(PostStatus.PUBLISHED.value, 0),
        "draft_posts": by_status.get(PostStatus.DRAFT.value, 0),
        "archived_posts": by_status.get(PostStatus.ARCHIVED.value, 0),
        "total_views": totals[0],
        "total_likes": totals[1],
        "total_shares": totals[2],
        "total_users": db.scalar(select(func.count(User.id))) or 0,
    }
