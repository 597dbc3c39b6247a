"""Engagement counters (views, likes, shares) on blog posts."""

from __future__ import annotations

import logging
from enum import Enum

from sqlalchemy import select, update
from sqlalchemy.orm import Session, sessionmaker

from casino.errors import NotFoundError
from casino.models.post import Post
from casino.observability.metrics import ENGAGEMENT_INCREMENTS, VIEW_INCREMENT_FAILURES

logger = logging.getLogger(__name__)


class EngagementCounter(str, Enum):
    VIEWS = "views"
    LIKES = "likes"
    SHARES = "shares"


def increment(db: Session, post_id: int, counter: EngagementCounter) -> int:
    """Add one to ``counter`` on a post and return the stored value.

    The increment runs in the database (``SET n = n + 1``), so concurrent
    calls never lose an update. Calls are not de-duplicated.

    Raises:
        NotFoundError: if no post has ``post_id``.
    """
    column = getattr(Post, counter.value)
    result = db.execute(
        update(Post)
        .where(Post.id == post_id)
        # Keep updated_at: engagement is not an edit
        .values({column: column + 1, Post.updated_at: Post.updated_at})
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Blog post not found")
    db.commit()
    ENGAGEMENT_INCREMENTS.labels(counter.value).inc()
    return db.scalar(select(column).where(Post.id == post_id))


def record_view(session_factory: sessionmaker, post_id: int) -> None:
    """Background view increment scheduled after a post is served.

    Runs outside the request session. Failures are logged and dropped so a
    lost view never affects the read that triggered it.
    """
    try:
        with session_factory() as db:
            increment(db, post_id, EngagementCounter.VIEWS)
    except Exception:
        VIEW_INCREMENT_FAILURES.inc()
        logger.exception("Failed to increment views for post %s", post_id)
