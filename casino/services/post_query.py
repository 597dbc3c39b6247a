"""Translate listing filters and caller privilege into a post query.

Building a query is pure: :func:`build_post_query` only normalizes its inputs
into frozen values, so equal inputs compare equal. :meth:`PostQuery.statement`
compiles such a value into a SQLAlchemy ``Select`` without touching the
database.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Select, case, false, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from casino.models.post import Post
from casino.schemas.blog import PostStatus
from casino.security.privilege import Privilege

# Sort keys are (field, descending) pairs; "relevance" is the search score.
OrderKey = tuple[str, bool]

DEFAULT_ORDER: tuple[OrderKey, ...] = (("published_at", True),)
SEARCH_ORDER: tuple[OrderKey, ...] = (("relevance", True), ("published_at", True))
TRENDING_ORDER: tuple[OrderKey, ...] = (("views", True), ("published_at", True))
TIE_BREAK: OrderKey = ("id", True)

SORT_OPTIONS: dict[str, tuple[OrderKey, ...]] = {
    "-publishedAt": (("published_at", True),),
    "publishedAt": (("published_at", False),),
    "-createdAt": (("created_at", True),),
    "createdAt": (("created_at", False),),
    "-views": (("views", True), ("published_at", True)),
    "-likes": (("likes", True), ("published_at", True)),
    "title": (("title", False),),
    "-title": (("title", True),),
}

ALL = "all"

_TITLE_WEIGHT = 4
_TAG_WEIGHT = 3
_TEXT_WEIGHTS = (
    (Post.excerpt, 2),
    (Post.content, 1),
)

_SORT_COLUMNS = {
    "published_at": Post.published_at,
    "created_at": Post.created_at,
    "views": Post.views,
    "likes": Post.likes,
    "title": Post.title,
    "id": Post.id,
}


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def split_tags(raw: str | None) -> tuple[str, ...]:
    """Parse a comma separated tag list into a normalized tuple."""
    if not raw:
        return ()
    seen: dict[str, None] = {}
    for item in raw.split(","):
        tag = item.strip().lower()
        if tag:
            seen.setdefault(tag, None)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class PostFilters:
    """Caller supplied listing filters, already normalized."""

    category: str | None = None
    tags: tuple[str, ...] = ()
    author: str | None = None
    featured: bool = False
    trending: bool = False
    search: str | None = None
    status: str | None = None
    sort: str | None = None

    @classmethod
    def from_params(
        cls,
        *,
        category: str | None = None,
        tags: str | None = None,
        author: str | None = None,
        featured: bool = False,
        trending: bool = False,
        search: str | None = None,
        status: str | None = None,
        sort: str | None = None,
    ) -> PostFilters:
        return cls(
            category=_clean(category),
            tags=split_tags(tags),
            author=_clean(author),
            featured=featured,
            trending=trending,
            search=_clean(search),
            status=_clean(status),
            sort=_clean(sort),
        )


@dataclass(frozen=True, slots=True)
class PostPredicate:
    """Conjunction of optional conditions a post must satisfy."""

    status: str | None = None
    published_before: datetime | None = None
    category: str | None = None
    tags: tuple[str, ...] = ()
    author: str | None = None
    featured_only: bool = False
    trending_only: bool = False
    search: str | None = None

    def clauses(self) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []
        if self.status is not None:
            conditions.append(Post.status == self.status)
        if self.published_before is not None:
            conditions.append(Post.published_at <= self.published_before)
        if self.category is not None:
            conditions.append(Post.category == self.category)
        if self.author is not None:
            conditions.append(_author_clause(self.author))
        if self.featured_only:
            conditions.append(Post.is_featured.is_(True))
        if self.trending_only:
            conditions.append(Post.is_trending.is_(True))
        if self.tags:
            conditions.append(tag_overlap(self.tags))
        if self.search is not None:
            matches = _search_matches(self.search)
            conditions.append(or_(*(match for match, _ in matches)))
        return conditions


@dataclass(frozen=True, slots=True)
class PostQuery:
    predicate: PostPredicate
    order: tuple[OrderKey, ...]

    def order_clauses(self) -> list[ColumnElement]:
        clauses: list[ColumnElement] = []
        for field, descending in self.order:
            if field == "relevance":
                score = relevance_score(self.predicate.search or "")
                clauses.append(score.desc())
                continue
            column = _SORT_COLUMNS[field]
            ordered = column.desc() if descending else column.asc()
            clauses.append(ordered.nulls_last())
        return clauses

    def statement(self) -> Select:
        return (
            select(Post)
            .where(*self.predicate.clauses())
            .order_by(*self.order_clauses())
        )


def _author_clause(author: str) -> ColumnElement[bool]:
    try:
        author_id = uuid.UUID(author)
    except ValueError:
        return false()
    return Post.author_id == author_id


def tag_overlap(tags: tuple[str, ...] | list[str]) -> ColumnElement[bool]:
    """Match posts carrying at least one of ``tags``."""
    # tags are stored as a JSON array, so match the quoted element
    return or_(
        *(Post.tags.contains(json.dumps(tag), autoescape=True) for tag in tags)
    )


def tag_search(term: str) -> ColumnElement[bool]:
    """Match posts with a tag element containing ``term``, case-insensitively."""
    # search inside array elements, never the JSON punctuation around them
    elements = func.json_each(Post.tags).table_valued("value")
    matching = elements.c.value.icontains(term, autoescape=True)
    return select(elements.c.value).where(matching).exists()


def _search_matches(term: str) -> list[tuple[ColumnElement[bool], int]]:
    return [
        (Post.title.icontains(term, autoescape=True), _TITLE_WEIGHT),
        (tag_search(term), _TAG_WEIGHT),
        *(
            (column.icontains(term, autoescape=True), weight)
            for column, weight in _TEXT_WEIGHTS
        ),
    ]


def relevance_score(term: str) -> ColumnElement[int]:
    """Weighted score of where ``term`` occurs in a post."""
    score = None
    for match, weight in _search_matches(term):
        part = case((match, weight), else_=0)
        score = part if score is None else score + part
    return score


def visibility_predicate(
    privilege: Privilege, now: datetime, status: str | None = None
) -> PostPredicate:
    """Status restriction for a caller; public callers only see live posts."""
    if privilege.sees_unpublished:
        if status is None or status == ALL:
            return PostPredicate()
        return PostPredicate(status=status)
    return PostPredicate(status=PostStatus.PUBLISHED.value, published_before=now)


def _ordering(filters: PostFilters) -> tuple[OrderKey, ...]:
    if filters.trending:
        order = TRENDING_ORDER
    elif filters.search is not None:
        order = SEARCH_ORDER
    else:
        order = SORT_OPTIONS.get(filters.sort or "", DEFAULT_ORDER)
    return (*order, TIE_BREAK)


def build_post_query(
    filters: PostFilters, privilege: Privilege, now: datetime
) -> PostQuery:
    """Combine filters with the caller's visibility into one query value."""
    visibility = visibility_predicate(privilege, now, filters.status)
    category = filters.category
    if privilege.sees_unpublished and category == ALL:
        category = None
    predicate = PostPredicate(
        status=visibility.status,
        published_before=visibility.published_before,
        category=category,
        tags=filters.tags,
        author=filters.author,
        featured_only=filters.featured,
        trending_only=filters.trending,
        search=filters.search,
    )
    return PostQuery(predicate=predicate, order=_ordering(filters))
