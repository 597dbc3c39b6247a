"""Offset pagination over SQLAlchemy select statements."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from casino.config import settings
from casino.errors import InvalidArgumentError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageRequest:
    page: int
    limit: int

    @classmethod
    def build(
        cls,
        page: int | None = None,
        limit: int | None = None,
        *,
        max_limit: int | None = None,
    ) -> PageRequest:
        """Normalize caller input.

        Pages start at 1 and lower values are clamped up. The limit falls back
        to the configured default and is clamped to ``max_limit``; a zero or
        negative limit is rejected.
        """
        if limit is None:
            limit = settings.default_page_size
        if limit <= 0:
            raise InvalidArgumentError("limit must be a positive integer")
        ceiling = max_limit if max_limit is not None else settings.max_page_size
        return cls(page=max(1, page or 1), limit=min(limit, ceiling))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class PageResult(Generic[T]):
    items: Sequence[T]
    current_page: int
    total_pages: int
    total_results: int


def count_pages(total: int, limit: int) -> int:
    """Number of pages for ``total`` results; an empty listing still has one."""
    if limit <= 0:
        raise InvalidArgumentError("limit must be a positive integer")
    return max(1, math.ceil(total / limit))


def paginate(db: Session, statement: Select, request: PageRequest) -> PageResult:
    """Count all matches, then fetch one page of them.

    The count and the fetch are two separate reads, so concurrent writes can
    make ``total_results`` disagree with ``items``.
    """
    count_statement = select(func.count()).select_from(
        statement.order_by(None).subquery()
    )
    total = db.scalar(count_statement) or 0
    items = db.scalars(statement.offset(request.offset).limit(request.limit)).all()
    return PageResult(
        items=items,
        current_page=request.page,
        total_pages=count_pages(total, request.limit),
        total_results=total,
    )
