"""Tests for offset pagination."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import select

from casino.errors import InvalidArgumentError
from casino.models.post import Post
from casino.security import ANONYMOUS
from casino.services.pagination import PageRequest, count_pages, paginate
from casino.services.post_query import PostFilters, build_post_query


def _public_listing():
    return build_post_query(PostFilters(), ANONYMOUS, datetime.now(UTC)).statement()


def test_page_request_defaults():
    request = PageRequest.build()
    assert request.page == 1
    assert request.limit == 10
    assert request.offset == 0


def test_page_is_clamped_to_one():
    assert PageRequest.build(page=0, limit=5).page == 1
    assert PageRequest.build(page=-3, limit=5).page == 1


def test_limit_is_clamped_to_maximum():
    assert PageRequest.build(limit=1000).limit == 100
    assert PageRequest.build(limit=50, max_limit=20).limit == 20


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_is_rejected(limit):
    with pytest.raises(InvalidArgumentError):
        PageRequest.build(limit=limit)


def test_offset():
    assert PageRequest.build(page=3, limit=5).offset == 10


@pytest.mark.parametrize(
    ("total", "limit", "pages"),
    [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (12, 5, 3)],
)
def test_count_pages(total, limit, pages):
    assert count_pages(total, limit) == pages


def test_paginate_reports_totals(db_session, make_post):
    for _ in range(12):
        make_post()
    statement = _public_listing()

    result = paginate(db_session, statement, PageRequest.build(page=2, limit=5))

    assert len(result.items) == 5
    assert result.current_page == 2
    assert result.total_pages == 3
    assert result.total_results == 12


def test_pages_are_disjoint_and_cover_everything(db_session, make_post):
    created = {make_post().id for _ in range(7)}
    statement = _public_listing()

    seen: list[int] = []
    for page in (1, 2, 3):
        result = paginate(db_session, statement, PageRequest.build(page, 3))
        seen.extend(post.id for post in result.items)

    assert len(seen) == len(set(seen)) == 7
    assert set(seen) == created


def test_page_past_the_end_is_empty(db_session, make_post):
    make_post()
    statement = select(Post).order_by(Post.id)
    result = paginate(db_session, statement, PageRequest.build(5, 10))
    assert result.items == []
    assert result.total_results == 1
    assert result.total_pages == 1


def test_empty_listing_has_one_page(db_session):
    result = paginate(db_session, select(Post), PageRequest.build())
    assert result.total_results == 0
    assert result.total_pages == 1
