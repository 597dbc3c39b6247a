"""Tests for blog router endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from casino.models.post import Post


@pytest.fixture
def sample_post(make_post) -> Post:
    return make_post(
        slug="blackjack-101",
        title="Blackjack 101",
        content="Hit or stand",
        category="game-guides",
        tags=["blackjack", "cards"],
        views=41,
    )


@pytest.fixture
def draft_post(make_post) -> Post:
    return make_post(slug="draft-post", title="Draft Post", status="draft")


# Listing
def test_list_posts_envelope(client: TestClient, sample_post: Post):
    response = client.get("/api/posts")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["totalResults"] == 1
    item = body["data"]["items"][0]
    assert item["slug"] == "blackjack-101"
    assert item["tags"] == ["blackjack", "cards"]
    assert "content" not in item
    assert "readingTime" in item


def test_list_posts_paginates(client: TestClient, make_post):
    for _ in range(12):
        make_post()
    response = client.get("/api/posts", params={"page": 2, "limit": 5})
    data = response.json()["data"]
    assert len(data["items"]) == 5
    assert data["currentPage"] == 2
    assert data["totalPages"] == 3
    assert data["totalResults"] == 12


def test_empty_listing(client: TestClient, db_session: Session):
    data = client.get("/api/posts").json()["data"]
    assert data == {"items": [], "currentPage": 1, "totalPages": 1, "totalResults": 0}


def test_limit_is_clamped(client: TestClient, sample_post: Post):
    response = client.get("/api/posts", params={"limit": 500})
    assert response.status_code == 200


def test_zero_limit_is_rejected(client: TestClient, db_session: Session):
    response = client.get("/api/posts", params={"limit": 0})
    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_drafts_hidden_from_public(
    client: TestClient, sample_post: Post, draft_post: Post
):
    slugs = [item["slug"] for item in client.get("/api/posts").json()["data"]["items"]]
    assert slugs == ["blackjack-101"]


def test_status_filter_ignored_for_anonymous(
    client: TestClient, sample_post: Post, draft_post: Post
):
    response = client.get("/api/posts", params={"status": "draft"})
    slugs = [item["slug"] for item in response.json()["data"]["items"]]
    assert slugs == ["blackjack-101"]


def test_status_filter_honored_for_admin(
    client: TestClient, login_as, admin, sample_post: Post, draft_post: Post
):
    login_as(admin)
    response = client.get("/api/posts", params={"status": "draft"})
    slugs = [item["slug"] for item in response.json()["data"]["items"]]
    assert slugs == ["draft-post"]


def test_scheduled_posts_hidden_until_due(client: TestClient, make_post):
    make_post(slug="later", published_at=datetime.now(UTC) + timedelta(hours=2))
    assert client.get("/api/posts").json()["data"]["totalResults"] == 0


def test_filter_by_category_and_tags(client: TestClient, make_post):
    make_post(slug="guide", category="game-guides", tags=["poker"])
    make_post(slug="news", category="news", tags=["poker"])
    make_post(slug="other-guide", category="game-guides", tags=["slots"])

    response = client.get(
        "/api/posts", params={"category": "game-guides", "tags": "poker,roulette"}
    )
    slugs = [item["slug"] for item in response.json()["data"]["items"]]
    assert slugs == ["guide"]


def test_search_is_case_insensitive(client: TestClient, sample_post: Post, make_post):
    make_post(slug="roulette", title="Roulette")
    response = client.get("/api/posts", params={"search": "BLACKJACK"})
    slugs = [item["slug"] for item in response.json()["data"]["items"]]
    assert slugs == ["blackjack-101"]


def test_punctuation_search_does_not_match_tags(client: TestClient, make_post):
    make_post(tags=["poker", "cards"])
    make_post(tags=["wheel", "spin"])
    for term in (",", '"'):
        data = client.get("/api/posts", params={"search": term}).json()["data"]
        assert data["totalResults"] == 0


def test_blank_search_returns_everything(client: TestClient, make_post):
    make_post()
    make_post()
    data = client.get("/api/posts", params={"search": "  "}).json()["data"]
    assert data["totalResults"] == 2


def test_sort_by_views(client: TestClient, make_post):
    make_post(slug="quiet", views=1)
    make_post(slug="popular", views=100)
    response = client.get("/api/posts", params={"sort": "-views"})
    slugs = [item["slug"] for item in response.json()["data"]["items"]]
    assert slugs == ["popular", "quiet"]


# Detail
def test_get_post_by_slug(client: TestClient, sample_post: Post):
    response = client.get("/api/posts/blackjack-101")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["content"] == "Hit or stand"
    assert data["views"] == 41


def test_get_post_increments_views(
    client: TestClient, db_session: Session, sample_post: Post
):
    client.get("/api/posts/blackjack-101")
    db_session.refresh(sample_post)
    assert sample_post.views == 42


def test_get_draft_post_404_for_public(client: TestClient, draft_post: Post):
    response = client.get("/api/posts/draft-post")
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Blog post not found"}


def test_get_draft_post_visible_to_admin(
    client: TestClient, login_as, admin, draft_post: Post
):
    login_as(admin)
    assert client.get("/api/posts/draft-post").status_code == 200


def test_get_missing_post_404(client: TestClient, db_session: Session):
    assert client.get("/api/posts/nope").status_code == 404


# Engagement
def test_like_post(client: TestClient, db_session: Session, sample_post: Post):
    response = client.post(f"/api/posts/{sample_post.id}/like")
    assert response.status_code == 200
    assert response.json()["data"] == {"likes": 1}
    assert client.post(f"/api/posts/{sample_post.id}/like").json()["data"] == {
        "likes": 2
    }


def test_share_post(client: TestClient, sample_post: Post):
    response = client.post(f"/api/posts/{sample_post.id}/share")
    assert response.json()["data"] == {"shares": 1}


def test_like_missing_post(client: TestClient, db_session: Session):
    response = client.post("/api/posts/999/like")
    assert response.status_code == 404


# Aggregates
def test_featured_posts(client: TestClient, make_post):
    make_post(slug="featured", is_featured=True)
    make_post(slug="plain")
    response = client.get("/api/posts/featured")
    assert [item["slug"] for item in response.json()["data"]] == ["featured"]


def test_trending_posts_ordered_by_views(client: TestClient, make_post):
    make_post(slug="low", views=5)
    make_post(slug="high", views=50)
    response = client.get("/api/posts/trending", params={"limit": 1})
    assert [item["slug"] for item in response.json()["data"]] == ["high"]


def test_related_posts(client: TestClient, make_post):
    anchor = make_post(category="news", tags=["poker"])
    sibling = make_post(category="strategies", tags=["poker"])
    make_post(category="promotions")
    response = client.get(f"/api/posts/{anchor.id}/related")
    assert [item["id"] for item in response.json()["data"]] == [sibling.id]


def test_related_posts_of_draft_are_not_found(client: TestClient, draft_post: Post):
    response = client.get(f"/api/posts/{draft_post.id}/related")
    assert response.status_code == 404
    assert client.get("/api/posts/99999/related").status_code == 404


def test_categories(client: TestClient, make_post):
    make_post(category="news")
    make_post(category="news")
    make_post(category="promotions")
    data = client.get("/api/posts/categories").json()["data"]
    assert data[0]["category"] == "news"
    assert data[0]["count"] == 2
    assert data[0]["name"] == "News"
    assert "latestPost" in data[0]


def test_tags(client: TestClient, make_post):
    make_post(tags=["poker", "slots"])
    make_post(tags=["poker"])
    data = client.get("/api/posts/tags").json()["data"]
    assert data == [{"name": "poker", "count": 2}, {"name": "slots", "count": 1}]
