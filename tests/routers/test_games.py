"""Tests for the game and bonus catalogue."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient


def test_list_games_hides_inactive(client: TestClient, make_game):
    make_game(slug="starburst", name="Starburst")
    make_game(slug="retired", is_active=False)
    data = client.get("/api/games").json()["data"]
    assert [item["slug"] for item in data["items"]] == ["starburst"]
    assert data["totalPages"] == 1


def test_list_games_hot_first(client: TestClient, make_game):
    make_game(slug="cold")
    make_game(slug="hot", is_hot=True)
    data = client.get("/api/games").json()["data"]
    assert data["items"][0]["slug"] == "hot"


def test_filter_games(client: TestClient, make_game):
    make_game(slug="blackjack", category="table", provider="Evolution")
    make_game(slug="gonzo", name="Gonzo's Quest", category="slots", provider="NetEnt")
    response = client.get("/api/games", params={"category": "table"})
    assert [item["slug"] for item in response.json()["data"]["items"]] == ["blackjack"]
    response = client.get("/api/games", params={"search": "GONZO"})
    assert [item["slug"] for item in response.json()["data"]["items"]] == ["gonzo"]
    response = client.get("/api/games", params={"provider": "NetEnt"})
    assert [item["slug"] for item in response.json()["data"]["items"]] == ["gonzo"]


def test_popular_and_featured(client: TestClient, make_game):
    make_game(slug="niche", popularity=1)
    make_game(slug="classic", popularity=99, is_featured=True)
    popular = client.get("/api/games/popular").json()["data"]
    assert [item["slug"] for item in popular] == ["classic", "niche"]
    featured = client.get("/api/games/featured").json()["data"]
    assert [item["slug"] for item in featured] == ["classic"]


def test_games_by_category(client: TestClient, make_game):
    make_game(slug="roulette", category="table")
    make_game(slug="reels", category="slots")
    data = client.get("/api/games/category/table").json()["data"]
    assert [item["slug"] for item in data["items"]] == ["roulette"]


def test_get_game(client: TestClient, make_game):
    game = make_game(rtp=96.1)
    data = client.get(f"/api/games/{game.id}").json()["data"]
    assert data["rtp"] == 96.1
    assert client.get("/api/games/9999").status_code == 404


def test_available_bonuses(client: TestClient, make_bonus):
    now = datetime.now(UTC)
    make_bonus(name="Live")
    make_bonus(name="Expired", end_date=now - timedelta(hours=1))
    make_bonus(name="Upcoming", start_date=now + timedelta(days=1))
    make_bonus(name="Disabled", is_active=False)
    data = client.get("/api/bonuses").json()["data"]
    assert [item["name"] for item in data] == ["Live"]


def test_welcome_bonuses(client: TestClient, make_bonus):
    make_bonus(name="Small", amount=10)
    make_bonus(name="Large", amount=500)
    make_bonus(name="Reload", type="reload", amount=1000)
    data = client.get("/api/bonuses/welcome").json()["data"]
    assert [item["name"] for item in data] == ["Large", "Small"]


def test_bonus_code_is_not_exposed(client: TestClient, make_bonus):
    bonus = make_bonus(code="SECRET", requires_code=True)
    data = client.get(f"/api/bonuses/{bonus.id}").json()["data"]
    assert "code" not in data
    assert data["requiresCode"] is True


def test_claim_requires_login(client: TestClient, make_bonus):
    bonus = make_bonus()
    response = client.post("/api/bonuses/claim", json={"bonusId": bonus.id})
    assert response.status_code == 401


def test_claim_bonus(client: TestClient, login_as, make_user, make_bonus):
    login_as(make_user())
    bonus = make_bonus(code="SPIN50", requires_code=True, amount=50)

    wrong = client.post("/api/bonuses/claim", json={"bonusId": bonus.id, "code": "x"})
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid bonus code"

    right = client.post(
        "/api/bonuses/claim", json={"bonusId": bonus.id, "code": "SPIN50"}
    )
    assert right.status_code == 200
    assert right.json()["data"]["amount"] == 50


def test_claim_expired_bonus(client: TestClient, login_as, make_user, make_bonus):
    login_as(make_user())
    bonus = make_bonus(end_date=datetime.now(UTC) - timedelta(days=1))
    response = client.post("/api/bonuses/claim", json={"bonusId": bonus.id})
    assert response.status_code == 400
    assert response.json()["message"] == "Bonus is not currently available"
