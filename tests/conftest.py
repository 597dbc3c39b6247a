"""Test fixtures for API and database."""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

TESTS_ROOT = Path(__file__).parent

# Set DATABASE_URL *before* importing casino modules so the app engine and the
# fastapi-users async engine both point at the throwaway test database.
os.environ.setdefault("DATABASE_URL", "sqlite:///test_casino.db")
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from casino.auth import get_privilege  # noqa: E402
from casino.database import Base  # noqa: E402
from casino.database import get_db as db_dependency  # noqa: E402
from casino.database import get_session_factory  # noqa: E402
from casino.main import app  # noqa: E402
from casino.models import Bonus, Game, Post, User  # noqa: E402
from casino.security import privilege_for  # noqa: E402
from casino.security.rate_limit import limiter  # noqa: E402

# Disable rate limiting in tests to prevent cross-test 429 flakes
limiter.enabled = False

TEST_DB_PATH = Path("test_casino.db")
TESTING_SESSION_FACTORY: sessionmaker | None = None


@pytest.fixture(scope="session")
def client():
    global TESTING_SESSION_FACTORY
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

    engine = create_engine(
        f"sqlite:///{TEST_DB_PATH}",
        connect_args={"check_same_thread": False},
    )
    TESTING_SESSION_FACTORY = sessionmaker(
        bind=engine, autocommit=False, autoflush=False
    )
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TESTING_SESSION_FACTORY()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[db_dependency] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TESTING_SESSION_FACTORY

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(db_dependency, None)
    app.dependency_overrides.pop(get_session_factory, None)
    engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


@pytest.fixture
def db_session(client):
    if TESTING_SESSION_FACTORY is None:
        raise RuntimeError("Session factory not initialized")
    session = TESTING_SESSION_FACTORY()
    try:
        yield session
    finally:
        # Ensure database state is isolated between tests
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()


@pytest.fixture
def session_factory(client) -> sessionmaker:
    return TESTING_SESSION_FACTORY


@pytest.fixture
def login_as(client):
    """Run subsequent requests as ``user`` (``None`` for anonymous)."""

    def _login(user: User | None):
        privilege = privilege_for(user)
        app.dependency_overrides[get_privilege] = lambda: privilege
        return privilege

    yield _login
    app.dependency_overrides.pop(get_privilege, None)


@pytest.fixture
def make_user(db_session):
    counter = iter(range(1, 10_000))

    def _make(role: str = "player", status: str = "active", **fields) -> User:
        n = next(counter)
        user = User(
            email=fields.pop("email", f"user{n}@example.com"),
            hashed_password="not-a-real-hash",
            username=fields.pop("username", f"user{n}"),
            role=role,
            status=status,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user(role="admin", username="admin")


@pytest.fixture
def moderator(make_user) -> User:
    return make_user(role="moderator", username="moderator")


@pytest.fixture
def author(make_user) -> User:
    return make_user(role="author", username="author")


@pytest.fixture
def make_post(db_session, make_user):
    """Create posts; published an hour ago unless told otherwise."""
    counter = iter(range(1, 10_000))
    default_author: list[User] = []

    def _make(**fields) -> Post:
        n = next(counter)
        owner = fields.pop("author", None)
        if owner is None:
            if not default_author:
                default_author.append(make_user(role="author", username="writer"))
            owner = default_author[0]
        status = fields.pop("status", "published")
        published_at = fields.pop(
            "published_at",
            datetime.now(UTC) - timedelta(hours=n) if status == "published" else None,
        )
        post = Post(
            slug=fields.pop("slug", f"post-{n}"),
            title=fields.pop("title", f"Post {n}"),
            excerpt=fields.pop("excerpt", f"Excerpt for post {n}"),
            content=fields.pop("content", f"Body of post {n}"),
            category=fields.pop("category", "news"),
            tags=json.dumps(fields.pop("tags", [])),
            keywords=json.dumps(fields.pop("keywords", [])),
            status=status,
            published_at=published_at,
            author_id=owner.id,
            author_name=owner.display_name,
            reading_time=1,
            **fields,
        )
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make


@pytest.fixture
def make_game(db_session):
    counter = iter(range(1, 10_000))

    def _make(**fields) -> Game:
        n = next(counter)
        game = Game(
            name=fields.pop("name", f"Game {n}"),
            slug=fields.pop("slug", f"game-{n}"),
            category=fields.pop("category", "slots"),
            provider=fields.pop("provider", "NetEnt"),
            description=fields.pop("description", f"Description {n}"),
            **fields,
        )
        db_session.add(game)
        db_session.commit()
        db_session.refresh(game)
        return game

    return _make


@pytest.fixture
def make_bonus(db_session):
    def _make(**fields) -> Bonus:
        bonus = Bonus(
            name=fields.pop("name", "Welcome Pack"),
            type=fields.pop("type", "welcome"),
            description=fields.pop("description", "Match on first deposit"),
            start_date=fields.pop("start_date", datetime.now(UTC) - timedelta(days=1)),
            **fields,
        )
        db_session.add(bonus)
        db_session.commit()
        db_session.refresh(bonus)
        return bonus

    return _make
