"""Pydantic schemas for blog posts."""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field, field_validator

from casino.schemas.common import CamelModel

SLUG_PATTERN = r"^[a-z0-9-]+$"


class PostStatus(str, Enum):
    """Blog post status."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class Category(str, Enum):
    """Blog post category."""

    GAME_GUIDES = "game-guides"
    STRATEGIES = "strategies"
    NEWS = "news"
    PROMOTIONS = "promotions"
    WINNER_STORIES = "winner-stories"
    INDUSTRY_UPDATES = "industry-updates"
    NEW_RELEASES = "new-releases"
    TIPS_TRICKS = "tips-tricks"
    RESPONSIBLE_GAMBLING = "responsible-gambling"


CATEGORY_INFO: dict[Category, tuple[str, str]] = {
    Category.GAME_GUIDES: ("Game Guides", "Learn how to play casino games"),
    Category.STRATEGIES: ("Strategies", "Winning strategies and tips"),
    Category.NEWS: ("News", "Latest casino industry news"),
    Category.PROMOTIONS: ("Promotions", "Current offers and promotions"),
    Category.WINNER_STORIES: ("Winner Stories", "Success stories from players"),
    Category.INDUSTRY_UPDATES: ("Industry Updates", "Casino industry insights"),
    Category.NEW_RELEASES: ("New Releases", "Latest game releases"),
    Category.TIPS_TRICKS: ("Tips & Tricks", "Pro tips for better gaming"),
    Category.RESPONSIBLE_GAMBLING: ("Responsible Gambling", "Safe gaming practices"),
}


def normalize_tags(values: list[str]) -> list[str]:
    """Strip, lowercase and de-duplicate tags, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        tag = value.strip().lower()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


class _PostInput(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("tags", check_fields=False)
    @classmethod
    def _normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return None if value is None else normalize_tags(value)


class PostCreate(_PostInput):
    """Schema for creating a post; the slug is derived from the title if absent."""

    title: str = Field(..., min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200, pattern=SLUG_PATTERN)
    excerpt: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    category: Category
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    featured_image_url: str | None = Field(None, max_length=500)
    featured_image_alt: str | None = Field(None, max_length=200)
    meta_title: str | None = Field(None, max_length=60)
    meta_description: str | None = Field(None, max_length=160)
    status: PostStatus = PostStatus.DRAFT
    scheduled_for: datetime | None = None
    is_featured: bool = False
    is_trending: bool = False
    is_sticky: bool = False
    comments_enabled: bool = True


class PostUpdate(_PostInput):
    """Schema for updating a post. Only fields present in the payload change."""

    title: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200, pattern=SLUG_PATTERN)
    excerpt: str | None = Field(None, min_length=1, max_length=500)
    content: str | None = Field(None, min_length=1)
    category: Category | None = None
    tags: list[str] | None = None
    keywords: list[str] | None = None
    featured_image_url: str | None = Field(None, max_length=500)
    featured_image_alt: str | None = Field(None, max_length=200)
    meta_title: str | None = Field(None, max_length=60)
    meta_description: str | None = Field(None, max_length=160)
    status: PostStatus | None = None
    scheduled_for: datetime | None = None
    is_featured: bool | None = None
    is_trending: bool | None = None
    is_sticky: bool | None = None
    comments_enabled: bool | None = None


class BulkPostChanges(CamelModel):
    """Fields a bulk update may touch."""

    status: PostStatus | None = None
    category: Category | None = None
    is_featured: bool | None = None
    is_trending: bool | None = None
    is_sticky: bool | None = None


class BulkUpdateRequest(CamelModel):
    post_ids: list[int] = Field(..., min_length=1)
    updates: BulkPostChanges


class BulkDeleteRequest(CamelModel):
    post_ids: list[int] = Field(..., min_length=1)


class PostSummary(CamelModel):
    """List view of a post (no body content)."""

    id: int
    slug: str
    title: str
    excerpt: str
    category: str
    tags: list[str]
    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    status: PostStatus
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    is_featured: bool
    is_trending: bool
    is_sticky: bool
    views: int
    likes: int
    shares: int
    reading_time: int
    author_id: uuid.UUID
    author_name: str
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", "keywords", mode="before", check_fields=False)
    @classmethod
    def _decode_json_list(cls, value: object) -> object:
        if isinstance(value, str):
            return json.loads(value) if value else []
        return value


class PostDetail(PostSummary):
    """Full post including body content."""

    content: str
    keywords: list[str]
    comments_enabled: bool


class CategoryStat(CamelModel):
    category: str
    name: str | None = None
    description: str | None = None
    count: int
    latest_post: datetime | None = None


class TagStat(CamelModel):
    name: str
    count: int


class DashboardStats(CamelModel):
    total_posts: int
    published_posts: int
    draft_posts: int
    archived_posts: int
    total_views: int
    total_likes: int
    total_shares: int
    total_users: int
