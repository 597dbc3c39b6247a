"""Blog post model."""

from __future__ import annotations

import json
import uuid
from datetime import datetime

from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from casino.database import Base


class Post(Base):
    """Blog post.

    Status values:
    - draft: Not yet published
    - published: Live and visible once ``published_at`` has passed
    - archived: No longer listed but kept for records

    ``tags`` and ``keywords`` hold JSON arrays as text.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_category_status", "category", "status"),
        Index("ix_posts_status_published_at", "status", "published_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(200))
    excerpt: Mapped[str] = mapped_column(String(500))
    content: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(50), index=True)
    tags: Mapped[str] = mapped_column(Text, default="[]", server_default="[]")
    keywords: Mapped[str] = mapped_column(Text, default="[]", server_default="[]")

    featured_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    featured_image_alt: Mapped[str | None] = mapped_column(String(200), nullable=True)

    meta_title: Mapped[str | None] = mapped_column(String(60), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(String(160), nullable=True)

    is_featured: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="0", index=True
    )
    is_trending: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="0", index=True
    )
    is_sticky: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    comments_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="1"
    )

    status: Mapped[str] = mapped_column(
        String(20), default="draft", server_default="draft", index=True
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    scheduled_for: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    views: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    likes: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    shares: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    reading_time: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    author_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    author_name: Mapped[str] = mapped_column(String(150))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    @tag_list.setter
    def tag_list(self, value: list[str]) -> None:
        self.tags = json.dumps(value)

    @property
    def keyword_list(self) -> list[str]:
        return json.loads(self.keywords) if self.keywords else []

    @keyword_list.setter
    def keyword_list(self, value: list[str]) -> None:
        self.keywords = json.dumps(value)
