from __future__ import annotations

from datetime import datetime

from fastapi_users_db_sqlalchemy import SQLAlchemyBaseUserTableUUID
from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from casino.database import Base


class User(SQLAlchemyBaseUserTableUUID, Base):
    """Site account. Role and status gate the back office and post visibility."""

    __tablename__ = "users"

    username: Mapped[str | None] = mapped_column(
        String(50), unique=True, index=True, default=None
    )
    first_name: Mapped[str | None] = mapped_column(String(100), default=None)
    last_name: Mapped[str | None] = mapped_column(String(100), default=None)
    role: Mapped[str] = mapped_column(
        String(20), default="player", server_default="player", index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default="active", server_default="active", index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )

    @property
    def display_name(self) -> str:
        if self.username:
            return self.username
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
