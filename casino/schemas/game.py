"""Schemas for the game and bonus catalogue."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from casino.schemas.common import CamelModel


class GameOut(CamelModel):
    id: int
    name: str
    slug: str
    category: str
    provider: str
    description: str
    image_url: str | None = None
    rtp: float | None = None
    min_bet: float | None = None
    max_bet: float | None = None
    is_featured: bool
    is_hot: bool
    popularity: int
    created_at: datetime


class BonusOut(CamelModel):
    id: int
    name: str
    type: str
    description: str
    amount: float | None = None
    percentage: float | None = None
    requires_code: bool
    start_date: datetime
    end_date: datetime | None = None


class BonusClaim(CamelModel):
    bonus_id: int
    code: str | None = Field(None, max_length=50)


class ClaimedBonus(CamelModel):
    id: int
    name: str
    type: str
    amount: float | None = None
    percentage: float | None = None
