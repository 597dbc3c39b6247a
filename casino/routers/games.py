"""Public game and bonus catalogue."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from casino.auth import require_authenticated
from casino.config import settings
from casino.database import get_db
from casino.errors import NotFoundError, ValidationFailedError
from casino.models.game import Bonus, Game
from casino.schemas.common import Envelope, Page, page_payload
from casino.schemas.game import BonusClaim, BonusOut, ClaimedBonus, GameOut
from casino.security import Privilege, limiter
from casino.services.pagination import PageRequest, paginate

router = APIRouter(prefix="/api/games", tags=["games"])
bonus_router = APIRouter(prefix="/api/bonuses", tags=["bonuses"])

_CATALOGUE_ORDER = (Game.is_hot.desc(), Game.is_featured.desc(), Game.created_at.desc())


def _active_games():
    return select(Game).where(Game.is_active.is_(True))


@router.get("", response_model=Envelope[Page[GameOut]])
@limiter.limit(settings.public_read_limit)
def list_games(
    request: Request,
    category: str | None = Query(None),
    provider: str | None = Query(None),
    search: str | None = Query(None),
    page: int = Query(1),
    limit: int = Query(20),
    db: Session = Depends(get_db),
):
    statement = _active_games()
    if category:
        statement = statement.where(Game.category == category)
    if provider:
        statement = statement.where(Game.provider == provider)
    term = (search or "").strip()
    if term:
        statement = statement.where(
            or_(
                Game.name.icontains(term, autoescape=True),
                Game.description.icontains(term, autoescape=True),
            )
        )
    statement = statement.order_by(*_CATALOGUE_ORDER, Game.id.desc())
    result = paginate(db, statement, PageRequest.build(page, limit))
    return {"data": page_payload(result)}


@router.get("/popular", response_model=Envelope[list[GameOut]])
@limiter.limit(settings.public_read_limit)
def popular_games(request: Request, db: Session = Depends(get_db)):
    statement = _active_games().order_by(Game.popularity.desc(), Game.id).limit(10)
    return {"data": db.scalars(statement).all()}


@router.get("/featured", response_model=Envelope[list[GameOut]])
@limiter.limit(settings.public_read_limit)
def featured_games(request: Request, db: Session = Depends(get_db)):
    statement = (
        _active_games()
        .where(Game.is_featured.is_(True))
        .order_by(Game.created_at.desc(), Game.id.desc())
        .limit(8)
    )
    return {"data": db.scalars(statement).all()}


@router.get("/category/{category}", response_model=Envelope[Page[GameOut]])
@limiter.limit(settings.public_read_limit)
def games_by_category(
    request: Request,
    category: str,
    page: int = Query(1),
    limit: int = Query(20),
    db: Session = Depends(get_db),
):
    statement = (
        _active_games()
        .where(Game.category == category)
        .order_by(Game.is_hot.desc(), Game.created_at.desc(), Game.id.desc())
    )
    result = paginate(db, statement, PageRequest.build(page, limit))
    return {"data": page_payload(result)}


@router.get("/{game_id}", response_model=Envelope[GameOut])
@limiter.limit(settings.public_read_limit)
def get_game(request: Request, game_id: int, db: Session = Depends(get_db)):
    game = db.get(Game, game_id)
    if game is None:
        raise NotFoundError("Game not found")
    return {"data": game}


def _available_bonuses(now: datetime):
    return select(Bonus).where(
        Bonus.is_active.is_(True),
        Bonus.start_date <= now,
        or_(Bonus.end_date.is_(None), Bonus.end_date >= now),
    )


def _is_available(bonus: Bonus, now: datetime) -> bool:
    # SQLite hands datetimes back naive; everything is stored as UTC
    now = now.replace(tzinfo=None)
    start = bonus.start_date.replace(tzinfo=None)
    end = bonus.end_date.replace(tzinfo=None) if bonus.end_date else None
    return start <= now and (end is None or end >= now)


@bonus_router.get("", response_model=Envelope[list[BonusOut]])
@limiter.limit(settings.public_read_limit)
def list_bonuses(request: Request, db: Session = Depends(get_db)):
    statement = _available_bonuses(datetime.now(UTC)).order_by(
        Bonus.created_at.desc(), Bonus.id.desc()
    )
    return {"data": db.scalars(statement).all()}


@bonus_router.get("/welcome", response_model=Envelope[list[BonusOut]])
@limiter.limit(settings.public_read_limit)
def welcome_bonuses(request: Request, db: Session = Depends(get_db)):
    statement = (
        _available_bonuses(datetime.now(UTC))
        .where(Bonus.type == "welcome")
        .order_by(Bonus.amount.desc().nulls_last(), Bonus.id)
    )
    return {"data": db.scalars(statement).all()}


@bonus_router.get("/{bonus_id}", response_model=Envelope[BonusOut])
@limiter.limit(settings.public_read_limit)
def get_bonus(request: Request, bonus_id: int, db: Session = Depends(get_db)):
    bonus = db.get(Bonus, bonus_id)
    if bonus is None:
        raise NotFoundError("Bonus not found")
    return {"data": bonus}


@bonus_router.post("/claim", response_model=Envelope[ClaimedBonus])
def claim_bonus(
    payload: BonusClaim,
    db: Session = Depends(get_db),
    privilege: Privilege = Depends(require_authenticated),
):
    """Check a bonus can be claimed. Claims are not recorded."""
    bonus = db.get(Bonus, payload.bonus_id)
    if bonus is None:
        raise NotFoundError("Bonus not found")
    if not bonus.is_active:
        raise ValidationFailedError("Bonus is not active")
    if bonus.requires_code and bonus.code != payload.code:
        raise ValidationFailedError("Invalid bonus code")
    if not _is_available(bonus, datetime.now(UTC)):
        raise ValidationFailedError("Bonus is not currently available")
    return {"data": bonus}
