"""
FastAPI Application - Casino marketing site API
"""

import logging
import secrets
from contextlib import asynccontextmanager
from pathlib import Path

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session

from casino import __version__
from casino.auth import auth_backend, fastapi_users
from casino.config import settings
from casino.database import Base, engine, get_db
from casino.errors import register_exception_handlers
from casino.models import Bonus, Game, Post, User  # noqa: F401 - needed for metadata
from casino.observability import MetricsMiddleware, configure_logging, metrics_response
from casino.routers.admin import router as admin_router
from casino.routers.blog import router as blog_router
from casino.routers.games import bonus_router
from casino.routers.games import router as games_router
from casino.routers.users import router as users_router
from casino.schemas.user import UserCreate, UserRead, UserUpdate
from casino.security import Role, limiter

logger = logging.getLogger("casino.main")


# ==========================================
# Database Initialization & Seeding
# ==========================================
def init_database() -> None:
    url = make_url(settings.resolved_database_url)
    on_disk = url.database not in (None, "", ":memory:")
    if url.get_backend_name() == "sqlite" and on_disk:
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)


async def create_admin_user_on_startup() -> None:
    """Create the bootstrap admin account from ADMIN_EMAIL / ADMIN_PASSWORD."""
    if not (settings.admin_email and settings.admin_password):
        return

    from fastapi_users.exceptions import UserAlreadyExists, UserNotExists
    from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase

    from casino.auth import UserManager
    from casino.database_async import AsyncSessionLocal

    async with AsyncSessionLocal() as session:
        user_db = SQLAlchemyUserDatabase(session, User)
        user_manager = UserManager(user_db)

        try:
            await user_manager.get_by_email(settings.admin_email)
            logger.info("Admin user %s exists", settings.admin_email)
            return
        except UserNotExists:
            pass

        try:
            user = await user_manager.create(
                UserCreate(
                    email=settings.admin_email,
                    password=settings.admin_password,
                    username="admin",
                    is_superuser=True,
                    is_verified=True,
                )
            )
        except UserAlreadyExists:
            return
        # Staff roles are never granted through UserCreate
        await user_db.update(user, {"role": Role.ADMIN.value})
        logger.info("Created admin user %s", user.email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application")
    init_database()
    await create_admin_user_on_startup()
    logger.info("Application ready")
    yield
    logger.info("Shutting down application")


configure_logging(settings.log_level)

# ==========================================
# FastAPI Application
# ==========================================
app = FastAPI(
    title="Casino Site API",
    description="Blog, back office and catalogue API for the casino marketing site",
    version=__version__,
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)
# Order: compression → rate-limit/metrics → correlation id
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")
app.state.limiter = limiter
register_exception_handlers(app)
if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Accept", "Content-Type", "Authorization"],
    )


# ==========================================
# Health & readiness
# ==========================================
@app.get("/healthz", tags=["system"], summary="Health check", response_model=dict)
def health_check(db: Session = Depends(get_db)) -> dict:
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Health check failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="unhealthy"
        )
    if settings.is_production:
        return {"status": "healthy"}
    return {"status": "healthy", "database": "connected", "version": app.version}


@app.get("/readyz", tags=["system"], summary="Readiness check", response_model=dict)
def readiness_check(db: Session = Depends(get_db)) -> dict:
    try:
        db.execute(text("SELECT 1 FROM posts LIMIT 1"))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        )
    return {"status": "ready"}


# ==========================================
# Metrics (Protected with HTTP Basic Auth)
# ==========================================
security = HTTPBasic(auto_error=False)


def verify_metrics_auth(
    credentials: HTTPBasicCredentials | None = Depends(security),
) -> None:
    """Verify HTTP Basic Auth credentials for the metrics endpoint."""
    if not settings.metrics_password:
        return
    if credentials is not None:
        correct_username = secrets.compare_digest(
            credentials.username, settings.metrics_username
        )
        correct_password = secrets.compare_digest(
            credentials.password, settings.metrics_password
        )
        if correct_username and correct_password:
            return
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid credentials",
        headers={"WWW-Authenticate": "Basic"},
    )


@app.get("/metrics", include_in_schema=False)
def metrics(_: None = Depends(verify_metrics_auth)):
    """Prometheus metrics endpoint."""
    return metrics_response()


# ==========================================
# Routers
# ==========================================
app.include_router(blog_router)
app.include_router(admin_router)
app.include_router(users_router)
app.include_router(games_router)
app.include_router(bonus_router)
# Auth
app.include_router(
    fastapi_users.get_auth_router(auth_backend), prefix="/api/auth/jwt", tags=["auth"]
)
app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/api/auth",
    tags=["auth"],
)
app.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix="/api/users",
    tags=["users"],
)
