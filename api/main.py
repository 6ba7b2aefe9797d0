"""FastAPI application for the golf tournament API."""

from contextlib import asynccontextmanager
from typing import Optional

import asyncpg
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from api.config import Settings
from api.logging_config import configure_logging
from api.storage import PrefixObjectStorage
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    NotFoundError,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the pool on startup, close it on shutdown."""
    settings: Settings = app.state.settings
    pool = DatabasePool()
    await pool.initialize(
        settings.database_url,
        min_size=settings.db_pool_min,
        max_size=settings.db_pool_max,
    )
    app.state.db_pool = pool
    app.state.db_manager = DatabaseManager(pool.pool)
    if settings.apply_schema:
        await app.state.db_manager.initialize_schema()
    yield
    await pool.close()


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateError)
    async def duplicate(request: Request, exc: DuplicateError):
        logger.info("conflict", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=409, content={"detail": "Already exists"})

    @app.exception_handler(IntegrityError)
    async def integrity(request: Request, exc: IntegrityError):
        logger.warning("integrity_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=409, content={"detail": "Database conflict"})

    @app.exception_handler(ValidationError)
    async def invalid_model(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors(include_url=False, include_context=False, include_input=False)},
        )

    @app.exception_handler(DatabaseError)
    @app.exception_handler(asyncpg.PostgresError)
    async def database_failure(request: Request, exc: Exception):
        logger.error("database_error", path=request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Optional[Settings] = None, *, use_lifespan: bool = True) -> FastAPI:
    """
    Build the app. Tests pass use_lifespan=False and set app.state.db_manager
    themselves instead of connecting to PostgreSQL.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Golf Tournament API",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None,
    )
    app.state.settings = settings
    app.state.object_storage = PrefixObjectStorage(settings.object_storage_public_prefix)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)
        return await call_next(request)

    _register_exception_handlers(app)

    from api.routers import (
        achievements,
        auth,
        courses,
        gallery,
        rounds,
        scores,
        tournaments,
        users,
    )
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(courses.router, prefix="/api/courses", tags=["courses"])
    app.include_router(tournaments.router, prefix="/api/tournaments", tags=["tournaments"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(scores.router, prefix="/api/scores", tags=["scores"])
    app.include_router(gallery.router, prefix="/api/gallery", tags=["gallery"])
    app.include_router(achievements.router, prefix="/api", tags=["achievements"])

    @app.get("/api/health")
    async def health(request: Request):
        pool: Optional[DatabasePool] = getattr(request.app.state, "db_pool", None)
        healthy = await pool.health_check() if pool else False
        return {"status": "ok" if healthy else "degraded", "database": healthy}

    return app


app = create_app()
