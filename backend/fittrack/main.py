"""
FitTrack Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   create_app(settings) builds the engine, session factory and stores
       from the explicit Settings it is given and hangs them on app.state.
Who:   uvicorn (`uvicorn --factory fittrack.main:create_app`), or run().

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  Middleware:  [Request ID] → [Access Log]           │
    │  Routes:      /workouts  /users  /health            │
    │  State:       settings, engine, workout_store,      │
    │               user_store                            │
    │  Exception Handlers:                                │
    │    Validation→400  NotFound/NoRows→404              │
    │    Conflict→409    Transient→503   Database→500     │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncEngine

from fittrack import __version__
from fittrack.config import Settings, load_settings
from fittrack.database import create_engine, create_session_factory, dispose_engine
from fittrack.exceptions import (
    ConflictError,
    DatabaseError,
    FitTrackError,
    NoRowsAffectedError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from fittrack.middleware.logging import RequestLoggingMiddleware
from fittrack.middleware.request_id import RequestIDMiddleware, request_id_var
from fittrack.routes import health, users, workouts
from fittrack.services.user_store import UserStore
from fittrack.services.workout_store import WorkoutStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Called once at startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,  # Override any existing logging config
    )

    # These libraries log every statement / connection at INFO or DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: log the target database (never the password).
    Shutdown: dispose the engine so every pooled connection is closed.
    """
    settings: Settings = app.state.settings
    db = settings.database
    logger.info("=" * 60)
    logger.info("FitTrack Backend %s starting up...", __version__)
    logger.info(
        "Database: %s@%s:%d/%s (sslmode=%s)", db.user, db.host, db.port, db.dbname, db.sslmode
    )
    logger.info("=" * 60)

    yield

    logger.info("FitTrack Backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the application error taxonomy to HTTP status codes.

        ValidationError (incl. InvalidEntryError) → 400
        NotFoundError, NoRowsAffectedError        → 404
        ConflictError                             → 409
        TransientError                            → 503 + Retry-After
        DatabaseError, FitTrackError              → 500
        Exception (fallback)                      → 500

    Security: handlers never put SQL, constraint names or stack traces in
    the response; `context` is logged server-side only, except for
    validation errors where it names the offending field.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(NoRowsAffectedError)
    async def handle_no_rows_affected(request: Request, exc: NoRowsAffectedError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning(
            "[%s] Conflict: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return JSONResponse(status_code=409, content=_error_body("conflict", exc.message))

    @app.exception_handler(TransientError)
    async def handle_transient(request: Request, exc: TransientError):
        logger.error(
            "[%s] Transient database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=503,
            content=_error_body("service_unavailable", exc.message),
            headers={"Retry-After": "1"},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(FitTrackError)
    async def handle_app_error(request: Request, exc: FitTrackError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content=_error_body("server_error", exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment when omitted.
        engine:   Pre-built engine (tests pass an SQLite one); built from
                  settings.database when omitted.

    The engine is created here, not at import time, and does not connect
    until the first request borrows a connection.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    engine = engine or create_engine(settings.database, echo=settings.log_level == "DEBUG")
    session_factory = create_session_factory(engine)

    app = FastAPI(
        title="FitTrack API",
        description="Workouts composed of ordered exercise entries.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.workout_store = WorkoutStore(session_factory, settings.db_operation_timeout)
    app.state.user_store = UserStore(session_factory, settings.db_operation_timeout)

    # Last added = first to execute: RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(workouts.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: `fittrack-api`."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.backend_host,
        port=settings.backend_port,
        log_config=None,
    )
