"""
Notes Service - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database and NoteStore for this app, registers
       middleware, exception handlers and routers, and returns the app.
Who:   `notes serve`, `uvicorn notes_service.main:create_app --factory`, tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌────────┐               │
    │  │ Req ID   │→│ Logging  │→│ CORS   │               │
    │  └──────────┘ └──────────┘ └────────┘               │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌───────────────────────┐   │
    │  │ /api/notes (CRUD)  │ │ GET /health, GET /    │   │
    │  └────────────────────┘ └───────────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ BadRequest→400 │ NotFound→404│  │
    │  │ StoreError→500 │ anything else→500            │  │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  app.state: settings, database, store               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → create schema (abort if impossible) → log ready
    Shutdown: dispose database engine → log
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_service import __version__
from notes_service.config import Settings, settings as default_settings
from notes_service.database import Database
from notes_service.exceptions import (
    BadRequestError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from notes_service.middleware.logging import RequestLoggingMiddleware
from notes_service.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_service.routes import health, notes
from notes_service.schemas.note import ErrorResponse
from notes_service.services.note_store import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, schema creation, readiness log.
    Shutdown: engine disposal.

    A database that cannot be initialised aborts startup; the server
    never accepts requests it could not serve.
    """
    cfg: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(cfg.log_level)
    logger.info("Notes microservice starting up...")

    try:
        await database.create_all()
    except Exception as e:
        logger.error("Failed to initialise the database: %s", str(e))
        raise

    logger.info("Notes microservice running on port %d", cfg.port)
    logger.info("Health check: http://localhost:%d/health", cfg.port)
    logger.info("API documentation: http://localhost:%d/", cfg.port)

    yield

    logger.info("Shutting down gracefully...")
    await database.dispose()
    logger.info("Database connection closed")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str, **fields) -> JSONResponse:
    body = ErrorResponse(message=message, **fields).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI, cfg: Settings) -> None:
    """
    Map exception types to status codes and the failure envelope.

        ValidationError         → 400 "Validation failed" + errors
        BadRequestError         → 400
        NotFoundError           → 404
        StoreError (+ subclass) → 500 "Internal server error"
        HTTPException           → its own status (unknown route, wrong method)
        RequestValidationError  → 400
        Exception (fallback)    → 500

    500 responses carry the original error text only when cfg.debug is set.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("[%s] Validation failed: %s", request_id_var.get(""), exc.errors)
        return _error(400, exc.message, errors=exc.errors)

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        return _error(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        detail = exc.context.get("original_error", exc.message) if cfg.debug else None
        return _error(500, "Internal server error", error=detail)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        response = _error(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _error(400, "Bad request")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error(500, "Internal server error", error=str(exc) if cfg.debug else None)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Assemble the application.

    Args:
        settings: configuration; the process-wide `settings` when omitted
        database: pre-built Database (tests); built from settings when omitted

    Returns:
        FastAPI app with `state.settings`, `state.database` and `state.store`.
    """
    cfg = settings or default_settings
    db = database or Database(cfg)

    app = FastAPI(
        title="Notes Microservice API",
        description="CRUD service for notes with category and priority.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.database = db
    app.state.store = NoteStore(db.session_factory)

    # Last added = first to execute: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app, cfg)

    app.include_router(notes.router, prefix=cfg.api_prefix)
    app.include_router(health.router)

    return app
