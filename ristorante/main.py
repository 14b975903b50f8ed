"""
Ristorante API: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) builds the per-app resources
       (database, image store), registers middleware, exception handlers and
       routers, and returns the app.
Who:   uvicorn (`uvicorn ristorante.main:app`) and the test suite, which
       builds its own app from test settings.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────┐ ┌────────────┐ ┌──────────────┐ ┌────────┐   │
    │  │ Req ID │→│ Access Log │→│ CORS / 204   │→│  GZip  │   │
    │  └────────┘ └────────────┘ └──────────────┘ └────────┘   │
    │                                                          │
    │  app.state:                                              │
    │    settings     Settings                                 │
    │    database     Database | None   (DATABASE_URL)         │
    │    image_store  ImageStore | None (IMAGES_BUCKET / DIR)  │
    │                                                          │
    │  Exception Handlers:                                     │
    │    RistoranteError → its status_code, {"error": message} │
    │    404 / 405       → 404 {"error": "Not found"}          │
    │    Exception       → 500 {"error": "Internal server error"}
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Log which settings are missing (the app still boots)
    Shutdown:
    1. Dispose the database engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from ristorante import __version__
from ristorante.config import Settings, get_settings
from ristorante.database import build_database
from ristorante.exceptions import RistoranteError
from ristorante.http import error_response
from ristorante.middleware.cors import CORSHeadersMiddleware
from ristorante.middleware.logging import RequestLoggingMiddleware
from ristorante.middleware.request_id import RequestIDMiddleware, request_id_var
from ristorante.routes import health, images, menu, pages, reservations
from ristorante.services.image_store import build_image_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: 2025-06-14T20:30:00 [INFO] ristorante.access: GET /api/menu 200 ...

    Called once from the lifespan hook, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("aiobotocore").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging and a configuration report. Missing settings are
    logged, not fatal: affected routes answer 500 (or 401) until fixed.

    Shutdown: dispose the engine.
    """
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("Ristorante API %s starting up...", __version__)

    for problem in settings.describe_missing():
        logger.warning("Configuration: %s", problem)

    store = app.state.image_store
    if store is not None:
        logger.info("Image store: %s", type(store).__name__)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Ristorante API shutting down...")
    if app.state.database is not None:
        await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{"error": message}` responses.

    Handler hierarchy:
        RistoranteError subclasses   → exc.status_code, exc.message
        HTTPException 404 / 405      → 404 "Not found" (no 405s, ever)
        other HTTPException          → its status, its detail
        RequestValidationError       → 400
        Exception (fallback)         → 500 "Internal server error"

    Responses never carry tracebacks, SQL or exception context; those are
    logged with the request ID.
    """

    @app.exception_handler(RistoranteError)
    async def handle_application_error(request: Request, exc: RistoranteError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid, type(exc).__name__, exc.message, exc.context,
            )
        else:
            logger.warning(
                "[%s] %s on %s %s: %s",
                rid, type(exc).__name__, request.method, request.url.path, exc.message,
            )
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # An unmatched path and a matched path with the wrong method look the same
        if exc.status_code in (404, 405):
            return error_response("Not found", 404)
        detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return error_response(detail, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        logger.warning("[%s] Request validation error: %s", rid, errors)
        first = errors[0] if errors else {}
        loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
        message = f"invalid {loc[-1]}" if loc else "invalid request"
        return error_response(message, 400)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for unexpected errors.

        Runs outside the middleware chain, so the CORS headers come from
        error_response itself.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return error_response("Internal server error", 500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit configuration (tests); read from the environment
                  when omitted.

    Returns:
        Fully configured FastAPI instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Ristorante API",
        description=(
            "Backend for a restaurant website: bilingual menu, reservation "
            "requests, editable page content and an image gallery."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        redirect_slashes=False,
        lifespan=lifespan,
    )

    # ── Per-app Resources ─────────────────────────────────────────────────
    app.state.settings = settings
    app.state.database = build_database(settings)
    app.state.image_store = build_image_store(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition:
    # RequestID → Logging → CORS → GZip → router
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(CORSHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # Upload before the /img catch-all
    app.include_router(images.admin_router)
    app.include_router(health.router)
    app.include_router(menu.router)
    app.include_router(menu.admin_router)
    app.include_router(reservations.router)
    app.include_router(reservations.admin_router)
    app.include_router(pages.router)
    app.include_router(pages.admin_router)
    app.include_router(images.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `ristorante.main:app` to be importable
app = create_app()
