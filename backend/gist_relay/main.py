"""
Gist Relay — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn gist_relay.main:app) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌──────┐     │
    │  │ Req ID   │→│  Logging    │→│ GZip │→│ CORS │     │
    │  └──────────┘ └─────────────┘ └──────┘ └──────┘     │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌───────────┐ ┌─────────────┐         │
    │  │ GET /api │ │ POST /api │ │ GET /health │         │
    │  └──────────┘ └───────────┘ └─────────────┘         │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Upstream→502  │  │
    │  │ Config→503     │ Serialization / other→500    │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Dependency Injection:
    create_app(settings=..., gist_service=...) stores both on app.state.
    Routes read them through gist_relay.dependencies, so tests build an app
    around a fake GistService without patching anything.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from gist_relay import __version__
from gist_relay.config import Settings, settings as default_settings
from gist_relay.exceptions import (
    ConfigurationError,
    GistRelayError,
    GistServiceError,
    NotFoundError,
    SerializationError,
    ValidationError,
)
from gist_relay.middleware.logging import RequestLoggingMiddleware
from gist_relay.middleware.request_id import RequestIDMiddleware, request_id_var
from gist_relay.routes import gist, health
from gist_relay.services.gist_base import GistService
from gist_relay.services.github_gist_service import GitHubGistService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # httpx logs every outbound request at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, report missing configuration, build the
              default gist service if none was injected.
    Shutdown: close the gist service's HTTP connection pool.
    """
    app_settings: Settings = app.state.settings

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Gist Relay starting up...")

    built_here = app.state.gist_service is None
    if built_here:
        app.state.gist_service = GitHubGistService.from_settings(app_settings)

    # A missing token disables POST only; GET keeps working, so don't exit
    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("POST /api will answer 503 until the server is restarted with a token.")

    logger.info(
        "Server ready at http://%s:%d/api",
        app_settings.backend_host,
        app_settings.backend_port,
    )
    logger.info("=" * 60)

    yield

    logger.info("Gist Relay shutting down...")
    await app.state.gist_service.aclose()
    if built_here:
        app.state.gist_service = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Client-facing 4xx answers are the bare message as text/plain, which is what
    the notebook shows to the user. 5xx answers use the JSON error envelope.

    Handler hierarchy:
        ValidationError     → 400 Bad Request (plain text)
        NotFoundError       → 404 Not Found (plain text)
        SerializationError  → 500 Internal Server Error
        GistServiceError    → 502 Bad Gateway
        ConfigurationError  → 503 Service Unavailable
        GistRelayError      → 500 Internal Server Error (catch-all for custom)
        Exception           → 500 Internal Server Error (unexpected errors)

    Upstream details (GitHub status codes, transport errors) are logged
    server-side and never included in the response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info(
            "[%s] Gist not found: %s | Context: %s",
            request_id_var.get(""),
            exc.resource_id,
            exc.context,
        )
        return PlainTextResponse(exc.message, status_code=404)

    @app.exception_handler(SerializationError)
    async def handle_serialization_error(request: Request, exc: SerializationError):
        logger.error(
            "[%s] Serialization error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(GistServiceError)
    async def handle_gist_service_error(request: Request, exc: GistServiceError):
        logger.error(
            "[%s] Gist service error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(502, "upstream_error", exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error(
            "[%s] Configuration error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(503, "configuration_error", exc.message)

    @app.exception_handler(GistRelayError)
    async def handle_relay_error(request: Request, exc: GistRelayError):
        logger.error(
            "[%s] Unhandled relay error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; the stack trace is logged server-side only."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    gist_service: Optional[GistService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings:     Configuration; defaults to the environment-loaded singleton.
        gist_service: Upstream provider. When omitted, the lifespan builds a
                      GitHubGistService from `settings` on startup, so importing
                      this module opens no connections. Tests pass a fake here.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Gist Relay API",
        description=(
            "Share notebooks as secret GitHub Gists and load them back by ID."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gist_service = gist_service

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition: the last added
    # (RequestID) runs first so every later log line carries the ID.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(gist.router)
    app.include_router(health.router)

    return app


# uvicorn expects `gist_relay.main:app` to be importable
app = create_app()
