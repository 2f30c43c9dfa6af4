"""
GitNotes Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) wires logging, middleware, exception handlers,
       the service graph and the routes.
Who:   uvicorn imports `gitnotes.main:app`; tests call create_app() directly.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  Middleware:  Request ID → Access Log               │
    │                                                     │
    │  Routes:      GET /   GET|POST /notes               │
    │               GET /notes/{id}   GET /notes/raw/{id} │
    │                                                     │
    │  Exception Handlers:                                │
    │   Validation→400 JSON │ NotFound→404 text           │
    │   Upstream→502 │ Config→500 │ anything else→500     │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gitnotes import __version__
from gitnotes.config import Settings, settings as default_settings
from gitnotes.dependencies import build_note_service
from gitnotes.exceptions import (
    ConfigurationError,
    NotFoundError,
    PayloadParseError,
    UpstreamError,
    ValidationError,
)
from gitnotes.middleware.logging import RequestLoggingMiddleware
from gitnotes.middleware.request_id import RequestIDMiddleware, request_id_var
from gitnotes.routes import notes, pages

logger = logging.getLogger(__name__)

UPSTREAM_FAILURE_MESSAGE = "An upstream service failed. Please try again later."
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure root logging once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, on stdout.
    httpx/httpcore log every outbound request at INFO; they are kept at
    WARNING so the access log and service logs stay readable.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging and report missing secrets.

    A missing secret does not stop the server: reads can still work, and the
    operation that needs the secret fails with ConfigurationError.
    """
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info("GitNotes backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info(
        "Storing notes in %s/%s:%s/%s (content filter %s)",
        settings.github_owner,
        settings.github_repo,
        settings.github_branch,
        settings.github_notes_dir,
        "enabled" if settings.content_filter_enabled else "disabled",
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("GitNotes backend shut down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    The single place where exceptions become responses.

    Handler map:
        ValidationError, RequestValidationError → 400 {"message": ...}
        NotFoundError                           → 404 text/plain message
        HTTPException 404/405                   → 404 text/plain "Not Found"
        UpstreamError, PayloadParseError        → 502 generic JSON
        ConfigurationError                      → 500 generic JSON
        Exception                               → 500 generic JSON

    Upstream and configuration details are logged with the request id and
    never returned to the client.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # Unparseable or mistyped body gets the same answer as missing fields
        logger.warning(
            "[%s] Malformed request body: %d error(s)",
            request_id_var.get(""),
            len(exc.errors()),
        )
        return JSONResponse(status_code=400, content={"message": ValidationError().message})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse(exc.message, status_code=404)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(
            str(exc.detail), status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content={"message": UPSTREAM_FAILURE_MESSAGE, "request_id": rid},
        )

    @app.exception_handler(PayloadParseError)
    async def handle_payload_error(request: Request, exc: PayloadParseError):
        rid = request_id_var.get("")
        logger.error("[%s] Malformed upstream payload: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content={"message": UPSTREAM_FAILURE_MESSAGE, "request_id": rid},
        )

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        rid = request_id_var.get("")
        logger.error("[%s] %s", rid, exc.message)
        return JSONResponse(
            status_code=500,
            content={"message": INTERNAL_ERROR_MESSAGE, "request_id": rid},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": INTERNAL_ERROR_MESSAGE, "request_id": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to build the app from; defaults to the
                  environment-loaded settings.

    The NoteService is built here (not in the lifespan) so that apps driven
    through ASGITransport, which runs no lifespan, are fully wired.
    """
    settings = settings or default_settings

    docs = settings.expose_api_docs
    app = FastAPI(
        title="GitNotes API",
        description="Short text notes stored as JSON files in a GitHub repository.",
        version=__version__,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.note_service = build_note_service(settings)

    # Last added runs first: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(notes.router)

    return app


app = create_app()
