"""
Products API - FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       holding its own settings and its own ProductStore.
Who:   Called by uvicorn (uvicorn products_api.main:app) or by
       `python -m products_api`.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      GET /, GET /health, /api/products/... │
    │  Write path:  require_api_key → validate → handler  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Auth→401     │  │
    │  │ unmatched route→404 │ anything else→500      │  │
    │  └──────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Error envelope (every failure except 401):
    {"error": {"message": "...", "status": 404, "timestamp": "..."}}
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from products_api import __version__
from products_api.config import Settings, settings as default_settings
from products_api.exceptions import ProductsAPIError, UnauthorizedError
from products_api.middleware.logging import RequestLoggingMiddleware
from products_api.middleware.request_id import RequestIDMiddleware, request_id_var
from products_api.routes import products, root
from products_api.services.product_store import ProductStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    The access logger (products_api.access) supplies method and path;
    asctime supplies the timestamp.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, warn about missing configuration.
    Shutdown: log only; the store has nothing to release.
    """
    app_settings: Settings = app.state.settings

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Products API starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving reads; writes answer 401 until the key is set
        logger.warning("Configuration error: %s", str(e))

    logger.info("Seeded %d products", len(app.state.store))
    logger.info("Server running on http://%s:%d", app_settings.host, app_settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Products API shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_envelope(
    message: str,
    status_code: int,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the standard {"error": {message, status, timestamp}} response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": message,
                "status": status_code,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register the global handlers that turn failures into JSON responses.

    Handler hierarchy:
        UnauthorizedError         → 401 {"message": "Unauthorized"}
        ProductsAPIError (+ subs) → exc.status_code, error envelope
        RequestValidationError    → 400 (bad query params, malformed JSON)
        StarletteHTTPException    → 404 "Endpoint not found" for unmatched
                                    routes, otherwise its own status
        Exception (fallback)      → 500 "Internal Server Error"

    The response never includes stack traces; those go to the server log.
    """

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        rid = request_id_var.get("")
        logger.warning("[%s] Unauthorized: %s", rid, exc.context)
        return JSONResponse(status_code=401, content={"message": exc.message})

    @app.exception_handler(ProductsAPIError)
    async def handle_app_error(request: Request, exc: ProductsAPIError):
        rid = request_id_var.get("")
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "[%s] %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return error_envelope(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid value for '{field}': {first.get('msg', 'invalid input')}"
        logger.warning("[%s] Request validation error: %s", rid, errors)
        return error_envelope(message, 400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        rid = request_id_var.get("")
        if exc.status_code in (404, 405):
            logger.warning("[%s] No route for %s %s", rid, request.method, request.url.path)
            return error_envelope("Endpoint not found", 404)
        logger.warning("[%s] HTTP %d: %s", rid, exc.status_code, exc.detail)
        return error_envelope(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=exc,
        )
        # Runs in ServerErrorMiddleware, outside RequestIDMiddleware
        return error_envelope("Internal Server Error", 500, headers={"X-Request-ID": rid})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[ProductStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment-loaded singleton
        store:        Product store to serve; defaults to a freshly seeded one

    Returns:
        Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Products API",
        description="CRUD, search and category statistics over an in-memory product catalogue.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.store = store if store is not None else ProductStore.with_sample_data()
    app.state.started_at = time.time()

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in REVERSE order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(root.router)
    app.include_router(products.router)

    return app


# uvicorn expects `products_api.main:app` to be importable
app = create_app()
