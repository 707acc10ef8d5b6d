"""
FoodHub Backend - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn foodhub.main:app).

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │                      FastAPI App                          │
    │                                                           │
    │  Middleware Chain:                                        │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐              │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │              │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘              │
    │                                                           │
    │  Routes:                                                  │
    │  /api/orders  /api/provider/orders  /api/admin/orders     │
    │  /api/reviews  /api/meals  /api/provider/meals            │
    │  /api/admin/users  /health                                │
    │                                                           │
    │  Exception Handlers:                                      │
    │  FoodHubError→status_code │ StoreError→500 │ other→500    │
    └───────────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from foodhub import __version__
from foodhub.config import settings
from foodhub.database import dispose_engine
from foodhub.exceptions import FoodHubError, StoreError, ValidationError
from foodhub.middleware.logging import RequestLoggingMiddleware
from foodhub.middleware.request_id import RequestIDMiddleware, request_id_var
from foodhub.routes import (
    admin_orders,
    admin_users,
    health,
    meals,
    orders,
    provider_meals,
    provider_orders,
    reviews,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    What:    Root logger to stdout with ISO timestamps at `settings.log_level`.
    When:    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check, startup log.
    Shutdown: dispose the database engine (close pooled connections).
    """
    setup_logging()
    logger.info("FoodHub Backend %s starting (%s)", __version__, settings.environment.value)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("FoodHub Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        RequestValidationError  → 400 validation_error (schema layer)
        StoreError              → 500 server_error (detail only in debug)
        FoodHubError            → exc.status_code / exc.error_code
        Exception (fallback)    → 500 internal_server_error
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Request body, path or query failed schema validation."""
        rid = request_id_var.get("")
        logger.info("[%s] Request validation failed: %d error(s)", rid, len(exc.errors()))
        error = ValidationError(context={"errors": jsonable_encoder(exc.errors())})
        return JSONResponse(
            status_code=error.status_code,
            content={
                "error": error.error_code,
                "message": error.message,
                "details": error.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        """Database error: generic message to the client, details logged."""
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        content = {
            "error": exc.error_code,
            "message": "An internal error occurred. Please try again later.",
            "request_id": rid,
        }
        if settings.expose_error_details():
            content["details"] = exc.context
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(FoodHubError)
    async def handle_domain_error(request: Request, exc: FoodHubError):
        """Domain refusal: the message and context are safe to return."""
        rid = request_id_var.get("")
        logger.info("[%s] %s: %s", rid, exc.error_code, exc.message)
        content = {
            "error": exc.error_code,
            "message": exc.message,
            "request_id": rid,
        }
        if exc.context:
            content["details"] = exc.context
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        content = {
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again or contact support.",
            "request_id": rid,
        }
        if settings.expose_error_details():
            content["details"] = {"type": type(exc).__name__, "detail": str(exc)}
        return JSONResponse(status_code=500, content=content)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Food-delivery marketplace order API: single-provider orders with "
            "frozen prices, provider fulfilment workflow, and reviews gated on "
            "delivered purchases, plus the meal catalog and account moderation "
            "that feed them."
        ),
        version=__version__,
        docs_url=None if settings.is_production() else "/docs",
        redoc_url=None if settings.is_production() else "/redoc",
        openapi_url=None if settings.is_production() else "/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(orders.router)
    app.include_router(provider_orders.router)
    app.include_router(admin_orders.router)
    app.include_router(reviews.router)
    app.include_router(meals.router)
    app.include_router(provider_meals.router)
    app.include_router(admin_users.router)
    app.include_router(health.router)

    return app


app = create_app()
