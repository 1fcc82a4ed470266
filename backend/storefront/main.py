"""
Storefront Gateway: FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handling and collaborator startup in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (storefront.main:app) and the `storefront` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  Req ID → Logging → Origin Policy → CORS            │
    │                                                     │
    │  Routes:                                            │
    │  /api/upload-image   /api/products[/{id}]           │
    │  /api/create-order   /health                        │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Origin→403 │ NotFound→404 │ 500   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Check media configuration (logged, not fatal)
    3. Build the GatewayContext (fatal if Firebase credentials are unusable)
    4. Log startup line

    Shutdown:
    Nothing to release; collaborator clients live until process exit.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront import __version__
from storefront.config import Settings, settings
from storefront.context import GatewayContext, build_context
from storefront.exceptions import (
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)
from storefront.middleware.logging import RequestLoggingMiddleware
from storefront.middleware.origin_policy import OriginPolicyMiddleware
from storefront.middleware.request_id import RequestIDMiddleware, request_id_var
from storefront.routes import health, payments, products, uploads

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure the root logger once at startup.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by the hosting platform)
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # SDK transports log every HTTP call at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("grpc").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the collaborator context before the first request is accepted.

    A context already present on app.state (injected by create_app) is kept
    as is. A ConfigurationError propagates so uvicorn aborts startup.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("Storefront Gateway %s starting up...", __version__)

    try:
        app_settings.validate_media_credentials()
    except ValueError as e:
        # Uploads will fail, but products and payments still work
        logger.error("Configuration error: %s", str(e))

    if getattr(app.state, "context", None) is None:
        try:
            app.state.context = build_context(app_settings)
        except ConfigurationError as e:
            logger.critical("Startup aborted: %s | Context: %s", e.message, e.context)
            raise

    logger.info(
        "Origin policy: allowed=%s, allow_no_origin=%s",
        ",".join(app_settings.cors_origins_list) or "(none)",
        app_settings.cors_allow_no_origin,
    )
    logger.info("Server running on port %d", app_settings.port)

    yield

    logger.info("Storefront Gateway shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError        → 400 Bad Request
        NotFoundError         → 404 Not Found
        CollaboratorError      → 500 (generic message, detail logged)
        StorefrontError (base) → 500
        Exception (fallback)   → 500

    Origin rejections (403) never reach these handlers; OriginPolicyMiddleware
    answers them before routing.

    Collaborator details stay in the server log; the response only carries
    the exception's user-safe message.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(CollaboratorError)
    async def handle_collaborator_error(request: Request, exc: CollaboratorError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(StorefrontError)
    async def handle_storefront_error(request: Request, exc: StorefrontError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    context: Optional[GatewayContext] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the module singleton.
        context:      Pre-built collaborator context. When omitted, the
                      lifespan builds one from settings at startup.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Storefront Gateway",
        description=(
            "E-commerce backend: product CRUD on Firestore, image uploads to "
            "Cloudinary and Razorpay order creation."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.context = context

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → OriginPolicy → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(
        OriginPolicyMiddleware,
        allowed_origins=app_settings.cors_origins_list,
        allow_no_origin=app_settings.cors_allow_no_origin,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(uploads.router)
    app.include_router(products.router)
    app.include_router(payments.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `storefront.main:app` to be importable
app = create_app()
