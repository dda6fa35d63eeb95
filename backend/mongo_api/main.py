"""
Mongo API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (uvicorn mongo_api.main:app) or the `mongo-api` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌────────┐ ┌─────────┐ ┌──────┐ ┌──────────┐       │
    │  │ Req ID │→│ Logging │→│ CORS │→│ CatchAll │       │
    │  └────────┘ └─────────┘ └──────┘ └──────────┘       │
    │                                                     │
    │  Routes:                                            │
    │  POST /users  GET /users/all  GET|DELETE /users/{id}│
    │  POST /image  GET /image/{id}  GET /health          │
    │                                                     │
    │  Exception Handlers:                                │
    │  InvalidArgument→400 │ NotFound→404 │ Store→500     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, build the Motor client and store adapters
    Shutdown: close the Motor client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mongo_api import __version__
from mongo_api.config import Settings, settings as default_settings
from mongo_api.database import close_stores, open_stores
from mongo_api.exceptions import (
    InvalidArgumentError,
    MongoApiError,
    NotFoundError,
    StoreError,
)
from mongo_api.middleware.errors import CatchAllExceptionMiddleware, internal_error_response
from mongo_api.middleware.logging import RequestLoggingMiddleware
from mongo_api.middleware.request_id import RequestIDMiddleware, request_id_var
from mongo_api.routes import health, images, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-operation chatter from the server and the driver
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("Mongo API %s starting up...", __version__)

    app.state.stores = open_stores(config)
    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Mongo API shutting down...")
    close_stores(app.state.stores)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes.

    Handler hierarchy:
        InvalidArgumentError → 400 Bad Request
        NotFoundError        → 404 Not Found
        StoreError           → 500 Internal Server Error
        MongoApiError (base) → 500 Internal Server Error
        Exception (fallback) → 500 Internal Server Error

    Driver error details are logged, never returned.
    """

    @app.exception_handler(InvalidArgumentError)
    async def handle_invalid_argument(request: Request, exc: InvalidArgumentError):
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid argument: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "invalid_argument",
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

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(MongoApiError)
    async def handle_app_error(request: Request, exc: MongoApiError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    # Route failures are answered by CatchAllExceptionMiddleware; this only
    # sees errors raised by the outer middleware themselves.
    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return internal_error_response(rid)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Assemble middleware, exception handlers and routes.

    Args:
        config: Settings to run with; the module-level singleton when omitted.
    """
    config = config or default_settings

    app = FastAPI(
        title="Mongo API",
        description="User records and image storage backed by MongoDB and GridFS.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → CORS → CatchAll
    app.add_middleware(CatchAllExceptionMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=config.cors_methods_list,
        allow_headers=config.cors_headers_list,
        expose_headers=["X-Request-ID", "X-Image-Id", "Location"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(images.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entrypoint: serve the app on the configured host and port."""
    uvicorn.run(
        "mongo_api.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
