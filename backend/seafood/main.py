"""
SeaFood Delivery Backend — FastAPI Application Factory
=======================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn seafood.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌────────┐ ┌──────────┐   │
    │  │  Req ID  │→│ Logging │→│  GZip  │→│   CORS   │   │
    │  └──────────┘ └─────────┘ └────────┘ └──────────┘   │
    │                                                     │
    │  Routers:                                           │
    │  /driver/*   /admin/*   orders   products   /health │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 │ Transition→409 │ Ledger→400   │   │
    │  │ Validation→400 │ Store→500 │ anything→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, config validation, database probe (retried)
    Shutdown: dispose the engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from seafood import __version__
from seafood.config import settings
from seafood.database import dispose_engine, ping_database
from seafood.exceptions import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidTransitionError,
    NotFoundError,
    SeafoodError,
    StoreUnavailableError,
    ValidationError,
)
from seafood.middleware.logging import RequestLoggingMiddleware
from seafood.middleware.request_id import RequestIDMiddleware, request_id_var
from seafood.routes import admin, driver, health, orders, products

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once, before anything else logs.

    Format: 2025-01-15T12:00:00 [INFO] seafood.services.driver_ledger: message
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
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("SeaFood backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports the real state
        logger.error("Configuration error: %s", str(e))

    try:
        await ping_database()
        logger.info("Database reachable")
    except Exception as e:
        logger.error("Database unreachable at startup: %s", str(e))

    logger.info("Commission rate: %s", settings.commission_rate)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("SeaFood backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {
        "success": False,
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy onto HTTP statuses and the error envelope.

    Internal details (SQL errors, stack traces) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return _error(
            422,
            "request_validation_error",
            "The request body or parameters are invalid",
            {"errors": jsonable_errors(exc)},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, "not_found", exc.message)

    @app.exception_handler(InvalidTransitionError)
    async def handle_invalid_transition(request: Request, exc: InvalidTransitionError):
        return _error(
            409,
            "invalid_transition",
            exc.message,
            {"current_status": exc.current, "target_status": exc.target},
        )

    @app.exception_handler(InvalidAmountError)
    async def handle_invalid_amount(request: Request, exc: InvalidAmountError):
        return _error(400, "invalid_amount", exc.message)

    @app.exception_handler(InsufficientBalanceError)
    async def handle_insufficient_balance(request: Request, exc: InsufficientBalanceError):
        return _error(
            400,
            "insufficient_balance",
            exc.message,
            {"available": float(exc.available), "requested": float(exc.requested)},
        )

    @app.exception_handler(StoreUnavailableError)
    async def handle_store_unavailable(request: Request, exc: StoreUnavailableError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(SeafoodError)
    async def handle_app_error(request: Request, exc: SeafoodError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic puts the raw exception under ctx for some errors; not JSON-safe
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="SeaFood Delivery API",
        description=(
            "Backend for the seafood delivery customer, driver and admin apps: "
            "orders, driver assignment, order status and driver payouts."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(driver.router)
    app.include_router(admin.router)
    app.include_router(orders.router)
    app.include_router(products.router)
    app.include_router(health.router)

    return app


app = create_app()
