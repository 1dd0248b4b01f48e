"""Weekline backend: FastAPI application entry point."""

import signal
import uuid
from contextlib import asynccontextmanager

# structlog caches its processor chain on first use, so logging is configured
# before any module that creates a logger is imported.
from weekline.core.logging import configure_structlog
from weekline.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
)

import structlog

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weekline.api.routes import api_router
from weekline.core.config import get_settings
from weekline.db import init_db, close_db
from weekline.middleware.correlation import (
    setup_correlation_middleware,
    get_correlation_id,
)

logger = structlog.get_logger(__name__)

STRIPE_SETTINGS = ("stripe_secret_key", "stripe_webhook_secret", "stripe_price_pro_monthly")


def validate_billing_config() -> None:
    """Refuse to start with a partial Stripe setup.

    All three settings missing means billing is simply off; some but not all
    of them set is a deployment mistake. Skipped in debug mode.
    """
    settings = get_settings()
    if settings.debug:
        return

    missing = [name for name in STRIPE_SETTINGS if not getattr(settings, name)]
    if not missing:
        return
    if len(missing) < len(STRIPE_SETTINGS):
        raise RuntimeError(f"Incomplete Stripe configuration at startup: {missing}")
    logger.warning("billing_disabled", missing=missing)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        # /api/health answers 503 from here on while in-flight requests drain
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    logger.info("db_initialized")

    validate_billing_config()

    yield

    logger.info("shutdown_begin")
    await close_db()
    logger.info("shutdown_complete")


def _request_context(request: Request) -> dict:
    return {
        "correlation_id": get_correlation_id(),
        "path": request.url.path,
        "method": request.method,
        "user_id": getattr(request.state, "user_id", None),
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return ``{"detail", "debug_id"}``; the debug_id ties the reply to the server log line."""
    debug_id = str(uuid.uuid4())
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        detail=exc.detail,
        **_request_context(request),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "debug_id": debug_id},
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unhandled errors: full traceback in the log, a generic 500 to the client."""
    debug_id = str(uuid.uuid4())
    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
        **_request_context(request),
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Weekline - focus sessions, weekly summaries and exports",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    origins = list(dict.fromkeys([settings.frontend_url, *settings.clerk_allowed_origins]))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    # added last so it wraps CORS and sees every request first
    setup_correlation_middleware(app)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("weekline.main:app", host="0.0.0.0", port=8000, reload=True)
