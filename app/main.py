"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, URL length, rate governing)
- Logging configuration
- Background rate-governor sweep and optional model warm-up

No business logic belongs here.
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from app.core.config import settings
from app.interfaces.health import router as health_router
from app.interfaces.market.dependencies import (
    get_category_classifier,
    get_sentiment_classifier,
)
from app.interfaces.market.router import router as market_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_governor import RateGovernor
from app.shared.security.rate_limiting import (
    RateGovernorMiddleware,
    limiter,
    rate_limit_exceeded_handler,
)
from app.shared.security.url_length import UrlLengthMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Paths that never count against a caller's budget
GOVERNOR_EXEMPT_PATHS = (
    f"{API_PREFIX}/health",
    f"{API_PREFIX}/stocks/rate-limit",
)


async def _sweep_periodically(governor: RateGovernor, interval: float) -> None:
    """Drop idle rate-governor keys until cancelled."""
    while True:
        await asyncio.sleep(interval)
        dropped = governor.sweep()
        if dropped:
            logger.debug("Rate governor sweep dropped %d idle keys", dropped)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: start/stop the governor sweep, warm models."""
    sweeper = asyncio.create_task(
        _sweep_periodically(app.state.governor, settings.rate_limit_sweep_seconds)
    )

    if settings.preload_models:
        logger.info("Preloading inference models")
        try:
            await asyncio.to_thread(get_sentiment_classifier().warm_up)
            await asyncio.to_thread(get_category_classifier().warm_up)
        except Exception:
            logger.warning(
                "Model preload failed; models will load on first use.",
                exc_info=True,
            )

    yield

    # Shutdown
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper


def create_app(governor: Optional[RateGovernor] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Args:
        governor: Rate governor to install; one is built from settings
            when omitted.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    if governor is None:
        governor = RateGovernor(
            default_limit=settings.rate_limit_default_limit,
            default_window_ms=settings.rate_limit_window_ms,
        )
    app.state.governor = governor

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware (last added runs first) ---
    app.add_middleware(
        RateGovernorMiddleware,
        governor=governor,
        exempt_paths=GOVERNOR_EXEMPT_PATHS,
    )
    app.add_middleware(UrlLengthMiddleware, max_length=settings.max_url_length)
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(market_router, prefix=API_PREFIX)

    return app


app = create_app()
