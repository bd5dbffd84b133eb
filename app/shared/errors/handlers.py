"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.domain.market.errors import (
    ExhaustedError,
    InferenceError,
    MarketDomainError,
    MissingCredentialsError,
    SymbolNotFoundError,
    UpstreamError,
    ValidationError,
)
from app.shared.security.rate_limiting import exhausted_response

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_500 = 500
HTTP_502 = 502
HTTP_503 = 503


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation(
        _request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle malformed request parameters."""
        logger.warning("Validation failed for %s: %s", exc.field, exc.reason)
        return _error_response(HTTP_400, "Invalid request", exc.message)

    @app.exception_handler(SymbolNotFoundError)
    async def handle_symbol_not_found(
        _request: Request, exc: SymbolNotFoundError
    ) -> JSONResponse:
        """Handle missing stock symbol errors."""
        logger.warning("Symbol not found: %s", exc.symbol)
        return _error_response(HTTP_404, "Symbol not found", exc.symbol)

    @app.exception_handler(ExhaustedError)
    async def handle_exhausted(
        _request: Request, exc: ExhaustedError
    ) -> JSONResponse:
        """Handle rate budget exhaustion."""
        logger.warning("Rate limit exhausted for %s", exc.key)
        return exhausted_response(
            settings.rate_limit_default_limit,
            exc.reset_at,
            time.time_ns() // 1_000_000,
        )

    @app.exception_handler(MissingCredentialsError)
    async def handle_missing_credentials(
        _request: Request, exc: MissingCredentialsError
    ) -> JSONResponse:
        """Handle calls to a provider whose API key is not configured."""
        logger.error("Missing credentials for %s", exc.provider)
        return _error_response(
            HTTP_503, "Service not configured", f"{exc.provider} is unavailable"
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream(
        _request: Request, exc: UpstreamError
    ) -> JSONResponse:
        """Handle data provider failures."""
        logger.error("Upstream error from %s: %s", exc.source, exc.reason)
        return _error_response(
            HTTP_502, "Upstream provider error", f"{exc.source} request failed"
        )

    @app.exception_handler(InferenceError)
    async def handle_inference(
        _request: Request, exc: InferenceError
    ) -> JSONResponse:
        """Handle text classification failures."""
        logger.error("Inference error in %s: %s", exc.task, exc.reason)
        return _error_response(HTTP_502, "Classification failed")

    @app.exception_handler(MarketDomainError)
    async def handle_market_domain(
        _request: Request, exc: MarketDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled market domain errors."""
        logger.error("Unhandled market domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
