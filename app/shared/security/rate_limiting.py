"""
Rate limiting configuration and setup.

Two layers guard the API:
- RateGovernorMiddleware admits every request through the in-process
  sliding-window RateGovernor, keyed on client address.
- slowapi's Limiter adds a tighter per-endpoint limit on
  compute-heavy routes such as the risk radar.
"""

import logging
import math
from collections.abc import Iterable
from typing import Optional

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from app.core.config import settings
from app.domain.market.entities import RateDecision
from app.domain.market.errors import ExhaustedError
from app.shared.security.rate_governor import RateGovernor

logger = logging.getLogger(__name__)

HEAVY_RATE_LIMIT = settings.rate_limit_heavy

limiter = Limiter(key_func=get_remote_address)


def client_key(request: Request) -> Optional[str]:
    """Identify the caller; ``None`` falls into the governor's shared bucket."""
    return get_remote_address(request) or None


def rate_limit_headers(limit: int, decision: RateDecision) -> dict[str, str]:
    """Build the ``X-RateLimit-*`` headers for an admitted request."""
    headers = {
        "X-RateLimit-Limit": str(limit),
        "X-RateLimit-Remaining": str(decision.remaining),
    }
    if decision.reset_at is not None:
        headers["X-RateLimit-Reset"] = str(decision.reset_at)
    return headers


def exhausted_response(
    limit: int, reset_at: Optional[int], now_ms: int
) -> JSONResponse:
    """Build the 429 response returned when a caller's budget is used up."""
    headers = {"X-RateLimit-Limit": str(limit), "X-RateLimit-Remaining": "0"}
    if reset_at is not None:
        headers["X-RateLimit-Reset"] = str(reset_at)
        headers["Retry-After"] = str(max(0, math.ceil((reset_at - now_ms) / 1000)))
    return JSONResponse(
        status_code=429,
        content={
            "error": "Rate limit exceeded",
            "detail": "Too many requests, please try again later.",
            "remaining": 0,
            "reset_at": reset_at,
        },
        headers=headers,
    )


class RateGovernorMiddleware(BaseHTTPMiddleware):
    """Middleware that admits each request through a RateGovernor.

    Denied requests never reach a route. Admitted ones get their
    remaining budget reported in ``X-RateLimit-*`` headers.

    Args:
        app: The wrapped ASGI application.
        governor: Shared governor instance.
        exempt_paths: Paths that bypass the governor entirely.
    """

    def __init__(
        self,
        app: ASGIApp,
        governor: RateGovernor,
        exempt_paths: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self._governor = governor
        self._exempt_paths = frozenset(exempt_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        limit = self._governor.default_limit
        try:
            decision = self._governor.enforce(client_key(request))
        except ExhaustedError as exc:
            # Raised inside middleware, so the app's exception handlers never see it
            logger.warning("%s on %s", exc.message, request.url.path)
            return exhausted_response(limit, exc.reset_at, self._governor.now())

        response = await call_next(request)
        response.headers.update(rate_limit_headers(limit, decision))
        return response


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle slowapi rate limit exceeded errors with a clean JSON response.

    Args:
        _request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
