"""
Request-URI length guard.

Rejects requests whose path plus query string is longer than the
configured maximum with ``414 URI Too Long``.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

DEFAULT_MAX_URL_LENGTH = 255


class UrlLengthMiddleware(BaseHTTPMiddleware):
    """Middleware returning 414 for overly long request URIs."""

    def __init__(self, app: ASGIApp, max_length: int = DEFAULT_MAX_URL_LENGTH) -> None:
        super().__init__(app)
        self._max_length = max_length

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        if len(target) > self._max_length:
            return JSONResponse(
                status_code=414,
                content={"error": "Request-URI Too Long"},
            )
        return await call_next(request)
