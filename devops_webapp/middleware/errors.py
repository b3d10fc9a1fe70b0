# =============================================================================
# DevOps Web App - Unhandled Error Middleware
# =============================================================================
"""
Turns exceptions no handler claimed into the JSON error envelope.

Registered innermost so the 500 still passes back through access logging,
rate limiting, CORS and the security headers.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..api.errors import unhandled_error_response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Answer unexpected exceptions inside the request policies."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        try:
            return await call_next(request)
        except Exception as exc:
            return unhandled_error_response(request, exc)
