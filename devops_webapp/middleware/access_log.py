# =============================================================================
# DevOps Web App - Access Log Middleware
# =============================================================================
"""
One structured log line per completed request.

Production emits the combined-log fields (client, referrer, user agent,
response size); development keeps the line short.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


logger = structlog.get_logger("devops_webapp.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of each request."""

    def __init__(self, app, combined: bool = False) -> None:
        super().__init__(app)
        self.combined = combined

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 3)

        if self.combined:
            logger.info(
                "request_completed",
                remote_addr=request.client.host if request.client else None,
                method=request.method,
                path=request.url.path,
                query=request.url.query or None,
                http_version=request.scope.get("http_version"),
                status=response.status_code,
                content_length=response.headers.get("content-length"),
                referrer=request.headers.get("referer"),
                user_agent=request.headers.get("user-agent"),
                duration_ms=duration_ms,
            )
        else:
            logger.info(
                "request_completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=duration_ms,
            )

        return response
