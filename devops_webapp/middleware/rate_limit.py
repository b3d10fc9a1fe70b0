# =============================================================================
# DevOps Web App - Rate Limiting Middleware
# =============================================================================
"""
Per-client request rate limiting.

Counts requests per source address over a moving window using the
``limits`` library. Counters live in whatever storage the URI names:
``memory://`` keeps them in this process, ``redis://...`` shares them
between instances without any change to the handlers.

Responses carry the standard ``RateLimit-*`` headers; requests over the
cap are answered with 429 and a fixed text message.
"""

import math
import time
from dataclasses import dataclass
from typing import Dict

import structlog
from limits import RateLimitItemPerSecond
from limits.storage import storage_from_string
from limits.strategies import MovingWindowRateLimiter
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response


logger = structlog.get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


@dataclass(frozen=True)
class RateLimitDecision:
    """
    Outcome of counting one request.

    Attributes:
        allowed: Whether the request fits in the window
        limit: Requests allowed per window
        remaining: Requests left in the current window
        reset_after: Seconds until the oldest counted request expires
        window_seconds: Length of the window
    """

    allowed: bool
    limit: int
    remaining: int
    reset_after: int
    window_seconds: int

    def headers(self) -> Dict[str, str]:
        """Standard rate-limit response headers."""
        return {
            "RateLimit-Policy": f"{self.limit};w={self.window_seconds}",
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class ClientRateLimiter:
    """
    Moving-window request counter keyed by client identity.

    Attributes:
        max_requests: Requests allowed per window
        window_seconds: Window length in seconds
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        storage_uri: str = "memory://",
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._item = RateLimitItemPerSecond(max_requests, window_seconds)
        self._storage = storage_from_string(storage_uri)
        self._strategy = MovingWindowRateLimiter(self._storage)

        logger.info(
            "rate_limiter_initialized",
            max_requests=max_requests,
            window_seconds=window_seconds,
            storage=storage_uri.split("://", 1)[0],
        )

    def hit(self, client_id: str) -> RateLimitDecision:
        """Count a request for ``client_id`` and report whether it is allowed."""
        allowed = self._strategy.hit(self._item, client_id)
        stats = self._strategy.get_window_stats(self._item, client_id)
        reset_after = max(0, math.ceil(stats.reset_time - time.time()))

        return RateLimitDecision(
            allowed=allowed,
            limit=self.max_requests,
            remaining=max(0, stats.remaining),
            reset_after=reset_after,
            window_seconds=self.window_seconds,
        )


def client_identity(request: Request) -> str:
    """Identify the client by its source address."""
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed the request cap for the current window."""

    def __init__(self, app, limiter: ClientRateLimiter) -> None:
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        client_id = client_identity(request)
        decision = self.limiter.hit(client_id)

        if decision.allowed:
            response = await call_next(request)
        else:
            logger.warning(
                "rate_limit_exceeded",
                client=client_id,
                method=request.method,
                path=request.url.path,
                reset_after=decision.reset_after,
            )
            response = PlainTextResponse(RATE_LIMIT_MESSAGE, status_code=429)
            response.headers["Retry-After"] = str(decision.reset_after)

        response.headers.update(decision.headers())
        return response
