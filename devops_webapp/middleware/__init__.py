# =============================================================================
# DevOps Web App - Middleware Package
# =============================================================================
"""Cross-cutting request policies applied before route dispatch."""

from .access_log import AccessLogMiddleware
from .errors import UnhandledErrorMiddleware
from .rate_limit import (
    RATE_LIMIT_MESSAGE,
    ClientRateLimiter,
    RateLimitDecision,
    RateLimitMiddleware,
)
from .security import SECURITY_HEADERS, SecurityHeadersMiddleware

__all__ = [
    "AccessLogMiddleware",
    "ClientRateLimiter",
    "RATE_LIMIT_MESSAGE",
    "RateLimitDecision",
    "RateLimitMiddleware",
    "SECURITY_HEADERS",
    "SecurityHeadersMiddleware",
    "UnhandledErrorMiddleware",
]
