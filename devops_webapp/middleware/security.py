# =============================================================================
# DevOps Web App - Security Headers Middleware
# =============================================================================
"""
Fixed security headers applied to every response.

Covers framing, MIME sniffing, HSTS, the content security policy and the
cross-origin isolation headers browsers understand today.
"""

from typing import Dict, Mapping, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


CONTENT_SECURITY_POLICY: Dict[str, str] = {
    "default-src": "'self'",
    "base-uri": "'self'",
    "font-src": "'self' https: data:",
    "form-action": "'self'",
    "frame-ancestors": "'self'",
    "img-src": "'self' data: https:",
    "object-src": "'none'",
    "script-src": "'self'",
    "script-src-attr": "'none'",
    "style-src": "'self' 'unsafe-inline'",
    "upgrade-insecure-requests": "",
}

HSTS_MAX_AGE = 365 * 24 * 60 * 60


def render_csp(directives: Mapping[str, str]) -> str:
    """Render CSP directives as a header value."""
    return "; ".join(
        f"{name} {value}" if value else name
        for name, value in directives.items()
    )


SECURITY_HEADERS: Dict[str, str] = {
    "Content-Security-Policy": render_csp(CONTENT_SECURITY_POLICY),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": f"max-age={HSTS_MAX_AGE}; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp the security header set onto every outgoing response."""

    def __init__(self, app, headers: Optional[Mapping[str, str]] = None) -> None:
        super().__init__(app)
        self.headers = dict(SECURITY_HEADERS if headers is None else headers)

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        response = await call_next(request)
        response.headers.update(self.headers)
        return response
