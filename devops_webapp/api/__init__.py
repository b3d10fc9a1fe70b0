# =============================================================================
# DevOps Web App - API Package
# =============================================================================
"""HTTP routes and the error handlers that back them."""

from .errors import register_error_handlers
from .routes import router

__all__ = ["register_error_handlers", "router"]
