"""Helpers shared by the test modules."""

from datetime import datetime

from devops_webapp.config import Settings


VALID_SUBMISSION = {
    "name": "John Doe",
    "email": "john.doe@example.com",
    "message": "This is a test message for the DevOps web application.",
}


def make_settings(**overrides) -> Settings:
    """Build settings independent of the caller's environment."""
    values = {
        "environment": "development",
        "port": 3000,
        "allowed_origins": "*",
        "log_level": "INFO",
        "service_name": "devops-webapp",
        "app_version": "1.0.0",
        "rate_limit_max_requests": 100,
        "rate_limit_window_seconds": 900,
        "rate_limit_storage_uri": "memory://",
        "max_body_bytes": 10 * 1024 * 1024,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting the Z suffix."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
