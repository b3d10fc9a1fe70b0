# =============================================================================
# DevOps Web App - Pydantic Schemas
# =============================================================================
"""
Request and response models for the DevOps Web App.

These models handle validation, serialization, and documentation
for all API endpoints.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# =============================================================================
# Request Models
# =============================================================================

class DataSubmission(BaseModel):
    """
    Request model for the data ingestion endpoint.

    Text fields are trimmed before their length is checked and HTML-escaped
    afterwards. The email address is syntax-checked (no DNS lookup) and
    normalized.

    Example:
        {
            "name": "John Doe",
            "email": "john.doe@example.com",
            "message": "This is a test message for the DevOps web application."
        }
    """

    name: str = Field(
        ...,
        min_length=3,
        description="Submitter name (at least 3 characters after trimming)",
        examples=["John Doe"],
    )
    email: EmailStr = Field(
        ...,
        description="Submitter email address",
        examples=["john.doe@example.com"],
    )
    message: str = Field(
        ...,
        min_length=10,
        max_length=1000,
        description="Message body (10 to 1000 characters after trimming)",
        examples=["This is a test message for the DevOps web application."],
    )

    @field_validator("name", "message", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        """Trim surrounding whitespace before length constraints apply."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("name", "message")
    @classmethod
    def escape_markup(cls, v: str) -> str:
        return escape_html(v)

    @field_validator("email", mode="before")
    @classmethod
    def reject_display_name(cls, v):
        """Accept a bare address only, not the ``Name <address>`` form."""
        if isinstance(v, str) and ("<" in v or ">" in v):
            raise ValueError("value is not a valid email address")
        return v

    @field_validator("email")
    @classmethod
    def canonical_email(cls, v: str) -> str:
        return normalize_email(v)


# =============================================================================
# Response Models
# =============================================================================

class MemorySnapshot(BaseModel):
    """Resident and virtual memory of the process, in bytes."""

    rss: int = Field(..., description="Resident set size")
    vms: int = Field(..., description="Virtual memory size")


class CpuSnapshot(BaseModel):
    """CPU seconds consumed by the process since it started."""

    user: float = Field(..., description="User-mode CPU seconds")
    system: float = Field(..., description="Kernel-mode CPU seconds")


class ServiceInfoResponse(BaseModel):
    """Response model for the root metadata endpoint."""

    status: str = "success"
    message: str = "Welcome to DevOps Web Application!"
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=utc_now)
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    """
    Response model for the liveness probe.

    Attributes:
        status: Always "healthy" while the process can answer
        timestamp: Current server time
        uptime: Seconds since the process started
        environment: Current environment
        version: Service version
        memory: Memory usage snapshot
        cpu: CPU usage snapshot
    """

    status: str = Field(default="healthy", description="Health status")
    timestamp: datetime = Field(default_factory=utc_now)
    uptime: float = Field(..., description="Process uptime in seconds")
    environment: str
    version: str
    memory: MemorySnapshot
    cpu: CpuSnapshot


class ReadinessChecks(BaseModel):
    """Declared state of downstream services. Nothing is probed."""

    database: str = "connected"
    redis: str = "connected"
    external_api: str = "available"


class ReadinessResponse(BaseModel):
    status: str = "ready"
    timestamp: datetime = Field(default_factory=utc_now)
    checks: ReadinessChecks = Field(default_factory=ReadinessChecks)


class ProcessMetrics(BaseModel):
    uptime: float
    memory: MemorySnapshot
    cpu: CpuSnapshot
    pid: int
    version: str = Field(..., description="Python runtime version")
    platform: str


class SystemInfo(BaseModel):
    environment: str
    port: int
    hostname: str


class MetricsResponse(BaseModel):
    """Response model for the metrics endpoint."""

    status: str = "success"
    timestamp: datetime = Field(default_factory=utc_now)
    process: ProcessMetrics
    system: SystemInfo


class OperationalStatusResponse(BaseModel):
    status: str = "operational"
    service: str
    timestamp: datetime = Field(default_factory=utc_now)


class ProcessedRecord(BaseModel):
    """
    Echo of a validated submission.

    Built per request and returned to the caller; it is never stored.
    """

    id: int = Field(..., description="Monotonic millisecond identifier")
    name: str
    email: str
    message: str
    timestamp: datetime = Field(default_factory=utc_now)
    processed: bool = True


class DataResponse(BaseModel):
    """Response model for a successful ingestion."""

    status: str = "success"
    message: str = "Data processed successfully"
    data: ProcessedRecord
    timestamp: datetime = Field(default_factory=utc_now)


class FieldError(BaseModel):
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """
    Envelope for every error response.

    Attributes:
        status: Always "error"
        message: Human-readable description
        path: Requested URL path (with query string)
        errors: Field-level details for validation failures
        stack: Formatted traceback, only outside production
        timestamp: Current server time
    """

    status: str = "error"
    message: str
    path: Optional[str] = None
    errors: Optional[List[FieldError]] = None
    stack: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


# =============================================================================
# Helpers
# =============================================================================

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
    "<": "&lt;",
    ">": "&gt;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})


def escape_html(text: str) -> str:
    """
    Replace characters with special meaning in HTML by their entities.

    Args:
        text: Raw user input

    Returns:
        str: Text safe to embed in HTML
    """
    return text.translate(_HTML_ESCAPES)


_GMAIL_DOMAINS = {"gmail.com", "googlemail.com"}
_PLUS_TAG_DOMAINS = {"outlook.com", "hotmail.com", "live.com", "icloud.com", "me.com"}
_DASH_TAG_DOMAINS = {"yahoo.com", "ymail.com", "rocketmail.com"}


def normalize_email(address: str) -> str:
    """
    Canonicalize an email address.

    Lower-cases the whole address, then applies provider rules:
    Gmail ignores dots and "+tag" suffixes (googlemail.com is an alias),
    Outlook and iCloud ignore "+tag", Yahoo ignores "-tag".

    Args:
        address: Syntactically valid email address

    Returns:
        str: Normalized address
    """
    local, _, domain = address.strip().lower().rpartition("@")

    if domain in _GMAIL_DOMAINS:
        local = local.split("+", 1)[0].replace(".", "") or local
        domain = "gmail.com"
    elif domain in _PLUS_TAG_DOMAINS:
        local = local.split("+", 1)[0] or local
    elif domain in _DASH_TAG_DOMAINS:
        local = local.split("-", 1)[0] or local

    return f"{local}@{domain}"


_record_id_lock = threading.Lock()
_last_record_id = 0


def generate_record_id() -> int:
    """
    Generate a unique record identifier.

    Format: milliseconds since the epoch, bumped by one when two calls
    land in the same millisecond so identifiers strictly increase.

    Returns:
        int: Unique record identifier
    """
    global _last_record_id
    with _record_id_lock:
        now_ms = time.time_ns() // 1_000_000
        _last_record_id = max(now_ms, _last_record_id + 1)
        return _last_record_id
