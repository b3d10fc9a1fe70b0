# =============================================================================
# DevOps Web App - Models Package
# =============================================================================
"""Pydantic models for request/response validation."""

from .schemas import (
    CpuSnapshot,
    DataResponse,
    DataSubmission,
    ErrorResponse,
    FieldError,
    HealthResponse,
    MemorySnapshot,
    MetricsResponse,
    OperationalStatusResponse,
    ProcessedRecord,
    ProcessMetrics,
    ReadinessResponse,
    ServiceInfoResponse,
    SystemInfo,
)

__all__ = [
    "CpuSnapshot",
    "DataResponse",
    "DataSubmission",
    "ErrorResponse",
    "FieldError",
    "HealthResponse",
    "MemorySnapshot",
    "MetricsResponse",
    "OperationalStatusResponse",
    "ProcessedRecord",
    "ProcessMetrics",
    "ReadinessResponse",
    "ServiceInfoResponse",
    "SystemInfo",
]
