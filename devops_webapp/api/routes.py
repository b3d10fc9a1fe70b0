"""
DevOps Web App - Route Handlers

Service metadata, liveness/readiness probes, process metrics and the
validated data ingestion endpoint.
"""

import platform
import socket
import sys
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from ..config import Settings
from ..errors import RequestValidationFailed
from ..models import (
    DataResponse,
    DataSubmission,
    HealthResponse,
    MetricsResponse,
    OperationalStatusResponse,
    ProcessedRecord,
    ProcessMetrics,
    ReadinessResponse,
    ServiceInfoResponse,
    SystemInfo,
)
from ..models.schemas import generate_record_id
from ..services import ProcessStats, get_process_stats
from .body import parse_body


logger = structlog.get_logger(__name__)
router = APIRouter()

ENDPOINTS = {
    "health": "/health",
    "ready": "/ready",
    "metrics": "/metrics",
    "api": "/api",
}


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


@router.get("/", response_model=ServiceInfoResponse, tags=["Service"])
@router.head("/", response_model=ServiceInfoResponse, include_in_schema=False)
async def service_info(settings: Settings = Depends(get_app_settings)) -> ServiceInfoResponse:
    """Service metadata and a map of the probe endpoints."""
    return ServiceInfoResponse(
        version=settings.app_version,
        environment=settings.environment,
        endpoints=ENDPOINTS,
    )


@router.get("/health", response_model=HealthResponse, tags=["Health"])
@router.head("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    stats: ProcessStats = Depends(get_process_stats),
) -> HealthResponse:
    """Liveness probe. Answers 200 whenever the process can respond."""
    return HealthResponse(
        uptime=stats.uptime(),
        environment=settings.environment,
        version=settings.app_version,
        memory=stats.memory(),
        cpu=stats.cpu(),
    )


@router.get("/ready", response_model=ReadinessResponse, tags=["Health"])
@router.head("/ready", response_model=ReadinessResponse, include_in_schema=False)
async def readiness_check() -> ReadinessResponse:
    """
    Readiness probe.

    Reports the downstream services as available without contacting them;
    this service has no dependencies to probe yet.
    """
    return ReadinessResponse()


@router.get("/metrics", response_model=MetricsResponse, tags=["Monitoring"])
@router.head("/metrics", response_model=MetricsResponse, include_in_schema=False)
async def metrics(
    settings: Settings = Depends(get_app_settings),
    stats: ProcessStats = Depends(get_process_stats),
) -> MetricsResponse:
    """Process statistics plus static runtime information."""
    return MetricsResponse(
        process=ProcessMetrics(
            uptime=stats.uptime(),
            memory=stats.memory(),
            cpu=stats.cpu(),
            pid=stats.pid,
            version=platform.python_version(),
            platform=sys.platform,
        ),
        system=SystemInfo(
            environment=settings.environment,
            port=settings.port,
            hostname=socket.gethostname(),
        ),
    )


@router.get("/api/status", response_model=OperationalStatusResponse, tags=["Service"])
@router.head("/api/status", response_model=OperationalStatusResponse, include_in_schema=False)
async def api_status(settings: Settings = Depends(get_app_settings)) -> OperationalStatusResponse:
    return OperationalStatusResponse(service=settings.service_name)


@router.post(
    "/api/data",
    response_model=DataResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Ingestion"],
)
async def submit_data(payload: Dict[str, Any] = Depends(parse_body)) -> DataResponse:
    """
    Validate a submission and echo it back as a processed record.

    Every field is checked; all violations are reported together.
    Nothing is stored.
    """
    try:
        submission = DataSubmission.model_validate(payload)
    except ValidationError as e:
        raise RequestValidationFailed(_field_errors(e)) from e

    record = ProcessedRecord(
        id=generate_record_id(),
        name=submission.name,
        email=submission.email,
        message=submission.message,
    )

    logger.info(
        "data_processed",
        record_id=record.id,
        message_length=len(record.message),
    )
    return DataResponse(data=record)


def _field_errors(exc: ValidationError) -> list:
    """Flatten Pydantic errors into field/message/type entries."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "body",
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
