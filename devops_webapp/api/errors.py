"""
DevOps Web App - Error Handlers

Global exception handlers that give every failure the same envelope:
``{status: "error", message, path, timestamp}``.

- AppError subclasses answer with their declared status and message
- Starlette 404/405 (no route for this path and method) become "Endpoint not found"
- Anything else is an internal error; production hides its message and stack
"""

import traceback
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import AppError, NotFoundError, RequestValidationFailed
from ..models import ErrorResponse


logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_app_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def original_url(request: Request) -> str:
    """Requested path including the query string."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _is_production(request: Request) -> bool:
    return request.app.state.settings.is_production


def _format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    exc: Optional[BaseException] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    """Build the error envelope, attaching the stack outside production."""
    body = ErrorResponse(message=message, path=original_url(request))
    if exc is not None and not _is_production(request):
        body.stack = _format_stack(exc)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def not_found_response(request: Request) -> JSONResponse:
    body = ErrorResponse(message=NotFoundError.default_message, path=original_url(request))
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def _register_app_error_handler(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Handle errors raised on purpose by handlers and parsers."""
        if isinstance(exc, RequestValidationFailed):
            logger.warning(
                "request_validation_failed",
                path=request.url.path,
                fields=[e["field"] for e in exc.errors],
            )
            body = ErrorResponse(
                message=exc.message,
                path=original_url(request),
                errors=exc.errors,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=body.model_dump(mode="json", exclude_none=True),
            )

        if isinstance(exc, NotFoundError):
            return not_found_response(request)

        if exc.status_code >= 500:
            return _internal_error_response(request, exc, exc.status_code)

        logger.warning(
            "request_rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
        return _error_response(request, exc.status_code, exc.message, exc)


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched path or method, or an HTTPException raised by a handler."""
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            logger.info("endpoint_not_found", method=request.method, path=request.url.path)
            return not_found_response(request)

        return _error_response(
            request,
            exc.status_code,
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )


def _internal_error_response(request: Request, exc: BaseException, status_code: int) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        method=request.method,
        path=request.url.path,
        status_code=status_code,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    if _is_production(request):
        message = INTERNAL_ERROR_MESSAGE
    else:
        message = str(exc) or type(exc).__name__
    return _error_response(request, status_code, message, exc)


def _declared_status(exc: Exception) -> int:
    """Status code an arbitrary exception asks for, 500 when it names none."""
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and 400 <= value <= 599:
            return value
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Envelope for an exception no other handler claimed."""
    return _internal_error_response(request, exc, _declared_status(exc))


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Last resort for errors raised outside the request policies."""
        return unhandled_error_response(request, exc)
