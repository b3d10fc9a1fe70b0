"""
DevOps Web App - Request Body Parsing

Decodes JSON and URL-encoded request bodies into a plain mapping, enforcing
the configured size cap. Decoding failures are raised as AppError subclasses
so the central error handler answers them.
"""

import json
from typing import Any, AsyncGenerator, Dict

import structlog
from fastapi import Request
from starlette.formparsers import FormParser

from ..errors import MalformedBodyError, PayloadTooLargeError


logger = structlog.get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _is_json(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


async def _read_capped(request: Request, limit: int) -> bytes:
    """Collect the body, stopping at the first chunk that passes ``limit``."""
    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            logger.warning("request_body_too_large", received_bytes=received, limit=limit)
            raise PayloadTooLargeError()
        chunks.append(chunk)
    return b"".join(chunks)


async def _replay(body: bytes) -> AsyncGenerator[bytes, None]:
    # An empty chunk tells the form parser the body is complete
    yield body
    yield b""


async def parse_body(request: Request) -> Dict[str, Any]:
    """
    Parse the request body into a field mapping.

    JSON bodies must decode to an object; any other JSON value, an empty
    body or an unsupported Content-Type yields an empty mapping. Chunked
    bodies are read incrementally and rejected as soon as they pass the cap.

    Raises:
        PayloadTooLargeError: If the body exceeds ``max_body_bytes``
        MalformedBodyError: If a JSON body cannot be decoded
    """
    limit = request.app.state.settings.max_body_bytes

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        logger.warning("request_body_too_large", declared_bytes=int(declared), limit=limit)
        raise PayloadTooLargeError()

    body = await _read_capped(request, limit)
    if not body:
        return {}

    media_type = _media_type(request)

    if _is_json(media_type):
        try:
            parsed = json.loads(body)
        except ValueError as e:
            logger.warning("invalid_json_body", error=str(e))
            raise MalformedBodyError("Invalid JSON body") from e
        return parsed if isinstance(parsed, dict) else {}

    if media_type == FORM_CONTENT_TYPE:
        form = await FormParser(request.headers, _replay(body)).parse()
        return {key: value for key, value in form.items()}

    logger.info("unsupported_content_type", content_type=media_type)
    return {}
