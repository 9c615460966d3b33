"""Authenticated pass-through to the store's Data and Workflow APIs."""

import json
import logging
import sqlite3
import time

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from api.dependencies import get_client, verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, ErrorResponse
from core.bubble_client import BubbleClient
from core.errors import ApiError, NetworkError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bubble")

PROXY_METHODS = ["GET", "POST", "PATCH", "PUT", "DELETE"]


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _error(status_code: int, message: str, code: str, details: list[str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code, details=details or []).model_dump(),
    )


async def _read_json_body(request: Request):
    if request.method in ("GET", "DELETE"):
        return None
    raw = await request.body()
    if not raw.strip():
        return None
    return json.loads(raw)


@router.api_route("/{path:path}", methods=PROXY_METHODS)
async def proxy(
    path: str,
    request: Request,
    client: BubbleClient = Depends(get_client),
    _api_key: str = Depends(verify_api_key),
):
    """
    Forward the request to /<path> on the store with the server-side token.

    Upstream errors come back with the upstream status and body; an
    unreachable store is a 502.
    """
    start_time = time.time()
    upstream_path = "/" + path.lstrip("/")
    request_log = RequestLog(
        endpoint=request.url.path,
        method=request.method,
        client_ip=get_client_ip(request),
        upstream_path=upstream_path,
    )

    response = None
    try:
        try:
            body = await _read_json_body(request)
        except ValueError as e:
            response = _error(
                status.HTTP_400_BAD_REQUEST,
                "Request body is not valid JSON",
                ErrorCodes.INVALID_REQUEST,
                [str(e)],
            )
            request_log.error_code = ErrorCodes.INVALID_REQUEST
            request_log.error_message = "Request body is not valid JSON"
            return response

        try:
            payload = await client.request(
                request.method,
                upstream_path,
                body=body,
                params=dict(request.query_params) or None,
                unwrap=False,
            )
        except ApiError as e:
            request_log.error_code = ErrorCodes.UPSTREAM_ERROR
            request_log.error_message = e.message
            if isinstance(e.response_body, (dict, list)):
                response = JSONResponse(status_code=e.status_code, content=e.response_body)
            else:
                response = _error(e.status_code, e.message, ErrorCodes.UPSTREAM_ERROR)
            return response
        except NetworkError as e:
            request_log.error_code = ErrorCodes.UPSTREAM_UNAVAILABLE
            request_log.error_message = e.message
            response = _error(
                status.HTTP_502_BAD_GATEWAY,
                "Remote store is unreachable",
                ErrorCodes.UPSTREAM_UNAVAILABLE,
                [e.message],
            )
            return response
        except ValidationError as e:
            request_log.error_code = ErrorCodes.UPSTREAM_ERROR
            request_log.error_message = e.message
            for issue in e.issues:
                request_log.details.append(("validation_error", issue))
            response = _error(
                status.HTTP_502_BAD_GATEWAY, e.message, ErrorCodes.UPSTREAM_ERROR, e.issues
            )
            return response

        if payload is None:
            response = Response(status_code=status.HTTP_204_NO_CONTENT)
        else:
            response = JSONResponse(content=payload)
        return response

    finally:
        request_log.status_code = response.status_code if response is not None else 500
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        try:
            log_request(request_log)
        except sqlite3.Error:
            # Logging must not fail the request
            logger.exception("Failed to record request %s", request_log.request_id)
