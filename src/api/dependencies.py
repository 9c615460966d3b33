"""FastAPI dependencies: API key check and the shared store client."""

import secrets

from fastapi import Header, HTTPException, status

from api.models.responses import ErrorCodes
from core import config
from core.bubble_client import BubbleClient, get_bubble_client


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 500 if no key is configured, 401 if the key is wrong
    """
    expected = config.OPS_API_KEY
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    # Constant-time comparison
    if not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )

    return x_api_key


def get_client() -> BubbleClient:
    """The process-wide store client; overridden in tests."""
    return get_bubble_client()
