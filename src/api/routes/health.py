"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_client
from api.models.responses import HealthResponse
from core.bubble_client import BubbleClient
from core.config import API_VERSION

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(client: BubbleClient = Depends(get_client)):
    """
    Health check endpoint for monitoring.

    Returns 200 when a store token is configured, 503 otherwise. The store
    itself is not contacted.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if client.token:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            token_configured=True,
            timestamp=timestamp,
        )

    return JSONResponse(
        status_code=503,
        content=HealthResponse(
            status="unhealthy",
            version=API_VERSION,
            token_configured=False,
            timestamp=timestamp,
            error="BUBBLE_API_TOKEN is not configured",
        ).model_dump(),
    )
