"""
Health check API endpoints.

Routes: GET /health, GET /health/vector-index

Dependencies: chunkbridge.api.deps
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from chunkbridge.api.deps import ServiceCache, get_service_cache


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/vector-index", response_model=HealthResponse)
async def health_check_vector_index(
    cache: ServiceCache = Depends(get_service_cache),
):
    """Report whether the vector index handle has been initialized."""
    if cache.vector_index is None:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="unavailable", message="Database not yet initialized").model_dump(),
        )
    return HealthResponse(status="healthy", message="Vector index initialized")
