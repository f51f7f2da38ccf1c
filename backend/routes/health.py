"""
Health check route.

Public (no authentication) so load balancers and deploy checks can hit it.
"""

from fastapi import APIRouter

from backend.schemas.health import HealthResponse
from backend.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check() -> HealthResponse:
    logger.debug("Health check endpoint called")
    return HealthResponse()
