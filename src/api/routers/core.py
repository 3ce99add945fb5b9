"""Core routes for the roastreel API (root and health check)."""

from api.dependencies import get_config
from api.schemas import HealthResponse, RootResponse
from fastapi import APIRouter

router = APIRouter(tags=["Core"])

API_VERSION = "0.1.0"


@router.get(
    "/",
    response_model=RootResponse,
    summary="API root",
    description="Returns API name and version.",
)
async def root() -> dict[str, str]:
    return {"message": "roastreel API", "version": API_VERSION}


@router.get(
    "/api/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Reports liveness plus the configured video mode and whether shot planning is on.",
)
async def health() -> dict:
    """Health check endpoint. Does not touch providers or storage."""
    config = get_config()
    return {
        "status": "healthy",
        "video_mode": config.get("video_mode", "fallback"),
        "shot_planning": bool(config.get("shot_planning_enabled", True)),
    }
