"""Roast routes: generate, clear cache, serve videos."""

import logging

from api.dependencies import get_roast_pipeline
from api.schemas import (
    CacheStatsResponse,
    ClearCacheResponse,
    ErrorResponse,
    RoastRequestModel,
    RoastResponse,
)
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse, Response
from roast_agent.agent import RoastPipeline, RoastPipelineError
from roast_agent.models import ValidationError
from services.roast_store import is_valid_video_name

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Roasts"])


@router.post(
    "/api/roasts",
    response_model=RoastResponse,
    summary="Build a roast video",
    description="Generate (or recall from cache) the roast script, subtitles and video for a tweet.",
    responses={
        422: {"model": ErrorResponse, "description": "Missing or invalid request fields"},
        502: {"model": ErrorResponse, "description": "Text or video provider failed after retries"},
    },
)
async def create_roast(
    body: RoastRequestModel,
    pipeline: RoastPipeline = Depends(get_roast_pipeline),
):
    try:
        result = await pipeline.run(body.to_request())
    except ValidationError as e:
        return JSONResponse(status_code=422, content={"ok": False, "error": str(e)})
    except RoastPipelineError as e:
        logger.error(f"Roast failed for tweet {body.tweet_id}: {e}")
        return JSONResponse(status_code=502, content={"ok": False, "error": str(e)})
    return RoastResponse(**result.to_dict())


@router.delete(
    "/api/roasts/cache",
    response_model=ClearCacheResponse,
    summary="Clear roast cache",
    description="Remove every stored artifact and video.",
)
async def clear_roast_cache(pipeline: RoastPipeline = Depends(get_roast_pipeline)) -> ClearCacheResponse:
    result = await pipeline.clear_cache()
    return ClearCacheResponse(success=result.success, count=result.count, error=result.error)


@router.get(
    "/api/roasts/cache/stats",
    response_model=CacheStatsResponse,
    summary="Roast cache statistics",
)
async def roast_cache_stats(pipeline: RoastPipeline = Depends(get_roast_pipeline)) -> dict:
    return pipeline.store.get_stats()


@router.get(
    "/roasts/{file}",
    summary="Download a roast video",
    responses={200: {"content": {"video/mp4": {}}}, 404: {"description": "Unknown video"}},
)
async def get_roast_video(file: str, pipeline: RoastPipeline = Depends(get_roast_pipeline)) -> Response:
    # Pattern check happens before any storage lookup
    if not is_valid_video_name(file):
        return Response("Not found", status_code=404, media_type="text/plain")

    path = pipeline.store.video_path(file)
    if path is None:
        return Response("Not found", status_code=404, media_type="text/plain")

    return FileResponse(path, media_type="video/mp4", headers={"Cache-Control": "no-store"})
