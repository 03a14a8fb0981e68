"""
Render API endpoints.

Exposes the orchestrator to a progress UI: start a render, poll its status,
and run the render engine pre-flight checks.
"""

import asyncio
import logging
from typing import Union

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse

from ..schemas.render import (
    RenderAcceptedResponse,
    RenderConflictResponse,
    RenderJobRequest,
    RenderOptions,
    RenderRequest,
    RenderStatus,
    SetupVerificationResult,
)
from ..services.rendering import VideoRenderingService
from .deps import get_rendering_service

logger = logging.getLogger(__name__)

router = APIRouter()

# Held from acceptance until the background render finishes
_render_lock = asyncio.Lock()


async def _run_render_job(
    service: VideoRenderingService,
    request: RenderRequest,
    options: RenderOptions,
) -> None:
    try:
        result = await service.render_video(request, options)
        if result.success:
            logger.info(f"Background render finished: {result.video_path}")
        else:
            logger.warning(f"Background render failed: {result.error}")
    finally:
        _render_lock.release()


@router.post(
    "",
    response_model=RenderAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={409: {"model": RenderConflictResponse}},
)
async def start_render(
    body: RenderJobRequest,
    background_tasks: BackgroundTasks,
    service: VideoRenderingService = Depends(get_rendering_service),
) -> Union[RenderAcceptedResponse, JSONResponse]:
    """
    Start rendering a video in the background.

    Poll GET /render/status for progress. Returns 409 while another render
    is running on this service.
    """
    if _render_lock.locked() or service.get_status().is_rendering:
        conflict = RenderConflictResponse(current_video_id=service.get_status().current_video_id)
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=conflict.model_dump())

    await _render_lock.acquire()
    background_tasks.add_task(
        _run_render_job, service, body.request, body.options or RenderOptions()
    )
    logger.info(f"Render accepted for video={body.request.video_id}")
    return RenderAcceptedResponse(video_id=body.request.video_id)


@router.get("/status", response_model=RenderStatus)
async def get_render_status(
    service: VideoRenderingService = Depends(get_rendering_service),
) -> RenderStatus:
    """Current render status snapshot."""
    return service.get_status()


@router.get("/setup", response_model=SetupVerificationResult)
async def get_render_setup(
    service: VideoRenderingService = Depends(get_rendering_service),
) -> SetupVerificationResult:
    """Run the render engine pre-flight checks."""
    return await service.verify_remotion_setup()
