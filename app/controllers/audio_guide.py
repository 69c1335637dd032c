"""Audio guide generation endpoint.

For the stage-by-stage map see `app.pipelines.audio_guide.flow`. The POST
`/generate-audio` handler only adapts HTTP to the pipeline:

1. Parse the JSON body into an `AttractionRequest`.
2. Start the shared request deadline and a disconnect watcher.
3. Run the pipeline; failures surface as `PipelineError` and are rendered by
   the handler registered in `app.main`.
4. Stream back the MP3 bytes, flagging failed location enrichment.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from app.config.settings import PipelineConfig
from app.pipelines.audio_guide import AudioGuidePipeline, RequestDeadline
from app.views import AttractionRequest, ErrorResponse

router = APIRouter(tags=["audio-guide"])

logger = logging.getLogger(__name__)

LOCATION_WARNING_HEADER = "X-Location-Warning"
LOCATION_WARNING_MESSAGE = (
    "Location details unavailable - information may be less accurate"
)


def get_audio_guide_pipeline(request: Request) -> AudioGuidePipeline:
    """Return the pipeline built at application startup."""

    return request.app.state.audio_guide_pipeline


def get_pipeline_config(request: Request) -> PipelineConfig:
    return request.app.state.settings.pipeline


PipelineDep = Annotated[AudioGuidePipeline, Depends(get_audio_guide_pipeline)]
PipelineConfigDep = Annotated[PipelineConfig, Depends(get_pipeline_config)]


async def _cancel_on_disconnect(
    request: Request,
    deadline: RequestDeadline,
    poll_seconds: float,
) -> None:
    """Cancel the pipeline's in-flight call once the client goes away."""

    while not deadline.expired():
        if await request.is_disconnected():
            logger.info("Client disconnected; cancelling audio guide generation")
            deadline.cancel()
            return
        await asyncio.sleep(poll_seconds)


@router.post(
    "/generate-audio",
    response_class=Response,
    responses={
        200: {"content": {"audio/mpeg": {}}},
        400: {"model": ErrorResponse},
        408: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)
async def generate_audio(
    payload: AttractionRequest,
    request: Request,
    pipeline: PipelineDep,
    pipeline_config: PipelineConfigDep,
) -> Response:
    """Generate a narrated MP3 about one attraction."""

    logger.info("Generating audio guide for: %s", (payload.name or "").strip())
    deadline = RequestDeadline(pipeline_config.request_timeout_seconds)
    watcher = asyncio.create_task(
        _cancel_on_disconnect(request, deadline, pipeline_config.disconnect_poll_seconds)
    )
    try:
        outcome = await pipeline.run(payload.to_raw(), deadline)
    finally:
        watcher.cancel()

    headers: dict[str, str] = {}
    if outcome.location_warning:
        headers[LOCATION_WARNING_HEADER] = LOCATION_WARNING_MESSAGE

    logger.info(
        "Successfully generated audio for: %s (%d bytes)",
        outcome.description.name,
        outcome.audio.size,
    )
    return Response(
        content=outcome.audio.audio_bytes,
        media_type=outcome.audio.media_type,
        headers=headers,
    )
