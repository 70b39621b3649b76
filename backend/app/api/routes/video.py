from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from backend.app.api.deps import get_venice_client
from backend.app.services.venice_client import VeniceClient, VeniceConfigurationError, VeniceError
from backend.app.services.video_jobs import (
    VIDEO_MODELS,
    build_video_prompt,
    get_video_status,
    queue_video,
)

router = APIRouter()


class VideoRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    prompt: Optional[str] = None
    script: Optional[str] = None
    model: Optional[str] = None
    duration: Optional[str] = None
    aspect_ratio: Optional[str] = None


def _upstream_error(exc: VeniceError, prefix: str) -> HTTPException:
    if isinstance(exc, VeniceConfigurationError) or exc.status_code is None:
        return HTTPException(status_code=500, detail=str(exc))
    return HTTPException(status_code=exc.status_code, detail=f"{prefix}: {exc}")


@router.get("")
async def list_models():
    return {"models": [model.to_dict() for model in VIDEO_MODELS]}


@router.post("")
async def create_video(body: VideoRequest, client: VeniceClient = Depends(get_venice_client)):
    prompt = body.prompt
    if not prompt and body.script:
        prompt = build_video_prompt(body.script)
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt is required")

    try:
        job = await queue_video(
            client,
            prompt,
            model=body.model,
            duration=body.duration,
            aspect_ratio=body.aspect_ratio,
        )
    except VeniceError as exc:
        raise _upstream_error(exc, "Video generation failed") from exc
    return job.to_dict()


@router.get("/status")
async def video_status(
    id: Optional[str] = Query(default=None),
    model: Optional[str] = None,
    client: VeniceClient = Depends(get_venice_client),
):
    if not id:
        raise HTTPException(status_code=400, detail="Video ID is required")

    try:
        job = await get_video_status(client, id, model=model)
    except VeniceError as exc:
        raise _upstream_error(exc, "Failed to check video status") from exc
    return job.to_dict()
