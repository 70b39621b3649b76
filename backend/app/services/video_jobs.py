from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from backend.app.core.settings import settings
from backend.app.services.venice_client import VeniceClient, VideoRetrieval

logger = logging.getLogger(__name__)

DEFAULT_DURATION = "4s"
DEFAULT_ASPECT_RATIO = "16:9"
VIDEO_PROMPT_PREFIX = "Create a cinematic car commercial video based on this ad script: "

STATUS_ALIASES = {
    "completed": "completed",
    "complete": "completed",
    "failed": "failed",
    "error": "failed",
    "queued": "queued",
    "pending": "queued",
    "processing": "processing",
}


@dataclass(frozen=True)
class VideoModel:
    id: str
    name: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}


VIDEO_MODELS: Tuple[VideoModel, ...] = (
    VideoModel("sora-2-text-to-video", "Sora 2", "OpenAI Sora 2 - High quality video generation"),
    VideoModel("kling-2.6-pro-text-to-video", "Kling 2.6 Pro", "High quality, professional video generation"),
)


@dataclass(frozen=True)
class VideoJob:
    id: str
    status: str
    video_url: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "status": self.status}
        if self.video_url:
            payload["videoUrl"] = self.video_url
        if self.error:
            payload["error"] = self.error
        return payload


def build_video_prompt(script: str, max_chars: Optional[int] = None) -> str:
    limit = max_chars or settings.video_prompt_max_chars
    body = " ".join(script.split())
    if len(body) > limit:
        body = body[:limit].rstrip()
    return f"{VIDEO_PROMPT_PREFIX}{body}"


def normalize_status(raw: Any) -> str:
    """Map a Venice status string onto queued/processing/completed/failed."""
    return STATUS_ALIASES.get(str(raw or "").strip().lower(), "processing")


def _payload_video_url(payload: Dict[str, Any]) -> Optional[str]:
    output = payload.get("output")
    nested = output.get("url") if isinstance(output, dict) else None
    return payload.get("url") or payload.get("video_url") or nested


def job_from_retrieval(job_id: str, retrieval: VideoRetrieval) -> VideoJob:
    if retrieval.is_video:
        encoded = base64.b64encode(retrieval.content).decode("ascii")
        return VideoJob(
            id=job_id,
            status="completed",
            video_url=f"data:{retrieval.content_type};base64,{encoded}",
        )
    payload = retrieval.payload
    error = payload.get("error")
    return VideoJob(
        id=str(payload.get("id") or job_id),
        status=normalize_status(payload.get("status")),
        video_url=_payload_video_url(payload),
        error=str(error) if error else None,
    )


async def queue_video(
    client: VeniceClient,
    prompt: str,
    *,
    model: Optional[str] = None,
    duration: Optional[str] = None,
    aspect_ratio: Optional[str] = None,
) -> VideoJob:
    selected_model = model or settings.venice_video_model
    logger.info(f"Queueing video generation with model {selected_model}")
    job_id = await client.queue_video(
        prompt=prompt,
        model=selected_model,
        duration=duration or DEFAULT_DURATION,
        aspect_ratio=aspect_ratio or DEFAULT_ASPECT_RATIO,
    )
    return VideoJob(id=job_id, status="queued")


async def get_video_status(client: VeniceClient, job_id: str, *, model: Optional[str] = None) -> VideoJob:
    retrieval = await client.retrieve_video(queue_id=job_id, model=model or settings.venice_video_model)
    return job_from_retrieval(job_id, retrieval)
