from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from backend.app.core.settings import settings

logger = logging.getLogger(__name__)

COPYWRITER_SYSTEM_PROMPT = (
    "You are an expert automotive advertising copywriter with 20 years of experience writing "
    "compelling car dealership ads. You understand what makes people want to buy cars and how to "
    "create urgency without being pushy. Your scripts are creative, memorable, and drive action."
)


class VeniceError(Exception):
    """Raised when the Venice API cannot be reached or rejects a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VeniceConfigurationError(VeniceError):
    """Raised when no API key is configured."""


@dataclass
class VideoRetrieval:
    content_type: str
    content: bytes
    payload: Dict[str, Any]

    @property
    def is_video(self) -> bool:
        return "video/" in self.content_type


class AsyncTransport(Protocol):
    async def post(
        self,
        path: str,
        json: Dict[str, Any],
        headers: Dict[str, str],
        timeout: float,
    ) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """httpx-based transport with connection pooling."""

    def __init__(self, base_url: str):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=None)

    async def post(
        self,
        path: str,
        json: Dict[str, Any],
        headers: Dict[str, str],
        timeout: float,
    ) -> httpx.Response:
        return await self._client.post(path, json=json, headers=headers, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()


class VeniceClient:
    """Thin async client against the Venice chat-completion and video endpoints."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        text_model: Optional[str] = None,
        transport: Optional[AsyncTransport] = None,
    ):
        self.api_key = api_key or settings.venice_api_key
        self.base_url = (base_url or settings.venice_base_url).rstrip("/")
        self.timeout = timeout or settings.generation_timeout_seconds
        self.text_model = text_model or settings.venice_text_model
        self._transport = transport or HttpxTransport(self.base_url)
        self._owns_transport = transport is None

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.close()

    async def complete(
        self,
        prompt: str,
        *,
        system_prompt: str = COPYWRITER_SYSTEM_PROMPT,
        max_tokens: int = 1000,
        temperature: float = 0.8,
    ) -> str:
        payload = {
            "model": self.text_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        body = self._json(await self._post("/chat/completions", payload))
        try:
            return body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise VeniceError("Unexpected chat completion payload from Venice") from exc

    async def queue_video(self, *, prompt: str, model: str, duration: str, aspect_ratio: str) -> str:
        payload = {
            "model": model,
            "prompt": prompt,
            "duration": duration,
            "aspect_ratio": aspect_ratio,
        }
        body = self._json(await self._post("/video/queue", payload))
        job_id = body.get("queue_id") or body.get("id")
        if not job_id:
            raise VeniceError(f"Venice did not return a queue id: {body}")
        return str(job_id)

    async def retrieve_video(self, *, queue_id: str, model: str) -> VideoRetrieval:
        response = await self._post("/video/retrieve", {"queue_id": queue_id, "model": model})
        content_type = response.headers.get("content-type", "")
        if "video/" in content_type:
            return VideoRetrieval(content_type=content_type, content=response.content, payload={})
        return VideoRetrieval(content_type=content_type, content=b"", payload=self._json(response))

    async def _post(self, path: str, payload: Dict[str, Any]) -> httpx.Response:
        if not self.api_key:
            raise VeniceConfigurationError("VENICE_API_KEY is not configured")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            response = await self._transport.post(path, json=payload, headers=headers, timeout=self.timeout)
        except httpx.RequestError as exc:
            logger.error(f"Venice request to {path} failed: {exc}")
            raise VeniceError(f"Venice request failed: {exc}") from exc

        if response.is_error:
            logger.error(f"Venice returned {response.status_code} for {path}: {response.text}")
            raise VeniceError(
                f"Venice API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise VeniceError(f"Invalid response from Venice API: {response.text}") from exc
        if not isinstance(body, dict):
            raise VeniceError(f"Invalid response from Venice API: {response.text}")
        return body
