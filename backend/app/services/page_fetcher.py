from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

import httpx

from backend.app.core.settings import settings

logger = logging.getLogger(__name__)


class PageFetchError(Exception):
    """Raised when a dealership page cannot be downloaded."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FetchedPage:
    requested_url: str
    url: str  # effective URL after redirects
    status_code: int
    html: str


class AsyncGetTransport(Protocol):
    async def get(self, url: str, headers: Dict[str, str], timeout: float) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxGetTransport:
    def __init__(self) -> None:
        self._client = httpx.AsyncClient(follow_redirects=True, timeout=None)

    async def get(self, url: str, headers: Dict[str, str], timeout: float) -> httpx.Response:
        return await self._client.get(url, headers=headers, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()


def browser_headers(user_agent: Optional[str] = None) -> Dict[str, str]:
    return {
        "User-Agent": user_agent or settings.scrape_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
    }


class PageFetcher:
    """Single-shot GET with browser-like headers. No retries."""

    def __init__(
        self,
        *,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
        transport: Optional[AsyncGetTransport] = None,
    ):
        self.timeout = timeout or settings.fetch_timeout_seconds
        self._headers = browser_headers(user_agent)
        self._transport = transport or HttpxGetTransport()
        self._owns_transport = transport is None

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.close()

    async def fetch(self, url: str) -> FetchedPage:
        try:
            response = await self._transport.get(url, headers=self._headers, timeout=self.timeout)
        except httpx.RequestError as exc:
            logger.warning(f"Fetching {url} failed: {exc}")
            raise PageFetchError(f"Failed to fetch page: {exc}") from exc

        if not response.is_success:
            logger.warning(f"Fetching {url} returned {response.status_code}")
            raise PageFetchError(
                f"Failed to fetch page: {response.status_code}",
                status_code=response.status_code,
            )

        return FetchedPage(
            requested_url=url,
            url=str(response.url) or url,
            status_code=response.status_code,
            html=response.text,
        )
