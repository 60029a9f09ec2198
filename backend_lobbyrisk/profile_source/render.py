"""
Render capability: fetch the raw document for a profile page.

Each task opens its own session (one httpx.AsyncClient) and closes it when the
task ends, so no connection state is shared across concurrent tasks.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Protocol
from urllib.parse import quote

import httpx

from backend_lobbyrisk.core.exceptions import FetchFailure, FetchTimeout
from backend_lobbyrisk.lobbyrisk_logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml",
}


class RenderSession(Protocol):
    async def render(self, url: str, *, timeout: float) -> str: ...


class Renderer(Protocol):
    def session(self) -> AsyncContextManager[RenderSession]: ...


def profile_url(base_url: str, identity: str) -> str:
    """Primary profile document for an identity."""
    return f"{base_url.rstrip('/')}/{quote(identity, safe='')}/"


def comments_url(base_url: str, identity: str) -> str:
    """Comment feed document for an identity."""
    return f"{base_url.rstrip('/')}/{quote(identity, safe='')}/allcomments"


class HttpxRenderSession:
    """One task's rendering session over a dedicated AsyncClient."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def render(self, url: str, *, timeout: float) -> str:
        """
        GET url and return the response body.

        Raises:
            FetchTimeout: when the request exceeds timeout.
            FetchFailure: on transport errors or non-2xx status.
        """
        try:
            resp = await self._client.get(url, timeout=timeout)
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            raise FetchTimeout(f"render timed out after {timeout}s", url=url) from e
        except httpx.HTTPStatusError as e:
            raise FetchFailure(f"render returned HTTP {e.response.status_code}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchFailure(f"render failed: {e}", url=url) from e
        return resp.text


class HttpxRenderer:
    """Renderer backed by httpx; one AsyncClient per session."""

    def __init__(
        self,
        *,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._transport = transport

    @asynccontextmanager
    async def session(self) -> AsyncIterator[HttpxRenderSession]:
        async with httpx.AsyncClient(
            headers=self._headers,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            yield HttpxRenderSession(client)
