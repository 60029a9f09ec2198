"""
Tests for the httpx renderer using httpx.MockTransport.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from backend_lobbyrisk.core.exceptions import FetchFailure, FetchTimeout
from backend_lobbyrisk.profile_source import HttpxRenderer, comments_url, profile_url


def _render(handler, url: str = "https://example.test/profiles/1/") -> str:
    renderer = HttpxRenderer(transport=httpx.MockTransport(handler))

    async def run() -> str:
        async with renderer.session() as session:
            return await session.render(url, timeout=5.0)

    return asyncio.run(run())


def test_render_returns_body_and_sends_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, text="<html>ok</html>")

    assert _render(handler) == "<html>ok</html>"
    assert "Mozilla" in seen["ua"]


def test_render_http_error_is_fetch_failure():
    with pytest.raises(FetchFailure, match="HTTP 503") as exc_info:
        _render(lambda request: httpx.Response(503))
    assert not isinstance(exc_info.value, FetchTimeout)
    assert exc_info.value.url == "https://example.test/profiles/1/"


def test_render_timeout_is_fetch_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(FetchTimeout):
        _render(handler)


def test_render_transport_error_is_fetch_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(FetchFailure):
        _render(handler)


def test_render_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/id/vanity/":
            return httpx.Response(302, headers={"location": "https://example.test/profiles/1/"})
        return httpx.Response(200, text="profile")

    assert _render(handler, "https://example.test/id/vanity/") == "profile"


def test_url_builders_quote_identity():
    base = "https://steamcommunity.com/profiles/"
    assert profile_url(base, "76561197960287930") == "https://steamcommunity.com/profiles/76561197960287930/"
    assert comments_url(base, "765") == "https://steamcommunity.com/profiles/765/allcomments"
    assert profile_url(base, "a/b") == "https://steamcommunity.com/profiles/a%2Fb/"
