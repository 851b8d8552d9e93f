"""Tests for the httpx page fetcher."""

from __future__ import annotations

import httpx
import pytest
import respx

from linkharvest.infrastructure.crawling import HttpxPageFetcher


class TestHttpxPageFetcher:
    @respx.mock
    async def test_fetch_returns_body(self) -> None:
        route = respx.get("https://tracker.test/torrent/1/").respond(200, text="<h1>ok</h1>")

        async with HttpxPageFetcher(user_agent="TestAgent/1.0", cookies={"uid": "42"}) as fetcher:
            body = await fetcher.fetch("https://tracker.test/torrent/1/")

        assert body == "<h1>ok</h1>"
        request = route.calls.last.request
        assert request.headers["User-Agent"] == "TestAgent/1.0"
        assert "uid=42" in request.headers["Cookie"]

    @respx.mock
    async def test_status_error_raises(self) -> None:
        respx.get("https://tracker.test/missing").respond(404)
        async with HttpxPageFetcher() as fetcher:
            with pytest.raises(httpx.HTTPStatusError):
                await fetcher.fetch("https://tracker.test/missing")

    @respx.mock
    async def test_follows_redirects(self) -> None:
        respx.get("https://tracker.test/old").respond(
            301, headers={"Location": "https://tracker.test/new"}
        )
        respx.get("https://tracker.test/new").respond(200, text="moved")
        async with HttpxPageFetcher() as fetcher:
            assert await fetcher.fetch("https://tracker.test/old") == "moved"

    async def test_borrowed_client_left_open(self) -> None:
        async with httpx.AsyncClient() as client:
            fetcher = HttpxPageFetcher(client)
            await fetcher.aclose()
            assert not client.is_closed
