"""Shared test fixtures for the linkharvest test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from linkharvest.domain.entities import Aria2Config, LinkRecord, ScanContext

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def scan_context() -> ScanContext:
    return ScanContext(host="example.com", url="https://example.com/list")


@pytest.fixture()
def aria2_config() -> Aria2Config:
    return Aria2Config(endpoint="http://aria2.test:6800/jsonrpc", token="secret", dir="/downloads")


@pytest.fixture()
def make_link() -> Callable[..., LinkRecord]:
    """Factory for LinkRecords with sensible defaults."""

    def _make(url: str, title: str | None = None, **kwargs: Any) -> LinkRecord:
        return LinkRecord(
            url=url,
            title=title or url,
            source_host=kwargs.pop("source_host", "example.com"),
            **kwargs,
        )

    return _make


@pytest.fixture()
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Port fakes
# ---------------------------------------------------------------------------


class FakePageFetcher:
    """In-memory PageFetcherPort that records concurrency.

    *pages* maps URL to HTML; a URL mapped to an exception raises it.
    URLs missing from *pages* raise ``httpx.ConnectError``.
    """

    def __init__(self, pages: dict[str, str | Exception], delay: float = 0.01) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            page = self.pages.get(url)
            if page is None:
                raise httpx.ConnectError(f"no route to {url}")
            if isinstance(page, Exception):
                raise page
            return page
        finally:
            self.in_flight -= 1


@pytest.fixture()
def fake_fetcher_factory() -> Callable[..., FakePageFetcher]:
    return FakePageFetcher
