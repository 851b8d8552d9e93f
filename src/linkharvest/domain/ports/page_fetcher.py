"""Port for fetching detail pages during follow-crawling."""

from __future__ import annotations

from typing import Protocol


class PageFetcherPort(Protocol):
    """Async interface returning the HTML body of a URL.

    Implementations raise on network errors and non-2xx responses; the
    crawler isolates those failures per URL.
    """

    async def fetch(self, url: str) -> str: ...
