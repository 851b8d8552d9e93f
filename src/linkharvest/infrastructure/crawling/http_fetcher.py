"""httpx-backed page fetcher for follow-crawling.

Cookies configured here are sent with every request; this is how
authenticated listing sites resolve outside a browser session.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import TracebackType

import httpx
import structlog

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT_SECONDS = 30.0

log = structlog.get_logger(__name__)


class HttpxPageFetcher:
    """Fetches HTML with a shared ``httpx.AsyncClient``.

    Pass *client* to reuse an existing client (its lifecycle stays with the
    caller); otherwise one is created lazily and closed by ``aclose``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        follow_redirects: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        cookies: Mapping[str, str] | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout_seconds
        self._follow_redirects = follow_redirects
        self._user_agent = user_agent
        self._cookies = dict(cookies or {})

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=self._follow_redirects,
                headers={"User-Agent": self._user_agent},
                cookies=self._cookies,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxPageFetcher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # PageFetcherPort
    # ------------------------------------------------------------------

    async def fetch(self, url: str) -> str:
        """GET *url* and return its body.

        Raises ``httpx.HTTPStatusError`` on non-2xx and ``httpx.HTTPError``
        subclasses on network failure.
        """
        client = self._ensure_client()
        log.debug("http_request_start", url=url)
        response = await client.get(url)
        response.raise_for_status()
        log.debug("page_fetched", url=url, status_code=response.status_code)
        return response.text
