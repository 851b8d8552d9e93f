"""List-to-detail crawling for follow rules.

Detail URLs are fetched in fixed-size batches: every fetch of a batch runs
concurrently, and the next batch starts only after the whole batch has
settled.  A failing URL contributes nothing and never cancels its
siblings.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog
from bs4 import BeautifulSoup, Tag

from linkharvest.domain.entities import LinkRecord, ScanContext
from linkharvest.domain.ports import PageFetcherPort
from linkharvest.domain.rules import DetailRule, FollowConfig
from linkharvest.infrastructure.common.html_selectors import (
    document_base_url,
    parse_html,
    resolve_href,
)
from linkharvest.infrastructure.extraction import LinkExtractor

DEFAULT_BATCH_SIZE = 5

log = structlog.get_logger(__name__)


def collect_follow_urls(
    doc: BeautifulSoup | Tag,
    base_url: str,
    href_selector: str,
    limit: int,
) -> list[str]:
    """Unique absolute detail URLs in document order, capped at *limit*."""
    seen: set[str] = set()
    urls: list[str] = []
    for element in doc.select(href_selector):
        if not isinstance(element, Tag):
            continue
        url = resolve_href(element, base_url)
        if not url or url in seen:
            continue
        seen.add(url)
        urls.append(url)
    return urls[: max(limit, 0)]


class FollowCrawler:
    """Fetches detail pages of a list page and extracts their links."""

    def __init__(
        self,
        fetcher: PageFetcherPort,
        extractor: LinkExtractor | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.fetcher = fetcher
        self.extractor = extractor or LinkExtractor()
        self.batch_size = batch_size

    async def follow_and_extract(
        self,
        doc: BeautifulSoup | Tag,
        context: ScanContext,
        follow: FollowConfig,
    ) -> list[LinkRecord]:
        """
        Crawl the detail pages linked from *doc*.

        Flow:
        1. Collect unique detail URLs via ``follow.href_selector``
        2. Cap at ``follow.limit`` keeping document order
        3. Fetch batch by batch, each batch joined on all-settled
        4. Extract every fetched page with ``follow.detail_rule``

        Records are concatenated in batch order; no cross-page dedup.
        """
        base_url = document_base_url(doc, context.url)
        urls = collect_follow_urls(doc, base_url, follow.href_selector, follow.limit)

        log.info(
            "follow_crawl_start",
            host=context.host,
            urls=len(urls),
            limit=follow.limit,
            batch_size=self.batch_size,
        )

        records: list[LinkRecord] = []
        failed = 0
        for start in range(0, len(urls), self.batch_size):
            batch = urls[start : start + self.batch_size]
            log.debug("follow_batch_start", batch_start=start, batch_len=len(batch))

            results = await asyncio.gather(
                *(self._fetch_and_extract(url, context, follow.detail_rule) for url in batch),
                return_exceptions=True,
            )

            for url, result in zip(batch, results):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        # Cancellation and interpreter exits are not per-URL failures
                        raise result
                    failed += 1
                    self._log_failure(url, result)
                    continue
                records.extend(result)

        log.info(
            "follow_crawl_complete",
            host=context.host,
            urls=len(urls),
            failed=failed,
            links=len(records),
        )
        return records

    async def _fetch_and_extract(
        self, url: str, context: ScanContext, detail_rule: DetailRule
    ) -> list[LinkRecord]:
        html = await self.fetcher.fetch(url)
        detail_doc = parse_html(html)
        detail_context = ScanContext(host=context.host, url=url)
        return self.extractor.extract(detail_doc, detail_context, detail_rule)

    @staticmethod
    def _log_failure(url: str, error: Exception) -> None:
        if isinstance(error, httpx.HTTPStatusError):
            log.warning(
                "follow_fetch_failed",
                url=url,
                status_code=error.response.status_code,
            )
            return
        log.warning(
            "follow_fetch_failed",
            url=url,
            error_type=type(error).__name__,
            error=str(error),
        )


async def follow_and_extract(
    doc: BeautifulSoup | Tag,
    context: ScanContext,
    follow: FollowConfig,
    fetcher: PageFetcherPort,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[LinkRecord]:
    return await FollowCrawler(fetcher, batch_size=batch_size).follow_and_extract(
        doc, context, follow
    )
