"""Follow-crawling of list pages and the httpx page fetcher."""

from __future__ import annotations

from .follow_crawler import (
    DEFAULT_BATCH_SIZE,
    FollowCrawler,
    collect_follow_urls,
    follow_and_extract,
)
from .http_fetcher import HttpxPageFetcher

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "FollowCrawler",
    "HttpxPageFetcher",
    "collect_follow_urls",
    "follow_and_extract",
]
