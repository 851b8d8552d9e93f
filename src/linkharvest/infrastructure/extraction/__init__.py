"""Link extraction: title resolution, download heuristics, extractor."""

from __future__ import annotations

from .extractor import GENERIC_LINK_SELECTOR, LinkExtractor, extract_links, parse_stat
from .heuristics import DEFAULT_DOWNLOAD_KEYWORDS, DownloadHeuristics
from .title_resolver import resolve_title

__all__ = [
    "DEFAULT_DOWNLOAD_KEYWORDS",
    "DownloadHeuristics",
    "GENERIC_LINK_SELECTOR",
    "LinkExtractor",
    "extract_links",
    "parse_stat",
    "resolve_title",
]
