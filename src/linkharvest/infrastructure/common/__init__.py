"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_int
from .link_filters import (
    add_keywords,
    build_search_text,
    filter_links,
    matches_all_keywords,
    matches_any_keyword,
    split_keywords,
)
from .urls import link_kind, magnet_display_name, normalize_http_url

__all__ = [
    "add_keywords",
    "build_search_text",
    "filter_links",
    "link_kind",
    "magnet_display_name",
    "matches_all_keywords",
    "matches_any_keyword",
    "normalize_http_url",
    "split_keywords",
    "to_int",
]
