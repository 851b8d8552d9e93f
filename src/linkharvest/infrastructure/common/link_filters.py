"""Keyword filtering over scan results."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from linkharvest.domain.entities import LinkRecord

# ASCII comma, fullwidth comma, newline
_KEYWORD_SPLIT_RE = re.compile(r"[,，\n]")


def split_keywords(value: str) -> list[str]:
    """Split user keyword input into lowercase, non-blank keywords."""
    return [k.strip().lower() for k in _KEYWORD_SPLIT_RE.split(value) if k.strip()]


def add_keywords(existing: Sequence[str], value: str) -> list[str]:
    """Append the keywords of *value* not already present (case-insensitive)."""
    merged = list(existing)
    seen = {k.lower() for k in existing}
    for keyword in split_keywords(value):
        if keyword not in seen:
            seen.add(keyword)
            merged.append(keyword)
    return merged


def build_search_text(link: LinkRecord) -> str:
    return " ".join(
        [
            link.title or "",
            link.url or "",
            link.source_host or "",
            link.normalized_title or "",
        ]
    ).lower()


def matches_all_keywords(haystack: str, keywords: Sequence[str]) -> bool:
    """True when every keyword occurs in *haystack* (no keywords: True)."""
    return all(k in haystack for k in keywords)


def matches_any_keyword(haystack: str, keywords: Sequence[str]) -> bool:
    """True when some keyword occurs in *haystack* (no keywords: True)."""
    if not keywords:
        return True
    return any(k in haystack for k in keywords)


def filter_links(
    links: Iterable[LinkRecord],
    include_all: Sequence[str] = (),
    include_any: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> list[LinkRecord]:
    """Keep links matching every *include_all*, some *include_any* and no *exclude* keyword."""
    kept: list[LinkRecord] = []
    for link in links:
        text = build_search_text(link)
        if not matches_all_keywords(text, include_all):
            continue
        if not matches_any_keyword(text, include_any):
            continue
        if exclude and any(k in text for k in exclude):
            continue
        kept.append(link)
    return kept
