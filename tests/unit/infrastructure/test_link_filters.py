"""Tests for keyword filtering of scan results."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from linkharvest.domain.entities import LinkRecord
from linkharvest.infrastructure.common import (
    add_keywords,
    filter_links,
    split_keywords,
)

MakeLink = Callable[..., LinkRecord]


def test_split_keywords() -> None:
    assert split_keywords(" 1080p, HEVC，Web\n\n, ") == ["1080p", "hevc", "web"]


def test_add_keywords_skips_known() -> None:
    assert add_keywords(["hevc"], "HEVC, x265") == ["hevc", "x265"]


@pytest.fixture()
def links(make_link: MakeLink) -> list[LinkRecord]:
    return [
        make_link("magnet:?xt=1", "Show S01E01 1080p HEVC"),
        make_link("magnet:?xt=2", "Show S01E02 720p"),
        make_link("https://cdn.test/show-e03.mkv", "Episode 3", source_host="cdn.test"),
    ]


def test_no_keywords_keeps_everything(links: list[LinkRecord]) -> None:
    assert filter_links(links) == links


def test_include_all(links: list[LinkRecord]) -> None:
    kept = filter_links(links, include_all=["show", "1080p"])
    assert [link.url for link in kept] == ["magnet:?xt=1"]


def test_include_any(links: list[LinkRecord]) -> None:
    kept = filter_links(links, include_any=["720p", "cdn.test"])
    assert [link.url for link in kept] == ["magnet:?xt=2", "https://cdn.test/show-e03.mkv"]


def test_exclude(links: list[LinkRecord]) -> None:
    kept = filter_links(links, exclude=["hevc"])
    assert [link.url for link in kept] == ["magnet:?xt=2", "https://cdn.test/show-e03.mkv"]


def test_url_is_searched(links: list[LinkRecord]) -> None:
    assert len(filter_links(links, include_all=["xt=2"])) == 1
