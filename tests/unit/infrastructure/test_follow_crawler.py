"""Tests for batched list-to-detail crawling."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from linkharvest.domain.entities import ScanContext
from linkharvest.domain.rules import DetailRule, FollowConfig, RuleSelectors
from linkharvest.infrastructure.common.html_selectors import parse_html
from linkharvest.infrastructure.crawling import (
    FollowCrawler,
    collect_follow_urls,
    follow_and_extract,
)

BASE = "https://1377x.to"
LIST_CTX = ScanContext(host="1377x.to", url=f"{BASE}/popular-movies")

DETAIL = DetailRule(
    selectors=RuleSelectors(link='a[href^="magnet:"],a[href$=".torrent"]', title="h1"),
)


def _list_page(count: int) -> str:
    rows = "".join(f'<tr><td><a href="/torrent/{i}/movie-{i}/">Movie {i}</a></td></tr>' for i in range(count))
    return f'<table class="table-list">{rows}</table>'


def _detail_page(i: int) -> str:
    return f'<h1>Movie {i}</h1><a href="magnet:?xt=urn:btih:{i:040d}">Magnet</a>'


def _pages(count: int) -> dict[str, str | Exception]:
    return {f"{BASE}/torrent/{i}/movie-{i}/": _detail_page(i) for i in range(count)}


def _follow(limit: int = 30) -> FollowConfig:
    return FollowConfig(
        href_selector='table.table-list a[href^="/torrent/"]',
        detail_rule=DETAIL,
        limit=limit,
    )


class TestCollectFollowUrls:
    def test_dedup_order_and_absolute(self) -> None:
        doc = parse_html(
            '<a class="d" href="/b">b</a><a class="d" href="/a">a</a>'
            '<a class="d" href="/b">again</a><a class="d" href="">empty</a>'
        )
        assert collect_follow_urls(doc, BASE, "a.d", 30) == [f"{BASE}/b", f"{BASE}/a"]

    def test_limit(self) -> None:
        doc = parse_html(_list_page(10))
        urls = collect_follow_urls(doc, BASE, "a", 3)
        assert urls == [f"{BASE}/torrent/{i}/movie-{i}/" for i in range(3)]

    def test_zero_limit(self) -> None:
        assert collect_follow_urls(parse_html(_list_page(3)), BASE, "a", 0) == []


class TestFollowCrawler:
    async def test_limit_caps_fetches(self, fake_fetcher_factory: Callable) -> None:
        fetcher = fake_fetcher_factory(_pages(40))
        links = await FollowCrawler(fetcher).follow_and_extract(
            parse_html(_list_page(40)), LIST_CTX, _follow()
        )

        assert len(fetcher.calls) == 30
        assert fetcher.calls == [f"{BASE}/torrent/{i}/movie-{i}/" for i in range(30)]
        assert len(links) == 30

    async def test_at_most_five_in_flight(self, fake_fetcher_factory: Callable) -> None:
        fetcher = fake_fetcher_factory(_pages(12))
        await FollowCrawler(fetcher).follow_and_extract(
            parse_html(_list_page(12)), LIST_CTX, _follow()
        )

        assert len(fetcher.calls) == 12
        assert fetcher.max_in_flight == 5

    async def test_custom_batch_size(self, fake_fetcher_factory: Callable) -> None:
        fetcher = fake_fetcher_factory(_pages(7))
        await FollowCrawler(fetcher, batch_size=2).follow_and_extract(
            parse_html(_list_page(7)), LIST_CTX, _follow()
        )
        assert fetcher.max_in_flight == 2

    def test_invalid_batch_size(self, fake_fetcher_factory: Callable) -> None:
        with pytest.raises(ValueError):
            FollowCrawler(fake_fetcher_factory({}), batch_size=0)

    async def test_failures_are_isolated(self, fake_fetcher_factory: Callable) -> None:
        pages = _pages(6)
        request = httpx.Request("GET", f"{BASE}/torrent/1/movie-1/")
        pages[f"{BASE}/torrent/1/movie-1/"] = httpx.HTTPStatusError(
            "boom", request=request, response=httpx.Response(500, request=request)
        )
        pages[f"{BASE}/torrent/3/movie-3/"] = RuntimeError("parser exploded")
        del pages[f"{BASE}/torrent/5/movie-5/"]  # connect error

        fetcher = fake_fetcher_factory(pages)
        links = await FollowCrawler(fetcher).follow_and_extract(
            parse_html(_list_page(6)), LIST_CTX, _follow()
        )

        assert len(fetcher.calls) == 6
        assert [link.title for link in links] == ["Movie 0", "Movie 2", "Movie 4"]

    async def test_detail_context_and_titles(self, fake_fetcher_factory: Callable) -> None:
        list_html = """\
        <table class="table-list">
          <tr><td><a href="/torrent/1/foo/">Foo</a></td></tr>
          <tr><td><a href="/torrent/2/bar/">Bar</a></td></tr>
        </table>
        """
        fetcher = fake_fetcher_factory(
            {
                f"{BASE}/torrent/1/foo/": '<h1>Foo</h1><a href="magnet:?xt=urn:btih:foo&dn=Foo%20Magnet">m</a>',
                f"{BASE}/torrent/2/bar/": '<h1>Bar</h1><a href="/download/bar.torrent">t</a>',
            }
        )
        links = await follow_and_extract(parse_html(list_html), LIST_CTX, _follow(), fetcher)

        assert [(link.url, link.title) for link in links] == [
            ("magnet:?xt=urn:btih:foo&dn=Foo%20Magnet", "Foo Magnet"),
            (f"{BASE}/download/bar.torrent", "Bar"),
        ]
        assert {link.source_host for link in links} == {"1377x.to"}

    async def test_no_follow_urls(self, fake_fetcher_factory: Callable) -> None:
        fetcher = fake_fetcher_factory({})
        links = await FollowCrawler(fetcher).follow_and_extract(
            parse_html("<p>empty list</p>"), LIST_CTX, _follow()
        )
        assert links == []
        assert fetcher.calls == []
