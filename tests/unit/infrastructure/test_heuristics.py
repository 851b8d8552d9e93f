"""Tests for the generic download-likeness heuristics."""

from __future__ import annotations

import pytest

from linkharvest.infrastructure.common.html_selectors import parse_html
from linkharvest.infrastructure.extraction.heuristics import DownloadHeuristics


def _anchor(html: str):
    return parse_html(html).select_one("a")


@pytest.fixture()
def heuristics() -> DownloadHeuristics:
    return DownloadHeuristics()


class TestSignals:
    def test_download_attribute(self, heuristics: DownloadHeuristics) -> None:
        anchor = _anchor('<a href="/x" download>x</a>')
        assert heuristics.is_likely_download(anchor, "https://e.test/x")

    @pytest.mark.parametrize("path", ["/a/movie.MKV", "/b/setup.exe", "/c/archive.tar.gz", "/d/book.epub"])
    def test_extension(self, heuristics: DownloadHeuristics, path: str) -> None:
        anchor = _anchor('<a href="#">file</a>')
        assert heuristics.is_likely_download(anchor, f"https://e.test{path}")

    @pytest.mark.parametrize("query", ["download=1", "dl", "file=abc", "FileName=x", "attachment=2"])
    def test_query_key(self, heuristics: DownloadHeuristics, query: str) -> None:
        anchor = _anchor('<a href="#">get</a>')
        assert heuristics.is_likely_download(anchor, f"https://e.test/get?{query}")

    @pytest.mark.parametrize(
        "html",
        [
            '<a href="#">Download now</a>',
            '<a href="#" aria-label="Direct link">go</a>',
            '<a href="#" title="Mirror 2">go</a>',
            '<a href="#" class="btn btn-dl">go</a>',
            '<a href="#">Downloads</a>',
            '<a href="#" class="downloadButton">Get</a>',
            '<a href="#" title="Mirrors">go</a>',
            '<a href="#">点击下载</a>',
            '<a href="#">百度直链</a>',
        ],
    )
    def test_keyword(self, heuristics: DownloadHeuristics, html: str) -> None:
        assert heuristics.is_likely_download(_anchor(html), "https://e.test/page")


class TestNavigationRejected:
    @pytest.mark.parametrize(
        "html",
        [
            '<a href="#">Login</a>',
            '<a href="#">Home</a>',
            '<a href="#" class="handler">Handle</a>',
            '<a href="#">About us</a>',
        ],
    )
    def test_plain_links_rejected(self, heuristics: DownloadHeuristics, html: str) -> None:
        assert not heuristics.is_likely_download(_anchor(html), "https://e.test/news/article")

    def test_html_extension_rejected(self, heuristics: DownloadHeuristics) -> None:
        anchor = _anchor('<a href="#">Read</a>')
        assert not heuristics.is_likely_download(anchor, "https://e.test/page.html")


class TestCustomKeywords:
    def test_override_list(self) -> None:
        heuristics = DownloadHeuristics(keywords=["herunterladen"])
        assert heuristics.is_likely_download(_anchor('<a href="#">Jetzt herunterladen</a>'), "https://e.test/p")
        assert not heuristics.is_likely_download(_anchor('<a href="#">Download</a>'), "https://e.test/p")
