"""Tests for link classification and URL normalization."""

from __future__ import annotations

import pytest

from linkharvest.infrastructure.common.urls import (
    is_torrent_file,
    link_kind,
    magnet_display_name,
    normalize_http_url,
)


class TestLinkKind:
    @pytest.mark.parametrize(
        ("url", "kind"),
        [
            ("magnet:?xt=urn:btih:abc", "magnet"),
            ("  MAGNET:?xt=urn:btih:abc", "magnet"),
            ("https://example.com/file.torrent", "torrent"),
            ("http://example.com/get.torrent?id=1", "torrent"),
            ("https://example.com/file.zip", "http"),
            ("ftp://example.com/file.zip", "other"),
            ("", "other"),
        ],
    )
    def test_kinds(self, url: str, kind: str) -> None:
        assert link_kind(url) == kind


class TestIsTorrentFile:
    def test_path_suffix(self) -> None:
        assert is_torrent_file("https://x.test/a/b.TORRENT")

    def test_query_mention_is_not_a_torrent_path(self) -> None:
        assert not is_torrent_file("https://x.test/get?name=b.torrent")


class TestMagnetDisplayName:
    def test_decodes_dn(self) -> None:
        href = "magnet:?xt=urn:btih:abc&dn=Show%20S01E01%201080p"
        assert magnet_display_name(href) == "Show S01E01 1080p"

    def test_plus_is_space(self) -> None:
        assert magnet_display_name("magnet:?xt=urn:btih:abc&dn=A+B") == "A B"

    def test_double_encoded(self) -> None:
        assert magnet_display_name("magnet:?xt=urn:btih:abc&dn=A%2520B") == "A B"

    def test_missing_dn(self) -> None:
        assert magnet_display_name("magnet:?xt=urn:btih:abc") is None

    def test_blank_dn(self) -> None:
        assert magnet_display_name("magnet:?xt=urn:btih:abc&dn=") is None

    def test_non_magnet(self) -> None:
        assert magnet_display_name("https://example.com/?dn=x") is None


class TestNormalizeHttpUrl:
    def test_strips_tracking_and_fragment(self) -> None:
        url = "https://x.com/a?utm_source=y&download=1#frag"
        assert normalize_http_url(url) == "https://x.com/a?download=1"

    def test_keeps_other_pairs_in_order(self) -> None:
        url = "https://x.com/a?b=2&fbclid=zz&a=1&gclid=q&c"
        assert normalize_http_url(url) == "https://x.com/a?b=2&a=1&c"

    def test_only_tracking_drops_query(self) -> None:
        assert normalize_http_url("https://x.com/a?utm_medium=m&spm=1") == "https://x.com/a"

    def test_tracking_keys_case_insensitive(self) -> None:
        assert normalize_http_url("https://x.com/a?UTM_Source=y&k=v") == "https://x.com/a?k=v"

    def test_preserves_encoding(self) -> None:
        url = "https://x.com/a?file=a%20b.zip"
        assert normalize_http_url(url) == url

    def test_non_http_unchanged(self) -> None:
        url = "magnet:?xt=urn:btih:abc&utm_source=x"
        assert normalize_http_url(url) == url
