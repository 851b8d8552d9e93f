"""Download-likeness heuristics for generic (rule-less) extraction.

An HTTP(S) anchor is kept when any one of four checks passes:

1. it carries a ``download`` attribute,
2. its path ends in a known binary/media/archive extension,
3. its query string has a download-intent key,
4. its text, ``aria-label``, ``title`` or ``class`` contains a download
   keyword.

Ordinary navigation links fail all four and are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import parse_qsl, urlsplit

from bs4 import Tag

DOWNLOAD_EXTENSIONS: frozenset[str] = frozenset(
    {
        # archives
        "zip", "rar", "7z", "tar", "gz", "tgz", "bz2", "xz", "zst", "lz", "cab",
        # disk images / installers / packages
        "iso", "img", "dmg", "pkg", "exe", "msi", "deb", "rpm", "apk", "ipa",
        "appimage", "jar", "bin", "torrent",
        # video
        "mp4", "mkv", "avi", "mov", "wmv", "flv", "webm", "m4v", "ts", "rmvb",
        # audio
        "mp3", "flac", "wav", "aac", "ogg", "m4a", "opus", "ape",
        # documents / books
        "pdf", "epub", "mobi", "azw3", "cbz", "cbr",
    }
)

DOWNLOAD_QUERY_KEYS: frozenset[str] = frozenset(
    {"download", "dl", "file", "filename", "attachment"}
)

DEFAULT_DOWNLOAD_KEYWORDS: tuple[str, ...] = (
    "download",
    "dl",
    "direct",
    "mirror",
    "attachment",
    "下载",
    "直链",
    "镜像",
)


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Keywords match as substrings ("Downloads", "downloadButton"), except
    # two-letter ASCII ones like "dl", which must stand alone so "handle"
    # does not count.
    if keyword.isascii() and len(keyword) <= 2:
        return re.compile(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])")
    return re.compile(re.escape(keyword))


class DownloadHeuristics:
    """Classifies HTTP(S) anchors as likely downloads."""

    def __init__(
        self,
        keywords: Iterable[str] = DEFAULT_DOWNLOAD_KEYWORDS,
        extensions: Iterable[str] = DOWNLOAD_EXTENSIONS,
        query_keys: Iterable[str] = DOWNLOAD_QUERY_KEYS,
    ) -> None:
        self.keywords = tuple(k.strip().lower() for k in keywords if k.strip())
        self._keyword_patterns = [_keyword_pattern(k) for k in self.keywords]
        self._extensions = frozenset(e.lower().lstrip(".") for e in extensions)
        self._query_keys = frozenset(k.lower() for k in query_keys)

    def has_download_attribute(self, anchor: Tag) -> bool:
        return anchor.has_attr("download")

    def has_download_extension(self, href: str) -> bool:
        path = urlsplit(href).path.lower()
        last = path.rsplit("/", 1)[-1]
        if "." not in last:
            return False
        return last.rsplit(".", 1)[-1] in self._extensions

    def has_download_query(self, href: str) -> bool:
        query = urlsplit(href).query
        return any(
            key.lower() in self._query_keys
            for key, _ in parse_qsl(query, keep_blank_values=True)
        )

    def has_download_keyword(self, anchor: Tag) -> bool:
        classes = anchor.get("class") or []
        if isinstance(classes, str):
            classes = [classes]
        haystack = " ".join(
            [
                anchor.get_text(" ", strip=True),
                str(anchor.get("aria-label") or ""),
                str(anchor.get("title") or ""),
                " ".join(str(c) for c in classes),
            ]
        ).lower()
        return any(p.search(haystack) for p in self._keyword_patterns)

    def is_likely_download(self, anchor: Tag, href: str) -> bool:
        try:
            return (
                self.has_download_attribute(anchor)
                or self.has_download_extension(href)
                or self.has_download_query(href)
                or self.has_download_keyword(anchor)
            )
        except ValueError:
            # urlsplit rejects malformed netlocs such as unbalanced IPv6 brackets
            return False
