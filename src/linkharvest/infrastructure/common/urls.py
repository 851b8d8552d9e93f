"""URL classification and normalization for discovered links."""

from __future__ import annotations

from typing import Literal
from urllib.parse import parse_qs, unquote, unquote_plus, urlsplit, urlunsplit

LinkKind = Literal["magnet", "torrent", "http", "other"]

TRACKING_QUERY_KEYS: frozenset[str] = frozenset(
    {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "utm_id",
        "fbclid",
        "gclid",
        "dclid",
        "msclkid",
        "yclid",
        "mc_cid",
        "mc_eid",
        "igshid",
        "spm",
    }
)


def is_magnet(url: str) -> bool:
    return url.strip().lower().startswith("magnet:")


def is_http(url: str) -> bool:
    return url.strip().lower().startswith(("http://", "https://"))


def link_kind(url: str) -> LinkKind:
    """Classify a URL as magnet, torrent file, plain HTTP or other."""
    value = (url or "").strip().lower()
    if value.startswith("magnet:"):
        return "magnet"
    if value.startswith(("http://", "https://")):
        if ".torrent" in value:
            return "torrent"
        return "http"
    return "other"


def is_torrent_file(url: str) -> bool:
    """True when the URL path ends in ``.torrent``."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return False
    return path.lower().endswith(".torrent")


def magnet_display_name(href: str) -> str | None:
    """Decoded ``dn`` parameter of a magnet URI, if any."""
    if not href.startswith("magnet:"):
        return None
    query = href.partition("?")[2]
    if not query:
        return None
    values = parse_qs(query, keep_blank_values=False).get("dn")
    if not values:
        return None
    name = values[0].strip()
    if not name:
        return None
    # parse_qs already decoded once; magnet producers sometimes double-encode
    if "%" in name:
        name = unquote(name).strip()
    return name or None


def normalize_http_url(url: str) -> str:
    """Drop the fragment and tracking parameters from an HTTP(S) URL.

    Other query pairs are kept verbatim and in order.  Non-HTTP URLs are
    returned unchanged.
    """
    if not is_http(url):
        return url
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return url

    kept: list[str] = []
    for pair in parts.query.split("&"):
        if not pair:
            continue
        key = unquote_plus(pair.partition("=")[0]).lower()
        if key in TRACKING_QUERY_KEYS:
            continue
        kept.append(pair)

    return urlunsplit((parts.scheme, parts.netloc, parts.path, "&".join(kept), ""))
