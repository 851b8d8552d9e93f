"""Human-readable labels for discovered links.

The label comes from an ordered fallback chain; ``resolve_title`` never
returns an empty string, the URL itself is the last resort.
"""

from __future__ import annotations

from bs4 import Tag

from linkharvest.domain.rules import ExtractConfig
from linkharvest.infrastructure.common.html_selectors import (
    closest,
    collapse_whitespace,
    element_text,
    normalize_text,
)
from linkharvest.infrastructure.common.urls import magnet_display_name

ROW_TEXT_CONTAINERS = "tr, li, div"


def _attr_title(anchor: Tag, attr: str | None) -> str | None:
    if not attr:
        return None
    value = anchor.get(attr)
    if value is None:
        return None
    if isinstance(value, list):
        value = " ".join(str(v) for v in value)
    return normalize_text(str(value))


def _row_text(anchor: Tag) -> str | None:
    container = anchor.parent and closest(anchor.parent, ROW_TEXT_CONTAINERS)
    text = element_text(container) if container else None
    return collapse_whitespace(text) if text else None


def resolve_title(
    anchor: Tag,
    row_title: str | None = None,
    extract: ExtractConfig | None = None,
    *,
    href: str | None = None,
) -> str:
    """Pick a label for *anchor*.

    ``extract.title_attr`` short-circuits the chain when the attribute has
    content.  Otherwise the steps of ``extract.title_fallback`` (default
    magnetDn, anchorText, rowText, href) are tried in order.
    """
    url = href if href is not None else str(anchor.get("href") or "").strip()

    if extract is not None:
        attr_value = _attr_title(anchor, extract.title_attr)
        if attr_value:
            return attr_value

    chain = extract.fallback_chain if extract is not None else ExtractConfig().fallback_chain

    for step in chain:
        if step == "magnetDn":
            name = magnet_display_name(url)
            if name:
                return name
        elif step == "anchorText":
            if row_title:
                return row_title
            text = element_text(anchor)
            if text:
                return text
        elif step == "rowText":
            text = _row_text(anchor)
            if text:
                return text
        elif step == "href":
            if url:
                return url

    return url or "(untitled link)"
