"""CSS-selector helpers over BeautifulSoup trees.

Wraps the handful of DOM operations the extractor needs (text,
closest ancestor, href resolution, visibility) so extraction code reads
like the browser code it replaces.  There is no layout engine here:
visibility is judged from the ``hidden`` attribute, ``type=hidden`` and
inline ``style`` declarations on the element and its ancestors.
"""

from __future__ import annotations

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

_WS_RE = re.compile(r"\s+")
_STYLE_DECL_RE = re.compile(r"\s*([a-zA-Z-]+)\s*:\s*([^;]+)")
_ZERO_LENGTH_RE = re.compile(r"^0+(?:\.0+)?(?:px|em|rem|%|vh|vw|pt)?$")


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (lxml parser)."""
    return BeautifulSoup(html, "lxml")


def normalize_text(value: str | None) -> str | None:
    """Strip *value*; empty results become ``None``."""
    if value is None:
        return None
    text = value.strip()
    return text or None


def collapse_whitespace(value: str) -> str:
    return _WS_RE.sub(" ", value).strip()


def element_text(element: Tag | None) -> str | None:
    """Trimmed text content of *element*, or ``None`` when blank."""
    if element is None:
        return None
    return normalize_text(element.get_text())


def extract_text(root: BeautifulSoup | Tag, selector: str | None) -> str | None:
    """Trimmed text of the first element matching *selector*."""
    if not selector:
        return None
    return element_text(root.select_one(selector))


def closest(element: Tag, selector: str) -> Tag | None:
    """Nearest ancestor-or-self matching *selector* (DOM ``closest``)."""
    node: Tag | None = element
    while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
        if node.css.match(selector):
            return node
        node = node.parent
    return None


def document_base_url(soup: BeautifulSoup | Tag, page_url: str) -> str:
    """Effective base URL: ``<base href>`` resolved against the page URL."""
    root = soup
    while root.parent is not None:
        root = root.parent
    base = root.find("base", href=True)
    if isinstance(base, Tag):
        href = str(base.get("href") or "").strip()
        if href:
            return urljoin(page_url, href)
    return page_url


def resolve_href(element: Tag, base_url: str) -> str:
    """Absolute URL of an anchor, like a browser's ``anchor.href``.

    Returns ``""`` when the anchor has no usable href.
    """
    raw = element.get("href")
    if raw is None:
        return ""
    href = str(raw).strip()
    if not href:
        return ""
    return urljoin(base_url, href) if base_url else href


def _inline_style(element: Tag) -> dict[str, str]:
    style = element.get("style")
    if not style:
        return {}
    declarations: dict[str, str] = {}
    for part in str(style).split(";"):
        match = _STYLE_DECL_RE.match(part)
        if match:
            value = match.group(2).replace("!important", "").strip().lower()
            declarations[match.group(1).lower()] = value
    return declarations


def _hides_self(element: Tag) -> bool:
    if element.has_attr("hidden"):
        return True
    if element.name == "input" and str(element.get("type", "")).lower() == "hidden":
        return True
    style = _inline_style(element)
    if style.get("display") == "none":
        return True
    if style.get("visibility") in {"hidden", "collapse"}:
        return True
    opacity = style.get("opacity")
    if opacity is not None:
        try:
            if float(opacity) == 0:
                return True
        except ValueError:
            pass
    width = style.get("width")
    height = style.get("height")
    if (width and _ZERO_LENGTH_RE.match(width)) or (
        height and _ZERO_LENGTH_RE.match(height)
    ):
        return True
    return False


def is_element_visible(element: Tag | None) -> bool:
    """Whether a user could see *element*.

    Hidden ancestors hide their descendants, as ``display:none`` and a
    zero-area box do in a rendered page.
    """
    if element is None:
        return False
    node: Tag | None = element
    while isinstance(node, Tag) and not isinstance(node, BeautifulSoup):
        if _hides_self(node):
            return False
        node = node.parent
    return True
