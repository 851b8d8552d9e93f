"""Rule-driven link extraction from a parsed HTML document.

Row mode walks repeating row elements and scopes title/stat lookups to
each row; page mode uses one document-wide title.  Both skip elements a
user could not see and dedupe by URL, first record wins.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from bs4 import BeautifulSoup, Tag

from linkharvest.domain.entities import (
    LinkRecord,
    RowExtraction,
    RowLinkGroup,
    ScanContext,
)
from linkharvest.domain.rules import (
    DetailRule,
    ExtractConfig,
    LinkFilter,
    RuleSelectors,
    SiteRule,
)
from linkharvest.infrastructure.aggregation.title_normalizer import normalize_title
from linkharvest.infrastructure.common.converters import to_int
from linkharvest.infrastructure.common.html_selectors import (
    document_base_url,
    element_text,
    extract_text,
    is_element_visible,
    resolve_href,
)
from linkharvest.infrastructure.common.urls import (
    is_magnet,
    is_torrent_file,
    link_kind,
    normalize_http_url,
)
from linkharvest.infrastructure.extraction.heuristics import (
    DEFAULT_DOWNLOAD_KEYWORDS,
    DownloadHeuristics,
)
from linkharvest.infrastructure.extraction.title_resolver import resolve_title

log = structlog.get_logger(__name__)

GENERIC_LINK_SELECTOR = "a[href]"

Document = BeautifulSoup | Tag


def _select(root: Document, selector: str | None) -> list[Tag]:
    if not selector:
        return []
    return [el for el in root.select(selector) if isinstance(el, Tag)]


def parse_stat(root: Document, selector: str | None) -> int | None:
    """First element matching *selector* whose text is an integer."""
    for element in _select(root, selector):
        value = to_int(element_text(element))
        if value is not None:
            return value
    return None


class LinkExtractor:
    """Builds ``LinkRecord`` lists from a document and a rule.

    ``rule`` may be a ``SiteRule``, the ``DetailRule`` of a follow step, or
    ``None`` for generic extraction with download heuristics.
    """

    def __init__(self, download_keywords: Iterable[str] = DEFAULT_DOWNLOAD_KEYWORDS) -> None:
        self.heuristics = DownloadHeuristics(download_keywords)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(
        self,
        doc: Document,
        context: ScanContext,
        rule: SiteRule | DetailRule | None = None,
    ) -> list[LinkRecord]:
        if rule is None:
            return self.extract_page(
                doc,
                context,
                RuleSelectors(link=GENERIC_LINK_SELECTOR),
                link_filter="download_heuristics",
            )

        link_filter: LinkFilter = getattr(rule, "link_filter", "none")
        if rule.mode == "row":
            return self.extract_rows(
                doc, context, rule.selectors, rule.extract, link_filter=link_filter
            ).links
        return self.extract_page(
            doc, context, rule.selectors, rule.extract, link_filter=link_filter
        )

    def extract_rows(
        self,
        doc: Document,
        context: ScanContext,
        selectors: RuleSelectors,
        extract: ExtractConfig | None = None,
        *,
        link_filter: LinkFilter = "none",
    ) -> RowExtraction:
        """Row-mode scan; also reports which links each visible row holds."""
        base_url = document_base_url(doc, context.url)
        by_url: dict[str, LinkRecord] = {}
        groups: list[RowLinkGroup] = []

        if not selectors.row:
            log.warning("row_selector_missing", host=context.host)
            return RowExtraction(links=[], groups=[])

        for index, row in enumerate(_select(doc, selectors.row)):
            if not is_element_visible(row):
                continue

            row_title = extract_text(row, selectors.title)
            seeders = parse_stat(row, selectors.seeders)
            leechers = parse_stat(row, selectors.leechers)
            size = extract_text(row, selectors.size)

            group = RowLinkGroup(index=index)
            for anchor in _select(row, selectors.link):
                if not is_element_visible(anchor):
                    continue
                url = self._accept_href(anchor, base_url, link_filter)
                if url is None:
                    continue

                record = by_url.get(url)
                if record is None:
                    record = self._build_record(anchor, url, context, row_title, extract)
                    record.seeders = seeders
                    record.leechers = leechers
                    record.size = size
                    by_url[url] = record
                if record not in group.links:
                    group.links.append(record)

            if group.links:
                groups.append(group)

        log.debug(
            "rows_extracted",
            host=context.host,
            links=len(by_url),
            rows=len(groups),
        )
        return RowExtraction(links=list(by_url.values()), groups=groups)

    def extract_page(
        self,
        doc: Document,
        context: ScanContext,
        selectors: RuleSelectors,
        extract: ExtractConfig | None = None,
        *,
        link_filter: LinkFilter = "none",
    ) -> list[LinkRecord]:
        """Page-mode scan: one title/stat context for the whole document."""
        base_url = document_base_url(doc, context.url)
        page_title = extract_text(doc, selectors.title)
        seeders = parse_stat(doc, selectors.seeders)
        leechers = parse_stat(doc, selectors.leechers)
        size = extract_text(doc, selectors.size)

        by_url: dict[str, LinkRecord] = {}
        for anchor in _select(doc, selectors.link):
            if not is_element_visible(anchor):
                continue
            url = self._accept_href(anchor, base_url, link_filter)
            if url is None or url in by_url:
                continue
            record = self._build_record(anchor, url, context, page_title, extract)
            record.seeders = seeders
            record.leechers = leechers
            record.size = size
            by_url[url] = record

        log.debug("page_extracted", host=context.host, links=len(by_url))
        return list(by_url.values())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _accept_href(
        self,
        anchor: Tag,
        base_url: str,
        link_filter: LinkFilter,
    ) -> str | None:
        """Resolved URL for *anchor*, or None when it must be skipped."""
        href = resolve_href(anchor, base_url)
        if not href:
            return None

        kind = link_kind(href)
        if kind == "http":
            href = normalize_http_url(href)

        if link_filter != "download_heuristics":
            return href

        if is_magnet(href) or is_torrent_file(href):
            return href
        if kind in ("http", "torrent") and self.heuristics.is_likely_download(anchor, href):
            return href
        return None

    @staticmethod
    def _build_record(
        anchor: Tag,
        url: str,
        context: ScanContext,
        row_title: str | None,
        extract: ExtractConfig | None,
    ) -> LinkRecord:
        title = resolve_title(anchor, row_title, extract, href=url)
        return LinkRecord(
            url=url,
            title=title,
            source_host=context.host,
            normalized_title=normalize_title(title) or None,
        )


def extract_links(
    doc: Document,
    context: ScanContext,
    rule: SiteRule | DetailRule | None = None,
) -> list[LinkRecord]:
    """Extract with the default keyword list."""
    return LinkExtractor().extract(doc, context, rule)
