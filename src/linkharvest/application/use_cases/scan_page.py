"""Scan one page: resolve its rule, extract, aggregate."""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from bs4 import BeautifulSoup

from linkharvest.domain.entities import LinkRecord, ScanContext, ScanResult
from linkharvest.domain.exceptions import LinkHarvestError
from linkharvest.domain.ports import PageFetcherPort
from linkharvest.domain.rules import ActiveRule, SiteRule
from linkharvest.infrastructure.aggregation import get_aggregator
from linkharvest.infrastructure.common.html_selectors import parse_html
from linkharvest.infrastructure.crawling import DEFAULT_BATCH_SIZE, FollowCrawler
from linkharvest.infrastructure.extraction import LinkExtractor
from linkharvest.infrastructure.rules import BUILTIN_RULES, resolve_rule

log = structlog.get_logger(__name__)


class ScanPageUseCase:
    """Extracts the downloadable links of one page.

    Flow:
        1. Resolve the rule (enabled custom rules first, then built-ins)
        2. Extract directly, or follow detail pages for follow rules
        3. Aggregate with the rule's aggregator (custom rules: URL dedup)
        4. Return a ScanResult stamped with the resolved rule id
    """

    def __init__(
        self,
        extractor: LinkExtractor | None = None,
        fetcher: PageFetcherPort | None = None,
        builtin_rules: Sequence[SiteRule] = BUILTIN_RULES,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ):
        """Initialize use case with dependencies.

        Args:
            extractor: Link extractor (default keyword list when omitted).
            fetcher: Page fetcher for follow rules; required only when a
                follow rule resolves.
            builtin_rules: Built-in rules in priority order.
            batch_size: Concurrent detail fetches per follow batch.
        """
        self.extractor = extractor or LinkExtractor()
        self.fetcher = fetcher
        self.builtin_rules = tuple(builtin_rules)
        self.batch_size = batch_size

    def resolve(
        self, context: ScanContext, custom_rules: Sequence[SiteRule] = ()
    ) -> ActiveRule:
        return resolve_rule(context, custom_rules, self.builtin_rules)

    async def execute(
        self,
        html: str | bytes | BeautifulSoup,
        context: ScanContext,
        custom_rules: Sequence[SiteRule] = (),
    ) -> ScanResult:
        """Scan *html* (markup or an already parsed document).

        Raises:
            LinkHarvestError: a follow rule resolved but no fetcher is set.
        """
        doc = html if isinstance(html, BeautifulSoup) else parse_html(html)
        active = self.resolve(context, custom_rules)

        raw = await self._extract(doc, context, active)
        links = get_aggregator(active.aggregate)(raw)

        log.info(
            "scan_complete",
            host=context.host,
            rule_id=active.id,
            raw_links=len(raw),
            links=len(links),
        )
        return ScanResult(
            rule_id=active.id,
            rule_name=active.name,
            context=context,
            links=links,
        )

    async def _extract(
        self, doc: BeautifulSoup, context: ScanContext, active: ActiveRule
    ) -> list[LinkRecord]:
        rule = active.rule
        if rule.follow is None:
            return self.extractor.extract(doc, context, rule)

        if self.fetcher is None:
            raise LinkHarvestError(
                f"rule '{active.id}' follows detail pages but no page fetcher is configured"
            )
        crawler = FollowCrawler(self.fetcher, self.extractor, batch_size=self.batch_size)
        return await crawler.follow_and_extract(doc, context, rule.follow)
