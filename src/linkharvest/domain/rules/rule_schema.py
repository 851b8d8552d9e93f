# src/linkharvest/domain/rules/rule_schema.py
"""Pure domain models for site rules (framework-free)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RuleMode = Literal["row", "page"]
TitleFallbackStep = Literal["magnetDn", "anchorText", "rowText", "href"]
LinkFilter = Literal["none", "download_heuristics"]
AggregatorKind = Literal["default", "ranked"]

TITLE_FALLBACK_STEPS: tuple[TitleFallbackStep, ...] = (
    "magnetDn",
    "anchorText",
    "rowText",
    "href",
)
DEFAULT_TITLE_FALLBACK: tuple[TitleFallbackStep, ...] = TITLE_FALLBACK_STEPS
DEFAULT_FOLLOW_LIMIT = 30

TORRENT_LINK_SELECTOR = 'a[href^="magnet:"],a[href$=".torrent"]'


@dataclass(frozen=True)
class RuleMatch:
    """Where a rule applies.

    ``host_suffix`` is OR-matched against the host (empty matches every
    host); ``path_regex`` is searched in the URL path.  ``host_regex`` is
    only used by built-in rules that match host families.
    """

    host_suffix: tuple[str, ...] = ()
    path_regex: str | None = None
    host_regex: str | None = None


@dataclass(frozen=True)
class RuleSelectors:
    """CSS selectors driving extraction.

    ``row`` is required in row mode.  Stat selectors (``seeders``,
    ``leechers``) resolve to the first match whose text is an integer.
    """

    link: str
    row: str | None = None
    title: str | None = None
    seeders: str | None = None
    leechers: str | None = None
    size: str | None = None


@dataclass(frozen=True)
class ExtractConfig:
    title_attr: str | None = None
    title_fallback: tuple[TitleFallbackStep, ...] = ()

    @property
    def fallback_chain(self) -> tuple[TitleFallbackStep, ...]:
        return self.title_fallback or DEFAULT_TITLE_FALLBACK


@dataclass(frozen=True)
class DetailRule:
    """Nested extraction recipe applied to fetched detail pages."""

    selectors: RuleSelectors
    mode: RuleMode = "page"
    extract: ExtractConfig | None = None


@dataclass(frozen=True)
class FollowConfig:
    href_selector: str
    detail_rule: DetailRule
    limit: int = DEFAULT_FOLLOW_LIMIT


@dataclass(frozen=True)
class SiteRule:
    """Matching + extraction recipe shared by built-in and custom rules.

    A rule with ``follow`` is a list rule: its own selectors are not used
    for extraction, the detail rule is applied to each followed page.
    """

    id: str
    name: str
    mode: RuleMode
    match: RuleMatch
    selectors: RuleSelectors
    enabled: bool = True
    extract: ExtractConfig | None = None
    follow: FollowConfig | None = None

    # Closed tags instead of per-rule callables
    link_filter: LinkFilter = "none"
    aggregate: AggregatorKind = "default"

    @property
    def is_follow_rule(self) -> bool:
        return self.follow is not None


@dataclass(frozen=True)
class ActiveRule:
    """A resolved rule ready to drive one scan."""

    id: str
    name: str
    rule: SiteRule
    custom: bool = False

    @property
    def aggregate(self) -> AggregatorKind:
        # Custom rules always use URL dedup
        return "default" if self.custom else self.rule.aggregate
