from .rule_schema import (
    DEFAULT_FOLLOW_LIMIT,
    DEFAULT_TITLE_FALLBACK,
    TITLE_FALLBACK_STEPS,
    TORRENT_LINK_SELECTOR,
    ActiveRule,
    AggregatorKind,
    DetailRule,
    ExtractConfig,
    FollowConfig,
    LinkFilter,
    RuleMatch,
    RuleMode,
    RuleSelectors,
    SiteRule,
    TitleFallbackStep,
)

__all__ = [
    "ActiveRule",
    "AggregatorKind",
    "DEFAULT_FOLLOW_LIMIT",
    "DEFAULT_TITLE_FALLBACK",
    "DetailRule",
    "ExtractConfig",
    "FollowConfig",
    "LinkFilter",
    "RuleMatch",
    "RuleMode",
    "RuleSelectors",
    "SiteRule",
    "TITLE_FALLBACK_STEPS",
    "TORRENT_LINK_SELECTOR",
    "TitleFallbackStep",
]
