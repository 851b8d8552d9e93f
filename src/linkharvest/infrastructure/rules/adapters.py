"""Adapters to convert Pydantic rule models to domain models."""

from __future__ import annotations

from linkharvest.domain.rules import rule_schema as domain
from linkharvest.infrastructure.rules import validation_schema as infra


def to_domain_match(pydantic: infra.MatchModel) -> domain.RuleMatch:
    return domain.RuleMatch(
        host_suffix=tuple(pydantic.host_suffix),
        path_regex=pydantic.path_regex,
        host_regex=pydantic.host_regex,
    )


def to_domain_selectors(pydantic: infra.SelectorsModel) -> domain.RuleSelectors:
    return domain.RuleSelectors(
        link=pydantic.link,
        row=pydantic.row,
        title=pydantic.title,
        seeders=pydantic.seeders,
        leechers=pydantic.leechers,
        size=pydantic.size,
    )


def to_domain_extract(
    pydantic: infra.ExtractModel | None,
) -> domain.ExtractConfig | None:
    if pydantic is None:
        return None
    return domain.ExtractConfig(
        title_attr=pydantic.title_attr or None,
        title_fallback=tuple(pydantic.title_fallback),
    )


def to_domain_follow(
    pydantic: infra.FollowModel | None,
    default_limit: int = domain.DEFAULT_FOLLOW_LIMIT,
) -> domain.FollowConfig | None:
    if pydantic is None:
        return None
    limit = pydantic.limit if "limit" in pydantic.model_fields_set else default_limit
    detail = pydantic.detail_rule
    return domain.FollowConfig(
        href_selector=pydantic.href_selector,
        limit=limit,
        detail_rule=domain.DetailRule(
            selectors=to_domain_selectors(detail.selectors),
            mode=detail.mode,
            extract=to_domain_extract(detail.extract),
        ),
    )


def to_domain_site_rule(
    pydantic: infra.SiteRuleModel,
    default_follow_limit: int = domain.DEFAULT_FOLLOW_LIMIT,
) -> domain.SiteRule:
    """Convert a validated custom rule to the domain ``SiteRule``."""
    return domain.SiteRule(
        id=pydantic.id,
        name=pydantic.name or pydantic.id,
        enabled=pydantic.enabled,
        mode=pydantic.mode,
        match=to_domain_match(pydantic.match),
        selectors=to_domain_selectors(pydantic.selectors),
        extract=to_domain_extract(pydantic.extract),
        follow=to_domain_follow(pydantic.follow, default_follow_limit),
    )
