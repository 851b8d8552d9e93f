"""Selects the single rule that drives a scan.

Enabled custom rules win in caller order, then built-ins in priority
order.  The generic built-in matches every page, so resolution always
succeeds when it is present.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from functools import lru_cache
from urllib.parse import urlsplit

import structlog

from linkharvest.domain.entities import ScanContext
from linkharvest.domain.rules import ActiveRule, RuleMatch, SiteRule
from linkharvest.infrastructure.rules.builtin import BUILTIN_RULES, GENERIC_RULE

log = structlog.get_logger(__name__)


@lru_cache(maxsize=256)
def _compile(pattern: str, flags: int = 0) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern, flags)
    except re.error:
        return None


def _url_path(url: str) -> str:
    if not url:
        return ""
    try:
        return urlsplit(url).path
    except ValueError:
        return ""


def matches(match: RuleMatch, context: ScanContext) -> bool:
    """Whether *match* applies to *context*; pure, no I/O.

    A pattern that does not compile never matches.
    """
    host = context.host

    if match.host_suffix and not any(host.endswith(s) for s in match.host_suffix):
        return False

    if match.host_regex:
        host_re = _compile(match.host_regex, re.IGNORECASE)
        if host_re is None or not host_re.search(host):
            return False

    if match.path_regex:
        path_re = _compile(match.path_regex)
        if path_re is None or not path_re.search(_url_path(context.url)):
            return False

    return True


def resolve_rule(
    context: ScanContext,
    custom_rules: Sequence[SiteRule] = (),
    builtin_rules: Sequence[SiteRule] = BUILTIN_RULES,
) -> ActiveRule:
    """Pick the rule for *context*.

    Custom rules resolve to ``custom:<id>``; built-ins keep their own id.
    Falls back to the generic rule if *builtin_rules* has no match.
    """
    for rule in custom_rules:
        if rule.enabled and matches(rule.match, context):
            active = ActiveRule(id=f"custom:{rule.id}", name=rule.name, rule=rule, custom=True)
            log.debug("rule_resolved", host=context.host, rule_id=active.id)
            return active

    for rule in builtin_rules:
        if matches(rule.match, context):
            log.debug("rule_resolved", host=context.host, rule_id=rule.id)
            return ActiveRule(id=rule.id, name=rule.name, rule=rule)

    log.debug("rule_resolved", host=context.host, rule_id=GENERIC_RULE.id)
    return ActiveRule(id=GENERIC_RULE.id, name=GENERIC_RULE.name, rule=GENERIC_RULE)
