"""Post-processing of raw extracted links.

Two strategies, selected by the rule's ``aggregate`` tag:

- ``default``: dedup by URL, first occurrence wins, order preserved.
- ``ranked``: one representative per ``normalized_title`` chosen by
  swarm health (PirateBay-style sites publish the same release under
  many near-duplicate titles).

Ranking: higher seeders first (absent = -1), then lower leechers
(absent = +inf), then the shorter title.  The same order decides which
record represents a group *and* the output order of the groups.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable

import structlog

from linkharvest.domain.entities import LinkRecord
from linkharvest.domain.rules import AggregatorKind

log = structlog.get_logger(__name__)

LinkAggregator = Callable[[list[LinkRecord]], list[LinkRecord]]


def rank_key(link: LinkRecord) -> tuple[float, float, int, str, str]:
    """Sort key, most preferred first.

    The trailing title/url fields only break exact ties so the result
    does not depend on input order.
    """
    seeders = link.seeders if link.seeders is not None else -1
    leechers = link.leechers if link.leechers is not None else math.inf
    return (-seeders, leechers, len(link.title), link.title, link.url)


def should_prioritize(existing: LinkRecord, candidate: LinkRecord) -> bool:
    """Whether *candidate* beats *existing* as a group representative."""
    return rank_key(candidate) < rank_key(existing)


def aggregate_default(links: Iterable[LinkRecord]) -> list[LinkRecord]:
    """Dedup by URL; first occurrence wins, input order otherwise kept."""
    seen: dict[str, LinkRecord] = {}
    for link in links:
        if link.url not in seen:
            seen[link.url] = link
    return list(seen.values())


def aggregate_ranked(links: Iterable[LinkRecord]) -> list[LinkRecord]:
    """One record per normalized title, ranked by swarm health.

    Records without a normalized title skip grouping and are appended
    after the ranked groups, in input order.
    """
    grouped: dict[str, LinkRecord] = {}
    without_key: list[LinkRecord] = []
    total = 0

    for link in links:
        total += 1
        key = link.normalized_title
        if not key:
            without_key.append(link)
            continue
        existing = grouped.get(key)
        if existing is None or should_prioritize(existing, link):
            grouped[key] = link

    ranked = sorted(grouped.values(), key=rank_key)

    log.debug(
        "ranked_aggregation_complete",
        input_count=total,
        groups=len(ranked),
        ungrouped=len(without_key),
    )
    return [*ranked, *without_key]


_AGGREGATORS: dict[str, LinkAggregator] = {
    "default": aggregate_default,
    "ranked": aggregate_ranked,
}


def get_aggregator(kind: AggregatorKind) -> LinkAggregator:
    try:
        return _AGGREGATORS[kind]
    except KeyError:
        raise ValueError(f"Unknown aggregator: {kind!r}") from None

