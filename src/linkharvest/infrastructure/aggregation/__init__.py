from .aggregators import (
    aggregate_default,
    aggregate_ranked,
    get_aggregator,
    rank_key,
)
from .title_normalizer import normalize_title

__all__ = [
    "aggregate_default",
    "aggregate_ranked",
    "get_aggregator",
    "normalize_title",
    "rank_key",
]
