"""Confluence selector — surfaces setups that several strategies agree on."""

from typing import Iterable

from sessionmap.strategy.models import PredictedTradeSetup

MIN_CONFLUENCE = 3
MAX_SELECTED = 5


def select_top_confluence(
    setups: Iterable[PredictedTradeSetup],
    min_score: int = MIN_CONFLUENCE,
    limit: int = MAX_SELECTED,
) -> list[PredictedTradeSetup]:
    """Keep setups with ``confluence_score >= min_score``, best first.

    Ordered by confluence score, then probability, both descending; at most
    *limit* entries.  Input order breaks remaining ties.
    """
    eligible = [s for s in setups if s.confluence_score >= min_score]
    eligible.sort(key=lambda s: (-s.confluence_score, -s.probability))
    return eligible[:max(limit, 0)]
