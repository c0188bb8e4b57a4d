"""Market event calendar — tags known macro-event days onto daily records."""

from dataclasses import replace
from typing import Iterable, Mapping, Optional

from sessionmap.analysis.models import AnalysisDocument, DailyData, MarketEvent


MARKET_EVENTS: dict[str, MarketEvent] = {
    "2025-10-30": MarketEvent(type="FED", reason="Fed rate cut", volatility=2.0),
    "2025-11-04": MarketEvent(
        type="ELECTION", reason="U.S. Election Day", volatility=3.0,
    ),
    "2025-11-08": MarketEvent(
        type="ELECTION_AFTERMATH",
        reason="Post-election volatility",
        volatility=3.5,
    ),
}


def attach_market_events(
    days: Iterable[DailyData],
    events: Optional[Mapping[str, MarketEvent]] = None,
) -> tuple[DailyData, ...]:
    """Return copies of *days* with ``market_event`` set from the calendar.

    Days whose date is not in the calendar are returned unchanged, keeping
    any event the model already reported.
    """
    calendar = MARKET_EVENTS if events is None else events
    out = []
    for day in days:
        event = calendar.get(day.date[:10])
        out.append(replace(day, market_event=event) if event is not None else day)
    return tuple(out)


def tag_analysis(
    doc: AnalysisDocument,
    events: Optional[Mapping[str, MarketEvent]] = None,
) -> AnalysisDocument:
    """Apply :func:`attach_market_events` to every day of *doc*."""
    return replace(doc, days=attach_market_events(doc.days, events))
