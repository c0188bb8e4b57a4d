"""Ingestion boundary — coerces raw model JSON into typed records, once.

The vision model is not trusted to honour its response schema.  Any field
that should be a list but is not becomes an empty tuple here, and records
that cannot be interpreted at all are dropped with a warning.  Downstream
code can therefore iterate ``day.reactions`` without re-checking shapes.
"""

import logging
import math
from datetime import date
from typing import Any, Optional

from sessionmap.analysis.models import (
    AnalysisDocument,
    DailyData,
    MarketEvent,
    Reaction,
    Session,
)

logger = logging.getLogger("sessionmap")


def as_list(value: Any) -> list:
    """Return *value* if it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


def as_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """Return *value* as a finite float, or *default* for anything else.

    Booleans are rejected even though ``bool`` subclasses ``int``, and so
    are ``NaN``/``Infinity`` (which ``json.loads`` accepts, and produces for
    out-of-range literals such as ``1e400``).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    return number if math.isfinite(number) else default


def _as_str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


# ── Records ──────────────────────────────────────────────────────────────


def parse_session(raw: Any) -> Optional[Session]:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        return None
    high = as_number(raw.get("high"), None)
    low = as_number(raw.get("low"), None)
    if high is None or low is None:
        return None
    return Session(name=raw["name"], high=high, low=low)


def parse_reaction(raw: Any) -> Optional[Reaction]:
    """Build a ``Reaction`` from a raw dict.

    Only ``levelName`` is mandatory.  ``reacted`` counts as true only for a
    literal JSON ``true``; a missing ``move`` reads as 0 points.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("levelName"), str):
        return None
    return Reaction(
        tested_level=as_number(raw.get("testedLevel")),
        level_name=raw["levelName"],
        reacted=raw.get("reacted") is True,
        reaction_type=_as_str(raw.get("reactionType")),
        move=as_number(raw.get("move")),
        outcome=_as_str(raw.get("outcome")),
    )


def parse_market_event(raw: Any) -> Optional[MarketEvent]:
    if not isinstance(raw, dict):
        return None
    return MarketEvent(
        type=_as_str(raw.get("type")),
        reason=_as_str(raw.get("reason")),
        volatility=as_number(raw.get("volatility")),
    )


def parse_day(raw: Any) -> Optional[DailyData]:
    """Build a ``DailyData`` from a raw dict.

    Returns ``None`` when the record is not a dict or its ``date`` is not an
    ISO date, since such a day cannot be placed on the timeline.
    """
    if not isinstance(raw, dict):
        return None
    day_str = raw.get("date")
    if not isinstance(day_str, str):
        return None
    try:
        date.fromisoformat(day_str[:10])
    except ValueError:
        return None

    sessions = tuple(
        s for s in (parse_session(r) for r in as_list(raw.get("sessions")))
        if s is not None
    )
    reactions = tuple(
        r for r in (parse_reaction(r) for r in as_list(raw.get("reactions")))
        if r is not None
    )
    return DailyData(
        date=day_str,
        day_of_week=_as_str(raw.get("dayOfWeek"), "Unknown"),
        sessions=sessions,
        reactions=reactions,
        market_event=parse_market_event(raw.get("marketEvent")),
    )


def parse_analysis(raw: Any) -> AnalysisDocument:
    """Normalise one analysis document returned by the vision model.

    Never raises: a non-dict document yields an empty ``AnalysisDocument``.
    """
    if not isinstance(raw, dict):
        logger.warning("Ignoring analysis document of type %s", type(raw).__name__)
        return AnalysisDocument()

    days: list[DailyData] = []
    raw_days = as_list(raw.get("days"))
    for raw_day in raw_days:
        day = parse_day(raw_day)
        if day is None:
            logger.warning("Skipping malformed day record: %r", raw_day)
            continue
        days.append(day)

    return AnalysisDocument(
        days=tuple(days),
        week_high=as_number(raw.get("weekHigh"), None),
        week_low=as_number(raw.get("weekLow"), None),
        volatility=_as_str(raw.get("volatility")),
    )


# ── Serialisation back to the wire shape ─────────────────────────────────


def reaction_to_dict(reaction: Reaction) -> dict:
    return {
        "testedLevel": reaction.tested_level,
        "levelName": reaction.level_name,
        "reacted": reaction.reacted,
        "reactionType": reaction.reaction_type,
        "move": reaction.move,
        "outcome": reaction.outcome,
    }


def day_to_dict(day: DailyData) -> dict:
    """Camel-case dict in the same shape the vision model produces."""
    out = {
        "date": day.date,
        "dayOfWeek": day.day_of_week,
        "sessions": [
            {"name": s.name, "high": s.high, "low": s.low} for s in day.sessions
        ],
        "reactions": [reaction_to_dict(r) for r in day.reactions],
    }
    if day.market_event is not None:
        out["marketEvent"] = {
            "type": day.market_event.type,
            "reason": day.market_event.reason,
            "volatility": day.market_event.volatility,
        }
    return out
