"""Historical patterns — day-of-week and session success rates."""

from typing import Iterable

from sessionmap.analysis.aggregator import format_pct
from sessionmap.analysis.models import (
    SESSION_NAMES,
    DailyData,
    HistoricalPatterns,
    PatternBucket,
)


def analyze_historical_patterns(
    daily_history: Iterable[DailyData],
) -> HistoricalPatterns:
    """Group reactions by weekday and by session and rank the buckets.

    Day buckets appear in first-seen order.  Session buckets are always
    ``Asia``, ``London``, ``NewYork``.  A reaction is bucketed by its
    canonical level, so "New York High" counts as ``NewYork`` rather than
    under its first word; non-canonical names fall back to the first word
    when it is a session name, and otherwise only count towards their
    weekday.

    The best bucket is the one with the highest success rate, scanning left
    to right and replacing only on a strictly higher rate, so ties go to the
    earlier bucket.  A bucket must beat 0 % to be chosen; otherwise the
    result is ``"N/A"``.
    """
    day_counts: dict[str, list[int]] = {}  # dow -> [days, reactions, successful]
    session_counts = {name: [0, 0] for name in SESSION_NAMES}  # -> [reactions, successful]
    total_days = 0

    for day in daily_history:
        total_days += 1
        counts = day_counts.setdefault(day.day_of_week, [0, 0, 0])
        counts[0] += 1
        for reaction in day.reactions:
            counts[1] += 1
            if reaction.reacted:
                counts[2] += 1
            session = reaction.session_name
            if session is not None:
                session_counts[session][0] += 1
                if reaction.reacted:
                    session_counts[session][1] += 1

    by_day = {
        dow: PatternBucket(
            count=days,
            reactions=reactions,
            successful=wins,
            success_rate=format_pct(wins, reactions),
        )
        for dow, (days, reactions, wins) in day_counts.items()
    }
    by_session = {
        name: PatternBucket(
            count=reactions,
            reactions=reactions,
            successful=wins,
            success_rate=format_pct(wins, reactions),
        )
        for name, (reactions, wins) in session_counts.items()
    }

    return HistoricalPatterns(
        by_day=by_day,
        by_session=by_session,
        best_day=_best_bucket(by_day),
        best_session=_best_session(session_counts),
        total_days=total_days,
    )


# ── Helpers ──────────────────────────────────────────────────────────────


def _best_bucket(buckets: dict[str, PatternBucket]) -> str:
    best_name, best_rate = "N/A", 0.0
    for name, bucket in buckets.items():
        rate = float(bucket.success_rate)
        if rate > best_rate:
            best_name, best_rate = name, rate
    return best_name


def _best_session(session_counts: dict[str, list[int]]) -> str:
    """Rank sessions on the unrounded rate."""
    best_name, best_rate = "N/A", 0.0
    for name, (reactions, wins) in session_counts.items():
        rate = wins / reactions * 100 if reactions > 0 else 0.0
        if rate > best_rate:
            best_name, best_rate = name, rate
    return best_name
