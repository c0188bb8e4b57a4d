"""Level report — one row per canonical level tested on each day."""

from dataclasses import dataclass
from typing import Iterable

from sessionmap.analysis.models import DailyData, Level, Reaction
from sessionmap.config import RiskPolicy


@dataclass(frozen=True)
class LevelReportRow:
    """Outcome of trading one level on one day."""

    date: str
    day_of_week: str
    level: Level
    entry_price: float
    reacted: bool
    direction: str
    points_moved: float
    pnl: float


def level_report(
    daily_data: Iterable[DailyData],
    policy: RiskPolicy,
) -> list[LevelReportRow]:
    """Build the per-day level table, days in input order.

    Levels are emitted in canonical order.  When a day reports the same
    level twice, the later reaction wins.  A trade counts as a win only if
    the level reacted *and* produced a direction; otherwise it is booked at
    ``policy.stop_loss_amount``.
    """
    rows: list[LevelReportRow] = []
    for day in daily_data:
        by_level: dict[Level, Reaction] = {}
        for reaction in day.reactions:
            level = reaction.level
            if level is not None:
                by_level[level] = reaction

        for level in Level:
            reaction = by_level.get(level)
            if reaction is None:
                continue
            is_win = reaction.reacted and bool(reaction.outcome)
            rows.append(
                LevelReportRow(
                    date=day.date,
                    day_of_week=day.day_of_week,
                    level=level,
                    entry_price=reaction.tested_level,
                    reacted=reaction.reacted,
                    direction=reaction.outcome or "SL",
                    points_moved=reaction.move,
                    pnl=(
                        reaction.move * policy.point_value
                        if is_win else policy.stop_loss_amount
                    ),
                )
            )
    return rows
