"""Strategy leaderboard — realized results per strategy, ranked by net P&L."""

from typing import Iterable

from sessionmap.analysis.models import DailyData
from sessionmap.analysis.patterns import analyze_historical_patterns
from sessionmap.config import RiskPolicy
from sessionmap.strategy.models import StrategyPerformance, StrategyType


def calculate_strategy_performance(
    daily_data: Iterable[DailyData],
    policy: RiskPolicy,
) -> list[StrategyPerformance]:
    """Attribute realized reactions to strategies and rank them.

    Stored history only records session-level reactions, so every trade is
    attributed to ``StrategyType.SESSION``; the other strategies stay at
    zero until per-strategy history exists.  A trade wins only if the level
    reacted and produced a direction; otherwise it loses
    ``policy.max_stop_dollars``.

    Returns:
        One ``StrategyPerformance`` per strategy, sorted by ``net_pnl``
        descending (ties keep enum order).
    """
    days = tuple(daily_data)
    board = {
        s: StrategyPerformance(strategy_name=s, display_name=s.display_name)
        for s in StrategyType
    }

    session = board[StrategyType.SESSION]
    for day in days:
        for reaction in day.reactions:
            is_win = reaction.reacted and bool(reaction.outcome)
            pnl = (
                reaction.move * policy.point_value
                if is_win else -policy.max_stop_dollars
            )
            session.total_trades += 1
            if pnl > 0:
                session.winning_trades += 1
            else:
                session.losing_trades += 1
            session.net_pnl += pnl

    if session.total_trades > 0:
        patterns = analyze_historical_patterns(days)
        session.best_day = patterns.best_day
        session.best_session = patterns.best_session

    for perf in board.values():
        _finalize(perf)

    return sorted(board.values(), key=lambda p: p.net_pnl, reverse=True)


# ── Helpers ──────────────────────────────────────────────────────────────


def _finalize(perf: StrategyPerformance) -> None:
    """Fill the derived ratios in place.

    ``avg_win``/``avg_loss`` spread net P&L over the win/loss counts, and
    ``profit_factor`` scales the per-trade average by those counts.  This
    mirrors the numbers the leaderboard has always reported; it is not a
    per-trade gross-profit / gross-loss computation.
    """
    if perf.total_trades == 0:
        return
    perf.win_rate = perf.winning_trades / perf.total_trades * 100
    perf.avg_win = (
        perf.net_pnl / perf.winning_trades if perf.winning_trades > 0 else 0.0
    )
    perf.avg_loss = (
        abs(perf.net_pnl) / perf.losing_trades if perf.losing_trades > 0 else 0.0
    )

    per_trade = perf.net_pnl / perf.total_trades
    gross_profit = perf.winning_trades * per_trade
    gross_loss = abs(perf.losing_trades * per_trade)
    perf.profit_factor = gross_profit / gross_loss if gross_loss > 0 else 0.0
