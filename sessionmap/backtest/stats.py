"""Backtest statistics — pure functions for trade-series analysis."""

from dataclasses import dataclass, field
from typing import Iterable

from sessionmap.analysis.models import DailyData
from sessionmap.backtest.engine import BacktestEngine, Trade
from sessionmap.config import RiskPolicy


@dataclass(frozen=True)
class PerformanceMetrics:
    """Summary of a simulated trade sequence."""

    trades: tuple[Trade, ...] = ()
    total_trades: int = 0
    net_pnl: float = 0.0
    win_rate: float = 0.0  # percent
    profit_factor: float = 0.0
    max_drawdown: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    reward_risk_ratio: float = 0.0
    equity_curve: tuple[float, ...] = field(default=(0.0,))


def calculate_stats(trades: list[Trade]) -> PerformanceMetrics:
    """Compute summary statistics from a list of simulated trades.

    Winners are trades with ``pnl > 0``; everything else, breakeven
    included, is a loser.  Every ratio falls back to 0 when its
    denominator is empty.
    """
    if not trades:
        return PerformanceMetrics()

    pnls = [t.pnl for t in trades]
    total = len(pnls)
    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p <= 0]

    gross_profit = sum(winners)
    gross_loss = abs(sum(losers))

    avg_win = gross_profit / len(winners) if winners else 0.0
    avg_loss = gross_loss / len(losers) if losers else 0.0
    reward_risk = avg_win / avg_loss if winners and losers and avg_loss > 0 else 0.0

    return PerformanceMetrics(
        trades=tuple(trades),
        total_trades=total,
        net_pnl=trades[-1].cumulative_pnl,
        win_rate=len(winners) / total * 100,
        profit_factor=gross_profit / gross_loss if gross_loss > 0 else 0.0,
        max_drawdown=_max_drawdown([t.cumulative_pnl for t in trades]),
        avg_win=avg_win,
        avg_loss=avg_loss,
        reward_risk_ratio=reward_risk,
        equity_curve=(0.0, *(t.cumulative_pnl for t in trades)),
    )


def calculate_performance(
    daily_data: Iterable[DailyData],
    policy: RiskPolicy,
) -> PerformanceMetrics:
    """Replay *daily_data* through :class:`BacktestEngine` and summarise it."""
    return calculate_stats(BacktestEngine(policy).run(daily_data))


# ── Helpers ──────────────────────────────────────────────────────────────


def _max_drawdown(equity: list[float]) -> float:
    """Maximum drawdown of a cumulative P&L curve.

    The running peak starts at 0 (flat account) and never decreases.
    Returns the largest peak-to-trough decline as a positive number.
    """
    peak = 0.0
    max_dd = 0.0
    for value in equity:
        if value > peak:
            peak = value
        dd = peak - value
        if dd > max_dd:
            max_dd = dd
    return max_dd
