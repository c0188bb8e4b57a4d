"""Backtest engine — replays recorded level reactions as simulated trades.

Every reaction becomes one trade: a reacting level books its point move,
a level that failed to react books the fixed stop-loss amount.  No real
orders are placed.
"""

from dataclasses import dataclass
from typing import Iterable

from sessionmap.analysis.models import DailyData
from sessionmap.config import RiskPolicy


@dataclass(frozen=True)
class Trade:
    """One simulated trade on the equity curve."""

    date: str
    level: str
    direction: str  # "LONG", "SHORT" or "SL" for a stop-out
    pnl: float
    cumulative_pnl: float


class BacktestEngine:
    """Simulates trading every recorded reaction in date order.

    Args:
        policy: Risk policy supplying point value and stop-loss amount.
    """

    def __init__(self, policy: RiskPolicy) -> None:
        self._policy = policy

    # ── Public API ───────────────────────────────────────────────────────

    def run(self, daily_data: Iterable[DailyData]) -> list[Trade]:
        """Replay all reactions and return the trade log.

        Days are sorted ascending by date (stable, so same-day records keep
        their input order).  ``cumulative_pnl`` runs across the whole
        sequence and is never reset between days.
        """
        days = sorted(daily_data, key=lambda d: d.trading_date)

        trades: list[Trade] = []
        cumulative = 0.0
        for day in days:
            for reaction in day.reactions:
                pnl = self._calc_pnl(reaction.reacted, reaction.move)
                cumulative += pnl
                trades.append(
                    Trade(
                        date=day.date,
                        level=reaction.level_name,
                        direction=reaction.outcome or "SL",
                        pnl=pnl,
                        cumulative_pnl=cumulative,
                    )
                )
        return trades

    # ── Helpers ──────────────────────────────────────────────────────────

    def _calc_pnl(self, reacted: bool, move: float) -> float:
        if reacted:
            return move * self._policy.point_value
        return self._policy.stop_loss_amount
