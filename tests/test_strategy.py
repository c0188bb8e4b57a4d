"""Tests for the strategy leaderboard and the confluence selector."""

import pytest

from sessionmap.analysis.models import DailyData, Reaction
from sessionmap.config import RiskPolicy
from sessionmap.strategy.confluence import select_top_confluence
from sessionmap.strategy.leaderboard import calculate_strategy_performance
from sessionmap.strategy.models import PredictedTradeSetup, StrategyType


# ── Helpers ──────────────────────────────────────────────────────────────


def _r(level="Asia Low", reacted=True, move=50.0, outcome="LONG"):
    return Reaction(
        tested_level=25_000.0,
        level_name=level,
        reacted=reacted,
        reaction_type="bounce",
        move=move,
        outcome=outcome,
    )


def _d(date, dow, reactions):
    return DailyData(date=date, day_of_week=dow, reactions=tuple(reactions))


def _setup(name, score, probability):
    return PredictedTradeSetup(
        date="2025-11-17",
        day_of_week="Monday",
        setup_name=name,
        strategies=("ICT", "SESSION"),
        confluence_score=score,
        entry_price=20_000.0,
        direction="LONG",
        probability=probability,
        reasoning="",
        technical_details="",
        stop_loss=19_950.0,
        stop_loss_points=50.0,
        take_profit=20_200.0,
        take_profit_points=200.0,
        risk_reward_ratio=4.0,
        position_size=10,
        risk_amount=1_000.0,
        potential_profit=4_000.0,
    )


# ── Leaderboard ──────────────────────────────────────────────────────────


class TestStrategyLeaderboard:

    def test_empty_history(self):
        board = calculate_strategy_performance([], RiskPolicy())
        assert [p.strategy_name for p in board] == list(StrategyType)
        for p in board:
            assert p.total_trades == 0
            assert p.win_rate == 0.0
            assert p.profit_factor == 0.0
            assert p.best_day == "N/A"
        assert board[0].display_name == "ICT (Order Blocks & FVG)"

    def test_attributes_to_session(self):
        history = [
            _d("2025-11-10", "Monday", [_r(move=100.0), _r(reacted=False, outcome="")]),
            _d("2025-11-11", "Tuesday", [_r(move=50.0)]),
        ]
        board = calculate_strategy_performance(history, RiskPolicy())
        top = board[0]
        # +200 - 150 + 100 = 150 > 0, so SESSION leads
        assert top.strategy_name is StrategyType.SESSION
        assert top.total_trades == 3
        assert top.winning_trades == 2
        assert top.losing_trades == 1
        assert top.net_pnl == pytest.approx(150.0)
        assert top.win_rate == pytest.approx(200.0 / 3)
        assert top.avg_win == pytest.approx(75.0)
        assert top.avg_loss == pytest.approx(150.0)
        # Proxy: (2 × 50) / |1 × 50| = 2
        assert top.profit_factor == pytest.approx(2.0)
        assert top.best_day == "Tuesday"
        assert top.best_session == "Asia"
        for other in board[1:]:
            assert other.total_trades == 0

    def test_losing_session_sorts_last(self):
        history = [_d("2025-11-10", "Monday", [_r(reacted=False, outcome="")] * 2)]
        board = calculate_strategy_performance(history, RiskPolicy())
        assert board[-1].strategy_name is StrategyType.SESSION
        assert board[-1].net_pnl == -300.0
        assert board[-1].profit_factor == 0.0  # no winners → 0 / 300
        assert board[-1].avg_win == 0.0

    def test_reacted_without_direction_loses(self):
        history = [_d("2025-11-10", "Monday", [_r(move=80.0, outcome="")])]
        session = next(
            p for p in calculate_strategy_performance(history, RiskPolicy())
            if p.strategy_name is StrategyType.SESSION
        )
        assert session.losing_trades == 1
        assert session.net_pnl == -150.0

    def test_uses_max_stop_dollars(self):
        history = [_d("2025-11-10", "Monday", [_r(reacted=False)])]
        policy = RiskPolicy(max_stop_dollars=300.0)
        board = calculate_strategy_performance(history, policy)
        assert board[-1].net_pnl == -300.0

    def test_breakeven_profit_factor_is_zero(self):
        history = [_d("2025-11-10", "Monday", [_r(move=75.0), _r(reacted=False)])]
        board = calculate_strategy_performance(history, RiskPolicy())
        session = next(p for p in board if p.strategy_name is StrategyType.SESSION)
        assert session.net_pnl == 0.0
        assert session.profit_factor == 0.0


# ── Confluence selector ──────────────────────────────────────────────────


class TestConfluenceSelector:

    def test_filters_and_orders(self):
        setups = [
            _setup("s2", 2, 90),
            _setup("s3a", 3, 70),
            _setup("s5", 5, 60),
            _setup("s1", 1, 99),
            _setup("s3b", 3, 80),
            _setup("s4", 4, 75),
        ]
        top = select_top_confluence(setups)
        assert [s.setup_name for s in top] == ["s5", "s4", "s3b", "s3a"]
        assert all(s.confluence_score >= 3 for s in top)

    def test_at_most_five(self):
        setups = [_setup(f"s{i}", 3 + i % 3, 50 + i) for i in range(9)]
        top = select_top_confluence(setups)
        assert len(top) == 5
        assert top[0].confluence_score == 5

    def test_empty(self):
        assert select_top_confluence([]) == []

    def test_nothing_qualifies(self):
        assert select_top_confluence([_setup("a", 2, 99), _setup("b", 1, 99)]) == []

    def test_custom_threshold(self):
        top = select_top_confluence([_setup("a", 2, 60), _setup("b", 1, 99)],
                                    min_score=2, limit=1)
        assert [s.setup_name for s in top] == ["a"]
