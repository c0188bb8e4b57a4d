"""Tests for the risk management module.

Covers hybrid stop-loss placement, contract sizing, and full setup sizing
of forecast-model records.
"""

import math

import pytest

from sessionmap.config import RiskPolicy
from sessionmap.forecast.service import build_strategy_forecast, parse_model_json
from sessionmap.risk.position_sizer import calculate_position_size
from sessionmap.risk.setup_sizer import parse_raw_setup, size_setup, size_setups
from sessionmap.risk.sl_tp import hybrid_stop_loss, normalize_direction


def _raw_setup(**overrides):
    raw = {
        "date": "2025-11-17",
        "dayOfWeek": "Monday",
        "setupName": "London Low Bounce + Bullish Order Block",
        "strategies": ["ICT", "SESSION", "SUPPLY_DEMAND"],
        "confluenceScore": 3,
        "entryPrice": 20150,
        "technicalStopLoss": 20050,
        "takeProfit": 20450,
        "direction": "LONG",
        "probability": 85,
        "reasoning": "Monday London lows hold 82% of the time.",
        "technicalDetails": "Bullish OB at 20100, FVG 20130-20170",
    }
    raw.update(overrides)
    return raw


# ── Hybrid stop loss ─────────────────────────────────────────────────────


class TestHybridStopLoss:
    """Unit tests for hybrid_stop_loss()."""

    def test_caps_wide_technical_stop(self):
        """Entry 25000, technical stop 24000 → capped at 75 points."""
        levels = hybrid_stop_loss(25_000.0, "LONG", 24_000.0, RiskPolicy())
        assert levels.stop_loss_points == 75.0
        assert levels.stop_loss == 24_925.0

    def test_keeps_tight_technical_stop(self):
        levels = hybrid_stop_loss(20_150.0, "LONG", 20_110.0, RiskPolicy())
        assert levels.stop_loss_points == 40.0
        assert levels.stop_loss == 20_110.0

    def test_short_adds_distance(self):
        levels = hybrid_stop_loss(20_000.0, "SHORT", 20_500.0, RiskPolicy())
        assert levels.stop_loss_points == 75.0
        assert levels.stop_loss == 20_075.0

    def test_technical_stop_on_wrong_side_uses_distance(self):
        levels = hybrid_stop_loss(20_000.0, "LONG", 20_030.0, RiskPolicy())
        assert levels.stop_loss_points == 30.0
        assert levels.stop_loss == 19_970.0

    def test_lowercase_direction(self):
        levels = hybrid_stop_loss(20_000.0, "short", 20_010.0, RiskPolicy())
        assert levels.stop_loss == 20_010.0

    def test_custom_ceiling(self):
        policy = RiskPolicy(max_stop_points=20.0)
        levels = hybrid_stop_loss(20_000.0, "LONG", 19_900.0, policy)
        assert levels.stop_loss_points == 20.0

    def test_never_exceeds_ceiling(self):
        policy = RiskPolicy()
        for tech in (19_000.0, 19_925.0, 19_990.0, 21_000.0):
            levels = hybrid_stop_loss(20_000.0, "LONG", tech, policy)
            assert levels.stop_loss_points <= policy.max_stop_points

    def test_invalid_direction(self):
        with pytest.raises(ValueError, match="direction"):
            hybrid_stop_loss(20_000.0, "HOLD", 19_950.0, RiskPolicy())


class TestNormalizeDirection:
    def test_accepts_long_short(self):
        assert normalize_direction(" long ") == "LONG"
        assert normalize_direction("SHORT") == "SHORT"

    def test_rejects_non_string(self):
        with pytest.raises(ValueError):
            normalize_direction(None)


# ── Position sizing ──────────────────────────────────────────────────────


class TestPositionSizing:
    """Unit tests for calculate_position_size()."""

    def test_position_sizing(self):
        """$50,000, 2% risk, $2/pt, 75 pt stop → 6 contracts, $900 risk."""
        size = calculate_position_size(75.0, RiskPolicy())
        # max risk = 50000 * 0.02 = 1000
        # risk per contract = 75 * 2 = 150
        # contracts = floor(1000 / 150) = 6
        assert size.position_size == 6
        assert size.risk_amount == pytest.approx(900.0)

    def test_exact_fit(self):
        size = calculate_position_size(50.0, RiskPolicy())
        assert size.position_size == 10
        assert size.risk_amount == pytest.approx(1_000.0)

    def test_minimum_one_contract(self):
        """A stop wider than the whole budget still trades one contract."""
        policy = RiskPolicy(account_size=5_000.0, risk_percentage=1.0)
        size = calculate_position_size(75.0, policy)
        # budget 50 < 150 per contract
        assert size.position_size == 1
        assert size.risk_amount == pytest.approx(150.0)

    def test_always_at_least_one(self):
        policy = RiskPolicy(account_size=1_000.0, risk_percentage=0.5)
        for points in (0.25, 1.0, 10.0, 75.0, 500.0):
            assert calculate_position_size(points, policy).position_size >= 1

    def test_rejects_zero_stop(self):
        with pytest.raises(ValueError, match="stop_loss_points"):
            calculate_position_size(0.0, RiskPolicy())

    def test_rejects_negative_stop(self):
        with pytest.raises(ValueError, match="stop_loss_points"):
            calculate_position_size(-5.0, RiskPolicy())

    def test_rejects_zero_point_value(self):
        with pytest.raises(ValueError, match="point_value"):
            calculate_position_size(10.0, RiskPolicy(point_value=0.0))


# ── Setup sizing ─────────────────────────────────────────────────────────


class TestSizeSetup:

    def test_full_setup(self):
        setup = size_setup(parse_raw_setup(_raw_setup()), RiskPolicy())
        # technical 100 pts → capped at 75
        assert setup.stop_loss_points == 75.0
        assert setup.stop_loss == 20_075.0
        assert setup.position_size == 6
        assert setup.risk_amount == pytest.approx(900.0)
        assert setup.take_profit_points == 300.0
        assert setup.risk_reward_ratio == pytest.approx(4.0)
        assert setup.potential_profit == pytest.approx(300.0 * 2.0 * 6)
        assert setup.strategies == ("ICT", "SESSION", "SUPPLY_DEMAND")
        assert setup.confluence_score == 3

    def test_short_setup(self):
        raw = _raw_setup(direction="short", entryPrice=20500, technicalStopLoss=20540,
                         takeProfit=20300)
        setup = size_setup(parse_raw_setup(raw), RiskPolicy())
        assert setup.direction == "SHORT"
        assert setup.stop_loss == 20_540.0
        assert setup.stop_loss_points == 40.0
        assert setup.position_size == math.floor(1_000 / 80)
        assert setup.risk_reward_ratio == pytest.approx(200.0 / 40.0)

    def test_zero_stop_raises(self):
        raw = parse_raw_setup(_raw_setup(technicalStopLoss=20150))
        with pytest.raises(ValueError, match="stop_loss_points"):
            size_setup(raw, RiskPolicy())

    def test_parse_rejects_missing_price(self):
        raw = _raw_setup()
        del raw["takeProfit"]
        assert parse_raw_setup(raw) is None

    def test_parse_rejects_bad_direction(self):
        assert parse_raw_setup(_raw_setup(direction="FLAT")) is None

    def test_parse_overrides_date(self):
        setup = parse_raw_setup(_raw_setup(), date="2025-11-12", day_of_week="Wednesday")
        assert setup.date == "2025-11-12"
        assert setup.day_of_week == "Wednesday"

    def test_size_setups_skips_bad_records(self):
        raws = [
            _raw_setup(),
            "garbage",
            _raw_setup(direction=None),
            _raw_setup(technicalStopLoss=20150),
            _raw_setup(setupName="Second", entryPrice=20200, technicalStopLoss=20180),
        ]
        sized = size_setups(raws, RiskPolicy())
        assert [s.setup_name for s in sized] == [
            "London Low Bounce + Bullish Order Block", "Second",
        ]
        assert sized[1].position_size == 25  # 1000 / (20 * 2)

    def test_weekly_and_next_day_use_same_formula(self):
        policy = RiskPolicy()
        weekly = size_setups([_raw_setup()], policy)[0]
        next_day = size_setups([_raw_setup()], policy, date="2025-11-18",
                               day_of_week="Tuesday")[0]
        assert weekly.stop_loss == next_day.stop_loss
        assert weekly.position_size == next_day.position_size
        assert weekly.potential_profit == next_day.potential_profit


# ── Non-finite model numbers ─────────────────────────────────────────────


class TestNonFiniteNumbers:
    """``json.loads`` yields inf/nan for ``1e400``, ``NaN`` and ``Infinity``."""

    @staticmethod
    def _forecast_text(*setups):
        body = ",".join(setups)
        return '{"weeklyPredictions": [' + body + '], "nextDayPrediction": null}'

    @staticmethod
    def _setup_text(name, score="3", probability="80", entry="20150", stop="20050"):
        return (
            '{"setupName": "' + name + '", "strategies": ["ICT", "SESSION", "SMC"], '
            '"confluenceScore": ' + score + ', "entryPrice": ' + entry + ', '
            '"technicalStopLoss": ' + stop + ', "takeProfit": 20450, '
            '"direction": "LONG", "probability": ' + probability + '}'
        )

    def test_overflowing_score_does_not_abort_sizing(self):
        raw = parse_model_json(
            self._forecast_text(
                self._setup_text("huge", score="1e400"),
                self._setup_text("valid"),
            ),
            "strategy forecast",
        )
        result = build_strategy_forecast(raw, [], RiskPolicy())
        by_name = {s.setup_name: s for s in result.weekly_predictions}
        assert by_name["valid"].position_size == 6
        assert by_name["huge"].confluence_score == 0
        assert [s.setup_name for s in result.top_confluence_setups] == ["valid"]

    def test_non_finite_price_skips_setup(self):
        raw = parse_model_json(
            self._forecast_text(
                self._setup_text("inf-entry", entry="Infinity"),
                self._setup_text("nan-stop", stop="NaN"),
                self._setup_text("valid"),
            ),
            "strategy forecast",
        )
        result = build_strategy_forecast(raw, [], RiskPolicy())
        assert [s.setup_name for s in result.weekly_predictions] == ["valid"]

    def test_nan_probability_keeps_confluence_order(self):
        raw = parse_model_json(
            self._forecast_text(
                self._setup_text("p60", probability="60"),
                self._setup_text("pnan", probability="NaN"),
                self._setup_text("p90", probability="90"),
            ),
            "strategy forecast",
        )
        top = build_strategy_forecast(raw, [], RiskPolicy()).top_confluence_setups
        assert [s.probability for s in top] == [90.0, 60.0, 0.0]
