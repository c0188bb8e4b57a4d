"""Forecast service — turns a raw strategy forecast into sized, ranked output.

Pure: the model call happens in :mod:`sessionmap.forecast.client`, this
module only interprets the document it returns.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sessionmap.analysis.ingest import as_list, as_number
from sessionmap.analysis.models import DailyData
from sessionmap.config import RiskPolicy
from sessionmap.forecast.errors import ForecastError
from sessionmap.risk.setup_sizer import size_setups
from sessionmap.strategy.confluence import select_top_confluence
from sessionmap.strategy.leaderboard import calculate_strategy_performance
from sessionmap.strategy.models import (
    KeyLevels,
    NextDayPrediction,
    StrategyForecastResult,
)

logger = logging.getLogger("sessionmap")


def parse_model_json(text: str, what: str) -> Any:
    """Decode a model response, tolerating a surrounding ```json fence.

    Raises:
        ForecastError: If the text is not valid JSON.
    """
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON response from model: %s", text)
        raise ForecastError(f"The AI returned an invalid {what} format.") from exc


def _numbers(value: Any) -> tuple[float, ...]:
    return tuple(
        n for n in (as_number(v, None) for v in as_list(value)) if n is not None
    )


def parse_next_day(raw: Any, policy: RiskPolicy) -> Optional[NextDayPrediction]:
    """Size the next-day block; ``None`` when the model sent none."""
    if not isinstance(raw, dict):
        return None
    date = raw.get("date") if isinstance(raw.get("date"), str) else ""
    dow = raw.get("dayOfWeek") if isinstance(raw.get("dayOfWeek"), str) else ""
    key_levels = raw.get("keyLevels") if isinstance(raw.get("keyLevels"), dict) else {}
    return NextDayPrediction(
        date=date,
        day_of_week=dow,
        market_bias=raw.get("marketBias") if isinstance(raw.get("marketBias"), str) else "",
        key_levels=KeyLevels(
            resistance=_numbers(key_levels.get("resistance")),
            support=_numbers(key_levels.get("support")),
        ),
        recommendation=(
            raw.get("recommendation")
            if isinstance(raw.get("recommendation"), str) else ""
        ),
        top_setups=tuple(
            size_setups(as_list(raw.get("topSetups")), policy, date=date, day_of_week=dow)
        ),
    )


def build_strategy_forecast(
    raw_forecast: Any,
    historical_data: Iterable[DailyData],
    policy: RiskPolicy,
    generated_at: Optional[str] = None,
) -> StrategyForecastResult:
    """Assemble the strategy forecast result.

    Weekly and next-day setups are sized with the same policy; the
    leaderboard is computed from *historical_data*, and the confluence
    selection is drawn from the weekly setups only.

    Raises:
        ForecastError: If *raw_forecast* is not a JSON object.
    """
    if not isinstance(raw_forecast, dict):
        raise ForecastError("The AI returned an invalid strategy forecast format.")

    weekly = tuple(size_setups(as_list(raw_forecast.get("weeklyPredictions")), policy))
    next_day = parse_next_day(raw_forecast.get("nextDayPrediction"), policy)

    if generated_at is None:
        generated_at = datetime.now(timezone.utc).isoformat()

    return StrategyForecastResult(
        strategy_leaderboard=tuple(
            calculate_strategy_performance(historical_data, policy)
        ),
        weekly_predictions=weekly,
        next_day_prediction=next_day,
        top_confluence_setups=tuple(select_top_confluence(weekly)),
        generated_at=generated_at,
        account_size=policy.account_size,
        risk_percentage=policy.risk_percentage,
        max_stop_loss=policy.max_stop_dollars,
    )


def finish_weekly_forecast(
    raw_forecast: Any,
    historical_days: int,
    generated_at: Optional[str] = None,
) -> dict:
    """Stamp a legacy weekly forecast with its generation time and day count.

    List fields that are not lists are replaced by empty lists.

    Raises:
        ForecastError: If *raw_forecast* is not a JSON object.
    """
    if not isinstance(raw_forecast, dict):
        raise ForecastError("The AI returned an invalid forecast format.")
    recommendation = raw_forecast.get("weeklyRecommendation")
    return {
        "dailyPredictions": as_list(raw_forecast.get("dailyPredictions")),
        "weeklyRecommendation": recommendation if isinstance(recommendation, str) else "",
        "topTrades": as_list(raw_forecast.get("topTrades")),
        "generatedAt": generated_at or datetime.now(timezone.utc).isoformat(),
        "historicalDays": historical_days,
    }
