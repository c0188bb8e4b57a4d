"""Internal API routers — /analyses, /results, /performance, /patterns, /report, /forecast.

No business logic. Delegates to the analysis, backtest and forecast modules
and keeps the latest results in module state.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException

from sessionmap.analysis.aggregator import aggregate
from sessionmap.analysis.events import tag_analysis
from sessionmap.analysis.history import DailyHistory
from sessionmap.analysis.ingest import parse_analysis
from sessionmap.analysis.models import AggregatedResults, AnalysisDocument
from sessionmap.analysis.patterns import analyze_historical_patterns
from sessionmap.analysis.report import level_report
from sessionmap.api.schemas import (
    aggregated_to_dict,
    patterns_to_dict,
    performance_to_dict,
    report_row_to_dict,
    strategy_forecast_to_dict,
)
from sessionmap.backtest.stats import PerformanceMetrics, calculate_performance
from sessionmap.config import RiskPolicy
from sessionmap.forecast.errors import (
    ForecastError,
    InsufficientHistoryError,
    require_history,
)

logger = logging.getLogger("sessionmap")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_policy: RiskPolicy = RiskPolicy()
_history: DailyHistory = DailyHistory()
_client = None  # GeminiClient, set via configure_routers()
_results: Optional[AggregatedResults] = None
_performance: Optional[PerformanceMetrics] = None


def configure_routers(
    client=None,
    policy: Optional[RiskPolicy] = None,
    history_max_days: int = 100,
) -> None:
    """Inject dependencies from the application startup and reset state.

    Args:
        client: A ``GeminiClient`` instance (or duck-type for tests).
        policy: Risk policy for backtests and sizing.
        history_max_days: Capacity of the rolling day history.
    """
    global _client, _policy, _history, _results, _performance  # noqa: PLW0603
    _client = client
    _policy = policy or RiskPolicy()
    _history = DailyHistory(history_max_days)
    _results = None
    _performance = None


def _ingest(docs: list[AnalysisDocument]) -> dict:
    """Aggregate *docs*, backtest them and append their days to history."""
    global _results, _performance  # noqa: PLW0603
    tagged = [tag_analysis(d) for d in docs]
    results = aggregate(tagged)
    performance = calculate_performance(results.daily_data, _policy)
    _results = results
    _performance = performance
    _history.extend(results.daily_data)
    logger.info(
        "Analysed %d day(s), %d reaction(s), success rate %s%%; history now %d day(s)",
        results.total_days,
        results.total_reactions,
        results.overall_success_rate,
        len(_history),
    )
    return {
        "results": aggregated_to_dict(results),
        "performance": performance_to_dict(performance),
        "historyDays": len(_history),
    }


def _require_client():
    if _client is None:
        raise HTTPException(status_code=503, detail="Forecast model is not configured.")
    return _client


# ── Analysis ─────────────────────────────────────────────────────────────


@router.post("/analyses")
async def post_analyses(body: list = Body(...)):
    """Ingest analysis documents already produced by the vision model."""
    return _ingest([parse_analysis(raw) for raw in body])


@router.post("/analyses/charts")
async def post_chart_images(body: dict = Body(...)):
    """Send chart images (data URLs) to the vision model, then ingest.

    Body: ``{"images": ["data:image/png;base64,...", ...]}``.
    """
    client = _require_client()
    images = body.get("images")
    if not isinstance(images, list) or not images:
        raise HTTPException(status_code=400, detail="Please upload at least one chart")
    docs = []
    for image in images:
        if not isinstance(image, str):
            raise HTTPException(status_code=400, detail="Invalid image data provided.")
        try:
            docs.append(await client.analyze_chart(image))
        except ForecastError as exc:
            raise HTTPException(
                status_code=502, detail=f"Analysis failed: {exc}",
            ) from exc
    return _ingest(docs)


@router.get("/results")
async def get_results():
    if _results is None:
        raise HTTPException(status_code=404, detail="No analysis has been run yet.")
    return aggregated_to_dict(_results)


@router.get("/performance")
async def get_performance():
    if _performance is None:
        raise HTTPException(status_code=404, detail="No analysis has been run yet.")
    return performance_to_dict(_performance)


@router.get("/report")
async def get_report():
    """Per-day, per-level outcomes for the latest analysis batch."""
    if _results is None:
        raise HTTPException(status_code=404, detail="No analysis has been run yet.")
    return {
        "rows": [
            report_row_to_dict(r)
            for r in level_report(_results.daily_data, _policy)
        ]
    }


# ── History ──────────────────────────────────────────────────────────────


@router.get("/patterns")
async def get_patterns():
    return patterns_to_dict(analyze_historical_patterns(_history.days))


@router.delete("/history")
async def clear_history():
    _history.clear()
    return {"historyDays": 0}


# ── Forecasts ────────────────────────────────────────────────────────────


def _forecast_inputs():
    try:
        require_history(len(_history))
    except InsufficientHistoryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    days = _history.days
    return days, analyze_historical_patterns(days)


@router.post("/forecast/weekly")
async def post_weekly_forecast() -> Any:
    client = _require_client()
    _, patterns = _forecast_inputs()
    try:
        return await client.generate_weekly_forecast(patterns)
    except ForecastError as exc:
        raise HTTPException(
            status_code=502, detail=f"Forecast generation failed: {exc}",
        ) from exc


@router.post("/forecast/strategy")
async def post_strategy_forecast():
    client = _require_client()
    days, patterns = _forecast_inputs()
    try:
        result = await client.generate_strategy_forecast(days, patterns)
    except ForecastError as exc:
        raise HTTPException(
            status_code=502, detail=f"Strategy forecast generation failed: {exc}",
        ) from exc
    return strategy_forecast_to_dict(result)
