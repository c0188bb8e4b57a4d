"""Gemini REST API async client.

Handles all communication with the vision/forecast model: chart analysis,
the legacy weekly forecast, and the multi-strategy forecast.  Every failure
is surfaced as :class:`ForecastError`.
"""

import asyncio
import logging
from datetime import date
from typing import Iterable, Optional

import httpx

from sessionmap.analysis.ingest import parse_analysis
from sessionmap.analysis.models import (
    AnalysisDocument,
    DailyData,
    HistoricalPatterns,
)
from sessionmap.config import Config
from sessionmap.forecast import prompts
from sessionmap.forecast.errors import ForecastError
from sessionmap.forecast.service import (
    build_strategy_forecast,
    finish_weekly_forecast,
    parse_model_json,
)
from sessionmap.strategy.models import StrategyForecastResult

logger = logging.getLogger("sessionmap")

# Retry settings
_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 2.0  # seconds; doubles each attempt
_RETRYABLE_STATUS_CODES = {500, 502, 503, 504, 429}


def split_data_url(image_data: str) -> tuple[str, str]:
    """Split ``data:<mime>;base64,<payload>`` into ``(mime, payload)``.

    Raises:
        ForecastError: If there is no base64 payload.
    """
    header, _, payload = image_data.partition(",")
    if not payload:
        raise ForecastError("Invalid image data provided.")
    mime = "image/jpeg"
    if header.startswith("data:") and ";" in header:
        mime = header[len("data:"):header.index(";")] or mime
    return mime, payload


class GeminiClient:
    """Async client wrapping the Gemini ``generateContent`` endpoint."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._url = (
            f"{config.gemini_base_url}/models/{config.gemini_model}:generateContent"
        )
        self._headers = {
            "x-goog-api-key": config.gemini_api_key,
            "Content-Type": "application/json",
        }

    # ── Retry helper ─────────────────────────────────────────────────────

    async def _post(self, body: dict) -> httpx.Response:
        async with httpx.AsyncClient() as client:
            return await client.post(
                self._url,
                headers=self._headers,
                json=body,
                timeout=120.0,
            )

    async def _request_with_retry(self, body: dict) -> httpx.Response:
        """POST *body*, retrying rate-limits (429), 5xx and transport errors.

        The n-th retry waits ``_RETRY_BASE_DELAY * 2**(n - 1)`` seconds.  The
        final attempt is not followed by a wait; its error is raised as is.
        Other HTTP errors are raised immediately.
        """
        for attempt in range(1, _MAX_RETRIES):
            try:
                resp = await self._post(body)
            except httpx.TransportError as exc:
                reason = f"transport error ({exc})"
            else:
                if resp.status_code not in _RETRYABLE_STATUS_CODES:
                    resp.raise_for_status()
                    return resp
                reason = f"status {resp.status_code}"

            delay = _RETRY_BASE_DELAY * 2 ** (attempt - 1)
            logger.warning(
                "Gemini request attempt %d/%d failed with %s; retrying in %.1fs",
                attempt, _MAX_RETRIES, reason, delay,
            )
            await asyncio.sleep(delay)

        resp = await self._post(body)
        resp.raise_for_status()
        return resp

    async def _generate(self, parts: list[dict], schema: dict) -> str:
        """Run one ``generateContent`` call and return the response text."""
        body = {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }
        try:
            resp = await self._request_with_retry(body)
        except httpx.HTTPError as exc:
            logger.error("Gemini request failed: %s", exc)
            raise ForecastError(f"The AI service request failed: {exc}") from exc

        try:
            data = resp.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Unexpected Gemini response: %s", resp.text)
            raise ForecastError("The AI returned an empty response.") from exc

    # ── Chart analysis ───────────────────────────────────────────────────

    async def analyze_chart(self, image_data: str) -> AnalysisDocument:
        """Extract sessions and reactions from a chart image data URL."""
        mime, payload = split_data_url(image_data)
        text = await self._generate(
            [
                {"inlineData": {"mimeType": mime, "data": payload}},
                {"text": prompts.CHART_ANALYSIS_PROMPT},
            ],
            prompts.ANALYSIS_RESULT_SCHEMA,
        )
        raw = parse_model_json(text, "analysis")
        if not isinstance(raw, dict):
            raise ForecastError("The AI returned an invalid analysis format.")
        return parse_analysis(raw)

    # ── Forecasts ────────────────────────────────────────────────────────

    async def generate_weekly_forecast(self, patterns: HistoricalPatterns) -> dict:
        """Session-level predictions for next week (legacy forecast view)."""
        text = await self._generate(
            [{"text": prompts.weekly_forecast_prompt(patterns)}],
            prompts.WEEKLY_FORECAST_SCHEMA,
        )
        return finish_weekly_forecast(
            parse_model_json(text, "forecast"), patterns.total_days,
        )

    async def generate_strategy_forecast(
        self,
        historical_data: Iterable[DailyData],
        patterns: HistoricalPatterns,
        today: Optional[date] = None,
    ) -> StrategyForecastResult:
        """Multi-strategy setups for next week and tomorrow, sized and ranked."""
        history = tuple(historical_data)
        prompt = prompts.strategy_forecast_prompt(
            history[-5:], patterns, today or date.today(),
        )
        text = await self._generate(
            [{"text": prompt}], prompts.STRATEGY_FORECAST_SCHEMA,
        )
        result = build_strategy_forecast(
            parse_model_json(text, "strategy forecast"),
            history,
            self._config.risk,
        )
        logger.info(
            "Strategy forecast: %d weekly setups, %d with 3+ confluence",
            len(result.weekly_predictions),
            len(result.top_confluence_setups),
        )
        return result
