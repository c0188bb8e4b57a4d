"""Prompt text and response schemas sent to the vision/forecast model."""

import json
from datetime import date, timedelta
from typing import Iterable

from sessionmap.analysis.models import DailyData, HistoricalPatterns


CHART_ANALYSIS_PROMPT = """You are an institutional trading analyst specialising in NQ (NASDAQ) futures. Analyse this 1-hour chart.

CHART SESSION BOXES:
- BLUE boxes = London session
- ORANGE boxes = New York session
- PINK boxes = Asia session

For every day visible on the chart report:
1. The high and low of each session (names: "Asia", "London", "NewYork").
2. Every test of a previous session level ("Asia High", "Asia Low", "London High",
   "London Low", "New York High", "New York Low"): the tested price, whether price
   reacted, the reaction type, the move in points and the resulting direction
   ("LONG" or "SHORT", empty when there was no reaction).

Also report the week high, week low and overall volatility (LOW, NORMAL, HIGH).

CRITICAL: Respond ONLY with JSON matching the response schema. No markdown."""


ANALYSIS_RESULT_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "days": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "date": {"type": "STRING"},
                    "dayOfWeek": {"type": "STRING"},
                    "sessions": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "name": {"type": "STRING"},
                                "high": {"type": "NUMBER"},
                                "low": {"type": "NUMBER"},
                            },
                            "required": ["name", "high", "low"],
                        },
                    },
                    "reactions": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "testedLevel": {"type": "NUMBER"},
                                "levelName": {"type": "STRING"},
                                "reacted": {"type": "BOOLEAN"},
                                "reactionType": {"type": "STRING"},
                                "move": {"type": "NUMBER"},
                                "outcome": {"type": "STRING"},
                            },
                            "required": [
                                "testedLevel", "levelName", "reacted",
                                "reactionType", "move", "outcome",
                            ],
                        },
                    },
                },
                "required": ["date", "dayOfWeek", "sessions", "reactions"],
            },
        },
        "weekHigh": {"type": "NUMBER"},
        "weekLow": {"type": "NUMBER"},
        "volatility": {"type": "STRING"},
    },
    "required": ["days", "weekHigh", "weekLow", "volatility"],
}


_WEEKLY_SETUP = {
    "type": "OBJECT",
    "properties": {
        "session": {"type": "STRING"},
        "level": {"type": "STRING"},
        "probability": {"type": "NUMBER"},
        "expectedMove": {"type": "NUMBER"},
        "direction": {"type": "STRING"},
        "reasoning": {"type": "STRING"},
    },
    "required": ["session", "level", "probability", "expectedMove", "direction", "reasoning"],
}

WEEKLY_FORECAST_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "dailyPredictions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "day": {"type": "STRING"},
                    "date": {"type": "STRING"},
                    "topSetups": {"type": "ARRAY", "items": _WEEKLY_SETUP},
                },
                "required": ["day", "date", "topSetups"],
            },
        },
        "weeklyRecommendation": {"type": "STRING"},
        "topTrades": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "day": {"type": "STRING"},
                    "setup": {"type": "STRING"},
                    "probability": {"type": "NUMBER"},
                    "expectedMove": {"type": "NUMBER"},
                },
                "required": ["day", "setup", "probability", "expectedMove"],
            },
        },
    },
    "required": ["dailyPredictions", "weeklyRecommendation", "topTrades"],
}


_SETUP_PROPERTIES = {
    "setupName": {"type": "STRING"},
    "strategies": {"type": "ARRAY", "items": {"type": "STRING"}},
    "confluenceScore": {"type": "NUMBER"},
    "entryPrice": {"type": "NUMBER"},
    "technicalStopLoss": {"type": "NUMBER"},
    "takeProfit": {"type": "NUMBER"},
    "direction": {"type": "STRING"},
    "probability": {"type": "NUMBER"},
    "reasoning": {"type": "STRING"},
    "technicalDetails": {"type": "STRING"},
}

STRATEGY_FORECAST_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "weeklyPredictions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "date": {"type": "STRING"},
                    "dayOfWeek": {"type": "STRING"},
                    **_SETUP_PROPERTIES,
                },
                "required": ["date", "dayOfWeek", *_SETUP_PROPERTIES],
            },
        },
        "nextDayPrediction": {
            "type": "OBJECT",
            "properties": {
                "date": {"type": "STRING"},
                "dayOfWeek": {"type": "STRING"},
                "marketBias": {"type": "STRING"},
                "keyLevels": {
                    "type": "OBJECT",
                    "properties": {
                        "resistance": {"type": "ARRAY", "items": {"type": "NUMBER"}},
                        "support": {"type": "ARRAY", "items": {"type": "NUMBER"}},
                    },
                    "required": ["resistance", "support"],
                },
                "recommendation": {"type": "STRING"},
                "topSetups": {
                    "type": "ARRAY",
                    "items": {
                        "type": "OBJECT",
                        "properties": _SETUP_PROPERTIES,
                        "required": list(_SETUP_PROPERTIES),
                    },
                },
            },
            "required": [
                "date", "dayOfWeek", "marketBias", "keyLevels",
                "recommendation", "topSetups",
            ],
        },
    },
    "required": ["weeklyPredictions", "nextDayPrediction"],
}


# ── Prompt builders ──────────────────────────────────────────────────────


def next_monday(today: date) -> date:
    """The Monday strictly after *today*."""
    return today + timedelta(days=7 - today.weekday())


def _pattern_summary(patterns: HistoricalPatterns) -> str:
    by_day = {
        dow: {
            "count": b.count,
            "reactions": b.reactions,
            "successful": b.successful,
            "successRate": b.success_rate,
        }
        for dow, b in patterns.by_day.items()
    }
    return (
        f"- Total days analyzed: {patterns.total_days}\n"
        f"- Best performing day: {patterns.best_day}\n"
        f"- Best performing session: {patterns.best_session}\n"
        f"- Session success rates by day: {json.dumps(by_day)}"
    )


def _session_range(day: DailyData, name: str) -> str:
    s = day.session(name)
    if s is None:
        return "n/a"
    return f"{s.high:g}-{s.low:g}"


def weekly_forecast_prompt(patterns: HistoricalPatterns) -> str:
    return (
        "You are a quantitative trading strategist. Based on the following "
        "historical trading data, generate predictions for next week's trading.\n\n"
        f"HISTORICAL DATA:\n{_pattern_summary(patterns)}\n\n"
        "Generate predictions for Monday through Friday of next week. For each "
        "day predict the highest probability session-level setups, the expected "
        "move size and a trading recommendation.\n\n"
        "CRITICAL: Respond ONLY with JSON matching the response schema."
    )


def strategy_forecast_prompt(
    recent_days: Iterable[DailyData],
    patterns: HistoricalPatterns,
    today: date,
) -> str:
    """Prompt for the multi-strategy forecast (next week plus tomorrow)."""
    price_action = "\n".join(
        f"{d.day_of_week} {d.date}: Asia {_session_range(d, 'Asia')}, "
        f"London {_session_range(d, 'London')}, NY {_session_range(d, 'NewYork')}"
        for d in recent_days
    )
    monday = next_monday(today)
    tomorrow = today + timedelta(days=1)
    return (
        "You are a quantitative trading strategist. Analyze historical NQ futures "
        "data using MULTIPLE PROFESSIONAL TRADING STRATEGIES to generate "
        "high-probability trade setups.\n\n"
        "STRATEGIES: ICT, SMC, SESSION, SUPPLY_DEMAND, MARKET_PROFILE.\n\n"
        f"HISTORICAL DATA SUMMARY:\n{_pattern_summary(patterns)}\n\n"
        f"RECENT PRICE ACTION:\n{price_action}\n\n"
        "GENERATE PREDICTIONS FOR:\n"
        f"1. NEXT WEEK (Monday {monday.isoformat()} through Friday)\n"
        f"2. TOMORROW ({tomorrow.isoformat()}, {tomorrow.strftime('%A')})\n\n"
        "For each setup give the aligned strategies, confluence score (1-5), "
        "entry price, technical stop loss from structure, take profit, direction "
        "(LONG/SHORT), probability, reasoning and technical details. Prioritise "
        "setups with 3+ strategy confluence.\n\n"
        "CRITICAL: Respond ONLY with JSON matching the response schema."
    )
