"""JSON shapes returned by the API — camelCase, matching the model's wire format."""

from sessionmap.analysis.ingest import day_to_dict, reaction_to_dict
from sessionmap.analysis.models import AggregatedResults, HistoricalPatterns, PatternBucket
from sessionmap.analysis.report import LevelReportRow
from sessionmap.backtest.stats import PerformanceMetrics
from sessionmap.strategy.models import (
    NextDayPrediction,
    PredictedTradeSetup,
    StrategyForecastResult,
    StrategyPerformance,
)


def _camel_level_key(display_name: str) -> str:
    """``"New York High"`` → ``"newYorkHigh"``."""
    words = display_name.split()
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def aggregated_to_dict(results: AggregatedResults) -> dict:
    return {
        "sessionStats": {
            _camel_level_key(level.display_name): {
                "tested": stat.tested,
                "successful": stat.successful,
                "moves": list(stat.moves),
                "probability": stat.probability,
                "avgMove": stat.avg_move,
                "confidence": stat.confidence.value,
            }
            for level, stat in results.session_stats.items()
        },
        "dailyData": [day_to_dict(d) for d in results.daily_data],
        "allReactions": [reaction_to_dict(r) for r in results.all_reactions],
        "totalDays": results.total_days,
        "totalReactions": results.total_reactions,
        "successfulReactions": results.successful_reactions,
        "overallSuccessRate": results.overall_success_rate,
    }


def performance_to_dict(metrics: PerformanceMetrics) -> dict:
    return {
        "trades": [
            {
                "date": t.date,
                "level": t.level,
                "direction": t.direction,
                "pnl": t.pnl,
                "cumulativePnl": t.cumulative_pnl,
            }
            for t in metrics.trades
        ],
        "totalTrades": metrics.total_trades,
        "netPnl": metrics.net_pnl,
        "winRate": metrics.win_rate,
        "profitFactor": metrics.profit_factor,
        "maxDrawdown": metrics.max_drawdown,
        "avgWin": metrics.avg_win,
        "avgLoss": metrics.avg_loss,
        "rewardRiskRatio": metrics.reward_risk_ratio,
        "equityCurve": list(metrics.equity_curve),
    }


def _bucket(b: PatternBucket) -> dict:
    return {
        "count": b.count,
        "reactions": b.reactions,
        "successful": b.successful,
        "successRate": b.success_rate,
    }


def patterns_to_dict(patterns: HistoricalPatterns) -> dict:
    return {
        "byDay": {k: _bucket(v) for k, v in patterns.by_day.items()},
        "bySession": {k: _bucket(v) for k, v in patterns.by_session.items()},
        "bestDay": patterns.best_day,
        "bestSession": patterns.best_session,
        "totalDays": patterns.total_days,
    }


def report_row_to_dict(row: LevelReportRow) -> dict:
    return {
        "date": row.date,
        "dayOfWeek": row.day_of_week,
        "level": row.level.display_name,
        "entryPrice": row.entry_price,
        "reacted": row.reacted,
        "direction": row.direction,
        "pointsMoved": row.points_moved,
        "pnl": row.pnl,
    }


def setup_to_dict(s: PredictedTradeSetup) -> dict:
    return {
        "date": s.date,
        "dayOfWeek": s.day_of_week,
        "setupName": s.setup_name,
        "strategies": list(s.strategies),
        "confluenceScore": s.confluence_score,
        "entryPrice": s.entry_price,
        "stopLoss": s.stop_loss,
        "stopLossPoints": s.stop_loss_points,
        "takeProfit": s.take_profit,
        "takeProfitPoints": s.take_profit_points,
        "direction": s.direction,
        "probability": s.probability,
        "riskRewardRatio": s.risk_reward_ratio,
        "positionSize": s.position_size,
        "riskAmount": s.risk_amount,
        "potentialProfit": s.potential_profit,
        "reasoning": s.reasoning,
        "technicalDetails": s.technical_details,
    }


def strategy_performance_to_dict(p: StrategyPerformance) -> dict:
    return {
        "strategyName": p.strategy_name.value,
        "displayName": p.display_name,
        "totalTrades": p.total_trades,
        "winningTrades": p.winning_trades,
        "losingTrades": p.losing_trades,
        "winRate": p.win_rate,
        "netPnl": p.net_pnl,
        "avgWin": p.avg_win,
        "avgLoss": p.avg_loss,
        "profitFactor": p.profit_factor,
        "bestDay": p.best_day,
        "bestSession": p.best_session,
    }


def _next_day_to_dict(n: NextDayPrediction) -> dict:
    return {
        "date": n.date,
        "dayOfWeek": n.day_of_week,
        "marketBias": n.market_bias,
        "keyLevels": {
            "resistance": list(n.key_levels.resistance),
            "support": list(n.key_levels.support),
        },
        "recommendation": n.recommendation,
        "topSetups": [setup_to_dict(s) for s in n.top_setups],
    }


def strategy_forecast_to_dict(result: StrategyForecastResult) -> dict:
    return {
        "strategyLeaderboard": [
            strategy_performance_to_dict(p) for p in result.strategy_leaderboard
        ],
        "weeklyPredictions": [setup_to_dict(s) for s in result.weekly_predictions],
        "nextDayPrediction": (
            _next_day_to_dict(result.next_day_prediction)
            if result.next_day_prediction is not None else None
        ),
        "topConfluenceSetups": [
            setup_to_dict(s) for s in result.top_confluence_setups
        ],
        "generatedAt": result.generated_at,
        "accountSize": result.account_size,
        "riskPercentage": result.risk_percentage,
        "maxStopLoss": result.max_stop_loss,
    }
