"""Strategy data models — typed representations for forecast setups."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StrategyType(str, Enum):
    """The closed set of strategies a setup can be attributed to."""

    ICT = "ICT"
    SMC = "SMC"
    SESSION = "SESSION"
    SUPPLY_DEMAND = "SUPPLY_DEMAND"
    MARKET_PROFILE = "MARKET_PROFILE"

    @property
    def display_name(self) -> str:
        return STRATEGY_DISPLAY_NAMES[self]


STRATEGY_DISPLAY_NAMES: dict[StrategyType, str] = {
    StrategyType.ICT: "ICT (Order Blocks & FVG)",
    StrategyType.SMC: "Smart Money Concepts",
    StrategyType.SESSION: "Session-Based Trading",
    StrategyType.SUPPLY_DEMAND: "Supply & Demand Zones",
    StrategyType.MARKET_PROFILE: "Market Profile / Volume",
}


@dataclass(frozen=True)
class RawSetup:
    """A predicted setup exactly as the forecast model describes it."""

    date: str
    day_of_week: str
    setup_name: str
    strategies: tuple[str, ...]
    confluence_score: int
    entry_price: float
    technical_stop_loss: float
    take_profit: float
    direction: str
    probability: float
    reasoning: str = ""
    technical_details: str = ""


@dataclass(frozen=True)
class PredictedTradeSetup:
    """A raw setup augmented with risk-policy sizing.

    Every field from ``stop_loss`` down to ``potential_profit`` is computed
    by :func:`sessionmap.risk.setup_sizer.size_setup`.
    """

    date: str
    day_of_week: str
    setup_name: str
    strategies: tuple[str, ...]
    confluence_score: int
    entry_price: float
    direction: str
    probability: float
    reasoning: str
    technical_details: str
    stop_loss: float
    stop_loss_points: float
    take_profit: float
    take_profit_points: float
    risk_reward_ratio: float
    position_size: int
    risk_amount: float
    potential_profit: float


@dataclass(frozen=True)
class KeyLevels:
    resistance: tuple[float, ...] = ()
    support: tuple[float, ...] = ()


@dataclass(frozen=True)
class NextDayPrediction:
    """Tomorrow's bias, key levels and sized top setups."""

    date: str
    day_of_week: str
    market_bias: str
    key_levels: KeyLevels
    recommendation: str
    top_setups: tuple[PredictedTradeSetup, ...] = ()


@dataclass
class StrategyPerformance:
    """Realized results attributed to one strategy."""

    strategy_name: StrategyType
    display_name: str
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    net_pnl: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    best_day: str = "N/A"
    best_session: str = "N/A"


@dataclass(frozen=True)
class StrategyForecastResult:
    """Everything the strategy forecast view needs, fully computed."""

    strategy_leaderboard: tuple[StrategyPerformance, ...]
    weekly_predictions: tuple[PredictedTradeSetup, ...]
    next_day_prediction: Optional[NextDayPrediction]
    top_confluence_setups: tuple[PredictedTradeSetup, ...]
    generated_at: str
    account_size: float
    risk_percentage: float
    max_stop_loss: float
