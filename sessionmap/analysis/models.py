"""Analysis data models — typed representations of chart-analysis records."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class Level(Enum):
    """The six canonical session levels a reaction can be measured against."""

    ASIA_HIGH = "Asia High"
    ASIA_LOW = "Asia Low"
    LONDON_HIGH = "London High"
    LONDON_LOW = "London Low"
    NEW_YORK_HIGH = "New York High"
    NEW_YORK_LOW = "New York Low"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def session(self) -> str:
        """Session bucket name: ``"Asia"``, ``"London"`` or ``"NewYork"``."""
        return self.value.rsplit(" ", 1)[0].replace(" ", "")

    @property
    def side(self) -> str:
        """``"High"`` or ``"Low"``."""
        return self.value.rsplit(" ", 1)[1]


SESSION_NAMES: tuple[str, ...] = ("Asia", "London", "NewYork")


def _level_key(name: str) -> str:
    return "".join(name.split()).lower()


_LEVELS_BY_KEY: dict[str, Level] = {_level_key(lv.value): lv for lv in Level}


def match_level(level_name: str) -> Optional[Level]:
    """Map free-text *level_name* onto a canonical ``Level``.

    Matching ignores case and all whitespace, so ``"asia low"``,
    ``"AsiaLow"`` and ``" ASIA  LOW "`` all resolve to ``Level.ASIA_LOW``.
    Returns ``None`` when nothing matches.
    """
    return _LEVELS_BY_KEY.get(_level_key(level_name))


class Confidence(str, Enum):
    """Count-based confidence bucket for a session statistic."""

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"

    @classmethod
    def from_sample_size(cls, tested: int) -> "Confidence":
        if tested >= 10:
            return cls.HIGH
        if tested >= 5:
            return cls.MODERATE
        return cls.LOW


# ── Records produced by the vision model ─────────────────────────────────


@dataclass(frozen=True)
class Session:
    """Observed high/low of one trading session on one day."""

    name: str
    high: float
    low: float


@dataclass(frozen=True)
class Reaction:
    """Whether price reacted to a named level, and by how much."""

    tested_level: float
    level_name: str
    reacted: bool
    reaction_type: str
    move: float
    outcome: str  # "LONG", "SHORT" or "" when no trade resulted

    @property
    def level(self) -> Optional[Level]:
        return match_level(self.level_name)

    @property
    def session_name(self) -> Optional[str]:
        """Session bucket of the reaction, or ``None`` when unrecognised."""
        level = self.level
        if level is not None:
            return level.session
        first_word = self.level_name.split(" ")[0]
        return first_word if first_word in SESSION_NAMES else None


@dataclass(frozen=True)
class MarketEvent:
    """A scheduled macro event that distorts a trading day."""

    type: str
    reason: str
    volatility: float


@dataclass(frozen=True)
class DailyData:
    """All sessions and reactions recorded for one trading day."""

    date: str
    day_of_week: str
    sessions: tuple[Session, ...] = ()
    reactions: tuple[Reaction, ...] = ()
    market_event: Optional[MarketEvent] = None

    @property
    def trading_date(self) -> date:
        return date.fromisoformat(self.date[:10])

    def session(self, name: str) -> Optional[Session]:
        for s in self.sessions:
            if s.name == name:
                return s
        return None


@dataclass(frozen=True)
class AnalysisDocument:
    """One chart analysis: the days visible on a single uploaded chart."""

    days: tuple[DailyData, ...] = ()
    week_high: Optional[float] = None
    week_low: Optional[float] = None
    volatility: str = ""


# ── Derived results ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class SessionStat:
    """Reaction statistics for one canonical level."""

    tested: int = 0
    successful: int = 0
    moves: tuple[float, ...] = ()
    probability: str = "0"
    avg_move: str = "0"
    confidence: Confidence = Confidence.LOW


@dataclass(frozen=True)
class AggregatedResults:
    """Output of :func:`sessionmap.analysis.aggregator.aggregate`."""

    session_stats: dict[Level, SessionStat]
    daily_data: tuple[DailyData, ...]
    all_reactions: tuple[Reaction, ...]
    total_days: int
    total_reactions: int
    successful_reactions: int
    overall_success_rate: str


@dataclass(frozen=True)
class PatternBucket:
    """Success counts for one day-of-week or session bucket."""

    count: int = 0  # days (by_day) or reactions (by_session) seen
    reactions: int = 0
    successful: int = 0
    success_rate: str = "0"


@dataclass(frozen=True)
class HistoricalPatterns:
    """Day-of-week and session success rates over the stored history."""

    by_day: dict[str, PatternBucket] = field(default_factory=dict)
    by_session: dict[str, PatternBucket] = field(default_factory=dict)
    best_day: str = "N/A"
    best_session: str = "N/A"
    total_days: int = 0
