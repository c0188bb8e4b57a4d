"""SessionMap — application configuration.

Loads .env variables into a typed config object.
Validates required variables on startup.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


_REQUIRED_VARS = [
    "GEMINI_API_KEY",
]


@dataclass(frozen=True)
class RiskPolicy:
    """Fixed account-risk policy shared by sizing, backtest and leaderboard.

    Defaults describe a $50k MNQ account ($2 per point) risking 2 % per trade
    with stops capped at 75 points / $150.
    """

    account_size: float = 50_000.0
    risk_percentage: float = 2.0
    max_stop_dollars: float = 150.0
    max_stop_points: float = 75.0
    point_value: float = 2.0
    stop_loss_amount: float = -150.0  # realized on a level that did not react

    @property
    def max_risk_dollars(self) -> float:
        """Currency budget per trade (``account_size × risk_percentage %``)."""
        return self.account_size * (self.risk_percentage / 100.0)


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    gemini_api_key: str
    gemini_model: str = "gemini-2.5-flash"
    risk: RiskPolicy = field(default_factory=RiskPolicy)
    history_max_days: int = 100
    log_level: str = "INFO"
    api_port: int = 8080

    @property
    def gemini_base_url(self) -> str:
        """Return the Generative Language API base URL."""
        return "https://generativelanguage.googleapis.com/v1beta"


def load_risk_policy() -> RiskPolicy:
    """Build a ``RiskPolicy`` from environment variables, falling back to defaults."""
    defaults = RiskPolicy()
    return RiskPolicy(
        account_size=float(os.environ.get("ACCOUNT_SIZE", defaults.account_size)),
        risk_percentage=float(
            os.environ.get("RISK_PERCENTAGE", defaults.risk_percentage)
        ),
        max_stop_dollars=float(
            os.environ.get("MAX_STOP_LOSS_DOLLARS", defaults.max_stop_dollars)
        ),
        max_stop_points=float(
            os.environ.get("MAX_STOP_LOSS_POINTS", defaults.max_stop_points)
        ),
        point_value=float(os.environ.get("POINT_VALUE", defaults.point_value)),
        stop_loss_amount=float(
            os.environ.get("STOP_LOSS_AMOUNT", defaults.stop_loss_amount)
        ),
    )


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the missing variable when a
    required variable is absent, or when the risk policy is not usable.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [v for v in _REQUIRED_VARS if not os.environ.get(v)]
    if missing:
        raise ValueError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    risk = load_risk_policy()
    if risk.account_size <= 0:
        raise ValueError(f"ACCOUNT_SIZE must be positive, got {risk.account_size}")
    if risk.point_value <= 0:
        raise ValueError(f"POINT_VALUE must be positive, got {risk.point_value}")
    if risk.max_stop_points <= 0:
        raise ValueError(
            f"MAX_STOP_LOSS_POINTS must be positive, got {risk.max_stop_points}"
        )

    return Config(
        gemini_api_key=os.environ["GEMINI_API_KEY"],
        gemini_model=os.environ.get("GEMINI_MODEL", "gemini-2.5-flash"),
        risk=risk,
        history_max_days=int(os.environ.get("HISTORY_MAX_DAYS", "100")),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        api_port=int(os.environ.get("API_PORT", "8080")),
    )
