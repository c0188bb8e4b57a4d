"""Errors raised at the forecast-model boundary."""


class ForecastError(Exception):
    """The vision/forecast model failed or returned unusable output.

    The message is human-readable and safe to show to the user.
    """


class InsufficientHistoryError(ValueError):
    """Too few stored days to ask for a forecast."""

    def __init__(self, have: int, need: int) -> None:
        super().__init__(
            f"Need at least {need} days of historical data. "
            f"Currently have: {have} days"
        )
        self.have = have
        self.need = need


MIN_FORECAST_DAYS = 5


def require_history(days_available: int, minimum: int = MIN_FORECAST_DAYS) -> None:
    """Raise ``InsufficientHistoryError`` when *days_available* < *minimum*."""
    if days_available < minimum:
        raise InsufficientHistoryError(days_available, minimum)
