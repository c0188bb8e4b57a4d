"""Rolling in-memory history of processed trading days."""

from typing import Iterable

from sessionmap.analysis.models import DailyData


class DailyHistory:
    """Keeps the most recent *max_days* daily records, oldest first.

    Args:
        max_days: Capacity of the buffer (default 100).
    """

    def __init__(self, max_days: int = 100) -> None:
        if max_days <= 0:
            raise ValueError(f"max_days must be positive, got {max_days}")
        self._max_days = max_days
        self._days: tuple[DailyData, ...] = ()

    # ── Mutation ─────────────────────────────────────────────────────────

    def extend(self, days: Iterable[DailyData]) -> None:
        """Append *days* in order, dropping the oldest beyond capacity."""
        combined = self._days + tuple(days)
        self._days = combined[-self._max_days:]

    def clear(self) -> None:
        self._days = ()

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def days(self) -> tuple[DailyData, ...]:
        """Snapshot of the stored days; safe to hand to pure functions."""
        return self._days

    @property
    def max_days(self) -> int:
        return self._max_days

    def recent(self, n: int) -> tuple[DailyData, ...]:
        """The last *n* days (fewer if the history is shorter)."""
        if n <= 0:
            return ()
        return self._days[-n:]

    def __len__(self) -> int:
        return len(self._days)
