"""Stop-loss calculation — pure math, no I/O.

Hybrid approach:
    The technical stop comes from chart structure (order block, session
    range, zone edge).  The policy never allows a stop wider than
    ``max_stop_points``, so the effective stop distance is the smaller of
    the two.
"""

from dataclasses import dataclass

from sessionmap.config import RiskPolicy


@dataclass(frozen=True)
class StopLevels:
    """Computed stop-loss price and distance for a trade."""

    stop_loss: float
    stop_loss_points: float


def normalize_direction(direction: str) -> str:
    """Upper-case *direction* and check it is ``"LONG"`` or ``"SHORT"``.

    Raises:
        ValueError: For any other value.
    """
    normalized = direction.strip().upper() if isinstance(direction, str) else ""
    if normalized not in ("LONG", "SHORT"):
        raise ValueError(f"direction must be 'LONG' or 'SHORT', got {direction!r}")
    return normalized


def hybrid_stop_loss(
    entry_price: float,
    direction: str,
    technical_stop_price: float,
    policy: RiskPolicy,
) -> StopLevels:
    """Place the stop at the technical level, capped at the policy maximum.

    Formula::

        technical_points = |entry_price − technical_stop_price|
        stop_points      = min(technical_points, max_stop_points)
        stop_loss        = entry − stop_points   (LONG)
                           entry + stop_points   (SHORT)

    Args:
        entry_price: Planned entry.
        direction: ``"LONG"`` or ``"SHORT"`` (case-insensitive).
        technical_stop_price: Structure-derived stop price.
        policy: Supplies ``max_stop_points``.

    Returns:
        ``StopLevels`` with the stop price and its distance in points.

    Raises:
        ValueError: If *direction* is not long or short.
    """
    side = normalize_direction(direction)

    technical_points = abs(entry_price - technical_stop_price)
    stop_points = min(technical_points, policy.max_stop_points)

    if side == "LONG":
        stop_loss = entry_price - stop_points
    else:
        stop_loss = entry_price + stop_points
    return StopLevels(stop_loss=stop_loss, stop_loss_points=stop_points)
