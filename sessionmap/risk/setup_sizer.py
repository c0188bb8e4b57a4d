"""Setup sizing — applies the risk policy to forecast setups.

Weekly and next-day setups go through the same functions; there is no
difference in formula between the two.
"""

import logging
from typing import Any, Iterable, Optional

from sessionmap.analysis.ingest import as_list, as_number
from sessionmap.config import RiskPolicy
from sessionmap.risk.position_sizer import calculate_position_size
from sessionmap.risk.sl_tp import hybrid_stop_loss, normalize_direction
from sessionmap.strategy.models import PredictedTradeSetup, RawSetup

logger = logging.getLogger("sessionmap")


def parse_raw_setup(
    raw: Any,
    date: Optional[str] = None,
    day_of_week: Optional[str] = None,
) -> Optional[RawSetup]:
    """Build a ``RawSetup`` from a forecast-model dict.

    *date* and *day_of_week*, when given, override the record's own values
    (next-day setups inherit them from the enclosing prediction).

    Returns ``None`` when a price is missing or the direction is not
    ``LONG``/``SHORT``.
    """
    if not isinstance(raw, dict):
        return None

    entry = as_number(raw.get("entryPrice"), None)
    stop = as_number(raw.get("technicalStopLoss"), None)
    target = as_number(raw.get("takeProfit"), None)
    if entry is None or stop is None or target is None:
        return None
    try:
        direction = normalize_direction(raw.get("direction"))
    except ValueError:
        return None

    def _str(key: str, override: Optional[str] = None) -> str:
        if override is not None:
            return override
        value = raw.get(key)
        return value if isinstance(value, str) else ""

    return RawSetup(
        date=_str("date", date),
        day_of_week=_str("dayOfWeek", day_of_week),
        setup_name=_str("setupName"),
        strategies=tuple(s for s in as_list(raw.get("strategies")) if isinstance(s, str)),
        confluence_score=int(as_number(raw.get("confluenceScore"))),
        entry_price=entry,
        technical_stop_loss=stop,
        take_profit=target,
        direction=direction,
        probability=as_number(raw.get("probability")),
        reasoning=_str("reasoning"),
        technical_details=_str("technicalDetails"),
    )


def size_setup(setup: RawSetup, policy: RiskPolicy) -> PredictedTradeSetup:
    """Compute stop, size and reward fields for one setup.

    Raises:
        ValueError: If the direction is invalid or the technical stop sits
            on the entry price (zero stop distance).
    """
    stop = hybrid_stop_loss(
        setup.entry_price, setup.direction, setup.technical_stop_loss, policy,
    )
    size = calculate_position_size(stop.stop_loss_points, policy)

    take_profit_points = abs(setup.take_profit - setup.entry_price)
    risk_reward = take_profit_points / stop.stop_loss_points
    potential_profit = take_profit_points * policy.point_value * size.position_size

    return PredictedTradeSetup(
        date=setup.date,
        day_of_week=setup.day_of_week,
        setup_name=setup.setup_name,
        strategies=setup.strategies,
        confluence_score=setup.confluence_score,
        entry_price=setup.entry_price,
        direction=normalize_direction(setup.direction),
        probability=setup.probability,
        reasoning=setup.reasoning,
        technical_details=setup.technical_details,
        stop_loss=stop.stop_loss,
        stop_loss_points=stop.stop_loss_points,
        take_profit=setup.take_profit,
        take_profit_points=take_profit_points,
        risk_reward_ratio=risk_reward,
        position_size=size.position_size,
        risk_amount=size.risk_amount,
        potential_profit=potential_profit,
    )


def size_setups(
    raw_setups: Iterable[Any],
    policy: RiskPolicy,
    date: Optional[str] = None,
    day_of_week: Optional[str] = None,
) -> list[PredictedTradeSetup]:
    """Parse and size every usable setup, skipping the rest with a warning."""
    sized: list[PredictedTradeSetup] = []
    for raw in raw_setups:
        setup = parse_raw_setup(raw, date=date, day_of_week=day_of_week)
        if setup is None:
            logger.warning("Skipping malformed setup: %r", raw)
            continue
        try:
            sized.append(size_setup(setup, policy))
        except ValueError as exc:
            logger.warning("Skipping setup %r: %s", setup.setup_name, exc)
    return sized
