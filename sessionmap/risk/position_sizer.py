"""Position sizing — pure math, no I/O.

Calculates the number of contracts to trade based on the account-risk
policy and the stop-loss distance in points.
"""

import math
from dataclasses import dataclass

from sessionmap.config import RiskPolicy


@dataclass(frozen=True)
class PositionSize:
    """Contract count and the dollar risk it actually carries."""

    position_size: int
    risk_amount: float


def calculate_position_size(
    stop_loss_points: float,
    policy: RiskPolicy,
) -> PositionSize:
    """Calculate position size in whole contracts.

    Formula::

        max_risk      = account_size × (risk_percentage / 100)
        risk_per_unit = stop_loss_points × point_value
        contracts     = max(1, floor(max_risk / risk_per_unit))
        risk_amount   = contracts × risk_per_unit

    At least one contract is always traded, so a very wide stop can carry
    more than ``max_risk``.

    Args:
        stop_loss_points: Stop distance in points (e.g. 75).
        policy: Account size, risk percentage and point value.

    Returns:
        ``PositionSize`` with the contract count and actual dollar risk.

    Raises:
        ValueError: If *stop_loss_points* or the policy values are non-positive.
    """
    if stop_loss_points <= 0:
        raise ValueError(
            f"stop_loss_points must be positive, got {stop_loss_points}"
        )
    if policy.point_value <= 0:
        raise ValueError(f"point_value must be positive, got {policy.point_value}")
    if policy.max_risk_dollars <= 0:
        raise ValueError(
            f"max risk must be positive, got {policy.max_risk_dollars}"
        )

    risk_per_unit = stop_loss_points * policy.point_value
    contracts = max(1, math.floor(policy.max_risk_dollars / risk_per_unit))
    return PositionSize(
        position_size=contracts,
        risk_amount=contracts * risk_per_unit,
    )
