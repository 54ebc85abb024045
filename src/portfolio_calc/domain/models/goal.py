"""Goal and goal-to-asset link models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_calc.domain.models.enums import AllocationMode, GoalLinkType, GoalProgressMode


@dataclass(frozen=True)
class GoalLink:
    """
    Link from a goal to one asset.

    asset_value is None when the asset could not be valued (e.g. no quote).
    """

    asset_id: str
    asset_value: Optional[Decimal]
    link_type: GoalLinkType = GoalLinkType.FUNDING
    allocation_mode: AllocationMode = AllocationMode.PERCENT
    allocation_percent: Decimal = Decimal("100")
    fixed_allocation_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Goal:
    """Financial goal with a target amount and optional deadline."""

    goal_id: str
    target_amount: Decimal
    progress_mode: GoalProgressMode = GoalProgressMode.AUTO
    manual_current_amount: Decimal = Decimal("0")
    target_date: Optional[date] = None
    name: str = ""
