"""View models for goal projection and progress."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class ProjectionResult:
    """
    Goal projection recomputed on every call.

    estimated_months_to_target is None when there is not enough data
    (no positive contribution rate) or the target lies beyond the horizon;
    required_monthly_contribution is None without a future deadline.
    """

    estimated_months_to_target: Optional[int]
    required_monthly_contribution: Optional[Decimal]
    is_on_track: Optional[bool]
    is_overdue: bool = False
    is_achieved: bool = False
    exceeds_horizon: bool = False
    estimated_completion_date: Optional[date] = None
    months_to_deadline: Optional[int] = None


@dataclass(frozen=True)
class GoalLinkProgress:
    """Contribution of one linked asset to a goal."""

    asset_id: str
    asset_value: Optional[Decimal]
    allocated_value: Decimal
    counts_toward_progress: bool


@dataclass
class GoalProgressView:
    """Current value and completion percentage of a goal."""

    goal_id: str
    current_value: Decimal
    linked_assets_value: Decimal
    manual_value: Decimal
    progress_percent: Decimal
    links: list[GoalLinkProgress] = field(default_factory=list)
