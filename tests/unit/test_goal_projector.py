"""
Unit tests for GoalProjector.

Tests cover:
- Months to target (linear and compounding) and the horizon limit
- Inverse consistency of the binary search
- Required monthly contribution and the on-track tolerance
- Overdue deadlines
- Average monthly contribution from transactions
- Goal progress from linked assets and manual amounts
"""

from decimal import Decimal

import pytest

from portfolio_calc.domain.models import (
    AllocationMode,
    Goal,
    GoalLink,
    GoalLinkType,
    GoalProgressMode,
)
from portfolio_calc.services import (
    GoalProjector,
    average_monthly_contribution,
    future_value,
    monthly_rate,
)

from tests.conftest import (
    assert_decimal_equal,
    create_buy,
    create_deposit,
    create_sell,
    d,
)


# =============================================================================
# TIME TO TARGET TESTS
# =============================================================================


class TestMonthsToTarget:
    """Tests for the estimated months to reach a target."""

    def test_linear_case_without_return(self, projector: GoalProjector):
        """
        GIVEN nothing saved, a 120000 target and 10000 a month at 0%
        WHEN I project
        THEN the target is reached in 12 months
        """
        result = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("10000"), Decimal("0"),
            as_of=d("2024-01-01"),
        )

        projection = result.value
        assert projection.estimated_months_to_target == 12
        assert projection.estimated_completion_date == d("2025-01-01")
        assert not projection.is_achieved

    def test_linear_case_rounds_up(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("100000"), Decimal("30000"), Decimal("0"),
            as_of=d("2024-01-01"),
        )

        assert result.value.estimated_months_to_target == 4

    def test_target_already_met(self, projector: GoalProjector):
        result = projector.project(
            Decimal("150000"), Decimal("100000"), Decimal("0"), Decimal("8"),
            as_of=d("2024-01-01"),
        )

        projection = result.value
        assert projection.estimated_months_to_target == 0
        assert projection.is_achieved
        assert projection.is_on_track is True

    def test_no_contribution_is_insufficient_data(self, projector: GoalProjector):
        """
        GIVEN no monthly contribution and an unmet target
        WHEN I project
        THEN months to target is None, not zero
        """
        result = projector.project(
            Decimal("1000"), Decimal("100000"), Decimal("0"), Decimal("12"),
            as_of=d("2024-01-01"),
        )

        projection = result.value
        assert projection.estimated_months_to_target is None
        assert not projection.exceeds_horizon
        assert projection.estimated_completion_date is None
        assert projection.is_on_track is None

    def test_target_beyond_horizon(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("1000000000000"), Decimal("1"), Decimal("1"),
            as_of=d("2024-01-01"),
        )

        assert result.value.estimated_months_to_target is None
        assert result.value.exceeds_horizon

    @pytest.mark.parametrize(
        "present_value,target,contribution,annual_percent",
        [
            ("10000", "1000000", "15000", "12"),
            ("0", "500000", "5000", "8"),
            ("250000", "300000", "100", "7.1"),
            ("0", "120000", "9999.99", "1.5"),
            ("0", "120000", "10000", "-12"),
        ],
    )
    def test_binary_search_is_tight(
        self,
        projector: GoalProjector,
        present_value,
        target,
        contribution,
        annual_percent,
    ):
        """
        GIVEN a compounding projection
        WHEN the estimated months are plugged back into the annuity formula
        THEN FV(n) >= target and FV(n - 1) < target
        """
        pv, goal, pmt = Decimal(present_value), Decimal(target), Decimal(contribution)
        rate = monthly_rate(Decimal(annual_percent))

        months = projector.project(
            pv, goal, pmt, Decimal(annual_percent), as_of=d("2024-01-01")
        ).value.estimated_months_to_target

        assert months is not None
        assert future_value(pv, pmt, rate, months) >= goal
        assert future_value(pv, pmt, rate, months - 1) < goal

    def test_negative_return_delays_target(self, projector: GoalProjector):
        """
        GIVEN nothing saved, a 120000 target and 10000 a month at -12% p.a.
        WHEN I project
        THEN losses push the target past the 12 months a zero return would need
        """
        rate = monthly_rate(Decimal("-12"))

        months = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("10000"), Decimal("-12"),
            as_of=d("2024-01-01"),
        ).value.estimated_months_to_target

        assert months == 13
        assert future_value(Decimal("0"), Decimal("10000"), rate, 12) < Decimal("120000")

    def test_negative_return_target_never_reached(self, projector: GoalProjector):
        """
        GIVEN 1000 a month at -12% p.a., whose balance levels off near 100000
        WHEN I project toward 120000
        THEN the target is reported as beyond the horizon
        """
        result = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("1000"), Decimal("-12"),
            as_of=d("2024-01-01"),
        )

        assert result.value.estimated_months_to_target is None
        assert result.value.exceeds_horizon

    def test_total_loss_rate_is_invalid(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("1000"), Decimal("100"), Decimal("-1200"),
            as_of=d("2024-01-01"),
        )

        assert result.error_code == "INVALID_INPUT"

    def test_invalid_target(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("0"), Decimal("100"), Decimal("8"), as_of=d("2024-01-01")
        )

        assert result.error_code == "INVALID_INPUT"


# =============================================================================
# DEADLINE TESTS
# =============================================================================


class TestRequiredContribution:
    """Tests for the contribution needed to meet a deadline."""

    def test_linear_required_contribution(self, projector: GoalProjector):
        """
        GIVEN a 120000 target due in 12 months at 0% and 9000 a month saved
        WHEN I project
        THEN 10000 a month is required and 9000 is on track within 90%
        """
        result = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("9000"), Decimal("0"),
            deadline=d("2025-01-01"), as_of=d("2024-01-01"),
        )

        projection = result.value
        assert projection.months_to_deadline == 12
        assert projection.required_monthly_contribution == Decimal("10000.00")
        assert projection.is_on_track is True
        assert not projection.is_overdue

    def test_below_tolerance_is_off_track(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("8999"), Decimal("0"),
            deadline=d("2025-01-01"), as_of=d("2024-01-01"),
        )

        assert result.value.is_on_track is False

    def test_caller_tolerance(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("9000"), Decimal("0"),
            deadline=d("2025-01-01"), as_of=d("2024-01-01"),
            on_track_tolerance=Decimal("1"),
        )

        assert result.value.is_on_track is False

    def test_compounding_required_contribution_reaches_target(self, projector: GoalProjector):
        pv, target = Decimal("50000"), Decimal("1000000")

        projection = projector.project(
            pv, target, Decimal("10000"), Decimal("12"),
            deadline=d("2029-01-01"), as_of=d("2024-01-01"),
        ).value

        required = projection.required_monthly_contribution
        assert projection.months_to_deadline == 60
        assert_decimal_equal(
            future_value(pv, required, monthly_rate(Decimal("12")), 60),
            target,
            Decimal("1"),
        )
        assert projection.is_on_track is False

    def test_negative_return_raises_required_contribution(self, projector: GoalProjector):
        """
        GIVEN a 120000 target due in 12 months at -12% p.a.
        WHEN I project with 10000 a month and no tolerance
        THEN more than 10000 a month is required and the goal is off track
        """
        rate = monthly_rate(Decimal("-12"))

        projection = projector.project(
            Decimal("0"), Decimal("120000"), Decimal("10000"), Decimal("-12"),
            deadline=d("2025-01-01"), as_of=d("2024-01-01"),
            on_track_tolerance=Decimal("1"),
        ).value

        required = projection.required_monthly_contribution
        assert required > Decimal("10000")
        assert_decimal_equal(
            future_value(Decimal("0"), required, rate, 12), Decimal("120000"), Decimal("1")
        )
        assert projection.is_on_track is False

    def test_required_contribution_is_clamped_to_zero(self, projector: GoalProjector):
        """
        GIVEN a balance that grows past the target on its own
        WHEN I project against a deadline
        THEN the required contribution is zero, never negative
        """
        result = projector.project(
            Decimal("90000"), Decimal("100000"), Decimal("0"), Decimal("12"),
            deadline=d("2026-01-01"), as_of=d("2024-01-01"),
        )

        assert result.value.required_monthly_contribution == Decimal("0.00")
        assert result.value.is_on_track is True

    def test_partial_month_counts_as_a_period(self, projector: GoalProjector):
        result = projector.project(
            Decimal("0"), Decimal("1000"), Decimal("100"), Decimal("0"),
            deadline=d("2024-03-01"), as_of=d("2024-01-15"),
        )

        assert result.value.months_to_deadline == 2
        assert result.value.required_monthly_contribution == Decimal("500.00")

    def test_overdue_deadline(self, projector: GoalProjector):
        """
        GIVEN a deadline already past
        WHEN I project
        THEN the goal is overdue and no required contribution is computed
        """
        result = projector.project(
            Decimal("5000"), Decimal("10000"), Decimal("500"), Decimal("8"),
            deadline=d("2023-12-01"), as_of=d("2024-01-01"),
        )

        projection = result.value
        assert projection.is_overdue
        assert projection.required_monthly_contribution is None
        assert projection.is_on_track is False
        assert projection.estimated_months_to_target is not None


# =============================================================================
# CONTRIBUTION RATE TESTS
# =============================================================================


class TestAverageMonthlyContribution:
    """Tests for the net monthly contribution rate."""

    def test_net_contributions_per_month(self):
        transactions = [
            create_deposit("2024-01-01", 1000),
            create_buy("2024-02-01", 10, 100),
            create_sell("2024-03-01", 5, 100),
        ]

        average = average_monthly_contribution(transactions, as_of=d("2024-05-01"))

        assert average == Decimal("375.00")

    def test_minimum_span_is_one_month(self):
        average = average_monthly_contribution(
            [create_deposit("2024-05-20", 600)], as_of=d("2024-05-25")
        )

        assert average == Decimal("600.00")

    def test_no_transactions(self):
        assert average_monthly_contribution([], as_of=d("2024-05-25")) == Decimal("0")


# =============================================================================
# GOAL PROGRESS TESTS
# =============================================================================


@pytest.fixture
def goal_links() -> list[GoalLink]:
    return [
        GoalLink(asset_id="mf-1", asset_value=Decimal("10000"), allocation_percent=Decimal("50")),
        GoalLink(
            asset_id="fd-1",
            asset_value=Decimal("2000"),
            allocation_mode=AllocationMode.FIXED_AMOUNT,
            fixed_allocation_amount=Decimal("3000"),
        ),
        GoalLink(asset_id="stock-1", asset_value=Decimal("5000"), link_type=GoalLinkType.TRACKING),
    ]


class TestGoalProgress:
    """Tests for goal progress from linked assets."""

    def test_auto_mode_uses_funding_links(self, projector: GoalProjector, goal_links):
        """
        GIVEN 50% of a 10000 asset, a fixed 3000 of a 2000 asset and a tracking link
        WHEN I compute progress toward 10000
        THEN 7000 counts and progress is 70%
        """
        goal = Goal(goal_id="house", target_amount=Decimal("10000"))

        view = projector.goal_progress(goal, goal_links).value

        assert view.linked_assets_value == Decimal("7000.00")
        assert view.current_value == Decimal("7000.00")
        assert view.progress_percent == Decimal("70.00")
        assert [link.allocated_value for link in view.links] == [
            Decimal("5000.00"),
            Decimal("2000.00"),
            Decimal("0.00"),
        ]
        assert not view.links[2].counts_toward_progress

    def test_manual_mode_ignores_links(self, projector: GoalProjector):
        goal = Goal(
            goal_id="car",
            target_amount=Decimal("10000"),
            progress_mode=GoalProgressMode.MANUAL,
            manual_current_amount=Decimal("4000"),
        )
        links = [GoalLink(asset_id="stock-1", asset_value=None)]

        view = projector.goal_progress(goal, links).value

        assert view.current_value == Decimal("4000.00")
        assert view.progress_percent == Decimal("40.00")

    def test_hybrid_mode_is_capped_at_hundred(self, projector: GoalProjector, goal_links):
        goal = Goal(
            goal_id="trip",
            target_amount=Decimal("10000"),
            progress_mode=GoalProgressMode.HYBRID,
            manual_current_amount=Decimal("4000"),
        )

        view = projector.goal_progress(goal, goal_links).value

        assert view.current_value == Decimal("11000.00")
        assert view.progress_percent == Decimal("100")

    def test_unknown_funding_asset_value(self, projector: GoalProjector):
        goal = Goal(goal_id="house", target_amount=Decimal("10000"))
        links = [GoalLink(asset_id="stock-1", asset_value=None)]

        result = projector.goal_progress(goal, links)

        assert result.error_code == "MISSING_PRICE_DATA"
