"""Tests for the health scorer."""

from decimal import Decimal, ROUND_HALF_UP

import pytest

from finpath_core.allocation import AllocationEngine
from finpath_core.emergency import EmergencyFundPlanner
from finpath_core.financials import FinancialsSummarizer
from finpath_core.health import HealthScorer, allocation_violations, savings_rate
from finpath_core.models import AccountsSnapshot, Allocation, HealthScore, Profile
from finpath_core.policy import grade_for_score
from finpath_core.retirement import RetirementPlanner


def score_profile(profile: Profile, accounts=None) -> HealthScore:
    allocation = AllocationEngine().allocate(profile).allocation
    return HealthScorer().score(
        profile,
        allocation,
        RetirementPlanner().plan(profile),
        EmergencyFundPlanner().plan(profile, accounts),
        FinancialsSummarizer().summarize(profile, accounts),
    )


class TestHealthScorer:
    """Component scores and the composite total."""

    def test_s1_components(self, s1_profile: Profile):
        score = score_profile(s1_profile)

        assert score.emergency_fund == Decimal("7.14")
        assert score.savings_rate == Decimal("16.28")
        assert score.debt == Decimal("20")
        # bonds squeezed to 4% by the 88% stock share
        assert score.diversification == Decimal("12")
        assert Decimal("0") < score.retirement < Decimal("5")

    def test_total_is_rounded_component_sum(self, s1_profile: Profile):
        score = score_profile(s1_profile)

        assert score.total_score == int(score.component_sum.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        assert score.grade == grade_for_score(score.total_score)

    def test_liabilities_reduce_debt_score(self, s1_profile: Profile, demo_accounts):
        score = score_profile(s1_profile, AccountsSnapshot.from_balances(demo_accounts))
        assert score.debt == Decimal("19.71")

    def test_zero_income_with_debt(self, make_profile, demo_accounts):
        profile = make_profile(income=0)
        score = score_profile(profile, AccountsSnapshot.from_balances(demo_accounts))

        assert score.debt == 0
        assert score.savings_rate == 0

    def test_zero_income_without_debt(self, make_profile):
        score = score_profile(make_profile(income=0))
        assert score.debt == Decimal("20")

    def test_factors_cover_every_component(self, s1_profile: Profile):
        score = score_profile(s1_profile)

        assert [f.category for f in score.factors] == [
            "Emergency Fund",
            "Retirement Readiness",
            "Debt Management",
            "Savings Rate",
            "Portfolio Strategy",
        ]
        assert sum(f.max_score for f in score.factors) == 100
        assert score.factors[4].description == "Outside guidelines for: bonds"

    @pytest.mark.parametrize("age", [18, 30, 45, 60, 75, 100])
    @pytest.mark.parametrize("risk", ["Conservative", "Moderate", "Aggressive"])
    def test_score_in_range(self, make_profile, age, risk):
        score = score_profile(make_profile(age=age, riskTolerance=risk))

        assert 0 <= score.total_score <= 100
        assert score.emergency_fund <= 20
        assert score.retirement <= 25
        assert score.debt <= 20
        assert score.savings_rate <= 20
        assert score.diversification <= 15

    @pytest.mark.parametrize(
        "score,grade",
        [(100, "A+"), (90, "A+"), (89, "A"), (80, "A"), (70, "B"),
         (60, "C"), (50, "D"), (49, "F"), (0, "F")],
    )
    def test_grades(self, score, grade):
        assert grade_for_score(score) == grade


class TestHealthHelpers:
    def test_savings_rate_monthly_basis(self, make_profile):
        """(60000 / 12 - 2500) / (60000 / 12) = 0.5."""
        profile = make_profile(income=60000, monthlyExpenses=2500)
        assert savings_rate(profile) == Decimal("0.5")

    def test_savings_rate_floored_at_zero(self, make_profile):
        assert savings_rate(make_profile(income=24000, monthlyExpenses=3000)) == 0

    def test_savings_rate_zero_income(self, make_profile):
        assert savings_rate(make_profile(income=0)) == 0

    def test_no_violations(self):
        assert allocation_violations(Allocation(stocks=70, bonds=22, real_estate=5, cash=3)) == []

    def test_stock_floor_violation(self):
        allocation = Allocation(stocks=20, bonds=50, real_estate=15, cash=15)
        assert allocation_violations(allocation) == ["stocks"]

    def test_bond_floor_violation(self):
        allocation = Allocation(stocks=88, bonds=4, real_estate=5, cash=3)
        assert allocation_violations(allocation) == ["bonds"]
