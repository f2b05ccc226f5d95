"""Tests for the retirement planner."""

from decimal import Decimal

import pytest

from finpath_core.retirement import RetirementPlanner
from finpath_core.tvm import annuity_factor, compound, monthly_payment_for


@pytest.fixture
def planner() -> RetirementPlanner:
    return RetirementPlanner()


class TestRetirementPlanner:
    """Nest egg sizing and monthly savings."""

    def test_years_to_retirement(self, planner: RetirementPlanner, s1_profile):
        assert planner.plan(s1_profile).years_to_retirement == 33

    def test_target_nest_egg(self, planner: RetirementPlanner, s1_profile):
        """80% of income inflated 33 years, x25, grossed up for 12% tax."""
        result = planner.plan(s1_profile)

        expected = (
            Decimal("85000") * Decimal("0.80") * Decimal("1.03") ** 33
            * Decimal("25") / Decimal("0.88")
        )
        assert abs(result.target_nest_egg - expected) < Decimal("0.01")
        assert Decimal("5000000") < result.target_nest_egg < Decimal("5300000")

    def test_current_progress_grows_savings(self, planner: RetirementPlanner, s1_profile):
        result = planner.plan(s1_profile)
        assert result.current_progress == compound(Decimal("45000"), Decimal("0.07"), 33)

    def test_monthly_savings_fund_shortfall(self, planner: RetirementPlanner, s1_profile):
        """Monthly deposits over the remaining years accumulate to the shortfall."""
        result = planner.plan(s1_profile)

        assert result.shortfall == result.target_nest_egg - result.current_progress
        funded = result.monthly_savings_needed * annuity_factor(Decimal("0.07"), 33)
        assert abs(funded - result.shortfall) < Decimal("0.01")

    def test_employer_match_contribution(self, planner: RetirementPlanner, s1_profile):
        """5% of 85,000 a year is 354.17 a month."""
        result = planner.plan(s1_profile)
        assert result.employer_match_contribution.quantize(Decimal("0.01")) == Decimal("354.17")

    def test_no_401k_means_no_match(self, planner: RetirementPlanner, make_profile):
        result = planner.plan(make_profile(has401k=False))
        assert result.employer_match_contribution == 0

    def test_past_retirement_age(self, planner: RetirementPlanner, make_profile):
        """At or past 65 the shortfall is reported but needs no monthly amount."""
        result = planner.plan(make_profile(age=70))

        assert result.years_to_retirement == 0
        assert result.monthly_savings_needed == 0
        assert result.target_nest_egg.quantize(Decimal("0.01")) == Decimal("1931818.18")
        assert result.shortfall == result.target_nest_egg - Decimal("45000")

    def test_funded_saver_has_no_shortfall(self, planner: RetirementPlanner, make_profile):
        result = planner.plan(make_profile(income=0))

        assert result.target_nest_egg == 0
        assert result.shortfall == 0
        assert result.monthly_savings_needed == 0

    def test_more_savings_less_needed(self, planner: RetirementPlanner, make_profile):
        low = planner.plan(make_profile(currentSavings=10000))
        high = planner.plan(make_profile(currentSavings=200000))
        assert high.monthly_savings_needed < low.monthly_savings_needed


class TestTimeValueOfMoney:
    def test_annuity_factor_zero_rate(self):
        assert annuity_factor(Decimal("0"), 10) == 120

    def test_monthly_payment_zero_years(self):
        assert monthly_payment_for(Decimal("1000"), Decimal("0.07"), 0) == 0

    def test_monthly_payment_nothing_needed(self):
        assert monthly_payment_for(Decimal("0"), Decimal("0.07"), 10) == 0

    def test_monthly_payment_zero_rate(self):
        assert monthly_payment_for(Decimal("12000"), Decimal("0"), 10) == 100
