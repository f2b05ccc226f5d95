"""Tests for the allocation engine."""

from decimal import Decimal

import pytest

from finpath_core.allocation import (
    AllocationEngine,
    expected_return,
    redistribute_residual,
    risk_level,
)
from finpath_core.models import Allocation, RiskLevel


@pytest.fixture
def engine() -> AllocationEngine:
    return AllocationEngine()


class TestTargetStocks:
    """Stock share from age, risk and goal."""

    def test_moderate_32_retirement(self, engine: AllocationEngine, make_profile):
        """120 - 32 = 88 at a 1.0 multiplier."""
        assert engine.target_stocks(make_profile()) == 88

    def test_young_aggressive_is_capped(self, engine: AllocationEngine, make_profile):
        """98 is capped to 90 by the age rule, then 90 x 1.3 is clamped to 90."""
        profile = make_profile(age=22, riskTolerance="Aggressive")
        assert engine.target_stocks(profile) == 90

    def test_near_retirement_conservative(self, engine: AllocationEngine, make_profile):
        """65 x 0.7 = 45.5 rounds half up to 46."""
        profile = make_profile(age=55, riskTolerance="Conservative", timeHorizon="10 years")
        assert engine.target_stocks(profile) == 46

    def test_age_rule_floor(self, engine: AllocationEngine, make_profile):
        """Past 60 the age rule stops falling."""
        assert engine.target_stocks(make_profile(age=85)) == 60

    def test_conservative_floor(self, engine: AllocationEngine, make_profile):
        """60 x 0.7 = 42 stays above the 30 floor."""
        profile = make_profile(age=90, riskTolerance="Conservative")
        assert engine.target_stocks(profile) == 42

    def test_house_override_short_horizon(self, engine: AllocationEngine, make_profile):
        profile = make_profile(investmentGoal="House", timeHorizon="5 years")
        assert engine.target_stocks(profile) == 50

    def test_house_override_not_applied_long_horizon(self, engine: AllocationEngine, make_profile):
        profile = make_profile(investmentGoal="House", timeHorizon="20 years")
        assert engine.target_stocks(profile) == 88

    def test_education_override(self, engine: AllocationEngine, make_profile):
        profile = make_profile(investmentGoal="Education", timeHorizon="10 years")
        assert engine.target_stocks(profile) == 60

    def test_emergency_fund_override_any_horizon(self, engine: AllocationEngine, make_profile):
        profile = make_profile(investmentGoal="Emergency Fund", timeHorizon="40 years")
        assert engine.target_stocks(profile) == 20

    def test_override_only_lowers(self, engine: AllocationEngine, make_profile):
        """A cap above the risk-adjusted share leaves it unchanged."""
        profile = make_profile(
            age=70,
            riskTolerance="Conservative",
            investmentGoal="Education",
            timeHorizon="5 years",
        )
        assert engine.target_stocks(profile) == 42

    def test_stocks_decrease_with_age(self, engine: AllocationEngine, make_profile):
        shares = [engine.target_stocks(make_profile(age=age)) for age in range(18, 101)]
        assert all(a >= b for a, b in zip(shares, shares[1:]))

    @pytest.mark.parametrize("age", [25, 40, 55, 70])
    def test_stocks_increase_with_risk(self, engine: AllocationEngine, make_profile, age):
        shares = [
            engine.target_stocks(make_profile(age=age, riskTolerance=risk))
            for risk in ("Conservative", "Moderate", "Aggressive")
        ]
        assert shares == sorted(shares)


class TestFillComplement:
    """Bonds, real estate and cash split the remainder."""

    def test_balanced_split(self, engine: AllocationEngine):
        """Remainder 30: cash 3, real estate 4.5 -> 5, bonds the rest."""
        allocation = engine.fill_complement(70)
        assert allocation.as_dict() == {"stocks": 70, "bonds": 22, "real_estate": 5, "cash": 3}

    def test_conservative_split(self, engine: AllocationEngine):
        allocation = engine.fill_complement(46)
        assert allocation.as_dict() == {"stocks": 46, "bonds": 41, "real_estate": 8, "cash": 5}

    def test_bond_overflow_moves_to_cash_then_real_estate(self, engine: AllocationEngine):
        """Remainder 80 would leave bonds at 60; the excess fills cash then real estate."""
        allocation = engine.fill_complement(20)
        assert allocation.as_dict() == {"stocks": 20, "bonds": 50, "real_estate": 15, "cash": 15}

    def test_high_stocks_squeeze_bonds(self, engine: AllocationEngine):
        """With 88 in stocks the floors leave bonds at 4."""
        allocation = engine.fill_complement(88)
        assert allocation.as_dict() == {"stocks": 88, "bonds": 4, "real_estate": 5, "cash": 3}

    @pytest.mark.parametrize("stocks", range(20, 91))
    def test_always_sums_to_100(self, engine: AllocationEngine, stocks):
        allocation = engine.fill_complement(stocks)
        assert allocation.total == 100
        assert allocation.stocks == stocks
        assert allocation.real_estate >= 5
        assert allocation.cash >= 3

    @pytest.mark.parametrize("stocks", range(30, 88))
    def test_within_bounds_when_remainder_allows(self, engine: AllocationEngine, stocks):
        allocation = engine.fill_complement(stocks)
        assert 5 <= allocation.bonds <= 50
        assert 5 <= allocation.real_estate <= 20
        assert 3 <= allocation.cash <= 15


class TestRedistributeResidual:
    def test_bond_deficit_drawn_from_cash(self):
        allocation = redistribute_residual(80, 2, 8, 10)
        assert allocation.as_dict() == {"stocks": 80, "bonds": 5, "real_estate": 8, "cash": 7}

    def test_bond_deficit_drawn_from_real_estate_after_cash(self):
        allocation = redistribute_residual(82, 1, 12, 5)
        assert allocation.as_dict() == {"stocks": 82, "bonds": 5, "real_estate": 10, "cash": 3}

    def test_rounding_residual_lands_in_bonds(self):
        allocation = redistribute_residual(60, 30, 6, 3)
        assert allocation.bonds == 31
        assert allocation.total == 100


class TestExpectedReturnAndRisk:
    def test_expected_return_is_weighted(self):
        """88 x 10% + 4 x 4% + 5 x 8% + 3 x 2% = 9.42, one decimal."""
        allocation = Allocation(stocks=88, bonds=4, real_estate=5, cash=3)
        assert expected_return(allocation) == Decimal("9.4")

    def test_expected_return_exact_mix(self):
        """50 x 10% + 35 x 4% + 10 x 8% + 5 x 2% = 7.3."""
        allocation = Allocation(stocks=50, bonds=35, real_estate=10, cash=5)
        assert expected_return(allocation) == Decimal("7.3")

    @pytest.mark.parametrize(
        "stocks,level",
        [(30, RiskLevel.LOW), (39, RiskLevel.LOW), (40, RiskLevel.MEDIUM),
         (69, RiskLevel.MEDIUM), (70, RiskLevel.HIGH), (90, RiskLevel.HIGH)],
    )
    def test_risk_level_thresholds(self, stocks, level):
        assert risk_level(stocks) == level

    def test_allocate_returns_analysis(self, engine: AllocationEngine, make_profile):
        analysis = engine.allocate(make_profile(age=22, riskTolerance="Aggressive"))

        assert analysis.allocation.stocks == 90
        assert analysis.risk_level == RiskLevel.HIGH
        assert analysis.expected_return == expected_return(analysis.allocation)

    def test_allocation_rejects_bad_total(self):
        with pytest.raises(ValueError):
            Allocation(stocks=50, bonds=30, real_estate=10, cash=5)
