"""Target asset allocation.

The stock share is derived in four ordered stages (age rule, risk multiplier,
goal override, rounding); bonds, real estate and cash then split the
remainder through a single redistribution step that keeps every class inside
its bounds wherever the remainder allows it.
"""

from decimal import Decimal, ROUND_HALF_UP

import structlog

from .models.plan import Allocation, PortfolioAnalysis, RiskLevel
from .models.profile import Profile
from .policy import (
    AGE_RULE_BASE,
    AGE_RULE_CAP,
    AGE_RULE_FLOOR,
    ASSET_CLASS_BOUNDS,
    CASH_SHARE_OF_REMAINDER,
    EXPECTED_RETURNS,
    GOAL_STOCK_OVERRIDES,
    REAL_ESTATE_SHARE_OF_REMAINDER,
    RISK_LEVEL_HIGH_FROM,
    RISK_LEVEL_MEDIUM_FROM,
    RISK_MULTIPLIERS,
)

logger = structlog.get_logger()


def _round_half_up(value: Decimal) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def redistribute_residual(stocks: int, bonds: int, real_estate: int, cash: int) -> Allocation:
    """Bring bonds inside its bounds by moving points to or from cash and real estate.

    Overflow above the bond cap goes to cash, then real estate, each up to
    its cap. A shortfall below the bond floor is taken from cash, then real
    estate, each down to its floor. Whatever cannot be moved stays in bonds,
    which also absorbs any rounding residual so the total is exactly 100.
    """
    bond_bounds = ASSET_CLASS_BOUNDS["bonds"]
    cash_bounds = ASSET_CLASS_BOUNDS["cash"]
    re_bounds = ASSET_CLASS_BOUNDS["real_estate"]

    if bonds > bond_bounds.high:
        overflow = bonds - bond_bounds.high
        to_cash = min(overflow, cash_bounds.high - cash)
        cash += max(0, to_cash)
        overflow -= max(0, to_cash)
        to_re = min(overflow, re_bounds.high - real_estate)
        real_estate += max(0, to_re)
        overflow -= max(0, to_re)
        bonds = bond_bounds.high + overflow
    elif bonds < bond_bounds.low:
        deficit = bond_bounds.low - bonds
        from_cash = min(deficit, max(0, cash - cash_bounds.low))
        cash -= from_cash
        deficit -= from_cash
        from_re = min(deficit, max(0, real_estate - re_bounds.low))
        real_estate -= from_re
        deficit -= from_re
        bonds = bond_bounds.low - deficit

    residual = 100 - (stocks + bonds + real_estate + cash)
    bonds += residual

    return Allocation(stocks=stocks, bonds=bonds, real_estate=real_estate, cash=cash)


class AllocationEngine:
    """Compute a target portfolio for a profile."""

    def target_stocks(self, profile: Profile) -> int:
        """Stock percentage after age rule, risk multiplier and goal override."""
        base = min(AGE_RULE_CAP, max(AGE_RULE_FLOOR, AGE_RULE_BASE - profile.age))

        adjusted = Decimal(base) * RISK_MULTIPLIERS[profile.risk_tolerance]
        adjusted = ASSET_CLASS_BOUNDS["stocks"].clamp(adjusted)

        override = GOAL_STOCK_OVERRIDES[profile.investment_goal]
        if override is not None and (
            override.max_horizon_years is None
            or profile.horizon_years <= override.max_horizon_years
        ):
            adjusted = min(adjusted, Decimal(override.stock_cap))

        stocks = _round_half_up(adjusted)
        logger.debug(
            "allocation_stocks",
            age_base=base,
            risk_tolerance=profile.risk_tolerance.value,
            investment_goal=profile.investment_goal.value,
            stocks=stocks,
        )
        return stocks

    def fill_complement(self, stocks: int) -> Allocation:
        """Split 100 - stocks across bonds, real estate and cash."""
        remaining = 100 - stocks
        cash = _round_half_up(
            ASSET_CLASS_BOUNDS["cash"].clamp(remaining * CASH_SHARE_OF_REMAINDER)
        )
        real_estate = _round_half_up(
            ASSET_CLASS_BOUNDS["real_estate"].clamp(
                remaining * REAL_ESTATE_SHARE_OF_REMAINDER
            )
        )
        bonds = remaining - cash - real_estate
        return redistribute_residual(stocks, bonds, real_estate, cash)

    def allocate(self, profile: Profile) -> PortfolioAnalysis:
        allocation = self.fill_complement(self.target_stocks(profile))
        analysis = PortfolioAnalysis(
            allocation=allocation,
            expected_return=expected_return(allocation),
            risk_level=risk_level(allocation.stocks),
        )
        logger.info(
            "allocation_complete",
            allocation=allocation.as_dict(),
            expected_return=str(analysis.expected_return),
            risk_level=analysis.risk_level.value,
        )
        return analysis


def expected_return(allocation: Allocation) -> Decimal:
    """Weighted expected annual return in percent, one decimal place."""
    weighted = sum(
        (Decimal(share) * EXPECTED_RETURNS[asset_class]
         for asset_class, share in allocation.as_dict().items()),
        Decimal("0"),
    )
    return weighted.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def risk_level(stocks: int) -> RiskLevel:
    if stocks < RISK_LEVEL_MEDIUM_FROM:
        return RiskLevel.LOW
    if stocks < RISK_LEVEL_HIGH_FROM:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH
