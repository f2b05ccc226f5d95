"""100-point financial health score.

Components are scored independently and kept to two decimals:

| Component       | Max | Basis                                        |
|-----------------|-----|----------------------------------------------|
| Emergency fund  | 20  | current / recommended emergency reserve      |
| Retirement      | 25  | projected savings / target nest egg          |
| Debt            | 20  | 1 - liabilities / annual income              |
| Savings rate    | 20  | monthly surplus rate, full marks at 50%      |
| Diversification | 15  | -3 per allocation bound violated             |
"""

from decimal import Decimal, ROUND_HALF_UP

import structlog

from .models.plan import (
    Allocation,
    CurrentFinancials,
    EmergencyFund,
    HealthFactor,
    HealthScore,
    RetirementPlan,
)
from .models.profile import Profile
from .policy import (
    ASSET_CLASS_BOUNDS,
    DIVERSIFICATION_PENALTY,
    HEALTH_SCORE_WEIGHTS,
    TARGET_SAVINGS_RATE,
    grade_for_score,
)

logger = structlog.get_logger()

_CENTS = Decimal("0.01")
ONE = Decimal("1")
ZERO = Decimal("0")


def _ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator capped to [0, 1]; an empty target counts as met."""
    if denominator <= 0:
        return ONE
    return max(ZERO, min(ONE, numerator / denominator))


def savings_rate(profile: Profile) -> Decimal:
    """Share of monthly income left after monthly expenses, floored at zero."""
    monthly_income = profile.monthly_income
    if monthly_income <= 0:
        return ZERO
    return max(ZERO, (monthly_income - profile.monthly_expenses) / monthly_income)


def allocation_violations(allocation: Allocation) -> list[str]:
    """Asset classes whose share is outside the diversification bounds."""
    violations = []
    if not ASSET_CLASS_BOUNDS["stocks"].contains(allocation.stocks):
        violations.append("stocks")
    if not ASSET_CLASS_BOUNDS["bonds"].contains(allocation.bonds):
        violations.append("bonds")
    if allocation.real_estate < ASSET_CLASS_BOUNDS["real_estate"].low:
        violations.append("real_estate")
    if allocation.cash < ASSET_CLASS_BOUNDS["cash"].low:
        violations.append("cash")
    return violations


class HealthScorer:
    """Score a plan's inputs and outputs on a 0-100 scale."""

    def score(
        self,
        profile: Profile,
        allocation: Allocation,
        retirement: RetirementPlan,
        emergency: EmergencyFund,
        financials: CurrentFinancials,
    ) -> HealthScore:
        emergency_ratio = _ratio(emergency.current_amount, emergency.recommended_amount)
        emergency_score = HEALTH_SCORE_WEIGHTS["emergency_fund"] * emergency_ratio

        retirement_ratio = _ratio(retirement.current_progress, retirement.target_nest_egg)
        retirement_score = HEALTH_SCORE_WEIGHTS["retirement"] * retirement_ratio

        debt_score = HEALTH_SCORE_WEIGHTS["debt"] * self._debt_ratio(profile, financials)

        rate = savings_rate(profile)
        savings_score = HEALTH_SCORE_WEIGHTS["savings_rate"] * min(ONE, rate / TARGET_SAVINGS_RATE)

        violations = allocation_violations(allocation)
        diversification_score = max(
            ZERO,
            HEALTH_SCORE_WEIGHTS["diversification"]
            - DIVERSIFICATION_PENALTY * len(violations),
        )

        components = {
            "emergency_fund": emergency_score.quantize(_CENTS, rounding=ROUND_HALF_UP),
            "retirement": retirement_score.quantize(_CENTS, rounding=ROUND_HALF_UP),
            "debt": debt_score.quantize(_CENTS, rounding=ROUND_HALF_UP),
            "savings_rate": savings_score.quantize(_CENTS, rounding=ROUND_HALF_UP),
            "diversification": diversification_score.quantize(_CENTS, rounding=ROUND_HALF_UP),
        }
        total = int(sum(components.values()).quantize(ONE, rounding=ROUND_HALF_UP))
        grade = grade_for_score(total)

        factors = (
            HealthFactor(
                category="Emergency Fund",
                score=components["emergency_fund"],
                max_score=int(HEALTH_SCORE_WEIGHTS["emergency_fund"]),
                description=f"{_percent(emergency_ratio)}% of recommended emergency fund",
            ),
            HealthFactor(
                category="Retirement Readiness",
                score=components["retirement"],
                max_score=int(HEALTH_SCORE_WEIGHTS["retirement"]),
                description=f"{_percent(retirement_ratio)}% of retirement goal",
            ),
            HealthFactor(
                category="Debt Management",
                score=components["debt"],
                max_score=int(HEALTH_SCORE_WEIGHTS["debt"]),
                description=(
                    "No recorded liabilities"
                    if financials.total_liabilities == 0
                    else f"Liabilities are {_percent(self._liability_ratio(profile, financials))}% of annual income"
                ),
            ),
            HealthFactor(
                category="Savings Rate",
                score=components["savings_rate"],
                max_score=int(HEALTH_SCORE_WEIGHTS["savings_rate"]),
                description=f"{_percent(rate)}% of income available for savings",
            ),
            HealthFactor(
                category="Portfolio Strategy",
                score=components["diversification"],
                max_score=int(HEALTH_SCORE_WEIGHTS["diversification"]),
                description=(
                    "Allocation within diversification guidelines"
                    if not violations
                    else "Outside guidelines for: " + ", ".join(violations)
                ),
            ),
        )

        logger.info(
            "health_score",
            total_score=total,
            grade=grade,
            **{name: str(value) for name, value in components.items()},
        )

        return HealthScore(
            **components,
            total_score=total,
            grade=grade,
            factors=factors,
        )

    @staticmethod
    def _liability_ratio(profile: Profile, financials: CurrentFinancials) -> Decimal:
        if profile.income <= 0:
            return ONE if financials.total_liabilities > 0 else ZERO
        return financials.total_liabilities / profile.income

    def _debt_ratio(self, profile: Profile, financials: CurrentFinancials) -> Decimal:
        return max(ZERO, ONE - self._liability_ratio(profile, financials))


def _percent(ratio: Decimal) -> int:
    return int((ratio * 100).quantize(ONE, rounding=ROUND_HALF_UP))
