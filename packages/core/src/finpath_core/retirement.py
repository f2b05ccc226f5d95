"""Retirement planning using the 25x rule with inflation and tax adjustments."""

from decimal import Decimal

import structlog

from .models.plan import RetirementPlan
from .models.profile import Profile
from .policy import (
    INCOME_REPLACEMENT_RATIO,
    INFLATION_RATE,
    RETIREMENT_AGE,
    RETIREMENT_TAX_RATE,
    SAVINGS_GROWTH_RATE,
    WITHDRAWAL_MULTIPLE,
)
from .tvm import compound, monthly_payment_for

logger = structlog.get_logger()


class RetirementPlanner:
    """
    Size a retirement nest egg and the monthly savings needed to fund it.

    The target replaces 80% of today's income, inflated to the retirement
    year, multiplied by 25 (4% withdrawal convention) and grossed up for
    tax on withdrawals. Current savings are grown at the assumed rate and
    the remaining shortfall is spread over the months left as an ordinary
    annuity.
    """

    def plan(self, profile: Profile) -> RetirementPlan:
        years = max(0, RETIREMENT_AGE - profile.age)

        annual_need_today = profile.income * INCOME_REPLACEMENT_RATIO
        future_annual_need = compound(annual_need_today, INFLATION_RATE, years)
        target_nest_egg = (future_annual_need * WITHDRAWAL_MULTIPLE) / (
            1 - RETIREMENT_TAX_RATE
        )

        current_progress = compound(profile.current_savings, SAVINGS_GROWTH_RATE, years)
        shortfall = max(Decimal("0"), target_nest_egg - current_progress)

        # At or past retirement age the shortfall is reported but not amortized
        monthly_needed = monthly_payment_for(shortfall, SAVINGS_GROWTH_RATE, years)

        match_contribution = Decimal("0")
        if profile.has_401k:
            match_contribution = profile.income * profile.employer_match / 12

        logger.info(
            "retirement_plan",
            years_to_retirement=years,
            target_nest_egg=str(target_nest_egg),
            current_progress=str(current_progress),
            shortfall=str(shortfall),
            monthly_savings_needed=str(monthly_needed),
        )

        return RetirementPlan(
            target_nest_egg=target_nest_egg,
            current_progress=current_progress,
            shortfall=shortfall,
            years_to_retirement=years,
            monthly_savings_needed=monthly_needed,
            employer_match_contribution=match_contribution,
        )
