"""Goal-specific savings plans for house, education and emergency fund goals."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import structlog
from dateutil.relativedelta import relativedelta

from .models.plan import EducationPlan, EmergencyFund, EmergencyGoalPlan, GoalPlan, HousePlan
from .models.profile import InvestmentGoal, Profile
from .policy import (
    EDUCATION_BASE_COST,
    EDUCATION_COST_INFLATION,
    EDUCATION_GROWTH_RATE,
    EMERGENCY_GOAL_MAX_MONTHS,
    HOUSE_CLOSING_COST_RATE,
    HOUSE_DOWN_PAYMENT_RATE,
    HOUSE_PRICE_TO_INCOME,
)
from .tvm import compound, monthly_payment_for

logger = structlog.get_logger()


class GoalPlanner:
    """Dispatch on the profile's investment goal.

    Retirement and Wealth Building have no separate goal plan; the retirement
    plan already covers them.
    """

    def __init__(self):
        self._handlers = {
            InvestmentGoal.RETIREMENT: None,
            InvestmentGoal.WEALTH_BUILDING: None,
            InvestmentGoal.HOUSE: self._house_plan,
            InvestmentGoal.EDUCATION: self._education_plan,
            InvestmentGoal.EMERGENCY_FUND: self._emergency_plan,
        }

    def plan(
        self,
        profile: Profile,
        emergency_fund: EmergencyFund,
        now: datetime,
    ) -> Optional[GoalPlan]:
        handler = self._handlers[profile.investment_goal]
        if handler is None:
            return None
        goal_plan = handler(profile, emergency_fund, now)
        logger.info(
            "goal_plan",
            investment_goal=profile.investment_goal.value,
            total_needed=str(goal_plan.total_needed),
            monthly_contribution=str(goal_plan.monthly_contribution),
            target_date=goal_plan.target_date.isoformat(),
        )
        return goal_plan

    def _house_plan(self, profile: Profile, emergency_fund: EmergencyFund, now: datetime) -> HousePlan:
        price = profile.income * HOUSE_PRICE_TO_INCOME
        down_payment = price * HOUSE_DOWN_PAYMENT_RATE
        closing_costs = price * HOUSE_CLOSING_COST_RATE
        total = price * (HOUSE_DOWN_PAYMENT_RATE + HOUSE_CLOSING_COST_RATE)
        return HousePlan(
            target_price=price,
            down_payment=down_payment,
            closing_costs=closing_costs,
            total_needed=total,
            monthly_contribution=total / profile.time_horizon.months,
            target_date=(now + relativedelta(years=profile.horizon_years)).date(),
        )

    def _education_plan(self, profile: Profile, emergency_fund: EmergencyFund, now: datetime) -> EducationPlan:
        years = profile.horizon_years
        total = compound(EDUCATION_BASE_COST, EDUCATION_COST_INFLATION, years)
        return EducationPlan(
            base_cost=EDUCATION_BASE_COST,
            inflation_rate=EDUCATION_COST_INFLATION,
            growth_rate=EDUCATION_GROWTH_RATE,
            total_needed=total,
            monthly_contribution=monthly_payment_for(total, EDUCATION_GROWTH_RATE, years),
            target_date=(now + relativedelta(years=years)).date(),
        )

    def _emergency_plan(self, profile: Profile, emergency_fund: EmergencyFund, now: datetime) -> EmergencyGoalPlan:
        months = min(EMERGENCY_GOAL_MAX_MONTHS, profile.time_horizon.months)
        return EmergencyGoalPlan(
            total_needed=emergency_fund.recommended_amount,
            current_amount=emergency_fund.current_amount,
            shortfall=emergency_fund.shortfall,
            months_to_target=months,
            monthly_contribution=emergency_fund.shortfall / Decimal(months),
            target_date=(now + relativedelta(months=months)).date(),
        )
