"""Prioritized recommendation list.

Rules are evaluated in a fixed order and the first entry per category wins,
so identical inputs always yield the same list in the same order. Numeric
thresholds come from the policy table; the prose lives here.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import structlog

from .models.plan import (
    Allocation,
    CurrentFinancials,
    EducationPlan,
    EmergencyFund,
    EmergencyFundStatus,
    EmergencyGoalPlan,
    GoalPlan,
    HousePlan,
    Priority,
    Recommendation,
    RecommendationCategory,
    RetirementPlan,
)
from .models.profile import Profile
from .policy import (
    MINIMUM_DEBT_PAYMENT_RATE,
    REBALANCE_DRIFT_POINTS,
    RETIREMENT_AGE,
    TAX_ADVANTAGED_INCOME_THRESHOLD,
)

logger = structlog.get_logger()


def _usd(amount: Decimal, cents: bool = False) -> str:
    if cents:
        return f"${amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,.2f}"
    return f"${amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP):,.0f}"


def _pct(ratio: Decimal) -> str:
    return f"{(ratio * 100).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP).normalize():f}%"


def _month_year(value: date) -> str:
    return value.strftime("%B %Y")


@dataclass(frozen=True)
class PlanContext:
    """Everything the rules may look at."""
    profile: Profile
    allocation: Allocation
    retirement: RetirementPlan
    emergency: EmergencyFund
    financials: CurrentFinancials
    goal_plan: Optional[GoalPlan]


class RecommendationBuilder:
    """Build the ordered, deduplicated recommendation list."""

    def __init__(self):
        self._rules = (
            self._emergency_fund,
            self._employer_match,
            self._debt_paydown,
            self._retirement_contributions,
            self._rebalancing,
            self._tax_advantaged,
            self._goal_savings,
        )

    def build(self, context: PlanContext) -> list[Recommendation]:
        seen: set[RecommendationCategory] = set()
        recommendations: list[Recommendation] = []

        for rule in self._rules:
            recommendation = rule(context)
            if recommendation is None or recommendation.category in seen:
                continue
            seen.add(recommendation.category)
            recommendations.append(recommendation)

        logger.info(
            "recommendations_built",
            categories=[r.category.value for r in recommendations],
        )
        return recommendations

    # Rules, in emission order

    def _emergency_fund(self, ctx: PlanContext) -> Optional[Recommendation]:
        fund = ctx.emergency
        if fund.status == EmergencyFundStatus.ADEQUATE or fund.recommended_amount <= 0:
            return None
        covered = max(Decimal("0"), fund.current_amount / fund.recommended_amount)
        return Recommendation(
            priority=Priority.HIGH,
            category=RecommendationCategory.EMERGENCY_FUND,
            title="Build Your Emergency Fund",
            description=(
                f"Your liquid savings cover {_pct(covered)} of the recommended "
                f"{fund.recommended_months}-month reserve of {_usd(fund.recommended_amount)}."
            ),
            action_items=(
                f"Set aside {_usd(fund.shortfall / 12)} per month for the next year",
                "Keep the reserve in a high-yield savings account",
                "Automate the transfer on each payday",
            ),
        )

    def _employer_match(self, ctx: PlanContext) -> Optional[Recommendation]:
        profile = ctx.profile
        # No contribution data: an unfunded retirement target means the match may go unclaimed
        if not (profile.has_401k and profile.employer_match > 0 and ctx.retirement.shortfall > 0):
            return None
        match = ctx.retirement.employer_match_contribution
        return Recommendation(
            priority=Priority.HIGH,
            category=RecommendationCategory.EMPLOYER_MATCH,
            title="Capture Your Full Employer Match",
            description=(
                f"Your employer matches {_pct(profile.employer_match)} of salary, "
                f"worth {_usd(match * 12)} a year."
            ),
            action_items=(
                f"Contribute at least {_usd(match, cents=True)} monthly to your 401(k)",
                f"Set your contribution rate to at least {_pct(profile.employer_match)} of salary",
            ),
        )

    def _debt_paydown(self, ctx: PlanContext) -> Optional[Recommendation]:
        liabilities = ctx.financials.total_liabilities
        if liabilities <= 0:
            return None
        minimum = liabilities * MINIMUM_DEBT_PAYMENT_RATE
        return Recommendation(
            priority=Priority.HIGH,
            category=RecommendationCategory.DEBT_PAYDOWN,
            title="Pay Down High-Interest Debt",
            description=f"Your linked accounts carry {_usd(liabilities)} in loan and credit balances.",
            action_items=(
                f"Pay at least {_usd(minimum)} per month across all balances",
                "Direct every extra dollar to the highest-interest balance first",
                "Avoid adding new revolving balances until debt is cleared",
            ),
        )

    def _retirement_contributions(self, ctx: PlanContext) -> Optional[Recommendation]:
        plan = ctx.retirement
        if plan.shortfall <= 0:
            return None
        items = [
            f"Target a nest egg of {_usd(plan.target_nest_egg)} by age {RETIREMENT_AGE}",
        ]
        if plan.years_to_retirement > 0:
            items.insert(0, f"Save {_usd(plan.monthly_savings_needed)} per month toward retirement")
            items.append("Raise your contribution rate by 1% of salary each year")
        else:
            items.append("Review your withdrawal plan with the projected shortfall in mind")
        return Recommendation(
            priority=Priority.MEDIUM,
            category=RecommendationCategory.RETIREMENT_CONTRIBUTIONS,
            title="Increase Retirement Contributions",
            description=(
                f"Your savings are projected to reach {_usd(plan.current_progress)}, "
                f"{_usd(plan.shortfall)} short of your retirement target."
            ),
            action_items=tuple(items),
        )

    def _rebalancing(self, ctx: PlanContext) -> Optional[Recommendation]:
        a = ctx.allocation
        return Recommendation(
            priority=Priority.MEDIUM,
            category=RecommendationCategory.REBALANCING,
            title="Rebalance Your Portfolio Quarterly",
            description="Market moves pull a portfolio away from its target mix over time.",
            action_items=(
                f"Rebalance each quarter toward {a.stocks}% stocks, {a.bonds}% bonds, "
                f"{a.real_estate}% real estate and {a.cash}% cash",
                f"Rebalance early if any asset class drifts more than {REBALANCE_DRIFT_POINTS} points",
            ),
        )

    def _tax_advantaged(self, ctx: PlanContext) -> Optional[Recommendation]:
        if ctx.profile.income <= TAX_ADVANTAGED_INCOME_THRESHOLD:
            return None
        return Recommendation(
            priority=Priority.MEDIUM,
            category=RecommendationCategory.TAX_ADVANTAGED,
            title="Use Tax-Advantaged Accounts",
            description="At your income, tax-deferred and tax-free accounts meaningfully raise after-tax returns.",
            action_items=(
                "Max out your 401(k) or 403(b) contributions",
                "Open and fund an IRA each year",
                "Use a Health Savings Account if your health plan qualifies",
            ),
        )

    def _goal_savings(self, ctx: PlanContext) -> Optional[Recommendation]:
        goal = ctx.goal_plan
        if goal is None:
            return None

        monthly = _usd(goal.monthly_contribution)
        by_date = _month_year(goal.target_date)
        if isinstance(goal, HousePlan):
            title = "Save for Your Home Purchase"
            description = (
                f"A {_usd(goal.target_price)} home needs {_usd(goal.total_needed)} "
                "for the down payment and closing costs."
            )
            items = (
                f"Save {monthly} per month until {by_date}",
                "Keep the house fund in a high-yield savings account or CDs",
                "Check your credit report before applying for a mortgage",
            )
        elif isinstance(goal, EducationPlan):
            title = "Save for Education"
            description = (
                f"Education costs are projected to reach {_usd(goal.total_needed)} "
                f"by {by_date}."
            )
            items = (
                f"Contribute {monthly} per month to a 529 plan",
                "Review state tax deductions for 529 contributions",
            )
        elif isinstance(goal, EmergencyGoalPlan):
            title = "Fund Your Emergency Reserve"
            description = (
                f"You need {_usd(goal.shortfall)} more to reach your "
                f"{_usd(goal.total_needed)} reserve."
            )
            items = (
                f"Save {monthly} per month for the next {goal.months_to_target} months",
                "Pause extra investing until the reserve is complete",
            )
        else:
            raise TypeError(f"Unsupported goal plan: {type(goal).__name__}")

        return Recommendation(
            priority=Priority.MEDIUM,
            category=RecommendationCategory.GOAL_SAVINGS,
            title=title,
            description=description,
            action_items=items,
        )
