"""What-if analysis: how a profile change moves the key plan numbers."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

import structlog
from pydantic import Field

from .models.base import FinpathModel, Number
from .models.plan import Plan
from .models.profile import Profile
from .normalizer import ProfileNormalizer
from .planner import AccountsInput, FinancialPlanner

logger = structlog.get_logger()


class NumericChange(FinpathModel):
    before: Number
    after: Number
    change: Number


class LabelChange(FinpathModel):
    before: str
    after: str
    changed: bool


class ChangeImpact(FinpathModel):
    """Before/after comparison of two plans."""

    changed_fields: tuple[str, ...]
    expected_return: NumericChange
    stocks: NumericChange
    risk_level: LabelChange
    monthly_savings_needed: NumericChange
    retirement_shortfall: NumericChange
    emergency_fund_target: NumericChange
    health_score: NumericChange
    insights: tuple[str, ...] = Field(default=())


def _numeric(before, after) -> NumericChange:
    before, after = Decimal(before), Decimal(after)
    return NumericChange(before=before, after=after, change=after - before)


def _direction(change: Decimal, up: str = "increased", down: str = "decreased") -> str:
    return up if change > 0 else down


class ChangeImpactAnalyzer:
    """Plan a profile before and after a set of field changes."""

    def __init__(self, planner: Optional[FinancialPlanner] = None):
        self.planner = planner or FinancialPlanner()
        self.normalizer: ProfileNormalizer = self.planner.normalizer

    def analyze(
        self,
        profile: Union[Profile, Mapping[str, Any]],
        changes: Mapping[str, Any],
        accounts: AccountsInput = None,
        now: Optional[datetime] = None,
    ) -> ChangeImpact:
        old_profile = self.normalizer.normalize(profile)
        new_profile = self.normalizer.merge(old_profile, changes)

        old_plan = self.planner.plan(old_profile, accounts=accounts, now=now)
        new_plan = self.planner.plan(new_profile, accounts=accounts, now=now)

        changed = tuple(
            name
            for name in Profile.model_fields
            if getattr(old_profile, name) != getattr(new_profile, name)
        )
        impact = ChangeImpact(
            changed_fields=changed,
            expected_return=_numeric(
                old_plan.portfolio_analysis.expected_return,
                new_plan.portfolio_analysis.expected_return,
            ),
            stocks=_numeric(
                old_plan.portfolio_analysis.allocation.stocks,
                new_plan.portfolio_analysis.allocation.stocks,
            ),
            risk_level=LabelChange(
                before=old_plan.portfolio_analysis.risk_level.value,
                after=new_plan.portfolio_analysis.risk_level.value,
                changed=old_plan.portfolio_analysis.risk_level
                != new_plan.portfolio_analysis.risk_level,
            ),
            monthly_savings_needed=_numeric(
                old_plan.retirement_plan.monthly_savings_needed,
                new_plan.retirement_plan.monthly_savings_needed,
            ),
            retirement_shortfall=_numeric(
                old_plan.retirement_plan.shortfall,
                new_plan.retirement_plan.shortfall,
            ),
            emergency_fund_target=_numeric(
                old_plan.emergency_fund.recommended_amount,
                new_plan.emergency_fund.recommended_amount,
            ),
            health_score=_numeric(
                old_plan.health_score.total_score,
                new_plan.health_score.total_score,
            ),
            insights=tuple(self._insights(changed, old_profile, new_profile, old_plan, new_plan)),
        )
        logger.info("change_analyzed", changed_fields=list(changed))
        return impact

    def _insights(
        self,
        changed: tuple[str, ...],
        old_profile: Profile,
        new_profile: Profile,
        old_plan: Plan,
        new_plan: Plan,
    ) -> list[str]:
        insights = []
        old_alloc = old_plan.portfolio_analysis.allocation
        new_alloc = new_plan.portfolio_analysis.allocation
        savings_delta = (
            new_plan.retirement_plan.monthly_savings_needed
            - old_plan.retirement_plan.monthly_savings_needed
        )

        if "age" in changed or "risk_tolerance" in changed or "investment_goal" in changed:
            if new_alloc.stocks != old_alloc.stocks:
                insights.append(
                    f"Stock allocation moved from {old_alloc.stocks}% to {new_alloc.stocks}%"
                )
            insights.append(
                f"Expected return is now {new_plan.portfolio_analysis.expected_return}% "
                f"({new_plan.portfolio_analysis.risk_level.value} risk)"
            )
        if "income" in changed and old_profile.income > 0:
            pct = (new_profile.income - old_profile.income) / old_profile.income * 100
            insights.append(
                f"Income {_direction(pct)} by {abs(pct):.1f}%"
            )
        if "current_savings" in changed or "income" in changed or "age" in changed:
            if savings_delta != 0:
                insights.append(
                    f"Monthly retirement savings needed {_direction(savings_delta)} "
                    f"by ${abs(savings_delta):,.0f}"
                )
        if "monthly_expenses" in changed or "risk_tolerance" in changed:
            target_delta = (
                new_plan.emergency_fund.recommended_amount
                - old_plan.emergency_fund.recommended_amount
            )
            if target_delta != 0:
                insights.append(
                    f"Emergency fund target {_direction(target_delta)} by ${abs(target_delta):,.0f}"
                )
        score_delta = new_plan.health_score.total_score - old_plan.health_score.total_score
        insights.append(
            f"Health score {new_plan.health_score.total_score}/100 "
            f"({'+' if score_delta >= 0 else ''}{score_delta})"
        )
        return insights


def analyze_change(
    profile: Union[Profile, Mapping[str, Any]],
    changes: Mapping[str, Any],
    accounts: AccountsInput = None,
    now: Optional[datetime] = None,
) -> ChangeImpact:
    """Compare plans before and after applying ``changes`` to ``profile``."""
    return ChangeImpactAnalyzer().analyze(profile, changes, accounts=accounts, now=now)
