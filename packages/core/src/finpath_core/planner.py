"""Financial plan assembly.

`plan()` runs the planning components in a fixed order over a normalized
profile and an optional account snapshot:

1. Normalize the profile (ValidationError before anything is computed)
2. Allocation, retirement, emergency fund, financial summary, goal plan
3. Health score from the outputs of step 2
4. Recommendations from everything above
5. Growth projection

Every step is checked for arithmetic failures and non-finite results; either
one is a ComputationError because valid input can never cause it.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar, Union

import pydantic
import structlog
from pydantic import BaseModel

from .allocation import AllocationEngine
from .emergency import EmergencyFundPlanner
from .exceptions import ComputationError, ValidationError
from .financials import FinancialsSummarizer
from .goals import GoalPlanner
from .health import HealthScorer
from .models.accounts import AccountsSnapshot
from .models.plan import EducationPlan, EmergencyGoalPlan, HousePlan, Plan
from .models.profile import Profile
from .normalizer import ProfileNormalizer
from .policy import get_policy_version
from .projections import project_growth
from .recommendations import PlanContext, RecommendationBuilder
from .retirement import RetirementPlanner

logger = structlog.get_logger()

T = TypeVar("T")

AccountsInput = Union[AccountsSnapshot, Mapping[str, Any], Iterable[Any], None]


def coerce_accounts(accounts: AccountsInput) -> Optional[AccountsSnapshot]:
    """Accept a snapshot, a ``{"accounts": [...]}`` mapping or a list of balances."""
    if accounts is None or isinstance(accounts, AccountsSnapshot):
        return accounts
    try:
        if isinstance(accounts, Mapping):
            return AccountsSnapshot.model_validate(dict(accounts))
        return AccountsSnapshot.from_balances(accounts)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        raise ValidationError(
            "Invalid account data",
            field="accounts",
            constraint=first.get("msg"),
            details={"loc": [str(part) for part in first.get("loc", ())]},
        ) from exc


def _non_finite(value: Any) -> bool:
    if isinstance(value, Decimal):
        return not value.is_finite()
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, BaseModel):
        return any(_non_finite(v) for v in value.__dict__.values())
    if isinstance(value, (list, tuple)):
        return any(_non_finite(v) for v in value)
    return False


class FinancialPlanner:
    """
    Turn a profile and optional account balances into a complete Plan.

    The planner holds no per-call state, so one instance can serve any
    number of concurrent callers.
    """

    def __init__(
        self,
        normalizer: Optional[ProfileNormalizer] = None,
        allocation_engine: Optional[AllocationEngine] = None,
        retirement_planner: Optional[RetirementPlanner] = None,
        emergency_planner: Optional[EmergencyFundPlanner] = None,
        goal_planner: Optional[GoalPlanner] = None,
        health_scorer: Optional[HealthScorer] = None,
        recommendation_builder: Optional[RecommendationBuilder] = None,
        financials_summarizer: Optional[FinancialsSummarizer] = None,
    ):
        self.normalizer = normalizer or ProfileNormalizer()
        self.allocation_engine = allocation_engine or AllocationEngine()
        self.retirement_planner = retirement_planner or RetirementPlanner()
        self.emergency_planner = emergency_planner or EmergencyFundPlanner()
        self.goal_planner = goal_planner or GoalPlanner()
        self.health_scorer = health_scorer or HealthScorer()
        self.recommendation_builder = recommendation_builder or RecommendationBuilder()
        self.financials_summarizer = financials_summarizer or FinancialsSummarizer()

    def _step(self, step: str, func: Callable[..., T], *args) -> T:
        """Run one planning step, converting arithmetic failures."""
        try:
            result = func(*args)
        except ArithmeticError as exc:
            logger.error("plan_step_failed", step=step, error=repr(exc))
            raise ComputationError(f"Planning step '{step}' failed: {exc!r}", step=step) from exc

        if _non_finite(result):
            logger.error("plan_step_non_finite", step=step)
            raise ComputationError(
                f"Planning step '{step}' produced a non-finite value", step=step
            )
        return result

    def plan(
        self,
        profile: Union[Profile, Mapping[str, Any], None],
        accounts: AccountsInput = None,
        now: Optional[datetime] = None,
    ) -> Plan:
        """
        Build a financial plan.

        Args:
            profile: Raw profile mapping or an already normalized Profile
            accounts: Optional account balances captured by a provider
            now: Timestamp for generated_at and goal target dates
                (default: current UTC time)

        Returns:
            Plan with allocation, retirement, emergency fund, goal plan,
            health score, recommendations and projections

        Raises:
            ValidationError: The profile or account data is invalid
            ComputationError: A step produced an unusable number
        """
        profile = self.normalizer.normalize(profile)
        snapshot = coerce_accounts(accounts)
        now = now or datetime.now(timezone.utc)

        logger.info(
            "plan_start",
            investment_goal=profile.investment_goal.value,
            has_accounts=snapshot is not None,
        )

        portfolio = self._step("portfolio_analysis", self.allocation_engine.allocate, profile)
        retirement = self._step("retirement_plan", self.retirement_planner.plan, profile)
        emergency = self._step("emergency_fund", self.emergency_planner.plan, profile, snapshot)
        financials = self._step(
            "current_financials", self.financials_summarizer.summarize, profile, snapshot
        )
        goal_plan = self._step("goal_plan", self.goal_planner.plan, profile, emergency, now)

        health = self._step(
            "health_score",
            self.health_scorer.score,
            profile,
            portfolio.allocation,
            retirement,
            emergency,
            financials,
        )

        context = PlanContext(
            profile=profile,
            allocation=portfolio.allocation,
            retirement=retirement,
            emergency=emergency,
            financials=financials,
            goal_plan=goal_plan,
        )
        recommendations = self._step(
            "recommendations", self.recommendation_builder.build, context
        )
        projections = self._step(
            "projections", project_growth, profile, portfolio, retirement
        )
        warnings = self.financials_summarizer.warnings(snapshot)
        for warning in warnings:
            logger.warning("insufficient_data", field=warning.field, fallback=warning.fallback)

        result = Plan(
            portfolio_analysis=portfolio,
            retirement_plan=retirement,
            emergency_fund=emergency,
            house_plan=goal_plan if isinstance(goal_plan, HousePlan) else None,
            education_plan=goal_plan if isinstance(goal_plan, EducationPlan) else None,
            emergency_goal_plan=goal_plan if isinstance(goal_plan, EmergencyGoalPlan) else None,
            health_score=health,
            current_financials=financials,
            recommendations=tuple(recommendations),
            projections=tuple(projections),
            warnings=tuple(warnings),
            policy_version=get_policy_version(),
            generated_at=now,
        )

        logger.info(
            "plan_complete",
            total_score=health.total_score,
            grade=health.grade,
            recommendation_count=len(recommendations),
        )
        return result


_default_planner = FinancialPlanner()


def plan(
    profile: Union[Profile, Mapping[str, Any], None],
    accounts: AccountsInput = None,
    now: Optional[datetime] = None,
) -> Plan:
    """Build a plan with the default FinancialPlanner."""
    return _default_planner.plan(profile, accounts=accounts, now=now)
