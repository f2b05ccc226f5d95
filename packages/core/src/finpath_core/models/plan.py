"""Result models produced by the planner.

Every model here is created by the planner, read once by the caller and
discarded. Nothing in a Plan is mutated after construction.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from .base import FinpathModel, Money, Number


# =============================================================================
# ENUMERATIONS
# =============================================================================

class RiskLevel(str, Enum):
    """Coarse risk label derived from the stock share."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class EmergencyFundStatus(str, Enum):
    """How well the current liquid savings cover the emergency target."""
    ADEQUATE = "adequate"
    PARTIAL = "partial"
    INADEQUATE = "inadequate"


class Priority(str, Enum):
    """Recommendation priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationCategory(str, Enum):
    """Recommendation categories in their fixed emission order."""
    EMERGENCY_FUND = "Emergency Fund"
    EMPLOYER_MATCH = "Capture Employer Match"
    DEBT_PAYDOWN = "High-Interest Debt Paydown"
    RETIREMENT_CONTRIBUTIONS = "Retirement Contributions"
    REBALANCING = "Portfolio Rebalancing"
    TAX_ADVANTAGED = "Tax-Advantaged Accounts"
    GOAL_SAVINGS = "Goal-Specific Savings"


# =============================================================================
# PORTFOLIO
# =============================================================================

class Allocation(FinpathModel):
    """Integer percentage split across the four asset classes."""

    stocks: int = Field(ge=0, le=100)
    bonds: int = Field(ge=0, le=100)
    real_estate: int = Field(ge=0, le=100)
    cash: int = Field(ge=0, le=100)

    @model_validator(mode="after")
    def check_total(self):
        if self.total != 100:
            raise ValueError(f"Allocation must sum to 100, got {self.total}")
        return self

    @property
    def total(self) -> int:
        return self.stocks + self.bonds + self.real_estate + self.cash

    def as_dict(self) -> dict[str, int]:
        return {
            "stocks": self.stocks,
            "bonds": self.bonds,
            "real_estate": self.real_estate,
            "cash": self.cash,
        }


class PortfolioAnalysis(FinpathModel):
    """Target allocation with its expected return and risk label."""

    allocation: Allocation
    expected_return: Number = Field(
        description="Weighted expected annual return, percent, one decimal"
    )
    risk_level: RiskLevel


# =============================================================================
# RETIREMENT AND EMERGENCY FUND
# =============================================================================

class RetirementPlan(FinpathModel):
    """Nest-egg target and the monthly savings needed to reach it."""

    target_nest_egg: Money
    current_progress: Money = Field(
        description="Current savings grown to retirement at the assumed rate"
    )
    shortfall: Money
    years_to_retirement: int
    monthly_savings_needed: Money
    employer_match_contribution: Money


class EmergencyFund(FinpathModel):
    """Emergency reserve target sized by risk tolerance."""

    recommended_months: int
    recommended_amount: Money
    current_amount: Money
    shortfall: Money
    status: EmergencyFundStatus


# =============================================================================
# GOAL PLANS
# =============================================================================

class GoalPlan(FinpathModel):
    """Fields every goal-specific plan carries."""

    total_needed: Money
    monthly_contribution: Money
    target_date: date


class HousePlan(GoalPlan):
    target_price: Money
    down_payment: Money
    closing_costs: Money


class EducationPlan(GoalPlan):
    base_cost: Money
    inflation_rate: Number
    growth_rate: Number


class EmergencyGoalPlan(GoalPlan):
    current_amount: Money
    shortfall: Money
    months_to_target: int


# =============================================================================
# HEALTH SCORE
# =============================================================================

class HealthFactor(FinpathModel):
    """One scored component with a short explanation."""

    category: str
    score: Number
    max_score: int
    description: str


class HealthScore(FinpathModel):
    """100-point composite financial health score."""

    emergency_fund: Number = Field(ge=0, le=20)
    retirement: Number = Field(ge=0, le=25)
    debt: Number = Field(ge=0, le=20)
    savings_rate: Number = Field(ge=0, le=20)
    diversification: Number = Field(ge=0, le=15)
    total_score: int = Field(ge=0, le=100)
    grade: str
    factors: tuple[HealthFactor, ...] = Field(default=())

    @property
    def component_sum(self) -> Decimal:
        return (
            self.emergency_fund
            + self.retirement
            + self.debt
            + self.savings_rate
            + self.diversification
        )


# =============================================================================
# RECOMMENDATIONS AND SUMMARY
# =============================================================================

class Recommendation(FinpathModel):
    """A prioritized action with 1-4 imperative action items."""

    priority: Priority
    category: RecommendationCategory
    title: str
    description: str
    action_items: tuple[str, ...] = Field(min_length=1, max_length=4)


class CurrentFinancials(FinpathModel):
    """Current-state snapshot merged from profile and accounts."""

    total_assets: Money
    liquid_savings: Money
    total_liabilities: Money
    net_worth: Money
    from_accounts: bool = Field(
        description="False when values were estimated from the profile alone"
    )


class InsufficientDataWarning(FinpathModel):
    """Non-fatal note that a value was estimated by a fallback rule."""

    field: str
    fallback: str
    message: str


class ProjectionPoint(FinpathModel):
    """Projected portfolio value at the end of a plan year."""

    year: int
    age: int
    total_contributions: Money
    projected_value: Money
    gains: Money


# =============================================================================
# PLAN
# =============================================================================

class Plan(FinpathModel):
    """Complete financial plan for one profile."""

    portfolio_analysis: PortfolioAnalysis
    retirement_plan: RetirementPlan
    emergency_fund: EmergencyFund
    house_plan: Optional[HousePlan] = None
    education_plan: Optional[EducationPlan] = None
    emergency_goal_plan: Optional[EmergencyGoalPlan] = None
    health_score: HealthScore
    current_financials: CurrentFinancials
    recommendations: tuple[Recommendation, ...]
    projections: tuple[ProjectionPoint, ...] = Field(default=())
    warnings: tuple[InsufficientDataWarning, ...] = Field(default=())
    policy_version: str
    generated_at: datetime

    @property
    def goal_plan(self) -> Optional[GoalPlan]:
        return self.house_plan or self.education_plan or self.emergency_goal_plan
