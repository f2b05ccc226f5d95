"""Data models for finpath-core.

This package provides:
- The validated user profile and its enumerations (profile.py)
- Account balances from an external provider (accounts.py)
- Plan results: allocation, retirement, emergency fund, goals,
  health score and recommendations (plan.py)
"""

from finpath_core.models.base import FinpathModel, Money, Number
from finpath_core.models.profile import (
    InvestmentGoal,
    Profile,
    RiskTolerance,
    TimeHorizon,
)
from finpath_core.models.accounts import (
    AccountBalance,
    AccountsSnapshot,
    AccountType,
)
from finpath_core.models.plan import (
    Allocation,
    CurrentFinancials,
    EducationPlan,
    EmergencyFund,
    EmergencyFundStatus,
    EmergencyGoalPlan,
    GoalPlan,
    HealthFactor,
    HealthScore,
    HousePlan,
    InsufficientDataWarning,
    Plan,
    PortfolioAnalysis,
    Priority,
    ProjectionPoint,
    Recommendation,
    RecommendationCategory,
    RetirementPlan,
    RiskLevel,
)

__all__ = [
    # Base
    "FinpathModel",
    "Money",
    "Number",
    # Profile
    "InvestmentGoal",
    "Profile",
    "RiskTolerance",
    "TimeHorizon",
    # Accounts
    "AccountBalance",
    "AccountsSnapshot",
    "AccountType",
    # Plan results
    "Allocation",
    "CurrentFinancials",
    "EducationPlan",
    "EmergencyFund",
    "EmergencyFundStatus",
    "EmergencyGoalPlan",
    "GoalPlan",
    "HealthFactor",
    "HealthScore",
    "HousePlan",
    "InsufficientDataWarning",
    "Plan",
    "PortfolioAnalysis",
    "Priority",
    "ProjectionPoint",
    "Recommendation",
    "RecommendationCategory",
    "RetirementPlan",
    "RiskLevel",
]
