"""Finpath Core - Personal financial planning engine."""

__version__ = "0.1.0"

from .exceptions import (
    ComputationError,
    ConfigurationError,
    FinpathError,
    ProviderError,
    ValidationError,
)
from .impact import ChangeImpact, analyze_change
from .models import AccountsSnapshot, Plan, Profile
from .planner import FinancialPlanner, plan
from .policy import get_policy_version
from .tracking import GoalProgress, GoalTarget, track_goal

__all__ = [
    "plan",
    "FinancialPlanner",
    "Plan",
    "Profile",
    "AccountsSnapshot",
    "analyze_change",
    "ChangeImpact",
    "track_goal",
    "GoalTarget",
    "GoalProgress",
    "get_policy_version",
    "FinpathError",
    "ValidationError",
    "ComputationError",
    "ProviderError",
    "ConfigurationError",
]
