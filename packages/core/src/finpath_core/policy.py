"""Numeric planning policy for the finpath engine.

Every constant the planner relies on lives in this module: capital market
assumptions, risk multipliers, asset-class bounds, retirement and education
assumptions, health score weights and grade thresholds. Components read from
here and never hard-code a number of their own.

Updated: 2026-Q3
"""

from decimal import Decimal
from typing import NamedTuple, Optional

from .models.profile import InvestmentGoal, RiskTolerance


# =============================================================================
# VERSION TRACKING
# =============================================================================

POLICY_VERSION = "2026-Q3"


def get_policy_version() -> str:
    """Return current planning policy version."""
    return POLICY_VERSION


# =============================================================================
# ASSET CLASSES - EXPECTED ANNUAL RETURNS
# =============================================================================

EXPECTED_RETURNS = {
    "stocks": Decimal("0.10"),
    "bonds": Decimal("0.04"),
    "real_estate": Decimal("0.08"),
    "cash": Decimal("0.02"),
}


class Bounds(NamedTuple):
    """Inclusive percentage bounds for an asset class."""
    low: int
    high: int

    def clamp(self, value):
        return max(self.low, min(self.high, value))

    def contains(self, value) -> bool:
        return self.low <= value <= self.high


ASSET_CLASS_BOUNDS = {
    "stocks": Bounds(30, 90),
    "bonds": Bounds(5, 50),
    "real_estate": Bounds(5, 20),
    "cash": Bounds(3, 15),
}

# Share of the non-stock remainder each complement class starts from
CASH_SHARE_OF_REMAINDER = Decimal("0.10")
REAL_ESTATE_SHARE_OF_REMAINDER = Decimal("0.15")


# =============================================================================
# ALLOCATION - AGE RULE, RISK MULTIPLIERS, GOAL OVERRIDES
# =============================================================================

AGE_RULE_BASE = 120
AGE_RULE_FLOOR = 60
AGE_RULE_CAP = 90

RISK_MULTIPLIERS = {
    RiskTolerance.CONSERVATIVE: Decimal("0.7"),
    RiskTolerance.MODERATE: Decimal("1.0"),
    RiskTolerance.AGGRESSIVE: Decimal("1.3"),
}


class GoalOverride(NamedTuple):
    """Stock cap applied when a goal needs liquidity.

    max_horizon_years of None means the cap applies at every horizon.
    """
    stock_cap: int
    max_horizon_years: Optional[int]


GOAL_STOCK_OVERRIDES = {
    InvestmentGoal.HOUSE: GoalOverride(stock_cap=50, max_horizon_years=10),
    InvestmentGoal.EDUCATION: GoalOverride(stock_cap=60, max_horizon_years=10),
    InvestmentGoal.EMERGENCY_FUND: GoalOverride(stock_cap=20, max_horizon_years=None),
    InvestmentGoal.RETIREMENT: None,
    InvestmentGoal.WEALTH_BUILDING: None,
}

# Risk level by stock share: Low below 40, Medium below 70, High otherwise
RISK_LEVEL_MEDIUM_FROM = 40
RISK_LEVEL_HIGH_FROM = 70


# =============================================================================
# RETIREMENT - 25x RULE WITH INFLATION AND TAX
# =============================================================================

RETIREMENT_AGE = 65
INFLATION_RATE = Decimal("0.03")
RETIREMENT_TAX_RATE = Decimal("0.12")
INCOME_REPLACEMENT_RATIO = Decimal("0.80")
WITHDRAWAL_MULTIPLE = Decimal("25")
SAVINGS_GROWTH_RATE = Decimal("0.07")


# =============================================================================
# EMERGENCY FUND
# =============================================================================

EMERGENCY_FUND_MONTHS = {
    RiskTolerance.CONSERVATIVE: 8,
    RiskTolerance.MODERATE: 6,
    RiskTolerance.AGGRESSIVE: 3,
}

# Fraction of current savings assumed liquid when no account data is present
LIQUID_SAVINGS_FALLBACK_RATIO = Decimal("0.2")
EMERGENCY_PARTIAL_RATIO = Decimal("0.5")
EMERGENCY_GOAL_MAX_MONTHS = 12


# =============================================================================
# GOALS - HOUSE AND EDUCATION
# =============================================================================

HOUSE_PRICE_TO_INCOME = Decimal("4")
HOUSE_DOWN_PAYMENT_RATE = Decimal("0.20")
HOUSE_CLOSING_COST_RATE = Decimal("0.03")

EDUCATION_BASE_COST = Decimal("100000")  # 4-year undergraduate baseline
EDUCATION_COST_INFLATION = Decimal("0.05")
EDUCATION_GROWTH_RATE = Decimal("0.06")


# =============================================================================
# HEALTH SCORE - WEIGHTS AND GRADES
# =============================================================================

HEALTH_SCORE_WEIGHTS = {
    "emergency_fund": Decimal("20"),
    "retirement": Decimal("25"),
    "debt": Decimal("20"),
    "savings_rate": Decimal("20"),
    "diversification": Decimal("15"),
}

# Savings rate that earns the full savings-rate component
TARGET_SAVINGS_RATE = Decimal("0.50")
DIVERSIFICATION_PENALTY = Decimal("3")

GRADE_THRESHOLDS = (
    (90, "A+"),
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
)
FAILING_GRADE = "F"


def grade_for_score(score: int) -> str:
    """Map a 0-100 total score to its letter grade."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return FAILING_GRADE


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

TAX_ADVANTAGED_INCOME_THRESHOLD = Decimal("50000")

# Minimum payment assumed on revolving and loan balances
MINIMUM_DEBT_PAYMENT_RATE = Decimal("0.02")

# Drift from target, in percentage points, that triggers an off-cycle rebalance
REBALANCE_DRIFT_POINTS = 5


# =============================================================================
# PROJECTIONS
# =============================================================================

MAX_PROJECTION_YEARS = 30
