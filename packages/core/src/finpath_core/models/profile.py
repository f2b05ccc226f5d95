"""User profile model and its enumerations.

The profile is the only user-supplied input to the planner. Field validators
coerce the loose values a browser form sends (``"32"``, ``"$85,000"``,
``"5%"``, ``"30 years"``) into canonical types; anything that cannot be
coerced, or that falls outside its bounds, fails validation.
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from .base import FinpathModel, Money


# =============================================================================
# ENUMERATIONS
# =============================================================================

class RiskTolerance(str, Enum):
    """Ordinal appetite for stock exposure."""
    CONSERVATIVE = "Conservative"
    MODERATE = "Moderate"
    AGGRESSIVE = "Aggressive"

    @property
    def rank(self) -> int:
        return list(RiskTolerance).index(self)


class InvestmentGoal(str, Enum):
    """Primary goal the plan is built around."""
    RETIREMENT = "Retirement"
    HOUSE = "House"
    EDUCATION = "Education"
    EMERGENCY_FUND = "Emergency Fund"
    WEALTH_BUILDING = "Wealth Building"


class TimeHorizon(str, Enum):
    """Supported planning horizons."""
    FIVE_YEARS = "5 years"
    TEN_YEARS = "10 years"
    TWENTY_YEARS = "20 years"
    THIRTY_YEARS = "30 years"
    FORTY_YEARS = "40 years"

    @property
    def years(self) -> int:
        return int(self.value.split()[0])

    @property
    def months(self) -> int:
        return self.years * 12


def parse_enum(enum_cls: type[Enum], value: Any) -> Enum:
    """Match a raw value to an enum member, case-insensitively.

    Unknown values raise ValueError; there is no default member.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        wanted = " ".join(value.split()).lower()
        for member in enum_cls:
            if wanted in (member.value.lower(), member.name.lower()):
                return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ValueError(f"Must be one of: {allowed}")


_HORIZON_RE = re.compile(r"^\s*(\d+)\s*(?:years?|yrs?|y)?\s*$", re.IGNORECASE)


def parse_time_horizon(value: Any) -> TimeHorizon:
    """Parse ``30``, ``"30"`` or ``"30 years"`` into a TimeHorizon."""
    if isinstance(value, TimeHorizon):
        return value
    if isinstance(value, bool):
        raise ValueError("Time horizon must be a number of years")
    if isinstance(value, int):
        years = value
    elif isinstance(value, str) and _HORIZON_RE.match(value):
        years = int(_HORIZON_RE.match(value).group(1))
    else:
        raise ValueError("Time horizon must look like '30 years'")

    for member in TimeHorizon:
        if member.years == years:
            return member
    allowed = ", ".join(m.value for m in TimeHorizon)
    raise ValueError(f"Must be one of: {allowed}")


def parse_money(value: Any) -> Any:
    """Coerce currency strings such as ``"$85,000.50"`` to Decimal."""
    if isinstance(value, str):
        cleaned = value.strip().replace("$", "").replace(",", "")
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Not a valid amount: {value!r}")
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# =============================================================================
# PROFILE
# =============================================================================

class Profile(FinpathModel):
    """Canonical, validated user profile.

    Field declaration order matters: when several required fields are
    missing, the first one listed here is the one reported.
    """

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "age": 32,
                    "income": 85000,
                    "riskTolerance": "Moderate",
                    "investmentGoal": "Retirement",
                    "timeHorizon": "30 years",
                    "currentSavings": 45000,
                    "monthlyExpenses": 4200,
                    "hasEmergencyFund": False,
                    "has401k": True,
                    "employerMatch": 0.05,
                }
            ]
        }
    }

    age: int = Field(ge=18, le=100, description="Age in whole years")
    income: Money = Field(
        ge=0, allow_inf_nan=False, description="Annual pre-tax income in USD"
    )
    risk_tolerance: RiskTolerance = Field(description="Risk appetite")
    investment_goal: InvestmentGoal = Field(description="Primary goal")
    time_horizon: TimeHorizon = Field(description="Planning horizon")
    current_savings: Money = Field(
        ge=0, allow_inf_nan=False, description="Total savings today"
    )
    monthly_expenses: Money = Field(
        ge=0, allow_inf_nan=False, description="Monthly living expenses"
    )
    has_emergency_fund: bool = Field(default=False)
    has_401k: bool = Field(default=False, alias="has401k")
    employer_match: Money = Field(
        default=Decimal("0"),
        ge=0,
        le=1,
        allow_inf_nan=False,
        description="Fraction of salary the employer matches (0.05 = 5%)",
    )

    @field_validator("income", "current_savings", "monthly_expenses", mode="before")
    @classmethod
    def coerce_money(cls, v):
        """Coerce currency strings to Decimal."""
        return parse_money(v)

    @field_validator("employer_match", mode="before")
    @classmethod
    def coerce_match(cls, v):
        """Accept fractions or percentage strings like ``"5%"``."""
        if isinstance(v, str) and v.strip().endswith("%"):
            return parse_money(v.strip()[:-1]) / 100
        return parse_money(v)

    @field_validator("risk_tolerance", mode="before")
    @classmethod
    def coerce_risk(cls, v):
        return parse_enum(RiskTolerance, v)

    @field_validator("investment_goal", mode="before")
    @classmethod
    def coerce_goal(cls, v):
        return parse_enum(InvestmentGoal, v)

    @field_validator("time_horizon", mode="before")
    @classmethod
    def coerce_horizon(cls, v):
        return parse_time_horizon(v)

    @property
    def horizon_years(self) -> int:
        return self.time_horizon.years

    @property
    def monthly_income(self) -> Decimal:
        return self.income / 12
