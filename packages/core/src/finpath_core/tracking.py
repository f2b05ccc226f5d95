"""Progress tracking toward an arbitrary savings target.

Simulates monthly deposits compounding at the portfolio's expected return
and reports yearly checkpoints, whether the target is reached, and the extra
monthly deposit needed if it is not.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional, Union

import pydantic
import structlog
from pydantic import Field, field_validator

from .allocation import AllocationEngine
from .exceptions import ValidationError
from .models.base import FinpathModel, Money, Number
from .models.profile import Profile, parse_money
from .normalizer import normalize_profile
from .tvm import annuity_factor

logger = structlog.get_logger()


class GoalTarget(FinpathModel):
    """A savings target to track against."""

    target_amount: Money = Field(gt=0, allow_inf_nan=False)
    timeframe_years: int = Field(gt=0, le=100)
    current_savings: Money = Field(default=Decimal("0"), ge=0, allow_inf_nan=False)
    monthly_contribution: Money = Field(default=Decimal("0"), ge=0, allow_inf_nan=False)

    @field_validator("target_amount", "current_savings", "monthly_contribution", mode="before")
    @classmethod
    def coerce_money(cls, v):
        return parse_money(v)


class Checkpoint(FinpathModel):
    month: int
    year: int
    projected_value: Money
    progress_percent: int
    on_track: bool


class GoalProgress(FinpathModel):
    """Outcome of tracking a GoalTarget."""

    target: GoalTarget
    expected_return: Number
    projected_final_value: Money
    will_reach_goal: bool
    shortfall: Money
    additional_monthly_needed: Money
    checkpoints: tuple[Checkpoint, ...]


class GoalTracker:
    """Track a savings target using the profile's target allocation."""

    def __init__(self, allocation_engine: Optional[AllocationEngine] = None):
        self.allocation_engine = allocation_engine or AllocationEngine()

    def track(self, profile: Profile, target: GoalTarget) -> GoalProgress:
        expected = self.allocation_engine.allocate(profile).expected_return
        annual_rate = expected / 100
        monthly_rate = annual_rate / 12
        total_months = target.timeframe_years * 12

        value = target.current_savings
        checkpoints = []
        for month in range(1, total_months + 1):
            value = (value + target.monthly_contribution) * (1 + monthly_rate)
            if month % 12 == 0 or month == total_months:
                pace = target.target_amount * month / total_months
                checkpoints.append(
                    Checkpoint(
                        month=month,
                        year=(month + 11) // 12,
                        projected_value=value,
                        progress_percent=int(
                            (value / target.target_amount * 100).quantize(
                                Decimal("1"), rounding=ROUND_HALF_UP
                            )
                        ),
                        on_track=value >= pace,
                    )
                )

        will_reach = value >= target.target_amount
        shortfall = Decimal("0") if will_reach else target.target_amount - value
        additional = Decimal("0")
        if shortfall > 0:
            additional = shortfall / annuity_factor(annual_rate, target.timeframe_years)

        logger.info(
            "goal_tracked",
            target_amount=str(target.target_amount),
            projected_final_value=str(value),
            will_reach_goal=will_reach,
        )
        return GoalProgress(
            target=target,
            expected_return=expected,
            projected_final_value=value,
            will_reach_goal=will_reach,
            shortfall=shortfall,
            additional_monthly_needed=additional,
            checkpoints=tuple(checkpoints),
        )


def track_goal(
    profile: Union[Profile, Mapping[str, Any]],
    target: Union[GoalTarget, Mapping[str, Any]],
) -> GoalProgress:
    """Validate both inputs and track the target."""
    profile = normalize_profile(profile)
    if not isinstance(target, GoalTarget):
        try:
            target = GoalTarget.model_validate(dict(target))
        except pydantic.ValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first.get("loc") else "goal"
            raise ValidationError(
                f"Invalid goal target: {field}",
                field=field,
                constraint=first.get("msg"),
            ) from exc
    return GoalTracker().track(profile, target)
