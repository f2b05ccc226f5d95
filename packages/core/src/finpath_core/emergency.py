"""Emergency fund target sized by risk tolerance."""

from decimal import Decimal
from typing import Optional

import structlog

from .financials import estimated_liquid_savings
from .models.accounts import AccountsSnapshot
from .models.plan import EmergencyFund, EmergencyFundStatus
from .models.profile import Profile
from .policy import EMERGENCY_FUND_MONTHS, EMERGENCY_PARTIAL_RATIO

logger = structlog.get_logger()


class EmergencyFundPlanner:
    """Months-of-expenses reserve: 8 conservative, 6 moderate, 3 aggressive."""

    def plan(
        self,
        profile: Profile,
        accounts: Optional[AccountsSnapshot] = None,
    ) -> EmergencyFund:
        months = EMERGENCY_FUND_MONTHS[profile.risk_tolerance]
        recommended = profile.monthly_expenses * months

        if accounts is not None:
            current = accounts.liquid_savings
        else:
            current = estimated_liquid_savings(profile)

        status = emergency_status(current, recommended)
        fund = EmergencyFund(
            recommended_months=months,
            recommended_amount=recommended,
            current_amount=current,
            shortfall=Decimal("0") if status == EmergencyFundStatus.ADEQUATE else recommended - current,
            status=status,
        )
        logger.info(
            "emergency_fund",
            recommended_amount=str(recommended),
            current_amount=str(current),
            status=status.value,
        )
        return fund


def emergency_status(current: Decimal, recommended: Decimal) -> EmergencyFundStatus:
    # An empty target counts as met, whatever the balance
    if recommended <= 0 or current >= recommended:
        return EmergencyFundStatus.ADEQUATE
    if current >= recommended * EMERGENCY_PARTIAL_RATIO:
        return EmergencyFundStatus.PARTIAL
    return EmergencyFundStatus.INADEQUATE
