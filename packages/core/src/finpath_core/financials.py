"""Current-state snapshot from the profile and optional account data."""

from decimal import Decimal
from typing import Optional

import structlog

from .models.accounts import AccountsSnapshot
from .models.plan import CurrentFinancials, InsufficientDataWarning
from .models.profile import Profile
from .policy import LIQUID_SAVINGS_FALLBACK_RATIO

logger = structlog.get_logger()


def estimated_liquid_savings(profile: Profile) -> Decimal:
    """Liquid share assumed for profile savings when no accounts are linked."""
    return profile.current_savings * LIQUID_SAVINGS_FALLBACK_RATIO


class FinancialsSummarizer:
    """Merge the profile with an optional AccountsSnapshot."""

    def summarize(
        self,
        profile: Profile,
        accounts: Optional[AccountsSnapshot] = None,
    ) -> CurrentFinancials:
        if accounts is None:
            return CurrentFinancials(
                total_assets=profile.current_savings,
                liquid_savings=estimated_liquid_savings(profile),
                total_liabilities=Decimal("0"),
                net_worth=profile.current_savings,
                from_accounts=False,
            )

        logger.debug("financials_from_accounts", account_count=len(accounts.accounts))
        return CurrentFinancials(
            total_assets=accounts.total_assets,
            liquid_savings=accounts.liquid_savings,
            total_liabilities=accounts.total_liabilities,
            net_worth=accounts.net_worth,
            from_accounts=True,
        )

    def warnings(
        self,
        accounts: Optional[AccountsSnapshot] = None,
    ) -> list[InsufficientDataWarning]:
        """Fallback notes for fields estimated without account data."""
        if accounts is not None:
            return []
        return [
            InsufficientDataWarning(
                field="liquidSavings",
                fallback=f"currentSavings x {LIQUID_SAVINGS_FALLBACK_RATIO}",
                message=(
                    "No account data linked; liquid savings and the emergency "
                    "fund balance were estimated from total savings."
                ),
            ),
            InsufficientDataWarning(
                field="totalLiabilities",
                fallback="0",
                message=(
                    "No account data linked; liabilities were assumed to be zero "
                    "and the debt score is not informative."
                ),
            ),
        ]
