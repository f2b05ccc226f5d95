"""Account balance models supplied by an external account data provider.

An AccountsSnapshot is a value: it is captured by the provider before
planning starts and never refreshed or mutated by the engine.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, computed_field, field_validator

from .base import FinpathModel, Money
from .profile import parse_money


class AccountType(str, Enum):
    """Normalized account categories."""
    CHECKING = "checking"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    LOAN = "loan"
    CREDIT = "credit"

    @property
    def is_liability(self) -> bool:
        return self in (AccountType.LOAN, AccountType.CREDIT)

    @property
    def is_liquid(self) -> bool:
        return self in (AccountType.CHECKING, AccountType.SAVINGS)


class AccountBalance(FinpathModel):
    """Balance of a single account at snapshot time."""

    type: AccountType = Field(description="Normalized account category")
    balance: Money = Field(
        allow_inf_nan=False,
        description="Current balance. Liabilities may be reported with either sign",
    )
    name: Optional[str] = Field(default=None, description="Display name")

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("balance", mode="before")
    @classmethod
    def coerce_balance(cls, v):
        return parse_money(v)


class AccountsSnapshot(FinpathModel):
    """Unordered set of account balances with derived totals.

    Liability balances are counted by magnitude, so a credit card reported
    as -1249.75 or 1249.75 contributes 1249.75 to total_liabilities.
    """

    accounts: tuple[AccountBalance, ...] = Field(default=())

    @computed_field(alias="liquidSavings")
    @property
    def liquid_savings(self) -> Money:
        """Sum of checking and savings balances."""
        return sum(
            (a.balance for a in self.accounts if a.type.is_liquid), Decimal("0")
        )

    @computed_field(alias="totalAssets")
    @property
    def total_assets(self) -> Money:
        """Sum of all non-liability balances."""
        return sum(
            (a.balance for a in self.accounts if not a.type.is_liability),
            Decimal("0"),
        )

    @computed_field(alias="totalLiabilities")
    @property
    def total_liabilities(self) -> Money:
        """Sum of loan and credit balances."""
        return sum(
            (abs(a.balance) for a in self.accounts if a.type.is_liability),
            Decimal("0"),
        )

    @computed_field(alias="netWorth")
    @property
    def net_worth(self) -> Money:
        return self.total_assets - self.total_liabilities

    @classmethod
    def from_balances(cls, balances) -> "AccountsSnapshot":
        """Build a snapshot from AccountBalance objects or plain mappings."""
        return cls(accounts=tuple(balances))
