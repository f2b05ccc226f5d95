"""Time-value-of-money helpers shared by the planners."""

from decimal import Decimal


def compound(amount: Decimal, annual_rate: Decimal, years: int) -> Decimal:
    """Grow an amount at an annual rate for whole years."""
    return amount * (1 + annual_rate) ** years


def annuity_factor(annual_rate: Decimal, years: int) -> Decimal:
    """Future value of 1 deposited monthly for the given years.

    ((1 + r/12)^(12n) - 1) / (r/12), or simply 12n when the rate is zero.
    """
    months = 12 * years
    if annual_rate == 0:
        return Decimal(months)
    monthly_rate = annual_rate / 12
    return ((1 + monthly_rate) ** months - 1) / monthly_rate


def monthly_payment_for(future_value: Decimal, annual_rate: Decimal, years: int) -> Decimal:
    """Monthly deposit that accumulates future_value over the given years.

    Solves FV = PMT * annuity_factor(r, n) for PMT. Zero years or a
    non-positive target needs no deposit.
    """
    if years <= 0 or future_value <= 0:
        return Decimal("0")
    return future_value / annuity_factor(annual_rate, years)
