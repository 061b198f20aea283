"""Interest estimates on a day-count basis.

Rates are percentages per ``RateFrequency`` period. A monthly period counts
as 30 days and an annual one as 365 days.
"""

from datetime import date
from decimal import Decimal

from loan_core.calculations.dates import resolve_as_of
from loan_core.models.financial import InterestMode, Loan, RateFrequency

DAYS_PER_PERIOD = {
    RateFrequency.MONTHLY: Decimal("30"),
    RateFrequency.ANNUAL: Decimal("365"),
}


def daily_rate(rate: Decimal, frequency: RateFrequency) -> Decimal:
    """Convert a percentage period rate into a daily fraction."""
    return rate / Decimal("100") / DAYS_PER_PERIOD[frequency]


def simple_interest(
    principal: Decimal,
    rate: Decimal,
    days: int,
    frequency: RateFrequency = RateFrequency.MONTHLY,
) -> Decimal:
    """Linear interest: ``principal * daily_rate * days``."""
    if days <= 0:
        return Decimal("0")
    return principal * daily_rate(rate, frequency) * days


def compound_interest(
    principal: Decimal,
    rate: Decimal,
    days: int,
    frequency: RateFrequency = RateFrequency.MONTHLY,
) -> Decimal:
    """Interest compounded once per period, pro-rated for partial periods.

    ``principal * ((1 + rate) ** (days / period_days) - 1)``
    """
    if days <= 0:
        return Decimal("0")
    periods = Decimal(days) / DAYS_PER_PERIOD[frequency]
    growth = (Decimal("1") + rate / Decimal("100")) ** periods
    return principal * (growth - Decimal("1"))


def estimate_interest(
    principal: Decimal,
    rate: Decimal,
    mode: InterestMode,
    frequency: RateFrequency,
    days: int = 30,
) -> Decimal:
    """Interest a new loan would accrue over ``days`` (loan form preview)."""
    if mode == InterestMode.SIMPLE:
        return simple_interest(principal, rate, days, frequency)
    return compound_interest(principal, rate, days, frequency)


def accrue_interest(loan: Loan, *, as_of: date | None = None) -> Decimal:
    """Interest on the outstanding principal from the loan start to ``as_of``.

    Parameters
    ----------
    loan : Loan
        Loan whose mode, frequency and rate drive the calculation.
    as_of : date | None
        Accrual cut-off (defaults to today).

    Returns
    -------
    Decimal
        Accrued interest, zero for loans that have not started.
    """
    days = (resolve_as_of(as_of) - loan.start_date).days
    return estimate_interest(
        loan.outstanding_principal,
        loan.interest_rate,
        loan.interest_mode,
        loan.rate_frequency,
        days,
    )
