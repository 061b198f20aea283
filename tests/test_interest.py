"""Tests for interest estimates."""

from datetime import date
from decimal import Decimal

from loan_core.calculations.interest import (
    accrue_interest,
    compound_interest,
    daily_rate,
    estimate_interest,
    simple_interest,
)
from loan_core.models.financial import InterestMode, RateFrequency

CENTS = Decimal("0.01")


class TestDailyRate:
    """Tests for daily_rate."""

    def test_monthly(self) -> None:
        assert daily_rate(Decimal("3"), RateFrequency.MONTHLY) == Decimal("0.001")

    def test_annual(self) -> None:
        assert daily_rate(Decimal("36.5"), RateFrequency.ANNUAL) == Decimal("0.001")


class TestSimpleInterest:
    """Tests for simple_interest."""

    def test_one_month(self) -> None:
        result = simple_interest(Decimal("3000"), Decimal("3"), 30, RateFrequency.MONTHLY)
        assert result == Decimal("90")

    def test_no_elapsed_days(self) -> None:
        assert simple_interest(Decimal("3000"), Decimal("3"), 0) == Decimal("0")


class TestCompoundInterest:
    """Tests for compound_interest."""

    def test_two_full_periods(self) -> None:
        result = compound_interest(Decimal("1000"), Decimal("10"), 60, RateFrequency.MONTHLY)
        assert result.quantize(CENTS) == Decimal("210.00")

    def test_matches_simple_for_one_period(self) -> None:
        compound = compound_interest(Decimal("1000"), Decimal("12"), 365, RateFrequency.ANNUAL)
        simple = simple_interest(Decimal("1000"), Decimal("12"), 365, RateFrequency.ANNUAL)
        assert compound.quantize(CENTS) == simple.quantize(CENTS)

    def test_negative_days(self) -> None:
        assert compound_interest(Decimal("1000"), Decimal("10"), -5) == Decimal("0")


class TestEstimateAndAccrue:
    """Tests for estimate_interest and accrue_interest."""

    def test_estimate_dispatches_on_mode(self) -> None:
        simple = estimate_interest(
            Decimal("1000"), Decimal("10"), InterestMode.SIMPLE, RateFrequency.MONTHLY, days=60
        )
        compound = estimate_interest(
            Decimal("1000"), Decimal("10"), InterestMode.COMPOUND, RateFrequency.MONTHLY, days=60
        )
        assert simple.quantize(CENTS) == Decimal("200.00")
        assert compound.quantize(CENTS) == Decimal("210.00")

    def test_accrue_uses_outstanding_principal(self, make_loan) -> None:
        loan = make_loan(
            interest_mode=InterestMode.SIMPLE,
            interest_rate=Decimal("3"),
            outstanding_principal=Decimal("2000"),
            start_date=date(2024, 1, 1),
        )
        accrued = accrue_interest(loan, as_of=date(2024, 1, 31))
        assert accrued == Decimal("60")

    def test_accrue_before_start_is_zero(self, make_loan) -> None:
        loan = make_loan(start_date=date(2024, 5, 1))
        assert accrue_interest(loan, as_of=date(2024, 4, 15)) == Decimal("0")
