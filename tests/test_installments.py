"""Tests for installment derivation."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from loan_core.calculations.installments import (
    derive_installments,
    future_installments,
    summarize_installments,
)
from loan_core.exceptions import ValidationError
from loan_core.models.financial import InstallmentStatus, LoanStatus

CENTS = Decimal("0.01")


class TestSingleInstallment:
    """Loans without an installment count are one bullet payment."""

    def test_single_installment_totals(self, make_loan, as_of) -> None:
        loan = make_loan()
        installments = derive_installments(loan, as_of=as_of)

        assert len(installments) == 1
        only = installments[0]
        assert only.number == 1
        assert only.due_date == loan.due_date
        assert only.principal_amount == Decimal("5000")
        assert only.interest_amount == Decimal("875")
        assert only.total_amount == Decimal("5875")
        assert only.status == InstallmentStatus.PENDING
        assert only.paid_date is None
        assert only.paid_amount is None

    @pytest.mark.parametrize("count", [None, 0, 1])
    def test_counts_up_to_one_are_single(self, make_loan, as_of, count) -> None:
        installments = derive_installments(make_loan(installment_count=count), as_of=as_of)
        assert len(installments) == 1

    def test_settled_loan_is_paid_on_due_date(self, make_loan, as_of) -> None:
        loan = make_loan(status=LoanStatus.SETTLED, outstanding_principal=Decimal("0"))
        only = derive_installments(loan, as_of=as_of)[0]

        assert only.status == InstallmentStatus.PAID
        assert only.paid_date == loan.due_date
        assert only.paid_amount == Decimal("5875")

    def test_past_due_is_overdue(self, make_loan, as_of) -> None:
        loan = make_loan(due_date=date(2024, 4, 10))
        assert derive_installments(loan, as_of=as_of)[0].status == InstallmentStatus.OVERDUE

    def test_due_today_is_pending(self, make_loan, as_of) -> None:
        loan = make_loan(due_date=as_of)
        assert derive_installments(loan, as_of=as_of)[0].status == InstallmentStatus.PENDING

    def test_payments_do_not_mark_bullet_paid(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(due_date=date(2024, 2, 20))
        only = derive_installments(loan, [make_payment()], as_of=as_of)[0]
        assert only.status == InstallmentStatus.OVERDUE


class TestScheduledInstallments:
    """Multi-installment loans are split evenly across monthly due dates."""

    def test_six_installment_schedule(self, make_loan, as_of) -> None:
        loan = make_loan(installment_count=6)
        installments = derive_installments(loan, [], as_of=as_of)

        assert [i.number for i in installments] == [1, 2, 3, 4, 5, 6]
        assert [i.due_date for i in installments] == [
            date(2024, 2, 1),
            date(2024, 3, 1),
            date(2024, 4, 1),
            date(2024, 5, 1),
            date(2024, 6, 1),
            date(2024, 7, 1),
        ]
        for installment in installments:
            assert installment.principal_amount.quantize(CENTS) == Decimal("833.33")
            assert installment.interest_amount.quantize(CENTS) == Decimal("145.83")
            assert installment.total_amount == (
                installment.principal_amount + installment.interest_amount
            )

        statuses = [i.status for i in installments]
        assert statuses[:3] == [InstallmentStatus.OVERDUE] * 3
        assert statuses[3:] == [InstallmentStatus.PENDING] * 3

    def test_even_split_sums_to_loan_figures(self, make_loan, as_of) -> None:
        loan = make_loan(installment_count=7, principal=Decimal("1000"), accrued_interest=Decimal("100"))
        installments = derive_installments(loan, as_of=as_of)

        principal_total = sum(i.principal_amount for i in installments)
        interest_total = sum(i.interest_amount for i in installments)
        assert abs(principal_total - Decimal("1000")) < Decimal("0.000001")
        assert abs(interest_total - Decimal("100")) < Decimal("0.000001")

    def test_same_month_payment_marks_paid(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        payment = make_payment(date=date(2024, 3, 20), amount=Decimal("1000"))

        installments = derive_installments(loan, [payment], as_of=as_of)

        second = installments[1]
        assert second.status == InstallmentStatus.PAID
        assert second.paid_date == date(2024, 3, 20)
        assert second.paid_amount == Decimal("1000")
        assert installments[0].status == InstallmentStatus.OVERDUE

    def test_future_installment_paid_early(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        payment = make_payment(date=date(2024, 6, 1))

        installments = derive_installments(loan, [payment], as_of=as_of)
        assert installments[4].status == InstallmentStatus.PAID

    def test_payment_in_other_year_does_not_match(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        payment = make_payment(date=date(2023, 2, 15))

        installments = derive_installments(loan, [payment], as_of=as_of)
        assert all(i.status != InstallmentStatus.PAID for i in installments)

    def test_first_payment_in_month_wins(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        later = make_payment(date=date(2024, 2, 25), amount=Decimal("300"))
        earlier = make_payment(date=date(2024, 2, 3), amount=Decimal("700"))

        first = derive_installments(loan, [later, earlier], as_of=as_of)[0]
        assert first.paid_date == date(2024, 2, 25)
        assert first.paid_amount == Decimal("300")

    def test_payment_order_does_not_change_statuses(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        payments = [
            make_payment(date=date(2024, 4, 2)),
            make_payment(date=date(2024, 2, 2)),
            make_payment(date=date(2024, 3, 2)),
        ]

        forward = derive_installments(loan, payments, as_of=as_of)
        backward = derive_installments(loan, list(reversed(payments)), as_of=as_of)

        assert [i.status for i in forward] == [i.status for i in backward]
        assert [i.status for i in forward][:3] == [InstallmentStatus.PAID] * 3

    def test_month_end_start_date_is_clamped(self, make_loan, as_of) -> None:
        loan = make_loan(installment_count=3, start_date=date(2024, 1, 31))
        installments = derive_installments(loan, as_of=as_of)

        assert [i.due_date for i in installments] == [
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_inputs_are_not_mutated(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        payments = [make_payment()]
        loan_before = replace(loan)
        payments_before = list(payments)

        derive_installments(loan, payments, as_of=as_of)

        assert loan == loan_before
        assert payments == payments_before

    def test_deterministic_for_fixed_as_of(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=12)
        payments = [make_payment(date=date(2024, 3, 10))]

        assert derive_installments(loan, payments, as_of=as_of) == derive_installments(
            loan, payments, as_of=as_of
        )


class TestValidation:
    """Structurally invalid records are rejected."""

    def test_negative_installment_count(self, make_loan, as_of) -> None:
        with pytest.raises(ValidationError, match="installment count"):
            derive_installments(make_loan(installment_count=-2), as_of=as_of)

    def test_missing_start_date(self, make_loan, as_of) -> None:
        with pytest.raises(ValidationError, match="start date"):
            derive_installments(make_loan(start_date=None), as_of=as_of)

    def test_missing_due_date(self, make_loan, as_of) -> None:
        with pytest.raises(ValidationError, match="due date"):
            derive_installments(make_loan(due_date=None), as_of=as_of)

    def test_non_positive_principal(self, make_loan, as_of) -> None:
        with pytest.raises(ValidationError, match="principal"):
            derive_installments(make_loan(principal=Decimal("0")), as_of=as_of)

    def test_payment_without_date(self, make_loan, make_payment, as_of) -> None:
        with pytest.raises(ValidationError, match="no date"):
            derive_installments(make_loan(installment_count=3), [make_payment(date=None)], as_of=as_of)


class TestFutureInstallments:
    """Tests for future_installments."""

    def test_only_after_as_of(self, make_loan, as_of) -> None:
        upcoming = future_installments(make_loan(installment_count=6), as_of=as_of)

        assert [i.number for i in upcoming] == [4, 5, 6]
        assert all(i.status == InstallmentStatus.PENDING for i in upcoming)

    def test_single_payment_loan_has_no_schedule(self, make_loan, as_of) -> None:
        assert future_installments(make_loan(), as_of=as_of) == []


class TestSummarizeInstallments:
    """Tests for summarize_installments."""

    def test_summary_counts_and_values(self, make_loan, make_payment, as_of) -> None:
        loan = make_loan(installment_count=6)
        installments = derive_installments(loan, [make_payment()], as_of=as_of)

        summary = summarize_installments(installments)

        assert summary.total == 6
        assert summary.paid == 1
        assert summary.overdue == 2
        assert summary.pending == 3
        assert abs(summary.total_value - Decimal("5875")) < Decimal("0.000001")
        assert summary.paid_value == Decimal("979.17")
        assert abs(summary.pending_value - Decimal("5875") * 5 / 6) < Decimal("0.000001")
        assert summary.paid_percentage.quantize(CENTS) == Decimal("16.67")

    def test_empty_summary(self) -> None:
        summary = summarize_installments([])

        assert summary.total == 0
        assert summary.paid_percentage == Decimal("0")
