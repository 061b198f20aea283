"""Installment projections derived from a loan and its payments.

Installments are never stored. They are recomputed from the loan record
every time, so the schedule always reflects the latest balances.

Scheduling rules:

- Principal and accrued interest are split evenly across installments; there
  is no declining-balance amortization.
- A payment settles the installment whose due date falls in the same calendar
  month and year. Payments carry no installment number, so two payments in one
  month cannot be told apart; the first one in input order is used.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from loan_core.calculations.dates import add_months, resolve_as_of, same_month
from loan_core.models.financial import (
    Installment,
    InstallmentStatus,
    InstallmentSummary,
    Loan,
    LoanStatus,
    Payment,
)
from loan_core.validation import validate_loan, validate_payment

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def derive_installments(
    loan: Loan,
    payments: Iterable[Payment] = (),
    *,
    as_of: date | None = None,
) -> list[Installment]:
    """Project the installments of a loan.

    Parameters
    ----------
    loan : Loan
        Loan to project. Not modified.
    payments : Iterable[Payment]
        Payments recorded against the loan, in any order.
    as_of : date | None
        Reference date for overdue classification (defaults to today).

    Returns
    -------
    list[Installment]
        Installments in ascending ``number`` order.

    Raises
    ------
    ValidationError
        If the loan or a payment is structurally invalid.
    """
    validate_loan(loan)
    payments = list(payments)
    for payment in payments:
        validate_payment(payment)

    today = resolve_as_of(as_of)

    if _is_single_payment(loan):
        return [_bullet_installment(loan, today)]

    return [
        _scheduled_installment(loan, number, payments, today)
        for number in range(1, loan.installment_count + 1)
    ]


def future_installments(loan: Loan, *, as_of: date | None = None) -> list[Installment]:
    """Installments still to come, ignoring payments.

    Only multi-installment loans have a schedule; a bullet loan returns an
    empty list.
    """
    validate_loan(loan)
    if _is_single_payment(loan):
        return []

    today = resolve_as_of(as_of)
    principal_share, interest_share = _even_shares(loan)
    upcoming = []
    for number in range(1, loan.installment_count + 1):
        due = add_months(loan.start_date, number)
        if due > today:
            upcoming.append(
                Installment(
                    number=number,
                    due_date=due,
                    principal_amount=principal_share,
                    interest_amount=interest_share,
                    total_amount=principal_share + interest_share,
                    status=InstallmentStatus.PENDING,
                )
            )
    return upcoming


def summarize_installments(installments: Sequence[Installment]) -> InstallmentSummary:
    """Count installments by status and total their values."""
    total = len(installments)
    paid = sum(1 for i in installments if i.status == InstallmentStatus.PAID)

    return InstallmentSummary(
        total=total,
        paid=paid,
        overdue=sum(1 for i in installments if i.status == InstallmentStatus.OVERDUE),
        pending=sum(1 for i in installments if i.status == InstallmentStatus.PENDING),
        total_value=sum((i.total_amount for i in installments), ZERO),
        paid_value=sum((i.paid_amount or ZERO for i in installments), ZERO),
        pending_value=sum(
            (i.total_amount for i in installments if i.status != InstallmentStatus.PAID),
            ZERO,
        ),
        paid_percentage=Decimal(paid) / Decimal(total) * HUNDRED if total else ZERO,
    )


def _is_single_payment(loan: Loan) -> bool:
    return loan.installment_count is None or loan.installment_count <= 1


def _even_shares(loan: Loan) -> tuple[Decimal, Decimal]:
    count = Decimal(loan.installment_count)
    return loan.principal / count, loan.accrued_interest / count


def _overdue_or_pending(due: date, today: date) -> InstallmentStatus:
    return InstallmentStatus.OVERDUE if due < today else InstallmentStatus.PENDING


def _bullet_installment(loan: Loan, today: date) -> Installment:
    total = loan.principal + loan.accrued_interest

    if loan.status == LoanStatus.SETTLED:
        return Installment(
            number=1,
            due_date=loan.due_date,
            principal_amount=loan.principal,
            interest_amount=loan.accrued_interest,
            total_amount=total,
            status=InstallmentStatus.PAID,
            paid_date=loan.due_date,
            paid_amount=total,
        )

    return Installment(
        number=1,
        due_date=loan.due_date,
        principal_amount=loan.principal,
        interest_amount=loan.accrued_interest,
        total_amount=total,
        status=_overdue_or_pending(loan.due_date, today),
    )


def _scheduled_installment(
    loan: Loan,
    number: int,
    payments: list[Payment],
    today: date,
) -> Installment:
    principal_share, interest_share = _even_shares(loan)
    due = add_months(loan.start_date, number)
    match = next((p for p in payments if same_month(p.date, due)), None)

    if match is not None:
        return Installment(
            number=number,
            due_date=due,
            principal_amount=principal_share,
            interest_amount=interest_share,
            total_amount=principal_share + interest_share,
            status=InstallmentStatus.PAID,
            paid_date=match.date,
            paid_amount=match.amount,
        )

    return Installment(
        number=number,
        due_date=due,
        principal_amount=principal_share,
        interest_amount=interest_share,
        total_amount=principal_share + interest_share,
        status=_overdue_or_pending(due, today),
    )
