"""Portfolio reports: client rankings and the monthly cash-flow projection."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from loan_core.calculations.dashboard import group_payments, status_distribution
from loan_core.calculations.dates import add_months, end_of_month, iter_months, resolve_as_of, same_month
from loan_core.calculations.installments import derive_installments
from loan_core.models.financial import (
    Client,
    ClientRanking,
    Installment,
    InstallmentStatus,
    Loan,
    LoanStatus,
    Payment,
    PortfolioReport,
    ProjectionPoint,
)
from loan_core.validation import validate_loan, validate_payment

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
PROJECTION_TAIL_MONTHS = 3


def client_lending_ranking(
    clients: Iterable[Client],
    loans: Sequence[Loan],
    limit: int = 10,
) -> list[ClientRanking]:
    """Clients ranked by total principal lent to them."""
    for loan in loans:
        validate_loan(loan)

    ranking = []
    for client in clients:
        own = [loan for loan in loans if loan.client_id == client.client_id]
        ranking.append(
            ClientRanking(
                client_id=client.client_id,
                name=client.first_name,
                value=sum((loan.principal for loan in own), ZERO),
                count=len(own),
            )
        )
    return _top(ranking, limit)


def client_receipts_ranking(
    clients: Iterable[Client],
    loans: Sequence[Loan],
    payments: Sequence[Payment],
    limit: int = 10,
) -> list[ClientRanking]:
    """Clients ranked by the total they have paid across all their loans."""
    for payment in payments:
        validate_payment(payment)

    ranking = []
    for client in clients:
        loan_ids = {loan.loan_id for loan in loans if loan.client_id == client.client_id}
        paid = [p for p in payments if p.loan_id in loan_ids]
        ranking.append(
            ClientRanking(
                client_id=client.client_id,
                name=client.first_name,
                value=sum((p.amount for p in paid), ZERO),
                count=len(paid),
            )
        )
    return _top(ranking, limit)


def monthly_projection(
    loans: Sequence[Loan],
    payments: Sequence[Payment],
    *,
    as_of: date | None = None,
) -> list[ProjectionPoint]:
    """Month-by-month received, receivable and overdue amounts.

    The series runs from the month of the earliest loan start or payment
    (twelve months back when there is no data) to three months past the last
    pending installment. Receipts and overdue amounts are only reported for
    months that have started; later months are flagged as projections.

    Parameters
    ----------
    loans : Sequence[Loan]
        Portfolio loans. Settled loans contribute receipts only.
    payments : Sequence[Payment]
        Payments across the portfolio.
    as_of : date | None
        Reference date (defaults to today).

    Returns
    -------
    list[ProjectionPoint]
        One point per month, oldest first.

    Raises
    ------
    ValidationError
        If a loan or payment is structurally invalid.
    """
    today = resolve_as_of(as_of)
    by_loan = group_payments(payments)
    for loan in loans:
        validate_loan(loan)
    for payment in payments:
        validate_payment(payment)

    open_schedules: list[list[Installment]] = [
        derive_installments(loan, by_loan.get(loan.loan_id, ()), as_of=today)
        for loan in loans
        if loan.status != LoanStatus.SETTLED
    ]

    known_dates = [loan.start_date for loan in loans] + [p.date for p in payments]
    if known_dates:
        first = min(known_dates)
    else:
        first = date(today.year - 1, today.month, 1)

    last_due = today
    for schedule in open_schedules:
        for installment in schedule:
            if installment.status == InstallmentStatus.PENDING and installment.due_date > last_due:
                last_due = installment.due_date
    last = add_months(last_due, PROJECTION_TAIL_MONTHS)

    points = []
    for month in iter_months(first, last):
        is_future = month > today
        month_end = end_of_month(month)

        received = ZERO
        if not is_future:
            received = sum(
                (p.amount for p in payments if month <= p.date <= month_end),
                ZERO,
            )

        receivable = ZERO
        overdue = ZERO
        for schedule in open_schedules:
            for installment in schedule:
                if not same_month(installment.due_date, month):
                    continue
                if installment.status == InstallmentStatus.PENDING:
                    receivable += installment.total_amount
                elif installment.status == InstallmentStatus.OVERDUE and not is_future:
                    overdue += installment.total_amount

        points.append(
            ProjectionPoint(
                month=month,
                received=received,
                receivable=receivable,
                overdue=overdue,
                is_projection=is_future,
            )
        )

    logger.debug("Projection spans %d months (%s to %s)", len(points), first, last)
    return points


def build_portfolio_report(
    clients: Iterable[Client],
    loans: Sequence[Loan],
    payments: Sequence[Payment],
    *,
    as_of: date | None = None,
) -> PortfolioReport:
    """Assemble the reports page for the whole portfolio.

    Raises
    ------
    ValidationError
        If a loan or payment is structurally invalid.
    """
    for loan in loans:
        validate_loan(loan)
    for payment in payments:
        validate_payment(payment)

    today = resolve_as_of(as_of)
    clients = list(clients)

    total_lent = sum((loan.principal for loan in loans), ZERO)
    total_received = sum((p.amount for p in payments), ZERO)
    total_pending = sum(
        (
            loan.outstanding_principal + loan.accrued_interest
            for loan in loans
            if loan.status != LoanStatus.SETTLED
        ),
        ZERO,
    )

    projection = monthly_projection(loans, payments, as_of=today)
    projected = [point.receivable for point in projection if point.is_projection]
    projected_total = sum(projected, ZERO)

    recovery_rate = ZERO
    if total_lent > 0:
        recovery_rate = (total_received + projected_total) / total_lent * HUNDRED

    return PortfolioReport(
        as_of=today,
        total_lent=total_lent,
        total_received=total_received,
        total_pending=total_pending,
        status_distribution=status_distribution(loans),
        top_borrowers=client_lending_ranking(clients, loans),
        top_payers=client_receipts_ranking(clients, loans, payments),
        projection=projection,
        projected_next_3_months=sum(projected[:3], ZERO),
        projected_next_6_months=sum(projected[:6], ZERO),
        recovery_rate=recovery_rate,
    )


def _top(ranking: list[ClientRanking], limit: int) -> list[ClientRanking]:
    ranked = [entry for entry in ranking if entry.value > 0]
    ranked.sort(key=lambda entry: entry.value, reverse=True)
    return ranked[:limit]
