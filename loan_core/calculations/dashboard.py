"""Dashboard KPIs, status distribution and time series over a loan portfolio."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from loan_core.calculations.dates import days_until, resolve_as_of, start_of_month, window_start
from loan_core.calculations.installments import derive_installments
from loan_core.config import DashboardConfig
from loan_core.models.financial import (
    Client,
    DashboardMetrics,
    DueInstallments,
    DueSoonEntry,
    InstallmentStatus,
    Loan,
    LoanInstallment,
    LoanStatus,
    Payment,
    StatusSlice,
    TimeSeriesPoint,
    TimeWindow,
    UserRole,
)
from loan_core.validation import validate_loan, validate_payment

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# (lookback days, sampling interval in days) per window; None lookback = oldest loan
SERIES_SAMPLING = {
    TimeWindow.DAY_1: (7, 1),
    TimeWindow.DAYS_7: (7, 1),
    TimeWindow.DAYS_30: (30, 2),
    TimeWindow.DAYS_90: (90, 7),
    TimeWindow.ALL: (None, 30),
}


def filter_by_time_window(
    loans: Iterable[Loan],
    time_window: TimeWindow,
    *,
    as_of: date | None = None,
) -> list[Loan]:
    """Keep loans that started inside the window ending at ``as_of``.

    Loans older than the window are dropped entirely, so changing the window
    changes which loans every KPI is computed over.

    Raises
    ------
    ValidationError
        If a loan is structurally invalid.
    """
    loans = list(loans)
    for loan in loans:
        validate_loan(loan)

    cutoff = window_start(time_window, resolve_as_of(as_of))
    if cutoff is None:
        return loans
    return [loan for loan in loans if loan.start_date >= cutoff]


def compute_dashboard_metrics(
    loans: Iterable[Loan],
    role: UserRole,
    user_id: str | None = None,
    time_window: TimeWindow = TimeWindow.DAYS_30,
    *,
    clients: Mapping[str, Client] | None = None,
    as_of: date | None = None,
    config: DashboardConfig | None = None,
) -> DashboardMetrics:
    """Compute the dashboard KPIs for the caller's loans.

    Parameters
    ----------
    loans : Iterable[Loan]
        Loans visible to the caller.
    role : UserRole
        Acting role. A CLIENT with a ``user_id`` only sees loans whose
        ``client_id`` matches.
    user_id : str | None
        Client id of the acting user.
    time_window : TimeWindow
        Start-date window applied before any aggregation.
    clients : Mapping[str, Client] | None
        Client records by id, joined onto the due-soon list.
    as_of : date | None
        Reference date (defaults to today).
    config : DashboardConfig | None
        Due-soon horizon, list cap and day-count conventions.

    Returns
    -------
    DashboardMetrics
        Fresh metrics; zeros and an empty due-soon list for no loans.

    Raises
    ------
    ValidationError
        If any loan is structurally invalid.
    """
    config = config or DashboardConfig()
    today = resolve_as_of(as_of)
    clients = clients or {}

    scoped = list(loans)
    for loan in scoped:
        validate_loan(loan)
    if role == UserRole.CLIENT and user_id is not None:
        scoped = [loan for loan in scoped if loan.client_id == user_id]

    selected = filter_by_time_window(scoped, time_window, as_of=today)

    logger.debug(
        "Computing dashboard for %s over %d of %d loans (window=%s)",
        role.value,
        len(selected),
        len(scoped),
        time_window.value,
    )

    month_start = start_of_month(today)
    month_days = Decimal(config.month_day_count)
    year_days = Decimal(config.year_day_count)

    return DashboardMetrics(
        as_of=today,
        time_window=time_window,
        upcoming_due_soon=_due_soon(selected, clients, today, config),
        total_accrued_interest=sum((l.accrued_interest for l in selected), ZERO),
        total_principal_lent=sum((l.principal for l in selected), ZERO),
        total_outstanding_principal=sum((l.outstanding_principal for l in selected), ZERO),
        total_receivable=sum(
            (
                l.outstanding_principal + l.accrued_interest
                for l in selected
                if l.status != LoanStatus.SETTLED
            ),
            ZERO,
        ),
        monthly_interest_estimate=sum(
            (l.accrued_interest / month_days for l in selected if l.start_date >= month_start),
            ZERO,
        ),
        daily_interest_estimate=sum(
            (
                l.interest_rate / year_days * l.outstanding_principal
                for l in selected
                if l.status == LoanStatus.ACTIVE
            ),
            ZERO,
        ),
        total_loans=len(selected),
        active_loans=_count(selected, LoanStatus.ACTIVE),
        overdue_loans=_count(selected, LoanStatus.OVERDUE),
        settled_loans=_count(selected, LoanStatus.SETTLED),
    )


def status_distribution(loans: Sequence[Loan]) -> list[StatusSlice]:
    """Count and principal per loan status, with the share of the total count."""
    total = len(loans)
    slices = []
    for status in LoanStatus:
        members = [loan for loan in loans if loan.status == status]
        slices.append(
            StatusSlice(
                status=status,
                count=len(members),
                value=sum((loan.principal for loan in members), ZERO),
                percentage=Decimal(len(members)) / Decimal(total) * HUNDRED if total else ZERO,
            )
        )
    return slices


def time_series(
    loans: Sequence[Loan],
    payments: Sequence[Payment],
    time_window: TimeWindow,
    *,
    as_of: date | None = None,
) -> list[TimeSeriesPoint]:
    """Sample cumulative portfolio figures across the window.

    Each point counts loans started on or before the sampled date and
    payments made on or before it. Loan balances are taken as currently
    recorded, not reconstructed historically.
    """
    for loan in loans:
        validate_loan(loan)
    for payment in payments:
        validate_payment(payment)
    if not loans:
        return []

    today = resolve_as_of(as_of)
    lookback, interval = SERIES_SAMPLING[time_window]
    if lookback is None:
        current = min(loan.start_date for loan in loans)
    else:
        current = today - timedelta(days=lookback)

    points = []
    while current <= today:
        started = [loan for loan in loans if loan.start_date <= current]
        received = sum((p.amount for p in payments if p.date <= current), ZERO)
        points.append(
            TimeSeriesPoint(
                date=current,
                total_lent=sum((l.principal for l in started), ZERO),
                total_received=received,
                accrued_interest=sum((l.accrued_interest for l in started), ZERO),
                total_receivable=sum(
                    (
                        l.outstanding_principal + l.accrued_interest
                        for l in started
                        if l.status != LoanStatus.SETTLED
                    ),
                    ZERO,
                ),
                active_loans=_count(started, LoanStatus.ACTIVE),
            )
        )
        current += timedelta(days=interval)

    return points


def due_installments(
    loans: Iterable[Loan],
    payments: Iterable[Payment],
    *,
    as_of: date | None = None,
    horizon_days: int = 30,
) -> DueInstallments:
    """Overdue installments and pending ones due within ``horizon_days``.

    Both lists are sorted by ascending due date.
    """
    today = resolve_as_of(as_of)
    by_loan = group_payments(payments)

    overdue: list[LoanInstallment] = []
    upcoming: list[LoanInstallment] = []
    for loan in loans:
        for installment in derive_installments(loan, by_loan.get(loan.loan_id, ()), as_of=today):
            if installment.status == InstallmentStatus.OVERDUE:
                overdue.append(LoanInstallment(loan=loan, installment=installment))
            elif installment.status == InstallmentStatus.PENDING:
                if 0 <= days_until(installment.due_date, today) <= horizon_days:
                    upcoming.append(LoanInstallment(loan=loan, installment=installment))

    overdue.sort(key=lambda item: item.installment.due_date)
    upcoming.sort(key=lambda item: item.installment.due_date)
    return DueInstallments(overdue=overdue, upcoming=upcoming)


def group_payments(payments: Iterable[Payment]) -> dict[str, list[Payment]]:
    """Index payments by loan id, keeping input order within each loan."""
    grouped: dict[str, list[Payment]] = defaultdict(list)
    for payment in payments:
        grouped[payment.loan_id].append(payment)
    return dict(grouped)


def _count(loans: Iterable[Loan], status: LoanStatus) -> int:
    return sum(1 for loan in loans if loan.status == status)


def _due_soon(
    loans: Sequence[Loan],
    clients: Mapping[str, Client],
    today: date,
    config: DashboardConfig,
) -> list[DueSoonEntry]:
    candidates = [
        loan
        for loan in loans
        if loan.status == LoanStatus.ACTIVE
        and days_until(loan.due_date, today) <= config.due_soon_days
    ]
    # Overdue first, then earliest due date
    candidates.sort(key=lambda loan: (not loan.due_date < today, loan.due_date))

    return [
        DueSoonEntry(
            loan=loan,
            client=clients.get(loan.client_id),
            days_until_due=days_until(loan.due_date, today),
            is_overdue=loan.due_date < today,
        )
        for loan in candidates[: config.due_soon_limit]
    ]
