"""Derived view models produced by the aggregation layer."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_core.models.financial.client import Client
from loan_core.models.financial.enums import LoanStatus, TimeWindow
from loan_core.models.financial.loan import Installment, Loan

ZERO = Decimal("0")


@dataclass
class InstallmentSummary:
    """Counts and values over one loan's installments."""

    total: int = 0
    paid: int = 0
    overdue: int = 0
    pending: int = 0
    total_value: Decimal = ZERO
    paid_value: Decimal = ZERO
    pending_value: Decimal = ZERO
    paid_percentage: Decimal = ZERO


@dataclass
class DueSoonEntry:
    """Loan due within the due-soon horizon, joined with its client."""

    loan: Loan
    client: Client | None
    days_until_due: int
    is_overdue: bool


@dataclass
class DashboardMetrics:
    """Dashboard KPIs for one role, user and time window."""

    as_of: date
    time_window: TimeWindow
    upcoming_due_soon: list[DueSoonEntry] = field(default_factory=list)
    total_accrued_interest: Decimal = ZERO
    total_principal_lent: Decimal = ZERO
    total_outstanding_principal: Decimal = ZERO
    total_receivable: Decimal = ZERO
    monthly_interest_estimate: Decimal = ZERO
    daily_interest_estimate: Decimal = ZERO
    total_loans: int = 0
    active_loans: int = 0
    overdue_loans: int = 0
    settled_loans: int = 0


@dataclass
class StatusSlice:
    """One slice of the loan status distribution chart."""

    status: LoanStatus
    count: int
    value: Decimal
    percentage: Decimal


@dataclass
class TimeSeriesPoint:
    """Cumulative portfolio figures as of one sampled date."""

    date: date
    total_lent: Decimal
    total_received: Decimal
    accrued_interest: Decimal
    total_receivable: Decimal
    active_loans: int


@dataclass
class LoanInstallment:
    """Installment paired with the loan it belongs to."""

    loan: Loan
    installment: Installment


@dataclass
class DueInstallments:
    """Overdue and upcoming installments across a portfolio."""

    overdue: list[LoanInstallment] = field(default_factory=list)
    upcoming: list[LoanInstallment] = field(default_factory=list)


@dataclass
class ClientRanking:
    """Bar in a per-client ranking chart."""

    client_id: str
    name: str
    value: Decimal
    count: int


@dataclass
class ProjectionPoint:
    """Monthly cash flow: received so far, receivable and overdue."""

    month: date  # first day of the month
    received: Decimal
    receivable: Decimal
    overdue: Decimal
    is_projection: bool


@dataclass
class PortfolioReport:
    """Everything shown on the reports page."""

    as_of: date
    total_lent: Decimal
    total_received: Decimal
    total_pending: Decimal
    status_distribution: list[StatusSlice]
    top_borrowers: list[ClientRanking]
    top_payers: list[ClientRanking]
    projection: list[ProjectionPoint]
    projected_next_3_months: Decimal
    projected_next_6_months: Decimal
    recovery_rate: Decimal
