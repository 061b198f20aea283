"""Loan, payment and installment models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from loan_core.models.financial.enums import (
    InstallmentStatus,
    InterestMode,
    LoanStatus,
    PaymentMethod,
    RateFrequency,
)


@dataclass
class Loan:
    """Loan contract (emprestimo)."""

    loan_id: str
    client_id: str
    principal: Decimal  # Amount lent
    interest_rate: Decimal  # Percentage per rate_frequency period (e.g., 2.5 for 2.5%)
    rate_frequency: RateFrequency
    interest_mode: InterestMode
    start_date: date
    due_date: date
    status: LoanStatus
    outstanding_principal: Decimal
    accrued_interest: Decimal
    total_value: Decimal
    last_updated: datetime
    installment_count: int | None = None  # None or 1 = single bullet payment
    notes: str | None = None


@dataclass
class Payment:
    """Payment recorded against a loan (pagamento)."""

    payment_id: str
    loan_id: str
    date: date
    amount: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    method: PaymentMethod
    notes: str | None = None


@dataclass
class Installment:
    """Derived installment projection (parcela). Never persisted."""

    number: int  # 1, 2, 3, ...
    due_date: date
    principal_amount: Decimal
    interest_amount: Decimal
    total_amount: Decimal
    status: InstallmentStatus
    paid_date: date | None = None
    paid_amount: Decimal | None = None
