"""Loan-servicing domain models."""

from loan_core.models.financial.client import Address, BankDetails, Client
from loan_core.models.financial.enums import (
    InstallmentStatus,
    InterestMode,
    LoanStatus,
    PaymentMethod,
    RateFrequency,
    TimeWindow,
    UserRole,
)
from loan_core.models.financial.loan import Installment, Loan, Payment
from loan_core.models.financial.metrics import (
    ClientRanking,
    DashboardMetrics,
    DueInstallments,
    DueSoonEntry,
    InstallmentSummary,
    LoanInstallment,
    PortfolioReport,
    ProjectionPoint,
    StatusSlice,
    TimeSeriesPoint,
)

__all__ = [
    "Address",
    "BankDetails",
    "Client",
    "ClientRanking",
    "DashboardMetrics",
    "DueInstallments",
    "DueSoonEntry",
    "Installment",
    "InstallmentStatus",
    "InstallmentSummary",
    "InterestMode",
    "Loan",
    "LoanInstallment",
    "LoanStatus",
    "Payment",
    "PaymentMethod",
    "PortfolioReport",
    "ProjectionPoint",
    "RateFrequency",
    "StatusSlice",
    "TimeSeriesPoint",
    "TimeWindow",
    "UserRole",
]
