"""Installment derivation and portfolio aggregation."""

from loan_core.calculations.dashboard import (
    compute_dashboard_metrics,
    due_installments,
    filter_by_time_window,
    status_distribution,
    time_series,
)
from loan_core.calculations.installments import (
    derive_installments,
    future_installments,
    summarize_installments,
)
from loan_core.calculations.reports import (
    build_portfolio_report,
    client_lending_ranking,
    client_receipts_ranking,
    monthly_projection,
)

__all__ = [
    "build_portfolio_report",
    "client_lending_ranking",
    "client_receipts_ranking",
    "compute_dashboard_metrics",
    "derive_installments",
    "due_installments",
    "filter_by_time_window",
    "future_installments",
    "monthly_projection",
    "status_distribution",
    "summarize_installments",
    "time_series",
]
