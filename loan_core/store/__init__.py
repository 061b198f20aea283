"""In-memory store standing in for the servicing backend."""

from loan_core.store.servicing import ClientFilters, LoanFilters, LoanServicingStore

__all__ = ["ClientFilters", "LoanFilters", "LoanServicingStore"]
