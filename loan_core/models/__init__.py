"""Domain models for loan servicing."""

from loan_core.models.financial import Address, Client, Installment, Loan, Payment

__all__ = ["Address", "Client", "Installment", "Loan", "Payment"]
