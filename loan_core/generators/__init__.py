"""Seed data generators."""

from loan_core.generators.client import ClientGenerator
from loan_core.generators.loan import LoanGenerator, PaymentGenerator

__all__ = ["ClientGenerator", "LoanGenerator", "PaymentGenerator"]
