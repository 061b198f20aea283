"""Installment derivation and portfolio aggregation for loan servicing."""

__version__ = "0.1.0"
