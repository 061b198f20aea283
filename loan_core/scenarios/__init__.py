"""Scenarios for generating realistic lending portfolios."""

from loan_core.scenarios.portfolio import LoanPortfolioScenario

__all__ = ["LoanPortfolioScenario"]
