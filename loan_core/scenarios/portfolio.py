"""Loan portfolio scenario for seeding a servicing store."""

from __future__ import annotations

import logging
import random
from datetime import date
from decimal import Decimal
from typing import Any

from loan_core.calculations.dates import resolve_as_of
from loan_core.config import SeedConfig
from loan_core.generators import ClientGenerator, LoanGenerator, PaymentGenerator
from loan_core.models.financial import LoanStatus
from loan_core.store import LoanServicingStore

logger = logging.getLogger(__name__)


class LoanPortfolioScenario:
    """Generate a small lending portfolio with payment history.

    This scenario creates:
    - Clients with valid CPFs and Brazilian addresses
    - One or more loans per client, bullet or in monthly installments
    - Payments for installments already due, some of them skipped so
      that part of the portfolio is behind
    """

    def __init__(
        self,
        num_clients: int = 10,
        loans_per_client: tuple[int, int] = (1, 3),
        on_time_rate: float = 0.80,
        seed: int | None = None,
        as_of: date | None = None,
        *,
        config: SeedConfig | None = None,
    ) -> None:
        """Initialize loan portfolio scenario.

        Parameters
        ----------
        num_clients : int
            Number of clients to generate.
        loans_per_client : tuple[int, int]
            Inclusive range of loans per client.
        on_time_rate : float
            Probability that a due installment was paid.
        seed : int | None
            Random seed for reproducibility.
        as_of : date | None
            Reference date for loan ages and payments (defaults to today).
        config : SeedConfig | None
            Optional seed configuration. If provided, overrides the
            keyword values above.
        """
        if config is not None:
            num_clients = config.num_clients
            loans_per_client = config.loans_per_client
            on_time_rate = config.on_time_rate
            as_of = config.as_of if config.as_of is not None else as_of

        self.num_clients = num_clients
        self.loans_per_client = loans_per_client
        self.on_time_rate = on_time_rate
        self.seed = seed
        self.as_of = resolve_as_of(as_of)

        if seed is not None:
            random.seed(seed)

        self.store = LoanServicingStore()
        self._client_gen = ClientGenerator(seed=seed)
        self._loan_gen = LoanGenerator(seed=seed)
        self._payment_gen = PaymentGenerator(seed=seed, on_time_rate=on_time_rate)

    def generate(self) -> LoanServicingStore:
        """Generate all data for the portfolio.

        Returns
        -------
        LoanServicingStore
            Store containing clients, loans and recorded payments.
        """
        logger.info(
            "Starting loan portfolio scenario: %d clients, as of %s",
            self.num_clients,
            self.as_of,
        )

        for client in self._client_gen.generate_batch(self.num_clients):
            self.store.add_client(client)

            for _ in range(random.randint(*self.loans_per_client)):
                loan = self._loan_gen.generate(client.client_id, as_of=self.as_of)
                self.store.add_loan(loan)

                for payment in self._payment_gen.generate_for_loan(loan, as_of=self.as_of):
                    updated = self.store.record_payment(payment)
                    if updated.status == LoanStatus.SETTLED:
                        break

        logger.info(
            "Generated %d loans (%d settled) with %d payments",
            len(self.store.loans),
            sum(1 for l in self.store.loans.values() if l.status == LoanStatus.SETTLED),
            len(self.store.payments),
        )
        return self.store

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (JsonFileSink, ConsoleSink).
        """
        for sink in sinks:
            sink.write_batch("clients", list(self.store.clients.values()))
            sink.write_batch("loans", list(self.store.loans.values()))
            sink.write_batch("payments", self.store.payments)

        logger.info("Exported loan portfolio to %d sinks", len(sinks))

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Get summary statistics for the portfolio.

        Returns
        -------
        dict[str, Any]
            Portfolio summary statistics, empty when no loans exist.
        """
        loans = list(self.store.loans.values())
        if not loans:
            return {}

        status_counts: dict[str, int] = {}
        for loan in loans:
            status_counts[loan.status.value] = status_counts.get(loan.status.value, 0) + 1

        return {
            "total_loans": len(loans),
            "total_principal": sum((l.principal for l in loans), Decimal("0")),
            "average_interest_rate": sum((l.interest_rate for l in loans), Decimal("0")) / len(loans),
            "loan_status_distribution": status_counts,
            "installment_loans": sum(1 for l in loans if (l.installment_count or 0) > 1),
            "payments": len(self.store.payments),
        }
