"""Loan and payment generators for seed data."""

from __future__ import annotations

import random
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from loan_core.calculations.dates import add_months, resolve_as_of
from loan_core.calculations.interest import accrue_interest
from loan_core.generators.base import BaseGenerator
from loan_core.models.financial import (
    InterestMode,
    Loan,
    LoanStatus,
    Payment,
    PaymentMethod,
    RateFrequency,
)

CENTS = Decimal("0.01")


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class LoanGenerator(BaseGenerator):
    """Generate synthetic loans with interest accrued up to a reference date."""

    INSTALLMENT_CHOICES = [None, 3, 6, 8, 12]
    NOTES = [
        "Empréstimo pessoal",
        "Reforma da casa",
        "Capital de giro",
        "Empréstimo de emergência",
        "Compra de equipamento",
    ]

    # Typical rates in percent per period
    RATE_RANGES = {
        RateFrequency.MONTHLY: (1.5, 5.0),
        RateFrequency.ANNUAL: (12.0, 36.0),
    }

    def generate(self, client_id: str, as_of: date | None = None) -> Loan:
        """Generate a loan for a client.

        Parameters
        ----------
        client_id : str
            Borrower id.
        as_of : date | None
            Reference date; the loan starts within the preceding year and
            interest is accrued up to it.

        Returns
        -------
        Loan
            ACTIVE loan, or OVERDUE when its final due date has passed.
        """
        today = resolve_as_of(as_of)
        frequency = random.choices(
            [RateFrequency.MONTHLY, RateFrequency.ANNUAL], weights=[0.8, 0.2], k=1
        )[0]
        low, high = self.RATE_RANGES[frequency]

        principal = Decimal(random.randint(10, 200) * 100)
        installment_count = random.choice(self.INSTALLMENT_CHOICES)
        start_date = today - timedelta(days=random.randint(0, 365))
        due_date = add_months(start_date, installment_count or 1)

        loan = Loan(
            loan_id=self.fake.uuid4(),
            client_id=client_id,
            principal=principal,
            interest_rate=Decimal(str(round(random.uniform(low, high), 1))),
            rate_frequency=frequency,
            interest_mode=random.choice(list(InterestMode)),
            start_date=start_date,
            due_date=due_date,
            status=LoanStatus.OVERDUE if due_date < today else LoanStatus.ACTIVE,
            outstanding_principal=principal,
            accrued_interest=Decimal("0"),
            total_value=principal,
            last_updated=datetime.now(),
            installment_count=installment_count,
            notes=random.choice(self.NOTES),
        )

        accrued = _to_cents(accrue_interest(loan, as_of=today))
        return replace(loan, accrued_interest=accrued, total_value=principal + accrued)


class PaymentGenerator(BaseGenerator):
    """Generate payments for the installments that have already fallen due."""

    METHODS = list(PaymentMethod)

    def __init__(self, seed: int | None = None, on_time_rate: float = 0.80) -> None:
        super().__init__(seed)
        self.on_time_rate = on_time_rate

    def generate_for_loan(self, loan: Loan, as_of: date | None = None) -> Iterator[Payment]:
        """Yield payments in date order, one per paid installment.

        Each payment lands in the same calendar month as the installment it
        pays, on or before the due day. Installments are skipped with
        probability ``1 - on_time_rate``. Principal portions are rounded to
        cents and the last installment carries the rounding remainder.
        """
        today = resolve_as_of(as_of)
        count = loan.installment_count if loan.installment_count and loan.installment_count > 1 else 1
        principal_share = _to_cents(loan.principal / count)
        interest_share = _to_cents(loan.accrued_interest / count)

        for number in range(1, count + 1):
            due = loan.due_date if count == 1 else add_months(loan.start_date, number)
            if due > today:
                break
            if random.random() > self.on_time_rate:
                continue

            principal_portion = principal_share
            if number == count:
                principal_portion = loan.principal - principal_share * (count - 1)

            yield Payment(
                payment_id=self.fake.uuid4(),
                loan_id=loan.loan_id,
                date=due.replace(day=random.randint(1, due.day)),
                amount=principal_portion + interest_share,
                principal_portion=principal_portion,
                interest_portion=interest_share,
                method=random.choice(self.METHODS),
            )
