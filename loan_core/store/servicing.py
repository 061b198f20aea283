"""In-memory loan servicing store with referential integrity."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal

from loan_core.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
    ValidationError,
)
from loan_core.models.financial import (
    Client,
    InterestMode,
    Loan,
    LoanStatus,
    Payment,
    RateFrequency,
    UserRole,
)
from loan_core.validation import (
    is_valid_document,
    is_valid_email,
    only_digits,
    validate_loan,
    validate_payment,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class LoanFilters:
    """Optional criteria for ``LoanServicingStore.find_loans``."""

    client_id: str | None = None
    status: LoanStatus | None = None
    due_from: date | None = None
    due_to: date | None = None
    min_principal: Decimal | None = None
    max_principal: Decimal | None = None
    search: str | None = None  # matches client name, document or loan notes


@dataclass
class ClientFilters:
    """Optional criteria for ``LoanServicingStore.find_clients``."""

    search: str | None = None  # full-name prefix, case-insensitive
    document: str | None = None
    city: str | None = None
    state: str | None = None
    limit: int | None = None


@dataclass
class LoanServicingStore:
    """In-memory store for clients, loans and payments."""

    clients: dict[str, Client] = field(default_factory=dict)
    loans: dict[str, Loan] = field(default_factory=dict)
    payments: list[Payment] = field(default_factory=list)

    # Relationship indexes
    _client_loans: dict[str, list[str]] = field(default_factory=dict)
    _loan_payments: dict[str, list[int]] = field(default_factory=dict)

    def add_client(self, client: Client) -> None:
        """Add a client to the store."""
        _check_client(client)

        self.clients[client.client_id] = client
        self._client_loans.setdefault(client.client_id, [])

    def update_client(self, client_id: str, **changes: object) -> Client:
        """Replace a client with a copy carrying ``changes``.

        ``updated_at`` is refreshed unless the caller supplies it.
        """
        client = self.get_client(client_id)
        if "client_id" in changes and changes["client_id"] != client_id:
            raise InvalidEntityStateError(f"Client {client_id} cannot change its id")

        changes.setdefault("updated_at", datetime.now())
        updated = replace(client, **changes)
        _check_client(updated)
        self.clients[client_id] = updated
        return updated

    def remove_client(self, client_id: str) -> None:
        """Delete a client that has no loans."""
        self.get_client(client_id)
        if self._client_loans.get(client_id):
            raise ReferentialIntegrityError(
                f"Client {client_id} still has {len(self._client_loans[client_id])} loans"
            )

        del self.clients[client_id]
        self._client_loans.pop(client_id, None)
        logger.info("Removed client %s", client_id)

    def add_loan(self, loan: Loan) -> None:
        """Add an existing loan record to the store."""
        if loan.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {loan.client_id} not found")
        validate_loan(loan)

        self.loans[loan.loan_id] = loan
        self._client_loans[loan.client_id].append(loan.loan_id)
        self._loan_payments.setdefault(loan.loan_id, [])

    def open_loan(
        self,
        loan_id: str,
        client_id: str,
        principal: Decimal,
        interest_rate: Decimal,
        start_date: date,
        due_date: date,
        rate_frequency: RateFrequency = RateFrequency.MONTHLY,
        interest_mode: InterestMode = InterestMode.SIMPLE,
        installment_count: int | None = None,
        notes: str | None = None,
    ) -> Loan:
        """Create a new ACTIVE loan with the full principal outstanding."""
        loan = Loan(
            loan_id=loan_id,
            client_id=client_id,
            principal=principal,
            interest_rate=interest_rate,
            rate_frequency=rate_frequency,
            interest_mode=interest_mode,
            start_date=start_date,
            due_date=due_date,
            status=LoanStatus.ACTIVE,
            outstanding_principal=principal,
            accrued_interest=ZERO,
            total_value=principal,
            last_updated=datetime.now(),
            installment_count=installment_count,
            notes=notes,
        )
        self.add_loan(loan)
        logger.info(
            "Opened loan %s for client %s",
            loan_id,
            client_id,
            extra={"extra": {"loan_id": loan_id, "client_id": client_id, "principal": principal}},
        )
        return loan

    def update_loan(self, loan_id: str, **changes: object) -> Loan:
        """Replace a loan with a copy carrying ``changes``.

        ``last_updated`` is refreshed unless the caller supplies it.
        """
        loan = self.get_loan(loan_id)
        if "client_id" in changes and changes["client_id"] != loan.client_id:
            raise InvalidEntityStateError(f"Loan {loan_id} cannot move to another client")

        changes.setdefault("last_updated", datetime.now())
        updated = replace(loan, **changes)
        validate_loan(updated)
        self.loans[loan_id] = updated
        return updated

    def remove_loan(self, loan_id: str) -> None:
        """Delete a loan and the payments recorded against it."""
        loan = self.get_loan(loan_id)
        del self.loans[loan_id]
        self._client_loans[loan.client_id].remove(loan_id)

        self.payments = [p for p in self.payments if p.loan_id != loan_id]
        self._reindex_payments()

    def record_payment(self, payment: Payment) -> Loan:
        """Store a payment and apply it to the loan balance.

        Outstanding principal and accrued interest are reduced by the payment
        portions, floored at zero. The loan is SETTLED once no principal is
        left.

        Returns
        -------
        Loan
            The updated loan (a new object; the previous one is untouched).
        """
        if payment.loan_id not in self.loans:
            raise ReferentialIntegrityError(f"Loan {payment.loan_id} not found")
        validate_payment(payment)

        loan = self.loans[payment.loan_id]
        if loan.status == LoanStatus.SETTLED:
            raise InvalidEntityStateError(f"Loan {loan.loan_id} is already settled")

        remaining = loan.outstanding_principal - payment.principal_portion
        interest_left = loan.accrued_interest - payment.interest_portion

        updated = replace(
            loan,
            outstanding_principal=max(ZERO, remaining),
            accrued_interest=max(ZERO, interest_left),
            status=LoanStatus.SETTLED if remaining <= 0 else loan.status,
            last_updated=datetime.now(),
        )
        self.loans[loan.loan_id] = updated

        self._loan_payments[loan.loan_id].append(len(self.payments))
        self.payments.append(payment)

        if updated.status == LoanStatus.SETTLED:
            logger.info(
                "Loan %s settled by payment %s",
                loan.loan_id,
                payment.payment_id,
                extra={"extra": {"loan_id": loan.loan_id, "paid_on": payment.date, "amount": payment.amount}},
            )
        return updated

    # Query methods
    def get_client(self, client_id: str) -> Client:
        """Get a client by id."""
        try:
            return self.clients[client_id]
        except KeyError:
            raise EntityNotFoundError(f"Client {client_id} not found") from None

    def get_loan(self, loan_id: str) -> Loan:
        """Get a loan by id."""
        try:
            return self.loans[loan_id]
        except KeyError:
            raise EntityNotFoundError(f"Loan {loan_id} not found") from None

    def get_client_loans(self, client_id: str) -> list[Loan]:
        """Get all loans for a client."""
        loan_ids = self._client_loans.get(client_id, [])
        return [self.loans[lid] for lid in loan_ids]

    def get_loan_payments(self, loan_id: str) -> list[Payment]:
        """Get all payments recorded against a loan."""
        indices = self._loan_payments.get(loan_id, [])
        return [self.payments[i] for i in indices]

    def payments_by_loan(self) -> dict[str, list[Payment]]:
        """Payments grouped by loan id."""
        return {loan_id: self.get_loan_payments(loan_id) for loan_id in self.loans}

    def visible_loans(self, role: UserRole, client_id: str | None = None) -> list[Loan]:
        """Loans the acting user may see.

        Administrators see every loan; clients only see their own.
        """
        if role == UserRole.ADMINISTRATOR:
            return list(self.loans.values())
        if client_id is None:
            return []
        return self.get_client_loans(client_id)

    def visible_payments(self, role: UserRole, client_id: str | None = None) -> list[Payment]:
        """Payments recorded against the loans the acting user may see."""
        return [
            payment
            for loan in self.visible_loans(role, client_id)
            for payment in self.get_loan_payments(loan.loan_id)
        ]

    def find_clients(self, filters: ClientFilters | None = None) -> list[Client]:
        """Query clients ordered by full name."""
        filters = filters or ClientFilters()
        document = only_digits(filters.document) if filters.document else None

        results = []
        for client in self.clients.values():
            if filters.search and not client.full_name.lower().startswith(filters.search.lower()):
                continue
            if document and only_digits(client.document) != document:
                continue
            if filters.city and client.address.city != filters.city:
                continue
            if filters.state and client.address.state != filters.state:
                continue
            results.append(client)

        results.sort(key=lambda client: client.full_name)
        return results[: filters.limit] if filters.limit else results

    def find_loans(self, filters: LoanFilters | None = None) -> list[Loan]:
        """Query loans, OVERDUE first and then the most recently started."""
        filters = filters or LoanFilters()
        results = [loan for loan in self.loans.values() if self._matches(loan, filters)]
        results.sort(key=lambda loan: loan.start_date, reverse=True)
        results.sort(key=lambda loan: loan.status != LoanStatus.OVERDUE)
        return results

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "clients": len(self.clients),
            "loans": len(self.loans),
            "payments": len(self.payments),
        }

    def _matches(self, loan: Loan, filters: LoanFilters) -> bool:
        if filters.client_id and loan.client_id != filters.client_id:
            return False
        if filters.status and loan.status != filters.status:
            return False
        if filters.due_from and loan.due_date < filters.due_from:
            return False
        if filters.due_to and loan.due_date > filters.due_to:
            return False
        if filters.min_principal is not None and loan.principal < filters.min_principal:
            return False
        if filters.max_principal is not None and loan.principal > filters.max_principal:
            return False
        if filters.search:
            needle = filters.search.lower()
            client = self.clients.get(loan.client_id)
            haystack = [loan.notes or ""]
            if client is not None:
                haystack += [client.full_name, client.document]
            if not any(needle in text.lower() for text in haystack):
                return False
        return True

    def _reindex_payments(self) -> None:
        self._loan_payments = {loan_id: [] for loan_id in self.loans}
        for idx, payment in enumerate(self.payments):
            self._loan_payments[payment.loan_id].append(idx)


def _check_client(client: Client) -> None:
    if not is_valid_document(client.document):
        raise ValidationError(f"Client {client.client_id} has an invalid CPF/CNPJ")
    if not is_valid_email(client.email):
        raise ValidationError(f"Client {client.client_id} has an invalid email")
