"""Pytest configuration and fixtures."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable

import pytest

from loan_core.models.financial import (
    Address,
    Client,
    InterestMode,
    Loan,
    LoanStatus,
    Payment,
    PaymentMethod,
    RateFrequency,
)

VALID_CPF = "529.982.247-25"


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def as_of() -> date:
    """Fixed reference date standing in for "now"."""
    return date(2024, 4, 15)


@pytest.fixture
def sample_client_id() -> str:
    """Sample client ID."""
    return "client-test-001"


@pytest.fixture
def sample_loan_id() -> str:
    """Sample loan ID."""
    return "loan-test-001"


@pytest.fixture
def make_loan(sample_client_id: str, sample_loan_id: str) -> Callable[..., Loan]:
    """Factory for loans with sensible defaults; keyword args override fields."""

    def _make(**overrides: Any) -> Loan:
        values: dict[str, Any] = {
            "loan_id": sample_loan_id,
            "client_id": sample_client_id,
            "principal": Decimal("5000"),
            "interest_rate": Decimal("2.5"),
            "rate_frequency": RateFrequency.MONTHLY,
            "interest_mode": InterestMode.COMPOUND,
            "start_date": date(2024, 1, 1),
            "due_date": date(2024, 7, 1),
            "status": LoanStatus.ACTIVE,
            "outstanding_principal": Decimal("5000"),
            "accrued_interest": Decimal("875"),
            "total_value": Decimal("5875"),
            "last_updated": datetime(2024, 4, 1, 12, 0),
            "installment_count": None,
        }
        values.update(overrides)
        return Loan(**values)

    return _make


@pytest.fixture
def make_payment(sample_loan_id: str) -> Callable[..., Payment]:
    """Factory for payments; keyword args override fields."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> Payment:
        counter["n"] += 1
        values: dict[str, Any] = {
            "payment_id": f"pay-test-{counter['n']:03d}",
            "loan_id": sample_loan_id,
            "date": date(2024, 2, 15),
            "amount": Decimal("979.17"),
            "principal_portion": Decimal("833.34"),
            "interest_portion": Decimal("145.83"),
            "method": PaymentMethod.PIX,
        }
        values.update(overrides)
        return Payment(**values)

    return _make


@pytest.fixture
def make_client() -> Callable[..., Client]:
    """Factory for clients with a valid CPF."""

    def _make(**overrides: Any) -> Client:
        values: dict[str, Any] = {
            "client_id": "client-test-001",
            "full_name": "João Silva Santos",
            "document": VALID_CPF,
            "phone": "(11) 99999-1111",
            "email": "joao@email.com",
            "address": Address(
                street="Rua das Flores",
                number="123",
                neighborhood="Centro",
                city="São Paulo",
                state="SP",
                postal_code="01234-567",
                complement="Apto 45",
            ),
            "created_at": datetime(2024, 1, 1, 9, 0),
        }
        values.update(overrides)
        return Client(**values)

    return _make
