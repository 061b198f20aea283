"""Tests for seed data generators."""

from datetime import date, timedelta
from decimal import Decimal

from loan_core.calculations.installments import derive_installments
from loan_core.generators import ClientGenerator, LoanGenerator, PaymentGenerator
from loan_core.models.financial import InstallmentStatus, LoanStatus
from loan_core.validation import is_valid_cpf, is_valid_email, validate_loan


class TestClientGenerator:
    """Tests for ClientGenerator."""

    def test_generate_client(self, seed: int) -> None:
        """Test client generation."""
        gen = ClientGenerator(seed=seed)
        client = gen.generate()

        assert client.client_id is not None
        assert is_valid_cpf(client.document)
        assert is_valid_email(client.email)
        assert client.full_name
        assert len(client.address.state) == 2

    def test_generate_multiple(self, seed: int) -> None:
        """Test generating multiple clients."""
        gen = ClientGenerator(seed=seed)
        clients = list(gen.generate_batch(5))

        assert len(clients) == 5
        # All should have unique IDs
        assert len({c.client_id for c in clients}) == 5

    def test_seed_reproducibility(self, seed: int) -> None:
        """Test that the same seed yields the same clients."""
        first = [c.full_name for c in ClientGenerator(seed=seed).generate_batch(3)]
        second = [c.full_name for c in ClientGenerator(seed=seed).generate_batch(3)]

        assert first == second


class TestLoanGenerator:
    """Tests for LoanGenerator."""

    def test_generate_loan(self, seed: int, sample_client_id: str, as_of: date) -> None:
        """Test loan generation."""
        gen = LoanGenerator(seed=seed)

        for _ in range(20):
            loan = gen.generate(sample_client_id, as_of=as_of)

            validate_loan(loan)
            assert loan.client_id == sample_client_id
            assert Decimal("1000") <= loan.principal <= Decimal("20000")
            assert as_of - timedelta(days=365) <= loan.start_date <= as_of
            assert loan.due_date > loan.start_date
            assert loan.installment_count in LoanGenerator.INSTALLMENT_CHOICES
            assert loan.outstanding_principal == loan.principal
            assert loan.accrued_interest >= 0
            assert loan.total_value == loan.principal + loan.accrued_interest

    def test_status_follows_due_date(self, seed: int, sample_client_id: str, as_of: date) -> None:
        """Test that past-due loans are generated as OVERDUE."""
        gen = LoanGenerator(seed=seed)

        for _ in range(20):
            loan = gen.generate(sample_client_id, as_of=as_of)
            expected = LoanStatus.OVERDUE if loan.due_date < as_of else LoanStatus.ACTIVE
            assert loan.status == expected


class TestPaymentGenerator:
    """Tests for PaymentGenerator."""

    def test_payments_match_installment_months(self, make_loan, as_of: date) -> None:
        """Test that every due installment is paid within its month."""
        loan = make_loan(installment_count=6)
        gen = PaymentGenerator(seed=1, on_time_rate=1.0)

        payments = list(gen.generate_for_loan(loan, as_of=as_of))

        assert [p.date.month for p in payments] == [2, 3, 4]
        assert all(p.date <= as_of for p in payments)
        assert all(p.loan_id == loan.loan_id for p in payments)

        statuses = [i.status for i in derive_installments(loan, payments, as_of=as_of)]
        assert statuses[:3] == [InstallmentStatus.PAID] * 3
        assert statuses[3:] == [InstallmentStatus.PENDING] * 3

    def test_last_installment_absorbs_rounding(self, make_loan) -> None:
        """Test that principal portions add up to the principal."""
        loan = make_loan(installment_count=3, principal=Decimal("1000"))
        gen = PaymentGenerator(seed=1, on_time_rate=1.0)

        payments = list(gen.generate_for_loan(loan, as_of=date(2024, 12, 31)))

        assert len(payments) == 3
        assert [p.principal_portion for p in payments] == [
            Decimal("333.33"),
            Decimal("333.33"),
            Decimal("333.34"),
        ]
        assert all(p.amount == p.principal_portion + p.interest_portion for p in payments)

    def test_bullet_loan_paid_in_due_month(self, make_loan) -> None:
        """Test the single payment for a bullet loan."""
        loan = make_loan(due_date=date(2024, 3, 20))
        gen = PaymentGenerator(seed=1, on_time_rate=1.0)

        payments = list(gen.generate_for_loan(loan, as_of=date(2024, 4, 15)))

        assert len(payments) == 1
        assert date(2024, 3, 1) <= payments[0].date <= date(2024, 3, 20)
        assert payments[0].principal_portion == loan.principal

    def test_nothing_due_yet(self, make_loan, as_of: date) -> None:
        """Test that loans with no due installment get no payments."""
        loan = make_loan(start_date=date(2024, 4, 1), due_date=date(2024, 10, 1), installment_count=6)
        gen = PaymentGenerator(seed=1, on_time_rate=1.0)

        assert list(gen.generate_for_loan(loan, as_of=as_of)) == []
