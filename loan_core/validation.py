"""Structural validation for loans, payments and client records."""

import re
from decimal import Decimal

from loan_core.exceptions import ValidationError
from loan_core.models.financial import Loan, Payment

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_loan(loan: Loan) -> None:
    """Reject loan records the calculations cannot interpret.

    Parameters
    ----------
    loan : Loan
        Loan to check.

    Raises
    ------
    ValidationError
        If a required date is missing or a figure is out of range.
    """
    if loan.start_date is None:
        raise ValidationError(f"Loan {loan.loan_id} has no start date")
    if loan.due_date is None:
        raise ValidationError(f"Loan {loan.loan_id} has no due date")
    if loan.principal is None or loan.principal <= 0:
        raise ValidationError(f"Loan {loan.loan_id} principal must be positive, got {loan.principal}")
    if loan.interest_rate is None or loan.interest_rate < 0:
        raise ValidationError(
            f"Loan {loan.loan_id} interest rate must be >= 0, got {loan.interest_rate}"
        )
    if loan.installment_count is not None and loan.installment_count < 0:
        raise ValidationError(
            f"Loan {loan.loan_id} installment count must be >= 0, got {loan.installment_count}"
        )
    if loan.outstanding_principal < 0:
        raise ValidationError(f"Loan {loan.loan_id} outstanding principal is negative")
    if loan.accrued_interest < 0:
        raise ValidationError(f"Loan {loan.loan_id} accrued interest is negative")


def validate_payment(payment: Payment) -> None:
    """Reject payments without a date or with a negative amount."""
    if payment.date is None:
        raise ValidationError(f"Payment {payment.payment_id} has no date")
    if payment.amount is None or payment.amount < Decimal("0"):
        raise ValidationError(f"Payment {payment.payment_id} amount must be >= 0")


def only_digits(value: str) -> str:
    """Strip formatting from a CPF, CNPJ or phone number."""
    return re.sub(r"\D", "", value)


def is_valid_cpf(cpf: str) -> bool:
    """Check a CPF's length and both check digits."""
    clean = only_digits(cpf)
    if len(clean) != 11 or clean == clean[0] * 11:
        return False

    for check_pos in (9, 10):
        total = sum(int(clean[i]) * (check_pos + 1 - i) for i in range(check_pos))
        digit = 11 - total % 11
        if digit >= 10:
            digit = 0
        if digit != int(clean[check_pos]):
            return False
    return True


def is_valid_cnpj(cnpj: str) -> bool:
    """Check a CNPJ's length and both check digits."""
    clean = only_digits(cnpj)
    if len(clean) != 14 or clean == clean[0] * 14:
        return False

    for check_pos in (12, 13):
        total = 0
        weight = 2
        for i in range(check_pos - 1, -1, -1):
            total += int(clean[i]) * weight
            weight = 2 if weight == 9 else weight + 1
        remainder = total % 11
        digit = 0 if remainder < 2 else 11 - remainder
        if digit != int(clean[check_pos]):
            return False
    return True


def is_valid_document(document: str) -> bool:
    """Validate a CPF (11 digits) or CNPJ (14 digits)."""
    clean = only_digits(document)
    if len(clean) == 11:
        return is_valid_cpf(clean)
    if len(clean) == 14:
        return is_valid_cnpj(clean)
    return False


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))
