"""Enumeration types for loan-servicing entities."""

from enum import Enum


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    OVERDUE = "OVERDUE"
    SETTLED = "SETTLED"


class InterestMode(str, Enum):
    SIMPLE = "SIMPLE"
    COMPOUND = "COMPOUND"


class RateFrequency(str, Enum):
    MONTHLY = "MONTHLY"
    ANNUAL = "ANNUAL"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    PIX = "PIX"
    TRANSFER = "TRANSFER"
    TED = "TED"
    CHECK = "CHECK"
    CARD = "CARD"


class UserRole(str, Enum):
    ADMINISTRATOR = "ADMINISTRATOR"
    CLIENT = "CLIENT"


class TimeWindow(str, Enum):
    """Dashboard filter selecting loans by how recently they started."""

    DAY_1 = "1d"
    DAYS_7 = "7d"
    DAYS_30 = "30d"
    DAYS_90 = "90d"
    ALL = "all"

    @property
    def days(self) -> int | None:
        """Window length in days, ``None`` for the unbounded window."""
        return {
            TimeWindow.DAY_1: 1,
            TimeWindow.DAYS_7: 7,
            TimeWindow.DAYS_30: 30,
            TimeWindow.DAYS_90: 90,
        }.get(self)
