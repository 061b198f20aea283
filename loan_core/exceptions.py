"""Custom exception hierarchy for loan-core."""


class LoanCoreError(Exception):
    """Base exception for all loan-core errors."""


class EntityNotFoundError(LoanCoreError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(LoanCoreError):
    """Raised when an entity is in an invalid state for the operation."""


class ValidationError(LoanCoreError):
    """Raised when a loan, payment or client record is structurally invalid."""


class ConfigurationError(LoanCoreError):
    """Raised when configuration is invalid or missing."""


class SinkError(LoanCoreError):
    """Raised when a sink operation fails."""
