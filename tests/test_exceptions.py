"""Tests for custom exception hierarchy."""

from loan_core.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    LoanCoreError,
    ReferentialIntegrityError,
    SinkError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_loan_core_error_is_exception(self) -> None:
        assert isinstance(LoanCoreError("test"), Exception)

    def test_entity_not_found_is_loan_core_error(self) -> None:
        assert isinstance(EntityNotFoundError("test"), LoanCoreError)

    def test_referential_integrity_is_entity_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, LoanCoreError)

    def test_invalid_entity_state_is_loan_core_error(self) -> None:
        assert isinstance(InvalidEntityStateError("test"), LoanCoreError)

    def test_validation_error_is_loan_core_error(self) -> None:
        assert isinstance(ValidationError("test"), LoanCoreError)

    def test_configuration_error_is_loan_core_error(self) -> None:
        assert isinstance(ConfigurationError("test"), LoanCoreError)

    def test_sink_error_is_loan_core_error(self) -> None:
        assert isinstance(SinkError("test"), LoanCoreError)

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("Client client-001 not found")
        assert str(err) == "Client client-001 not found"
