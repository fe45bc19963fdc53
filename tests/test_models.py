"""
Tests for Gastos models

Test strategy:
1. Unit tests for individual components (models, money helpers, errors)
2. Integration tests for flows against a temporary SQLite file
3. No shared state between tests (each gets its own database)
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError as PydanticValidationError

from gastos.errors import (
    CategoryInUseError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    StorageError,
    UnknownCategoryError,
    ValidationError,
)
from gastos.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from gastos.models.finance import (
    Category,
    CommandResult,
    Currency,
    Transaction,
    TransactionKind,
)
from gastos.models.reports import ReportFilter
from gastos.money import MAX_CENTS, fits_in_cents, format_amount, from_cents, to_cents


def _transaction(**overrides) -> Transaction:
    now = datetime.now(timezone.utc)
    fields = {
        "id": 1,
        "description": "Netflix",
        "amount": 10.0,
        "amount_in_ars": 9500.0,
        "currency": "USD",
        "exchange_rate": 950.0,
        "category_id": 5,
        "date": "2024-03-09",
        "kind": "expense",
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return Transaction(**fields)


class TestFinanceModels:
    """Tests for category and transaction records."""

    def test_category_creation(self):
        """Test Category model creation."""
        category = Category(
            id=1, name="Alimentación", kind="expense",
            icon="ShoppingBag", color="#f87171", is_default=True,
        )
        assert category.kind == TransactionKind.EXPENSE
        assert category.is_default is True

    def test_category_rejects_unknown_kind(self):
        """Test that records only hold the closed set of kinds."""
        with pytest.raises(PydanticValidationError):
            Category(id=1, name="X", kind="transfer", icon="X", color="#000000")

    def test_category_is_frozen(self):
        """Test that stored records are immutable."""
        category = Category(id=1, name="X", kind="income", icon="X", color="#000000")
        with pytest.raises(PydanticValidationError):
            category.name = "Y"

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = _transaction()
        assert transaction.currency == Currency.USD
        assert transaction.kind == TransactionKind.EXPENSE
        assert transaction.exchange_rate == 950.0

    def test_transaction_year_and_month(self):
        """Test year/month are read from the date prefix."""
        transaction = _transaction(date="2024-03-09")
        assert transaction.year == 2024
        assert transaction.month == 3

    def test_transaction_year_and_month_free_text_date(self):
        """Test that a date without a YYYY-MM prefix yields no year/month."""
        transaction = _transaction(date="yesterday")
        assert transaction.year is None
        assert transaction.month is None

    def test_kind_values(self):
        """Test enum string values."""
        assert TransactionKind.INCOME.value == "income"
        assert TransactionKind.EXPENSE.value == "expense"
        assert [c.value for c in Currency] == ["ARS", "USD"]


class TestCommandResult:
    """Tests for CommandResult."""

    def test_ok(self):
        """Test successful result carries data and no error."""
        correlation_id = uuid4()
        result = CommandResult.ok([1, 2], correlation_id)
        assert result.success is True
        assert result.data == [1, 2]
        assert result.error_code is None
        assert result.correlation_id == correlation_id

    def test_fail(self):
        """Test failed result carries the error's code and message."""
        result = CommandResult.fail(NotFoundError("transaction", 99))
        assert result.success is False
        assert result.data is None
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.error_message == "Transaction with id 99 not found"


class TestErrors:
    """Tests for the error taxonomy."""

    def test_codes(self):
        """Test each error class reports its code."""
        assert ValidationError("x").code == ErrorCode.VALIDATION
        assert NotFoundError("category", 1).code == ErrorCode.NOT_FOUND
        assert CategoryInUseError(1, 2).code == ErrorCode.CONFLICT
        assert UnknownCategoryError(1).code == ErrorCode.CONFLICT
        assert StorageError("disk").code == ErrorCode.STORAGE

    def test_conflict_subclasses(self):
        """Test both conflict variants can be caught as ConflictError."""
        assert isinstance(CategoryInUseError(1, 2), ConflictError)
        assert isinstance(UnknownCategoryError(1), ConflictError)

    def test_category_in_use_message(self):
        """Test the delete guard message names the transaction count."""
        error = CategoryInUseError(3, 2)
        assert error.transaction_count == 2
        assert "2 associated transaction(s)" in error.message


class TestReportFilter:
    """Tests for the report filter model."""

    def test_empty_filter(self):
        """Test an empty filter matches everything."""
        report_filter = ReportFilter()
        assert report_filter.year is None
        assert report_filter.month is None
        assert report_filter.search is None

    def test_month_bounds(self):
        """Test month must be 1..12."""
        with pytest.raises(PydanticValidationError):
            ReportFilter(month=13)


class TestMoney:
    """Tests for cents conversion."""

    def test_to_cents(self):
        """Test major units convert to whole cents."""
        assert to_cents(19.99) == 1999
        assert to_cents(0.01) == 1
        assert to_cents(1500) == 150000

    def test_to_cents_rounds_half_up(self):
        """Test sub-cent inputs are rounded half up."""
        assert to_cents(10.005) == 1001
        assert to_cents(0.125) == 13
        assert to_cents(0.124) == 12

    def test_from_cents(self):
        """Test cents convert back to major units."""
        assert from_cents(1999) == 19.99
        assert from_cents(0) == 0.0

    def test_fits_in_cents(self):
        """Test the upper bound matches a signed 64-bit SQLite INTEGER."""
        assert MAX_CENTS == 9_223_372_036_854_775_807
        assert fits_in_cents(9.2e16) is True
        assert fits_in_cents(1e17) is False
        assert fits_in_cents(1e30) is False

    def test_format_amount(self):
        """Test currency symbols and thousands separators."""
        assert format_amount(1234.5) == "$1,234.50"
        assert format_amount(10, "USD") == "US$10.00"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATED,
            description="Category created",
        )
        assert event.event_type == AuditEventType.CATEGORY_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=7,
            description="Transaction saved",
            details={"amount": "$19.99"},
        )
        log_dict = event.to_log_dict()
        assert len(log_dict) == 12
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "transaction_created"
        assert log_dict["entity_id"] == 7
        assert log_dict["correlation_id"] is None
        assert log_dict["details"]["amount"] == "$19.99"

    def test_audit_event_builder_category_created(self):
        """Test AuditEventBuilder.category_created."""
        correlation_id = uuid4()
        event = AuditEventBuilder.category_created(
            category_id=15,
            name="Mascotas",
            kind="expense",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.CATEGORY_CREATED
        assert event.entity_id == 15
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_audit_event_builder_delete_blocked(self):
        """Test AuditEventBuilder.category_delete_blocked."""
        event = AuditEventBuilder.category_delete_blocked(
            category_id=1, transaction_count=4, correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.CATEGORY_DELETE_BLOCKED
        assert event.entity_id == 1

    @pytest.mark.parametrize(
        "error_code,event_type,severity",
        [
            ("validation", AuditEventType.VALIDATION_FAILED, AuditSeverity.WARNING),
            ("not_found", AuditEventType.ENTITY_NOT_FOUND, AuditSeverity.WARNING),
            ("conflict", AuditEventType.CONFLICT_REJECTED, AuditSeverity.WARNING),
            ("storage", AuditEventType.STORAGE_ERROR, AuditSeverity.ERROR),
        ],
    )
    def test_audit_event_builder_command_rejected(self, error_code, event_type, severity):
        """Test rejections map error codes to event types and severities."""
        event = AuditEventBuilder.command_rejected(
            operation="add_transaction",
            error_code=error_code,
            error_message="boom",
            correlation_id=uuid4(),
            field="amount",
        )
        assert event.event_type == event_type
        assert event.severity == severity
        assert event.details == {"operation": "add_transaction", "field": "amount"}
        assert event.error_message == "boom"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
