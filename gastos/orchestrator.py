"""
Main Orchestrator for Gastos

This module ties together validation, storage, reports and auditing and
exposes the operations the presentation layer calls:

Categories:   list / add / update / delete
Transactions: list / add / update / delete
Reports:      summary / monthly trend / expenses by category / pareto /
              cash flow / search / available years

Every operation is synchronous and returns a CommandResult. Domain errors
raised below this layer (ValidationError, NotFoundError, ConflictError,
StorageError) are caught here and turned into structured failures, and
every mutation or rejection is audited under one correlation id.
"""

from typing import Any, Callable, Mapping, Optional, Type, TypeVar, Union
from uuid import UUID

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gastos.audit import AuditLogger, configure_logging, create_correlation_id
from gastos.config import DatabaseSettings, Settings, get_settings
from gastos.errors import CategoryInUseError, ErrorCode, GastosError, StorageError, ValidationError
from gastos.models.finance import (
    CategoryInput,
    CategoryUpdate,
    CommandResult,
    TransactionInput,
    TransactionUpdate,
)
from gastos.models.reports import ReportFilter
from gastos.money import format_amount
from gastos.queries import ReportExecutor
from gastos.services.storage import (
    CategoryRepositoryInterface,
    Database,
    SQLiteCategoryRepository,
    SQLiteTransactionRepository,
    TransactionRepositoryInterface,
)


logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
Payload = Union[BaseModel, Mapping[str, Any]]


def parse_payload(model: Type[ModelT], payload: Payload) -> ModelT:
    """
    Turn caller input (a model instance or a plain mapping) into `model`.

    Structural problems (missing fields, a non-numeric amount) are reported
    as ValidationError with the first offending field, like every other
    input problem.
    """
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", "invalid input")
        if field:
            message = f"Invalid value for '{field}': {message}"
        raise ValidationError(message, field=field) from e


class FinanceService:
    """
    The operations exposed to the presentation layer.

    Repositories do the work; this class parses input, audits outcomes and
    converts exceptions into CommandResult failures.
    """

    def __init__(
        self,
        categories: CategoryRepositoryInterface,
        transactions: TransactionRepositoryInterface,
        reports: Optional[ReportExecutor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._categories = categories
        self._transactions = transactions
        self._reports = reports or ReportExecutor(transactions, categories)
        self._audit_logger = audit_logger or AuditLogger()

    def _run(
        self,
        operation: str,
        action: Callable[[UUID], Any],
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
    ) -> CommandResult:
        """Run one command, converting any failure into a CommandResult."""
        correlation_id = create_correlation_id()
        try:
            return CommandResult.ok(action(correlation_id), correlation_id)
        except CategoryInUseError as e:
            self._audit_logger.log_category_delete_blocked(
                category_id=e.category_id,
                transaction_count=e.transaction_count,
                correlation_id=correlation_id,
            )
            return CommandResult.fail(e, correlation_id)
        except GastosError as e:
            self._audit_logger.log_command_rejected(
                operation=operation,
                error_code=e.code.value,
                error_message=e.message,
                correlation_id=correlation_id,
                entity_type=entity_type,
                entity_id=entity_id,
                field=getattr(e, "field", None),
            )
            return CommandResult.fail(e, correlation_id)
        except Exception as e:
            # Unclassified failures are still reported, never raised to the UI
            logger.exception("command_failed", operation=operation)
            error = StorageError(f"Unexpected error during {operation}: {e}")
            self._audit_logger.log_command_rejected(
                operation=operation,
                error_code=ErrorCode.STORAGE.value,
                error_message=error.message,
                correlation_id=correlation_id,
                entity_type=entity_type,
                entity_id=entity_id,
            )
            return CommandResult.fail(error, correlation_id)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def list_categories(self) -> CommandResult:
        return self._run("list_categories", lambda _: self._categories.list())

    def add_category(self, payload: Payload) -> CommandResult:
        def action(correlation_id: UUID):
            category = self._categories.add(parse_payload(CategoryInput, payload))
            self._audit_logger.log_category_created(
                category_id=category.id,
                name=category.name,
                kind=category.kind.value,
                correlation_id=correlation_id,
            )
            return category

        return self._run("add_category", action, entity_type="category")

    def update_category(self, category_id: int, payload: Payload) -> CommandResult:
        def action(correlation_id: UUID):
            category = self._categories.update(
                category_id, parse_payload(CategoryUpdate, payload)
            )
            self._audit_logger.log_category_updated(
                category_id=category.id,
                name=category.name,
                correlation_id=correlation_id,
            )
            return category

        return self._run(
            "update_category", action, entity_type="category", entity_id=category_id
        )

    def delete_category(self, category_id: int) -> CommandResult:
        def action(correlation_id: UUID):
            self._categories.delete(category_id)
            self._audit_logger.log_category_deleted(category_id, correlation_id)

        return self._run(
            "delete_category", action, entity_type="category", entity_id=category_id
        )

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def list_transactions(self) -> CommandResult:
        return self._run("list_transactions", lambda _: self._transactions.list())

    def add_transaction(self, payload: Payload) -> CommandResult:
        def action(correlation_id: UUID):
            transaction = self._transactions.add(parse_payload(TransactionInput, payload))
            self._audit_logger.log_transaction_created(
                transaction_id=transaction.id,
                description=transaction.description,
                amount=format_amount(transaction.amount, transaction.currency.value),
                correlation_id=correlation_id,
            )
            return transaction

        return self._run("add_transaction", action, entity_type="transaction")

    def update_transaction(self, transaction_id: int, payload: Payload) -> CommandResult:
        def action(correlation_id: UUID):
            transaction = self._transactions.update(
                transaction_id, parse_payload(TransactionUpdate, payload)
            )
            self._audit_logger.log_transaction_updated(
                transaction_id=transaction.id,
                amount=format_amount(transaction.amount, transaction.currency.value),
                correlation_id=correlation_id,
            )
            return transaction

        return self._run(
            "update_transaction", action,
            entity_type="transaction", entity_id=transaction_id,
        )

    def delete_transaction(self, transaction_id: int) -> CommandResult:
        def action(correlation_id: UUID):
            self._transactions.delete(transaction_id)
            self._audit_logger.log_transaction_deleted(transaction_id, correlation_id)

        return self._run(
            "delete_transaction", action,
            entity_type="transaction", entity_id=transaction_id,
        )

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def search_transactions(self, report_filter: Optional[Payload] = None) -> CommandResult:
        return self._run(
            "search_transactions",
            lambda _: self._reports.filter_transactions(self._filter(report_filter)),
        )

    def transaction_summary(self, report_filter: Optional[Payload] = None) -> CommandResult:
        return self._run(
            "transaction_summary",
            lambda _: self._reports.summary(self._filter(report_filter)),
        )

    def monthly_trend(self, year: int) -> CommandResult:
        return self._run("monthly_trend", lambda _: self._reports.monthly_trend(year))

    def expenses_by_category(self, report_filter: Optional[Payload] = None) -> CommandResult:
        return self._run(
            "expenses_by_category",
            lambda _: self._reports.expenses_by_category(self._filter(report_filter)),
        )

    def expense_pareto(self, report_filter: Optional[Payload] = None) -> CommandResult:
        return self._run(
            "expense_pareto",
            lambda _: self._reports.pareto(self._filter(report_filter)),
        )

    def cash_flow(self, year: int) -> CommandResult:
        return self._run("cash_flow", lambda _: self._reports.cash_flow(year))

    def available_years(self) -> CommandResult:
        return self._run("available_years", lambda _: self._reports.available_years())

    def _filter(self, report_filter: Optional[Payload]) -> ReportFilter:
        if report_filter is None:
            return ReportFilter()
        return parse_payload(ReportFilter, report_filter)


def create_app_components(
    settings: Optional[Settings] = None,
    database_settings: Optional[DatabaseSettings] = None,
) -> tuple[FinanceService, Database]:
    """
    Factory function to create all application components.

    Opens (or creates) the database, ensures the schema and seed data exist
    and wires repositories, reports and audit logging together.

    Args:
        settings: Root settings; loaded from the environment if omitted
        database_settings: Overrides settings.database (e.g. a temporary file)

    Returns:
        (finance_service, database)

    Raises:
        StorageError: If the database cannot be opened or initialized
    """
    settings = settings or get_settings()
    configure_logging(settings.app.effective_log_level)

    database = Database(database_settings or settings.database)
    audit_logger = AuditLogger()

    seeded = database.initialize()
    audit_logger.log_schema_initialized(database.path, database.journal_mode, seeded)

    categories = SQLiteCategoryRepository(database)
    transactions = SQLiteTransactionRepository(database)
    service = FinanceService(
        categories=categories,
        transactions=transactions,
        reports=ReportExecutor(transactions, categories),
        audit_logger=audit_logger,
    )
    return service, database
