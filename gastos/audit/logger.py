"""
Audit Logger

Every mutation and every rejected command is logged as a structured event.
This provides:
1. Traceability of every change to the store
2. Debugging capability
3. Correlation of all events that belong to one command

Audit events go to the local structured log only; the store itself holds
nothing but categories and transactions.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from gastos.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger().setLevel(getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Every event is written to the structured local log at the level that
    matches its severity.
    """

    def __init__(self, logger_name: str = "gastos.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> AuditEvent:
        """
        Log an audit event.

        Returns the event so callers can keep or inspect it.
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        return event

    def log_schema_initialized(self, db_path: str, journal_mode: str, seeded: int) -> None:
        """Log schema setup and, on first run, the default category seed."""
        self.log(AuditEventBuilder.schema_initialized(db_path, journal_mode))
        if seeded:
            self.log(AuditEventBuilder.default_categories_seeded(seeded))

    def log_category_created(
        self,
        category_id: int,
        name: str,
        kind: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.category_created(
            category_id=category_id,
            name=name,
            kind=kind,
            correlation_id=correlation_id,
        ))

    def log_category_updated(
        self,
        category_id: int,
        name: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.category_updated(
            category_id=category_id,
            name=name,
            correlation_id=correlation_id,
        ))

    def log_category_deleted(self, category_id: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.category_deleted(
            category_id=category_id,
            correlation_id=correlation_id,
        ))

    def log_category_delete_blocked(
        self,
        category_id: int,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a deletion refused because transactions still use the category."""
        self.log(AuditEventBuilder.category_delete_blocked(
            category_id=category_id,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        ))

    def log_transaction_created(
        self,
        transaction_id: int,
        description: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.transaction_created(
            transaction_id=transaction_id,
            description=description,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transaction_updated(
        self,
        transaction_id: int,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(self, transaction_id: int, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.transaction_deleted(
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_command_rejected(
        self,
        operation: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        field: Optional[str] = None,
    ) -> None:
        """Log a command that failed with a structured error."""
        self.log(AuditEventBuilder.command_rejected(
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            correlation_id=correlation_id,
            entity_type=entity_type,
            entity_id=entity_id,
            field=field,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of each command and pass it to every
    audit call the command makes.
    """
    return uuid4()
