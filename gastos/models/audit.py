"""
Audit Models for Gastos

Every mutation of the store and every rejected command is described by an
AuditEvent. Events go to the structured local log; they are append-only
and never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every exposed operation has its own event type.
    """
    # Schema lifecycle
    SCHEMA_INITIALIZED = "schema_initialized"
    DEFAULT_CATEGORIES_SEEDED = "default_categories_seeded"

    # Categories
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"
    CATEGORY_DELETE_BLOCKED = "category_delete_blocked"

    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Rejected commands
    VALIDATION_FAILED = "validation_failed"
    ENTITY_NOT_FOUND = "entity_not_found"
    CONFLICT_REJECTED = "conflict_rejected"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every mutation or rejected command creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('category' or 'transaction')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Row id of the entity this event relates to"
    )

    # Correlation - for tracking related events of one command
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one command"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.category_created(category_id, name, correlation_id)
        event = AuditEventBuilder.transaction_deleted(transaction_id, correlation_id)
    """

    @staticmethod
    def schema_initialized(db_path: str, journal_mode: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_INITIALIZED,
            description=f"Schema ready at {db_path}",
            details={
                "db_path": db_path,
                "journal_mode": journal_mode,
            },
        )

    @staticmethod
    def default_categories_seeded(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEFAULT_CATEGORIES_SEEDED,
            entity_type="category",
            description=f"Seeded {count} default categories",
            details={"count": count},
        )

    @staticmethod
    def category_created(
        category_id: int,
        name: str,
        kind: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_CREATED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Category created: {name}",
            details={
                "name": name,
                "kind": kind,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_updated(
        category_id: int,
        name: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_UPDATED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Category updated: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def category_deleted(
        category_id: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=f"Category {category_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def category_delete_blocked(
        category_id: int,
        transaction_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETE_BLOCKED,
            severity=AuditSeverity.WARNING,
            entity_type="category",
            entity_id=category_id,
            correlation_id=correlation_id,
            description=(
                f"Category {category_id} not deleted: "
                f"{transaction_count} transaction(s) reference it"
            ),
            details={"transaction_count": transaction_count},
            is_user_action=True,
        )

    @staticmethod
    def transaction_created(
        transaction_id: int,
        description: str,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction saved: {description} - {amount}",
            details={
                "description": description,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_updated(
        transaction_id: int,
        amount: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction {transaction_id} updated",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction {transaction_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def command_rejected(
        operation: str,
        error_code: str,
        error_message: str,
        correlation_id: UUID,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        field: Optional[str] = None,
    ) -> AuditEvent:
        event_type = {
            "validation": AuditEventType.VALIDATION_FAILED,
            "not_found": AuditEventType.ENTITY_NOT_FOUND,
            "conflict": AuditEventType.CONFLICT_REJECTED,
        }.get(error_code, AuditEventType.STORAGE_ERROR)
        severity = (
            AuditSeverity.ERROR
            if event_type == AuditEventType.STORAGE_ERROR
            else AuditSeverity.WARNING
        )
        details: dict[str, Any] = {"operation": operation}
        if field:
            details["field"] = field
        return AuditEvent(
            event_type=event_type,
            severity=severity,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{operation} rejected ({error_code})",
            details=details,
            error_code=error_code,
            error_message=error_message,
            is_user_action=True,
        )
