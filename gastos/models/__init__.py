"""
Data Models Package

This package contains all Pydantic models used in Gastos.
All data flowing between the caller and storage must conform to these schemas.
"""

from gastos.models.finance import (
    Category,
    CategoryInput,
    CategoryUpdate,
    CommandResult,
    Currency,
    Transaction,
    TransactionInput,
    TransactionKind,
    TransactionUpdate,
)
from gastos.models.reports import (
    CashFlowReport,
    CashFlowRow,
    CategoryTotal,
    DashboardSummary,
    ParetoPoint,
    ReportFilter,
    TrendPoint,
)
from gastos.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "Category",
    "CategoryInput",
    "CategoryUpdate",
    "CommandResult",
    "Currency",
    "Transaction",
    "TransactionInput",
    "TransactionKind",
    "TransactionUpdate",
    # Report models
    "CashFlowReport",
    "CashFlowRow",
    "CategoryTotal",
    "DashboardSummary",
    "ParetoPoint",
    "ReportFilter",
    "TrendPoint",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
