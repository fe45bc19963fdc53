"""Report execution package."""

from gastos.queries.executor import ReportExecutor

__all__ = ["ReportExecutor"]
