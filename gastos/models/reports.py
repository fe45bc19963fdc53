"""
Report Models

Dashboard figures computed from stored transactions. All amounts are
ARS major units (amount_in_ars of each transaction).
"""

from typing import Optional

from pydantic import BaseModel, Field


class ReportFilter(BaseModel):
    """Year / month / text filter applied before aggregating."""

    year: Optional[int] = Field(default=None, ge=1)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring matched against descriptions"
    )


class DashboardSummary(BaseModel):
    """Totals for the filtered period."""

    income: float = 0.0
    expenses: float = 0.0
    balance: float = 0.0
    savings_rate: float = Field(
        default=0.0,
        description="(income - expenses) / income * 100, 0 when there is no income"
    )
    transaction_count: int = Field(default=0, ge=0)


class TrendPoint(BaseModel):
    """Income and expenses for one month of a year."""

    month: int = Field(..., ge=1, le=12)
    income: float = 0.0
    expenses: float = 0.0


class CategoryTotal(BaseModel):
    """Total expense amount for one category."""

    category_id: int
    name: str
    color: str
    total: float


class ParetoPoint(CategoryTotal):
    """Category total with its cumulative share of all expenses."""

    accumulated_percentage: float
    item_percentage: float


class CashFlowRow(BaseModel):
    """One category's amounts for each month of a year."""

    category_id: int
    name: str
    months: list[float] = Field(..., min_length=12, max_length=12)
    total: float


class CashFlowReport(BaseModel):
    """
    Month-by-month cash flow of one year.

    Every list field holds twelve values, January first. Rows are sorted
    by total, largest first.
    """

    year: int
    income_rows: list[CashFlowRow] = Field(default_factory=list)
    expense_rows: list[CashFlowRow] = Field(default_factory=list)
    income_totals: list[float]
    expense_totals: list[float]
    net_balance: list[float] = Field(
        ...,
        description="income_totals - expense_totals for each month"
    )
    accumulated_balance: list[float] = Field(
        ...,
        description="Running sum of net_balance from January"
    )
