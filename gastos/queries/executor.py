"""
Report Execution Engine

Dashboard figures are computed DETERMINISTICALLY from stored data: the
executor reads every transaction through the repository and filters and
aggregates in Python. The dataset of a personal tracker is small, so no
SQL aggregation is needed.

All sums are taken in integer cents and converted back to major units
once, so totals never drift.
"""

from datetime import date
from itertools import accumulate
from typing import Optional

from gastos.models.finance import Category, Transaction, TransactionKind
from gastos.models.reports import (
    CashFlowReport,
    CashFlowRow,
    CategoryTotal,
    DashboardSummary,
    ParetoPoint,
    ReportFilter,
    TrendPoint,
)
from gastos.money import from_cents, to_cents
from gastos.services.storage import (
    CategoryRepositoryInterface,
    TransactionRepositoryInterface,
)


UNKNOWN_CATEGORY_NAME = "Unknown"
UNKNOWN_CATEGORY_COLOR = "#9ca3af"


class ReportExecutor:
    """
    Executes dashboard reports against category and transaction storage.

    GUARANTEES:
    - Only reports real data from storage
    - Transactions keep the List order (date desc, id desc) after filtering
    - Empty periods report zeros, never errors
    """

    def __init__(
        self,
        transactions: TransactionRepositoryInterface,
        categories: CategoryRepositoryInterface,
    ):
        self._transactions = transactions
        self._categories = categories

    def filter_transactions(self, report_filter: Optional[ReportFilter] = None) -> list[Transaction]:
        """Transactions matching year, month and search text."""
        report_filter = report_filter or ReportFilter()
        return [
            t for t in self._transactions.list()
            if self._matches(t, report_filter)
        ]

    def _matches(self, transaction: Transaction, report_filter: ReportFilter) -> bool:
        if report_filter.year is not None and transaction.year != report_filter.year:
            return False
        if report_filter.month is not None and transaction.month != report_filter.month:
            return False
        if report_filter.search:
            needle = report_filter.search.strip().lower()
            if needle and needle not in transaction.description.lower():
                return False
        return True

    def summary(self, report_filter: Optional[ReportFilter] = None) -> DashboardSummary:
        """Income, expenses, balance and savings rate in ARS."""
        transactions = self.filter_transactions(report_filter)

        income_cents = sum(
            to_cents(t.amount_in_ars) for t in transactions
            if t.kind == TransactionKind.INCOME
        )
        expense_cents = sum(
            to_cents(t.amount_in_ars) for t in transactions
            if t.kind == TransactionKind.EXPENSE
        )
        balance_cents = income_cents - expense_cents
        savings_rate = balance_cents / income_cents * 100 if income_cents > 0 else 0.0

        return DashboardSummary(
            income=from_cents(income_cents),
            expenses=from_cents(expense_cents),
            balance=from_cents(balance_cents),
            savings_rate=savings_rate,
            transaction_count=len(transactions),
        )

    def monthly_trend(self, year: int) -> list[TrendPoint]:
        """Income and expenses per month for all twelve months of `year`."""
        income = [0] * 12
        expenses = [0] * 12

        for t in self.filter_transactions(ReportFilter(year=year)):
            if t.month is None or not 1 <= t.month <= 12:
                continue
            bucket = income if t.kind == TransactionKind.INCOME else expenses
            bucket[t.month - 1] += to_cents(t.amount_in_ars)

        return [
            TrendPoint(
                month=index + 1,
                income=from_cents(income[index]),
                expenses=from_cents(expenses[index]),
            )
            for index in range(12)
        ]

    def expenses_by_category(self, report_filter: Optional[ReportFilter] = None) -> list[CategoryTotal]:
        """Expense totals grouped by category, largest first."""
        grouped: dict[int, int] = {}
        for t in self.filter_transactions(report_filter):
            if t.kind != TransactionKind.EXPENSE:
                continue
            grouped[t.category_id] = grouped.get(t.category_id, 0) + to_cents(t.amount_in_ars)

        categories = {c.id: c for c in self._categories.list()}
        totals = [
            self._category_total(category_id, cents, categories.get(category_id))
            for category_id, cents in grouped.items()
        ]
        totals.sort(key=lambda item: item.total, reverse=True)
        return totals

    def _category_total(
        self,
        category_id: int,
        cents: int,
        category: Optional[Category],
    ) -> CategoryTotal:
        return CategoryTotal(
            category_id=category_id,
            name=category.name if category else UNKNOWN_CATEGORY_NAME,
            color=category.color if category else UNKNOWN_CATEGORY_COLOR,
            total=from_cents(cents),
        )

    def pareto(self, report_filter: Optional[ReportFilter] = None) -> list[ParetoPoint]:
        """
        Category totals with cumulative percentages.

        accumulated_percentage is the share of all expenses covered by this
        and every larger category; item_percentage is the share of
        categories covered so far.
        """
        totals = self.expenses_by_category(report_filter)
        grand_total = sum(to_cents(item.total) for item in totals)
        count = len(totals)

        points = []
        accumulated = 0
        for index, item in enumerate(totals):
            accumulated += to_cents(item.total)
            points.append(ParetoPoint(
                **item.model_dump(),
                accumulated_percentage=(
                    accumulated / grand_total * 100 if grand_total else 0.0
                ),
                item_percentage=(index + 1) / count * 100,
            ))
        return points

    def cash_flow(self, year: int) -> CashFlowReport:
        """
        Per-category monthly amounts for `year`, with monthly totals.

        The month filter does not apply: the report always spans the whole
        year. Categories that no longer exist are labelled like in
        expenses_by_category.
        """
        transactions = self.filter_transactions(ReportFilter(year=year))
        categories = {c.id: c for c in self._categories.list()}

        income = self._monthly_cents(transactions, TransactionKind.INCOME)
        expenses = self._monthly_cents(transactions, TransactionKind.EXPENSE)

        income_totals = [sum(months[i] for months in income.values()) for i in range(12)]
        expense_totals = [sum(months[i] for months in expenses.values()) for i in range(12)]
        net_balance = [inc - exp for inc, exp in zip(income_totals, expense_totals)]

        return CashFlowReport(
            year=year,
            income_rows=self._cash_flow_rows(income, categories),
            expense_rows=self._cash_flow_rows(expenses, categories),
            income_totals=[from_cents(c) for c in income_totals],
            expense_totals=[from_cents(c) for c in expense_totals],
            net_balance=[from_cents(c) for c in net_balance],
            accumulated_balance=[from_cents(c) for c in accumulate(net_balance)],
        )

    def _monthly_cents(
        self,
        transactions: list[Transaction],
        kind: TransactionKind,
    ) -> dict[int, list[int]]:
        grouped: dict[int, list[int]] = {}
        for t in transactions:
            if t.kind != kind or t.month is None or not 1 <= t.month <= 12:
                continue
            months = grouped.setdefault(t.category_id, [0] * 12)
            months[t.month - 1] += to_cents(t.amount_in_ars)
        return grouped

    def _cash_flow_rows(
        self,
        grouped: dict[int, list[int]],
        categories: dict[int, Category],
    ) -> list[CashFlowRow]:
        rows = [
            CashFlowRow(
                category_id=category_id,
                name=(
                    categories[category_id].name if category_id in categories
                    else UNKNOWN_CATEGORY_NAME
                ),
                months=[from_cents(c) for c in months],
                total=from_cents(sum(months)),
            )
            for category_id, months in grouped.items()
        ]
        rows.sort(key=lambda row: row.total, reverse=True)
        return rows

    def available_years(self, today: Optional[date] = None) -> list[int]:
        """Years with transactions plus the current year, newest first."""
        today = today or date.today()
        years = {t.year for t in self._transactions.list() if t.year is not None}
        years.add(today.year)
        return sorted(years, reverse=True)
