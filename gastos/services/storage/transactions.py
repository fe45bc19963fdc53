"""
SQLite Transaction Repository

CRUD over the transactions table.

Money: amount and amount_in_ars are stored as integer cents and converted
back to major units on every read, List included. Writes return the
caller's original float amounts.

Timestamps: created_at and updated_at are UTC RFC3339 strings. created_at
is written once on insert; update refreshes updated_at only.

Exchange rate: a non-finite rate (only possible for ARS, USD rates are
validated) is stored and returned as None.
"""

import math
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from gastos.errors import NotFoundError, UnknownCategoryError
from gastos.models.finance import (
    Currency,
    Transaction,
    TransactionInput,
    TransactionKind,
    TransactionUpdate,
)
from gastos.money import from_cents, to_cents
from gastos.services.storage.database import Database
from gastos.services.storage.interface import TransactionRepositoryInterface
from gastos.validation import validate_transaction_input


TRANSACTION_COLUMNS = (
    "id, description, amount, amount_in_ars, currency, exchange_rate, "
    "category_id, date, type, created_at, updated_at"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stored_rate(exchange_rate: Optional[float]) -> Optional[float]:
    # SQLite turns NaN into NULL; keep infinities out as well
    if exchange_rate is None or not math.isfinite(exchange_rate):
        return None
    return exchange_rate


class SQLiteTransactionRepository(TransactionRepositoryInterface):
    """
    SQLite implementation of transaction storage.
    """

    def __init__(self, db: Database):
        self._db = db

    def _row_to_model(self, row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            description=row["description"],
            amount=from_cents(row["amount"]),
            amount_in_ars=from_cents(row["amount_in_ars"]),
            currency=Currency(row["currency"]),
            exchange_rate=row["exchange_rate"],
            category_id=row["category_id"],
            date=row["date"],
            kind=TransactionKind(row["type"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _input_to_model(
        self,
        transaction_id: int,
        data: TransactionInput,
        created_at: datetime,
        updated_at: datetime,
    ) -> Transaction:
        return Transaction(
            id=transaction_id,
            description=data.description.strip(),
            amount=data.amount,
            amount_in_ars=data.amount_in_ars,
            currency=Currency(data.currency),
            exchange_rate=_stored_rate(data.exchange_rate),
            category_id=data.category_id,
            date=data.date.strip(),
            kind=TransactionKind(data.kind),
            created_at=created_at,
            updated_at=updated_at,
        )

    def _ensure_category(self, conn: sqlite3.Connection, category_id: int) -> None:
        exists = conn.execute(
            "SELECT 1 FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        if exists is None:
            raise UnknownCategoryError(category_id)

    def list(self) -> list[Transaction]:
        with self._db.session() as conn:
            rows = conn.execute(
                f"SELECT {TRANSACTION_COLUMNS} FROM transactions "
                "ORDER BY date DESC, id DESC"
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get(self, transaction_id: int) -> Optional[Transaction]:
        with self._db.session() as conn:
            row = conn.execute(
                f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE id = ?",
                (transaction_id,),
            ).fetchone()
        return self._row_to_model(row) if row else None

    def count_for_category(self, category_id: int) -> int:
        with self._db.session() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM transactions WHERE category_id = ?",
                (category_id,),
            ).fetchone()[0]

    def add(self, data: TransactionInput) -> Transaction:
        validate_transaction_input(data)
        now = _utcnow()
        stamp = now.isoformat()

        with self._db.session() as conn:
            self._ensure_category(conn, data.category_id)
            cursor = conn.execute(
                """INSERT INTO transactions (description, amount, amount_in_ars,
                       currency, exchange_rate, category_id, date, type,
                       created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    data.description.strip(),
                    to_cents(data.amount),
                    to_cents(data.amount_in_ars),
                    Currency(data.currency).value,
                    _stored_rate(data.exchange_rate),
                    data.category_id,
                    data.date.strip(),
                    TransactionKind(data.kind).value,
                    stamp,
                    stamp,
                ),
            )
            transaction_id = cursor.lastrowid

        return self._input_to_model(transaction_id, data, now, now)

    def update(self, transaction_id: int, data: TransactionUpdate) -> Transaction:
        validate_transaction_input(data)
        now = _utcnow()

        with self._db.session() as conn:
            self._ensure_category(conn, data.category_id)
            cursor = conn.execute(
                """UPDATE transactions SET description = ?, amount = ?,
                       amount_in_ars = ?, currency = ?, exchange_rate = ?,
                       category_id = ?, date = ?, type = ?, updated_at = ?
                   WHERE id = ?""",
                (
                    data.description.strip(),
                    to_cents(data.amount),
                    to_cents(data.amount_in_ars),
                    Currency(data.currency).value,
                    _stored_rate(data.exchange_rate),
                    data.category_id,
                    data.date.strip(),
                    TransactionKind(data.kind).value,
                    now.isoformat(),
                    transaction_id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("transaction", transaction_id)

            created_at = conn.execute(
                "SELECT created_at FROM transactions WHERE id = ?",
                (transaction_id,),
            ).fetchone()["created_at"]

        return self._input_to_model(
            transaction_id, data, datetime.fromisoformat(created_at), now
        )

    def delete(self, transaction_id: int) -> None:
        with self._db.session() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ?", (transaction_id,)
            )
            if cursor.rowcount == 0:
                raise NotFoundError("transaction", transaction_id)
