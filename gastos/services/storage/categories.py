"""
SQLite Category Repository

CRUD over the categories table. Deletion is guarded by transaction
references (never cascading); the is_default flag is informational and
plays no part in the guard.
"""

import sqlite3
from typing import Optional

from gastos.errors import CategoryInUseError, NotFoundError
from gastos.models.finance import Category, CategoryInput, CategoryUpdate, TransactionKind
from gastos.services.storage.database import Database
from gastos.services.storage.interface import CategoryRepositoryInterface
from gastos.validation import validate_category_input


CATEGORY_COLUMNS = "id, name, type, icon, color, is_default"


class SQLiteCategoryRepository(CategoryRepositoryInterface):
    """
    SQLite implementation of category storage.
    """

    def __init__(self, db: Database):
        self._db = db

    def _row_to_model(self, row: sqlite3.Row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            kind=TransactionKind(row["type"]),
            icon=row["icon"],
            color=row["color"],
            is_default=bool(row["is_default"]),
        )

    def _fetch(self, conn: sqlite3.Connection, category_id: int) -> Optional[Category]:
        row = conn.execute(
            f"SELECT {CATEGORY_COLUMNS} FROM categories WHERE id = ?",
            (category_id,),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def list(self) -> list[Category]:
        with self._db.session() as conn:
            rows = conn.execute(
                f"SELECT {CATEGORY_COLUMNS} FROM categories ORDER BY id"
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get(self, category_id: int) -> Optional[Category]:
        with self._db.session() as conn:
            return self._fetch(conn, category_id)

    def add(self, data: CategoryInput) -> Category:
        validate_category_input(data)

        with self._db.session() as conn:
            cursor = conn.execute(
                """INSERT INTO categories (name, type, icon, color, is_default)
                   VALUES (?, ?, ?, ?, 0)""",
                (
                    data.name.strip(),
                    TransactionKind(data.kind).value,
                    data.icon.strip(),
                    data.color.strip(),
                ),
            )
            category_id = cursor.lastrowid

        return Category(
            id=category_id,
            name=data.name.strip(),
            kind=TransactionKind(data.kind),
            icon=data.icon.strip(),
            color=data.color.strip(),
            is_default=False,
        )

    def update(self, category_id: int, data: CategoryUpdate) -> Category:
        validate_category_input(data)

        with self._db.session() as conn:
            cursor = conn.execute(
                "UPDATE categories SET name = ?, type = ?, icon = ?, color = ? WHERE id = ?",
                (
                    data.name.strip(),
                    TransactionKind(data.kind).value,
                    data.icon.strip(),
                    data.color.strip(),
                    category_id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFoundError("category", category_id)

            # Re-read so is_default comes from storage, not from the input
            return self._fetch(conn, category_id)

    def delete(self, category_id: int) -> None:
        with self._db.session() as conn:
            tx_count = conn.execute(
                "SELECT COUNT(*) FROM transactions WHERE category_id = ?",
                (category_id,),
            ).fetchone()[0]
            if tx_count > 0:
                raise CategoryInUseError(category_id, tx_count)

            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("category", category_id)
