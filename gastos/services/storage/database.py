"""
SQLite Database Manager

Owns the single shared sqlite3 connection, the lock that serializes every
access to it, and the idempotent schema setup.

DESIGN DECISION: single process, single writer. Every repository call runs
inside session(), which holds the lock for the whole call and commits or
rolls back before releasing it. WAL mode lets readers from other processes
in while we write; inside this process the lock already serializes
everything.
"""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from gastos.config import DatabaseSettings
from gastos.errors import StorageError


logger = structlog.get_logger(__name__)


SCHEMA = """
    CREATE TABLE IF NOT EXISTS categories (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        name        TEXT    NOT NULL,
        type        TEXT    NOT NULL CHECK(type IN ('income', 'expense')),
        icon        TEXT    NOT NULL,
        color       TEXT    NOT NULL,
        is_default  INTEGER NOT NULL DEFAULT 0
    );

    CREATE TABLE IF NOT EXISTS transactions (
        id             INTEGER PRIMARY KEY AUTOINCREMENT,
        description    TEXT    NOT NULL,
        amount         INTEGER NOT NULL,
        amount_in_ars  INTEGER NOT NULL,
        currency       TEXT    NOT NULL CHECK(currency IN ('ARS', 'USD')),
        exchange_rate  REAL,
        category_id    INTEGER NOT NULL REFERENCES categories(id),
        date           TEXT    NOT NULL,
        type           TEXT    NOT NULL CHECK(type IN ('income', 'expense')),
        created_at     TEXT    NOT NULL,
        updated_at     TEXT    NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);
"""

# (name, kind, icon, color)
DEFAULT_CATEGORIES = [
    # Expenses
    ("Alimentación", "expense", "Utensils", "#f87171"),
    ("Transporte", "expense", "Car", "#fb923c"),
    ("Vivienda", "expense", "Home", "#facc15"),
    ("Servicios", "expense", "Zap", "#a3e635"),
    ("Entretenimiento", "expense", "Gamepad2", "#22d3ee"),
    ("Salud", "expense", "Heart", "#f472b6"),
    ("Educación", "expense", "GraduationCap", "#818cf8"),
    ("Compras", "expense", "ShoppingBag", "#2dd4bf"),
    ("Otros", "expense", "MoreHorizontal", "#9ca3af"),
    # Income
    ("Salario", "income", "Briefcase", "#4ade80"),
    ("Freelance", "income", "Laptop", "#34d399"),
    ("Inversiones", "income", "TrendingUp", "#60a5fa"),
    ("Regalo", "income", "Gift", "#c084fc"),
    ("Otros Ingresos", "income", "Plus", "#94a3b8"),
]


class Database:
    """
    Shared SQLite handle guarded by one lock.

    Usage:
        db = Database(settings)
        seeded = db.initialize()
        with db.session() as conn:
            conn.execute(...)
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self._settings = settings or DatabaseSettings()
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._settings.path

    @property
    def journal_mode(self) -> str:
        return self._settings.journal_mode

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            conn = sqlite3.connect(
                self._settings.path,
                timeout=self._settings.timeout,
                check_same_thread=False,
            )
            conn.row_factory = sqlite3.Row
            # SQLite does not enforce foreign keys unless asked to, per connection
            conn.execute("PRAGMA foreign_keys = ON")
            conn.execute(f"PRAGMA journal_mode = {self._settings.journal_mode}")
            self._conn = conn
        return self._conn

    @contextmanager
    def session(self) -> Iterator[sqlite3.Connection]:
        """
        Hold the lock for one repository operation.

        Commits when the block exits normally, rolls back on any exception.
        sqlite3 errors are re-raised as StorageError; domain errors pass
        through unchanged. Nothing is retried.
        """
        with self._lock:
            try:
                conn = self._connect()
            except sqlite3.Error as e:
                raise StorageError(f"Failed to open database {self.path}: {e}") from e
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.error("storage_error", db_path=self.path, error=str(e))
                raise StorageError(f"Database error: {e}") from e
            except BaseException:
                conn.rollback()
                raise

    def initialize(self) -> int:
        """
        Create schema objects if absent and seed default categories.

        Seeding only happens when the categories table is empty, so running
        this any number of times against the same file never duplicates rows.

        Returns:
            Number of categories seeded by this call (0 or 14)
        """
        with self.session() as conn:
            conn.executescript(SCHEMA)
            count = conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]
            seeded = 0
            if count == 0:
                seeded = self._seed_default_categories(conn)
        return seeded

    def _seed_default_categories(self, conn: sqlite3.Connection) -> int:
        conn.executemany(
            """INSERT INTO categories (name, type, icon, color, is_default)
               VALUES (?, ?, ?, ?, 1)""",
            DEFAULT_CATEGORIES,
        )
        return len(DEFAULT_CATEGORIES)

    def close(self):
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
