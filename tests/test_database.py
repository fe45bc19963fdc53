"""
Tests for the SQLite database manager: schema, seeding, sessions.
"""

import pytest

from gastos.config import DatabaseSettings
from gastos.errors import NotFoundError, StorageError
from gastos.services.storage import DEFAULT_CATEGORIES, Database


def _scalar(db: Database, sql: str):
    with db.session() as conn:
        return conn.execute(sql).fetchone()[0]


class TestInitialize:
    """Tests for schema creation and default category seeding."""

    def test_seeds_default_categories(self, db_settings):
        """Test first initialization seeds 9 expense and 5 income defaults."""
        database = Database(db_settings)
        try:
            assert database.initialize() == 14
            assert _scalar(database, "SELECT COUNT(*) FROM categories") == 14
            assert _scalar(
                database, "SELECT COUNT(*) FROM categories WHERE type = 'expense'"
            ) == 9
            assert _scalar(
                database, "SELECT COUNT(*) FROM categories WHERE type = 'income'"
            ) == 5
            assert _scalar(
                database, "SELECT COUNT(*) FROM categories WHERE is_default = 1"
            ) == 14
        finally:
            database.close()

    def test_initialize_is_idempotent(self, db):
        """Test re-running initialize never duplicates seed rows."""
        assert db.initialize() == 0
        assert _scalar(db, "SELECT COUNT(*) FROM categories") == 14

    def test_reopening_the_file_does_not_reseed(self, db, db_settings):
        """Test a second handle on the same file finds the seed in place."""
        db.close()
        reopened = Database(db_settings)
        try:
            assert reopened.initialize() == 0
            assert _scalar(reopened, "SELECT COUNT(*) FROM categories") == 14
        finally:
            reopened.close()

    def test_no_seed_when_categories_exist(self, db):
        """Test seeding is skipped while any category remains."""
        with db.session() as conn:
            conn.execute("DELETE FROM categories WHERE id > 1")
        assert db.initialize() == 0
        assert _scalar(db, "SELECT COUNT(*) FROM categories") == 1

    def test_seed_order_and_values(self, db):
        """Test seed rows keep their declared order and values."""
        with db.session() as conn:
            rows = conn.execute(
                "SELECT name, type, icon, color FROM categories ORDER BY id"
            ).fetchall()
        assert [tuple(row) for row in rows] == DEFAULT_CATEGORIES
        assert rows[0]["name"] == "Alimentación"
        assert rows[9]["name"] == "Salario"

    def test_date_index_exists(self, db):
        """Test the transaction date index is created."""
        assert _scalar(
            db,
            "SELECT COUNT(*) FROM sqlite_master "
            "WHERE type = 'index' AND name = 'idx_transactions_date'",
        ) == 1


class TestConnection:
    """Tests for connection pragmas."""

    def test_foreign_keys_enabled(self, db):
        """Test foreign key enforcement is on for the connection."""
        assert _scalar(db, "PRAGMA foreign_keys") == 1

    def test_wal_journal_mode(self, db):
        """Test the configured WAL journal mode is applied."""
        assert db.journal_mode == "WAL"
        assert _scalar(db, "PRAGMA journal_mode").lower() == "wal"

    def test_close_then_reuse_reconnects(self, db):
        """Test a closed database reopens on the next session."""
        db.close()
        assert _scalar(db, "SELECT COUNT(*) FROM categories") == 14


class TestSession:
    """Tests for commit/rollback and error translation."""

    def test_commits_on_success(self, db):
        """Test writes are committed when the session exits cleanly."""
        with db.session() as conn:
            conn.execute(
                "INSERT INTO categories (name, type, icon, color) "
                "VALUES ('Mascotas', 'expense', 'PawPrint', '#123456')"
            )
        assert _scalar(db, "SELECT COUNT(*) FROM categories") == 15

    def test_rolls_back_on_domain_error(self, db):
        """Test a domain error undoes the writes and passes through unchanged."""
        with pytest.raises(NotFoundError):
            with db.session() as conn:
                conn.execute(
                    "INSERT INTO categories (name, type, icon, color) "
                    "VALUES ('Mascotas', 'expense', 'PawPrint', '#123456')"
                )
                raise NotFoundError("category", 99)
        assert _scalar(db, "SELECT COUNT(*) FROM categories") == 14

    def test_sqlite_errors_become_storage_errors(self, db):
        """Test a CHECK violation surfaces as StorageError and rolls back."""
        with pytest.raises(StorageError):
            with db.session() as conn:
                conn.execute(
                    "INSERT INTO categories (name, type, icon, color) "
                    "VALUES ('Bad', 'transfer', 'X', '#000000')"
                )
        assert _scalar(db, "SELECT COUNT(*) FROM categories") == 14

    def test_foreign_key_violation_is_storage_error(self, db):
        """Test the schema itself rejects a dangling category reference."""
        with pytest.raises(StorageError):
            with db.session() as conn:
                conn.execute(
                    "INSERT INTO transactions (description, amount, amount_in_ars,"
                    " currency, category_id, date, type, created_at, updated_at)"
                    " VALUES ('x', 100, 100, 'ARS', 999, '2024-01-01', 'expense',"
                    " '2024-01-01T00:00:00+00:00', '2024-01-01T00:00:00+00:00')"
                )

    def test_unopenable_path(self, tmp_path):
        """Test a directory path fails with StorageError, not sqlite3.Error."""
        database = Database(DatabaseSettings(path=str(tmp_path)))
        with pytest.raises(StorageError):
            database.initialize()
