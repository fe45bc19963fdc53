"""
Shared fixtures.

Every test gets its own SQLite file under pytest's tmp_path, initialized
with the schema and the 14 default categories.
"""

import pytest

from gastos.config import DatabaseSettings
from gastos.models.finance import CategoryInput, TransactionInput
from gastos.orchestrator import create_app_components
from gastos.services.storage import (
    Database,
    SQLiteCategoryRepository,
    SQLiteTransactionRepository,
)

# Ids assigned by the default seed
ALIMENTACION_ID = 1
TRANSPORTE_ID = 2
SALARIO_ID = 10


@pytest.fixture
def db_settings(tmp_path):
    return DatabaseSettings(path=str(tmp_path / "gastos.db"))


@pytest.fixture
def db(db_settings):
    database = Database(db_settings)
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def categories(db):
    return SQLiteCategoryRepository(db)


@pytest.fixture
def transactions(db):
    return SQLiteTransactionRepository(db)


@pytest.fixture
def service(db_settings):
    finance_service, database = create_app_components(database_settings=db_settings)
    yield finance_service
    database.close()


def make_category(**overrides) -> CategoryInput:
    fields = {
        "name": "Mascotas",
        "kind": "expense",
        "icon": "PawPrint",
        "color": "#1a2B3c",
    }
    fields.update(overrides)
    return CategoryInput(**fields)


def make_transaction(**overrides) -> TransactionInput:
    fields = {
        "description": "Supermercado",
        "amount": 19.99,
        "amount_in_ars": 19.99,
        "currency": "ARS",
        "exchange_rate": None,
        "category_id": ALIMENTACION_ID,
        "date": "2024-01-15",
        "kind": "expense",
    }
    fields.update(overrides)
    return TransactionInput(**fields)
