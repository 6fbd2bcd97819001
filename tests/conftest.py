"""Shared fixtures: an isolated SQLite file per test, DAOs and services on top of it."""

import random

import pytest

from database.category_dao import CategoryDAO
from database.db_manager import DatabaseManager
from database.subcategory_blacklist_dao import SubcategoryBlacklistDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction
from services.category_service import CategoryService
from services.data_service import DataService
from services.report_service import ReportService
from services.transaction_service import TransactionService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.tally folder."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("TALLY_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("TALLY_ENV", raising=False)
    return config_dir


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def blacklist_dao(db):
    return SubcategoryBlacklistDAO(db)


@pytest.fixture
def category_service(category_dao):
    return CategoryService(category_dao, rng=random.Random(7))


@pytest.fixture
def tx_service(tx_dao, blacklist_dao):
    return TransactionService(tx_dao, blacklist_dao)


@pytest.fixture
def report_service(category_service):
    return ReportService(category_service)


@pytest.fixture
def data_service(db, category_dao, tx_dao):
    return DataService(db, category_dao, tx_dao)


@pytest.fixture
def make_tx():
    """Build an in-memory Transaction without touching the database."""
    counter = {"id": 0}

    def _make(date, amount, type_="expense", category="Food", **kwargs):
        counter["id"] += 1
        return Transaction(
            id=counter["id"],
            type=type_,
            category=category,
            date=date,
            amount=amount,
            **kwargs,
        )

    return _make
