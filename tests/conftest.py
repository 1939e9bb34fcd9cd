import pytest

from calculator import Calculator
from history_manager import HistoryManager
from storage import KeyValueStore, PersistenceError, SQLiteStore


class FailingStore(KeyValueStore):
    """Store whose every operation fails"""

    def get(self, key):
        raise PersistenceError("read failed")

    def set(self, key, value):
        raise PersistenceError("write failed")

    def remove(self, key):
        raise PersistenceError("delete failed")


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "pocketcalc.db")


@pytest.fixture
def store(db_path):
    return SQLiteStore(db_path)


@pytest.fixture
def history(store):
    manager = HistoryManager(store)
    manager.load()
    return manager


@pytest.fixture
def calc(history):
    return Calculator(history)


@pytest.fixture
def failing_calc():
    return Calculator(HistoryManager(FailingStore()))
