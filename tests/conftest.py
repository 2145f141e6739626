import random

import pytest

from notables.app import create_app
from notables.config import Config
from notables.store import MemoryLogStore, SQLiteLogStore
from notables.validator import LogValidator


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def validator():
    return LogValidator()


@pytest.fixture
def memory_store():
    return MemoryLogStore()


@pytest.fixture
def sqlite_store(tmp_path):
    store = SQLiteLogStore(str(tmp_path / "db" / "logs.db"))
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    """Each store-contract test runs against both backends."""
    if request.param == "memory":
        return MemoryLogStore()
    return SQLiteLogStore(str(tmp_path / "logs.db"))


@pytest.fixture
def sample_valid_log():
    return {
        "timestamp": "2025-05-15T14:30:00Z",
        "level": "WARNING",
        "ruleName": "Suspicious Login Attempt",
        "sourceIP": "192.168.1.100",
        "destinationIP": "10.10.0.5",
        "message": "5 failed logins for admin",
        "metadata": {"user": "admin"},
    }


@pytest.fixture
def app(config, memory_store):
    """Create a Flask test app over an in-memory store."""
    application = create_app(config, store=memory_store, rng=random.Random(7))
    application.config["TESTING"] = True
    return application


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
