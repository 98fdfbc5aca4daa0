"""Shared fixtures for cart helper tests."""
from datetime import datetime, timedelta, timezone

import pytest

from keranjang import storage
from keranjang.storage import InMemoryStore


@pytest.fixture(autouse=True)
def reset_store(monkeypatch):
    """Fresh in-memory global store for every test, no Redis/file backends."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.delenv("STORAGE_PATH", raising=False)
    storage._store = InMemoryStore()
    yield
    storage._store = None


@pytest.fixture
def kv():
    return InMemoryStore()


@pytest.fixture
def clock():
    """Deterministic clock advancing one millisecond per call."""
    state = {"now": datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)}

    def tick():
        state["now"] += timedelta(milliseconds=1)
        return state["now"]

    return tick
