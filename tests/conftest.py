"""Shared fixtures: a fresh ledger, dispatcher and API client per test."""

import pytest
from fastapi.testclient import TestClient

from answerstake.config import Settings
from answerstake.database import MemoryLedgerStore
from answerstake.main import create_app
from answerstake.services.dispatcher import LedgerDispatcher
from answerstake.services.ledger import Ledger


@pytest.fixture
def ledger():
    """Empty ledger with the default amounts."""
    return Ledger()


@pytest.fixture
def store():
    return MemoryLedgerStore()


@pytest.fixture
def dispatcher(store):
    return LedgerDispatcher.from_store(store)


@pytest.fixture
def settings():
    return Settings(_env_file=None, supabase_url="", supabase_key="")


@pytest.fixture
def client(settings, store):
    """API client bound to an in-memory store. Entering runs the lifespan."""
    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client
