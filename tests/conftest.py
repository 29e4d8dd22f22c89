"""
Pytest configuration for checkmate tests

Provides fixtures shared across all test files
"""

from datetime import date

import pytest

from checkmate.config import CheckmateConfig
from checkmate.core.state import AppState
from checkmate.services.checkmate_service import CheckmateService
from checkmate.services.document_store import InMemoryDocumentStore, LocalCache


@pytest.fixture
def monday():
    """First day of ISO week 2024-W01"""
    return date(2024, 1, 1)


@pytest.fixture
def state(monday):
    return AppState.default(monday)


@pytest.fixture
def memory_store():
    return InMemoryDocumentStore()


@pytest.fixture
def cache(tmp_path):
    return LocalCache(tmp_path / "local_cache.json")


@pytest.fixture
def make_service(memory_store, cache):
    """
    Factory for services saving without delay; pass a document to preload the store.

    Tests run on fixed 2024 dates, so editing days other than today is allowed
    unless `edit_any_day` is False.
    """

    def factory(document=None, edit_any_day=True):
        store = InMemoryDocumentStore(document) if document is not None else memory_store
        service = CheckmateService(store, cache, debounce_seconds=0)
        service.admin.past_date_edit_allowed = edit_any_day
        return service

    return factory


@pytest.fixture
def test_config(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_TO_FILE", "false")
    monkeypatch.setenv("STORE_BACKEND", "file")
    monkeypatch.setenv("SYNC_DEBOUNCE_SECONDS", "0")
    monkeypatch.delenv("TIMEZONE", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    return CheckmateConfig()
