"""Shared fixtures: an in-memory store loaded as of 20 May 2024."""

from datetime import date

import pytest

from findash.audit import AuditLogger
from findash.models import Theme
from findash.services.storage import InMemoryStorage
from findash.store import EntityStore


TODAY = date(2024, 5, 20)


@pytest.fixture
def audit_logger():
    return AuditLogger(buffer_size=100)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage, audit_logger):
    store = EntityStore(storage, audit_logger=audit_logger, default_theme=Theme.DARK)
    store.load(today=TODAY)
    return store
