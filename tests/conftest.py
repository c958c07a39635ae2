"""Shared pytest fixtures for invoice editor tests."""

import random
from datetime import date

import pytest
from fastapi.testclient import TestClient

from invoice_editor.core.invoice import create_initial_invoice
from invoice_editor.core.totals import compute_totals
from invoice_editor.main import create_app
from invoice_editor.services.session_store import SessionStore


@pytest.fixture
def today():
    return date(2026, 10, 19)


@pytest.fixture
def rng():
    """Seeded random source so generated invoice numbers are reproducible."""
    return random.Random(1234)


@pytest.fixture
def invoice(today, rng):
    """The seeded invoice a new session starts with."""
    return create_initial_invoice(today, rng)


@pytest.fixture
def totals(invoice):
    return compute_totals(invoice.line_items, invoice.tax_rate)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def client(store):
    """Test client for an app wired to its own session store."""
    return TestClient(create_app(store))


@pytest.fixture
def session_id(client):
    response = client.post("/sessions/", json={"locale": "en"})
    assert response.status_code == 201
    return response.json()["session_id"]
