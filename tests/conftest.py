"""Pytest fixtures for ordertrack tests."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from ordertrack.models import OrderFields
from ordertrack.services import build_services


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def services(temp_dir):
    """Services over an empty data directory."""
    return build_services(temp_dir)


@pytest.fixture
def alice(services):
    """A registered and logged-in user."""
    services.accounts.register("alice", "secret1", "secret1")
    return services.accounts.login("alice", "secret1")


def make_fields(**overrides) -> OrderFields:
    """Valid order fields, with overrides."""
    values = {
        "order_number": "A1",
        "buyer_name": "Bob",
        "address": "1 Main St",
        "phone": "1234567890",
        "total": "10.5",
        "due_date": date(2030, 1, 15),
    }
    values.update(overrides)
    return OrderFields(**values)
