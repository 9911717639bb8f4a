"""Pytest fixtures for Carimbo tests."""

from datetime import date

import pytest

from carimbo.models import Client
from carimbo.tests.helpers import NOW, FrozenClock


@pytest.fixture
def frozen_clock(settings):
    """Pin carimbo.clock.now() to NOW; tests may move it with advance()."""
    settings.CARIMBO = {"CLOCK": "carimbo.tests.helpers.frozen_now"}
    FrozenClock.set(NOW)
    yield FrozenClock
    FrozenClock.current = None


@pytest.fixture
def client_maria(db):
    """Registered client with an empty card."""
    return Client.objects.create(
        cpf="12345678901",
        name="Maria Santos",
        phone="41999990001",
        email="maria@example.com",
        birth_date=date(1990, 5, 17),
    )


@pytest.fixture
def client_joao(db):
    """Registered client with an empty card."""
    return Client.objects.create(
        cpf="98765432100",
        name="João Silva",
        phone="41988880002",
        email="joao@example.com",
        birth_date=date(1985, 1, 2),
    )


@pytest.fixture
def client_with_stamps(client_maria):
    """Return a factory setting client_maria's current balance."""

    def _set(stamps: int) -> Client:
        Client.objects.filter(pk=client_maria.pk).update(current_stamps=stamps)
        client_maria.refresh_from_db()
        return client_maria

    return _set
