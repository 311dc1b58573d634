"""Configuration de test pour pytest avec gestion des chemins.

Ce module ajoute la racine du projet au sys.path et fournit des fixtures
déterministes: moteur calendaire factice, horloge figée et dépôt en mémoire.
"""

import os
import sys
from datetime import UTC, datetime

import pytest

# Ensure project root is on sys.path so that
# imports like `from shuwen...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from shuwen.core.container import container  # noqa: E402
from shuwen.domain.derivation import RitualFactsService  # noqa: E402
from shuwen.infra.calendar.fake_oracle import FakeCalendarOracle  # noqa: E402
from shuwen.infra.clock import FixedClock  # noqa: E402
from shuwen.infra.record_store import InMemoryRecordStore  # noqa: E402

# 2024-02-10 12:00 à Taipei (UTC+8)
NOON_TAIPEI = datetime(2024, 2, 10, 4, 0, tzinfo=UTC)


class FakeTimer:
    """Minuteur manuel compatible `threading.Timer` (déclenché par `fire`)."""

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


@pytest.fixture
def fake_oracle():
    """Moteur calendaire déterministe (libellés simplifiés)."""
    return FakeCalendarOracle()


@pytest.fixture
def fixed_clock():
    """Horloge figée à midi (heure de Taipei) le 2024-02-10."""
    return FixedClock(NOON_TAIPEI)


@pytest.fixture
def memory_store():
    return InMemoryRecordStore()


@pytest.fixture
def timers():
    """Fabrique de `FakeTimer` qui garde la trace des minuteurs créés."""
    created: list[FakeTimer] = []

    def factory(interval, function, args=()):
        timer = FakeTimer(interval, function, args)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture
def wired_container(monkeypatch, fake_oracle, fixed_clock, memory_store):
    """Branche le conteneur global sur les doublures déterministes."""
    monkeypatch.setattr(container, "oracle", fake_oracle)
    monkeypatch.setattr(container, "facts_service", RitualFactsService(fake_oracle))
    monkeypatch.setattr(container, "clock", fixed_clock)
    monkeypatch.setattr(container, "record_store", memory_store)
    monkeypatch.setattr(container, "storage_backend", "memory")
    monkeypatch.setattr(container, "sessions", {})
    return container
