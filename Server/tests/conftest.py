"""Pytest configuration and shared fixtures for the BitWord server tests."""
import os
import tempfile

# Keep test logs out of the working directory; must run before bitword is imported.
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="bitword-logs-"))

from datetime import datetime, timedelta

import pytest

from bitword import create_app
from bitword.config import TestingConfig
from bitword.models import Difficulty, Term
from bitword.repositories import InMemoryGameRepository
from bitword.services import game_service as game_service_module
from bitword.services.game_service import GameService

TEST_TERMS = [
    Term(word="HODL", difficulty=Difficulty.BEGINNER, category="Culture",
         definition="Holding bitcoin through volatility", hint="Hold on for dear life",
         fun_fact="Started as a typo on a forum in 2013"),
    Term(word="FIAT", difficulty=Difficulty.BEGINNER, category="Economics",
         definition="Government-issued money", hint="Decree money", is_active=False),
    Term(word="SATS", difficulty=Difficulty.INTERMEDIATE, category="Units",
         definition="The smallest bitcoin unit, plural", hint="Named after the creator"),
    Term(word="TAPROOT", difficulty=Difficulty.ADVANCED, category="Protocol",
         definition="A 2021 soft fork", hint="Schnorr signatures", is_active=False),
]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 18, 9, 0, 0))


@pytest.fixture
def repository():
    return InMemoryGameRepository(TEST_TERMS)


@pytest.fixture
def service(repository, clock):
    return GameService(repository, clock=clock)


@pytest.fixture
def app(service, monkeypatch):
    monkeypatch.setattr(game_service_module, "_game_service", service)
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
