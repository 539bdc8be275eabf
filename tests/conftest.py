"""
Fixtures compartidas: app construida con `create_app`, reloj controlable y
base de datos SQLite temporal.
"""
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config.settings import Settings
from core.session_store import SessionStore


class FakeClock:
    """Reloj manual para probar intervalos sin dormir."""
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "BLOCKED_ORIGINS": ["www.some-evil-place.com"],
        "ON_BLOCKED_ORIGIN": "reject_not_found",
        "RATE_LIMIT_INTERVAL": 10.0,
        "SESSIONS_ENABLED": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(DATABASE_URL=f"sqlite:///{tmp_path / 'health.db'}")


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def app(settings, session_store, clock):
    return create_app(settings=settings, session_store=session_store, clock=clock)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
