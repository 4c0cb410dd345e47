"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from device_console.config import Config
from device_console.database import make_engine, init_db
from device_console.main import create_app
from device_console.registry import DeviceRegistry
from device_console.sessions import SessionManager


class FakeClock:
    """Controllable replacement for ``utcnow``."""

    def __init__(self, start=datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    # In-memory SQLite shared through a StaticPool
    return Config(admin_password="admin123", api_password="panda", database_url="sqlite://")


@pytest.fixture
def engine(config):
    engine = make_engine(config)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def registry(db_session, clock):
    return DeviceRegistry(db_session, clock=clock)


@pytest.fixture
def session_manager(db_session, config, clock):
    return SessionManager(db_session, config, clock=clock)


@pytest.fixture
def client(config, engine, clock):
    app = create_app(config, engine=engine, clock=clock)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/admin/login", json={"password": "admin123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
