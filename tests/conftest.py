"""Shared test fixtures.

Every test gets its own in-memory SQLite database; the app under test is
built with ``create_app`` and bound to that same engine.
"""
from typing import Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from taskboard.core.config import Settings
from taskboard.core.security import Identity, PasswordHasher
from taskboard.db.session import create_db_and_tables, create_db_engine
from taskboard.db.stores import TaskStore, UserStore
from taskboard.main import create_app
from taskboard.services.task_access import TaskAccess

from .helpers import login, make_user, register


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret-key-that-is-long-enough-for-hs256",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def engine(settings):
    # StaticPool keeps the single in-memory connection alive across sessions
    engine = create_db_engine(settings, poolclass=StaticPool)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def users(session) -> UserStore:
    return UserStore(session)


@pytest.fixture()
def tasks(session) -> TaskStore:
    return TaskStore(session)


@pytest.fixture()
def access(tasks) -> TaskAccess:
    return TaskAccess(tasks)


@pytest.fixture()
def ana(users) -> Identity:
    return Identity.from_user(make_user(users, "ana@mail.com", name="Ana"))


@pytest.fixture()
def bruno(users) -> Identity:
    return Identity.from_user(make_user(users, "bruno@mail.com", name="Bruno"))


@pytest.fixture()
def app(settings, engine):
    return create_app(settings, engine=engine)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def ana_headers(client) -> Dict[str, str]:
    assert register(client, "Ana", "a@x.com").status_code == 201
    return login(client, "a@x.com")


@pytest.fixture()
def bruno_headers(client) -> Dict[str, str]:
    assert register(client, "Bruno", "b@x.com").status_code == 201
    return login(client, "b@x.com")
