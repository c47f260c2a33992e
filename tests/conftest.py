"""Shared pytest fixtures and configuration."""

import os

import pytest

# Set test environment variables before the app reads its configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")
os.environ.setdefault("CLIENT_URL", "http://localhost:8081")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from agencyhub import models  # noqa: E402,F401
from agencyhub.database import Base, get_db  # noqa: E402
from agencyhub.main import app  # noqa: E402
from tests.utils.factories import (  # noqa: E402
    auth_headers,
    create_agent,
    create_client,
    create_representation,
)


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """FastAPI test client bound to the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.identity_cache.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.identity_cache.clear()


@pytest.fixture
def agent(db):
    return create_agent(db, first_name="Ari", last_name="Gold", username="ari@agency.com")


@pytest.fixture
def other_agent(db):
    return create_agent(db, first_name="Lloyd", last_name="Lee", username="lloyd@agency.com")


@pytest.fixture
def talent(db):
    """A registered client."""
    return create_client(db, first_name="Vince", last_name="Chase", username="vince@example.com")


@pytest.fixture
def active_representation(db, agent, talent):
    return create_representation(db, agent, talent, status="active")


@pytest.fixture
def agent_headers(agent):
    return auth_headers(agent)


@pytest.fixture
def other_agent_headers(other_agent):
    return auth_headers(other_agent)


@pytest.fixture
def talent_headers(talent):
    return auth_headers(talent)
