import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront import services
from storefront.api import app, limiter
from storefront.database import Base
from storefront.models import user  # noqa: F401


@pytest.fixture
def session_local(monkeypatch):
    """Provide an isolated in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(services, "SessionLocal", TestingSessionLocal)
    return TestingSessionLocal


@pytest.fixture
def client(session_local, monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)
    return TestClient(app)


@pytest.fixture
def fast_hashing(monkeypatch):
    """Lower the bcrypt cost so suites registering many users stay quick."""
    from storefront.config import settings

    monkeypatch.setattr(settings, "password_hash_rounds", 4)
