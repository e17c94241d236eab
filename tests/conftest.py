"""Shared test fixtures for the catalog admin test suite."""

import os
import tempfile

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

API_KEY = "test-public-api-key-0123456789"
STORAGE_DIR = tempfile.mkdtemp(prefix="catalog-admin-storage-")

# Settings are read once at import time, so the environment must be ready first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PUBLIC_API_KEY"] = API_KEY
os.environ["STORAGE_ROOT"] = STORAGE_DIR
os.environ["STORAGE_PUBLIC_URL"] = "http://testserver"
os.environ["LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient  # noqa: E402

from catalog_admin.db.models import Base  # noqa: E402
from catalog_admin.db.session import get_db  # noqa: E402
from catalog_admin.main import app  # noqa: E402


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every session of a test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """TestClient with the database dependency bound to the test engine."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        test_client.headers.update({"apikey": API_KEY})
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(session_factory):
    """TestClient without the API key header."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_bundle():
    return {
        "features": ["Corrosion resistant", "Low noise"],
        "images": [
            "http://testserver/storage/v1/object/public/product-images/pump-front.png",
            "http://testserver/storage/v1/object/public/product-images/pump-side.png",
        ],
        "charts": ["http://testserver/storage/v1/object/public/product-charts/curve.png"],
        "documents": [
            {
                "name": "Manual",
                "url": "http://testserver/storage/v1/object/public/product-documents/manual.pdf",
                "type": "pdf",
            }
        ],
        "sections": {"documents": {"enabled": True}, "videos": {"enabled": False}},
    }
