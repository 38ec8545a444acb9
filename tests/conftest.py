"""
Pytest configuration and fixtures.
Each test gets its own in-memory SQLite database and images directory.
"""

import pytest
from fastapi.testclient import TestClient

from app.db.database import Database
from app.main import create_app
from app.services.images import ImageStore
from tests.helpers import login_headers


@pytest.fixture
def images_dir(tmp_path):
    return tmp_path / "images"


@pytest.fixture
def client(images_dir):
    app = create_app(database_url="sqlite://", images_dir=str(images_dir))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(client):
    """Session bound to the same database the client talks to."""
    session = client.app.state.database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def database():
    """Standalone database for service-level tests."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def image_store(images_dir):
    store = ImageStore(str(images_dir))
    store.ensure_directory()
    return store


@pytest.fixture
def alice(client):
    return login_headers(client)


@pytest.fixture
def bob(client):
    return login_headers(client, email="bob@test.com", name="Bob")
