"""Shared fixtures: a throwaway SQLite file per test, a session, and an API client."""
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.init_db import init_db
from app.db.session import build_engine, build_session_factory
from app.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x01" * 16


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'customers_test.db'}"


@pytest.fixture
def engine(database_url):
    engine = build_engine(database_url, busy_timeout=15)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(database_url):
    app = create_app(Settings(DATABASE_URL=database_url, API_PREFIX="/api", ENVIRONMENT="test"))
    with TestClient(app) as test_client:
        yield test_client


def image_files(count, payload=PNG_BYTES):
    """Multipart `files` parts for TestClient."""
    return [("files", (f"img{i}.png", payload, "image/png")) for i in range(count)]
