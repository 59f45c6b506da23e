"""Pytest configuration and shared fixtures."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.db.repositories.todos import TodoRepository
from app.main import create_app
from tests.helpers import FakeBlobStore, make_settings


@pytest.fixture
def settings(tmp_path):
    return make_settings(SQLITE_PATH=str(tmp_path / "todos.db"))


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def app(settings, blob_store):
    application = create_app(settings)
    application.state.blob_store = blob_store
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


@pytest.fixture
def repo(session):
    return TodoRepository(session)
