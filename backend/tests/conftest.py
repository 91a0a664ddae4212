import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from autoplan.api.deps import get_db
from autoplan.core.config import Settings
from autoplan.db.base import Base
from autoplan.main import app
from autoplan.services.time_grid import TimeGrid
import autoplan.models  # noqa: F401


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def grid(settings):
    return TimeGrid.from_settings(settings)


@pytest.fixture()
def db_engine():
    # one in-memory database shared by every connection of the test
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
