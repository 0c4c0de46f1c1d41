"""Shared pytest fixtures for restful test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="session", autouse=True)
def schema() -> Generator[None, None, None]:
    """Create the widget table once for the whole run."""
    from tests.widgets import Base
    from tests.widgets import engine

    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture(autouse=True)
def clean_tables() -> None:
    """Reset widgets between tests."""
    from tests.widgets import Widget
    from tests.widgets import engine

    with engine.begin() as conn:
        conn.execute(Widget.__table__.delete())


@pytest.fixture
def session() -> Generator[Session, None, None]:
    from tests.widgets import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client over the widget app."""
    from tests.widgets import build_app

    with TestClient(build_app()) as test_client:
        yield test_client
