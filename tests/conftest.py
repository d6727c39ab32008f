import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault(
    "API_TOKENS", "test-token=tester@example.com,lead-token=lead@example.com"
)
os.environ.setdefault("TEAM_REVIEWER_EMAILS", "lead@example.com")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from signoff.db import Base, SessionLocal, engine  # noqa: E402
from signoff.main import app  # noqa: E402

from mocks import FakeCollectionApi  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    return {"Authorization": "Bearer test-token"}


@pytest.fixture()
def fake_api():
    return FakeCollectionApi()


@pytest.fixture()
def reviewer_headers():
    return {"Authorization": "Bearer lead-token"}
