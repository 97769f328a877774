from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from ..core import db as core_db
from ..core.config import Settings, get_settings
from ..core.db import create_engine_for_url, get_session, init_db, set_engine
from ..main import app


@pytest.fixture
def engine(tmp_path):
    test_db = tmp_path / "test.db"
    engine = create_engine_for_url(f"sqlite:///{test_db}", timeout=30)
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine) -> TestClient:
    original_engine = core_db.engine
    set_engine(engine)

    def _get_session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session_override
    app.dependency_overrides[get_settings] = lambda: Settings(transfer_retry_delay_ms=0)
    init_db()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    set_engine(original_engine)


def create_account(client: TestClient, balance: str = "10") -> str:
    response = client.post("/accounts", json={"balance": balance})
    assert response.status_code == 200
    return response.json()["id"]


def balance_of(client: TestClient, account_id: str) -> Decimal:
    response = client.get(f"/accounts/{account_id}/balance")
    assert response.status_code == 200
    assert isinstance(response.json(), (int, float))
    return Decimal(response.text)
