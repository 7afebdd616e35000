"""Shared fixtures: isolated settings, a fresh database per test, a TestClient."""

import os
import tempfile

# Setup environment for testing (before any gardenauth import)
os.environ["GARDEN_DATA_DIR"] = tempfile.mkdtemp()
os.environ["GARDEN_DB_PATH"] = os.path.join(os.environ["GARDEN_DATA_DIR"], "test.db")
os.environ["GARDEN_SIGNING_KEY"] = "test-signing-key"
os.environ["GARDEN_ADMIN_PASSWORD"] = "test-admin-password"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from gardenauth.config import settings
from gardenauth.database import engine, init_db
from gardenauth.main import app
from gardenauth.services.accounts import issue_account_token, set_claimed_gardens
from gardenauth.utils.security import derive_key


@pytest.fixture(autouse=True)
def fresh_db():
    init_db()
    yield
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def config():
    return settings


@pytest.fixture
def provision(client):
    """Register a garden the way a controller does on first contact."""

    def _provision(serial: str) -> str:
        key = derive_key(serial, settings.signing_key)
        r = client.get("/requestNewToken", params={"serial": serial, "key": key})
        assert r.status_code == 200, f"requestNewToken failed: {r.status_code} {r.text}"
        return r.text

    return _provision


@pytest.fixture
def account_token(session):
    """Issue a sign-in token for an account, optionally seeding its claimed gardens."""

    def _token(account_id: str, claimed: list[str] | None = None) -> str:
        if claimed is not None:
            set_claimed_gardens(account_id, claimed, session)
        return issue_account_token(account_id, session, settings)

    return _token
