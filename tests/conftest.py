import os

# Must be configured before the app (and its settings/engine) is imported
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ADMIN_PASSWORD", "admin-password")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from app.db import core
from app.db.schema import User
from app.main import app
from app.models.user import UserCreate
from app.services.user import UserService
from seed import seed_admin


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"
CUSTOMER_EMAIL = "customer@example.com"
CUSTOMER_PASSWORD = "customer-password"

QUOTATION_PAYLOAD = {
    "name": "Alice",
    "email": "alice@x.com",
    "phone_number": "1234567890",
    "business_address": "1 Main St",
    "company_name": "Acme",
    "industrial_experience": "5 yrs",
    "qualification": "BSc",
    "product_details": "widgets",
}


@pytest.fixture(autouse=True)
def test_engine(tmp_path, monkeypatch):
    # A fresh file database per test; request sessions and the audit worker
    # resolve core.engine at call time
    engine = core._build_engine(f"sqlite:///{tmp_path / 'storefront.db'}")
    monkeypatch.setattr(core, "engine", engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(test_engine):
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_user(session) -> User:
    user = seed_admin(session, ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer_user(session) -> User:
    return UserService(session).create_user(UserCreate(
        name="Carol", email=CUSTOMER_EMAIL, password=CUSTOMER_PASSWORD))


def _bearer(session, user) -> dict:
    token = UserService(session).generate_access_token(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(session, admin_user) -> dict:
    return _bearer(session, admin_user)


@pytest.fixture
def customer_headers(session, customer_user) -> dict:
    return _bearer(session, customer_user)


@pytest.fixture
def submit_quotation(client):
    def _submit(**overrides) -> dict:
        payload = {**QUOTATION_PAYLOAD, **overrides}
        response = client.post("/api/v1/quotations/", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["quotation"]
    return _submit


@pytest.fixture
def approved_quotation(client, admin_headers, submit_quotation) -> dict:
    quotation = submit_quotation()
    response = client.put(
        f"/api/v1/quotations/{quotation['id']}/approve", headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()["quotation"]


@pytest.fixture
def supplier_payload(approved_quotation) -> dict:
    return {
        "quotation_id": approved_quotation["id"],
        "quantity": 10,
        "product_name": "Widget",
        "product_image": "https://x/img.png",
        "product_code": "W-001",
    }
