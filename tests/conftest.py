# tests/conftest.py
"""
Fixtures comunes.

- BD SQLite en memoria (una conexión compartida vía StaticPool).
- Tablas creadas y borradas en cada test.
- Dos clientes HTTP independientes (cada uno con su cookie de sesión).
"""

from __future__ import annotations

import os

# Antes de importar la app: settings y engine se construyen al importar
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BOOTSTRAP_CREATE_ALL"] = "false"
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app

API = "/api/v1"


@pytest.fixture(autouse=True)
def _db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def login(client: TestClient, username: str, pin: str):
    return client.post(f"{API}/auth", json={"username": username, "pin": pin})


@pytest.fixture
def anon_client():
    return TestClient(app)


@pytest.fixture
def client():
    """Cliente autenticado como 'ana'."""
    c = TestClient(app)
    resp = login(c, "ana", "1234")
    assert resp.status_code == 201
    return c


@pytest.fixture
def other_client():
    """Segundo usuario ('bruno') para comprobar aislamiento."""
    c = TestClient(app)
    resp = login(c, "bruno", "9999")
    assert resp.status_code == 201
    return c


def create_person(client: TestClient, name: str = "Ana Souza", **extra) -> dict:
    resp = client.post(f"{API}/people", json={"name": name, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()


def add_transaction(client: TestClient, person_id: str, type_: str, amount: str, date: str = "2024-03-01T12:00:00Z") -> dict:
    resp = client.post(
        f"{API}/people/{person_id}/transactions",
        json={"type": type_, "amount": amount, "date": date},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_loan(client: TestClient, **body) -> dict:
    payload = {
        "direction": "lent",
        "amount": "200.00",
        "reason": "Conserto do carro",
        "transactionDate": "2024-02-01T10:00:00Z",
    }
    payload.update(body)
    resp = client.post(f"{API}/loans", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_expense(client: TestClient, **body) -> dict:
    payload = {
        "name": "Netflix",
        "amount": "39.90",
        "category": "subscription",
        "recurrence": "monthly",
        "paymentMethod": "credit_card",
        "dueDay": 10,
        "startDate": "2024-01-01T00:00:00Z",
    }
    payload.update(body)
    resp = client.post(f"{API}/expenses", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()
