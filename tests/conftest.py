import hashlib
import hmac
import os
import time
from decimal import Decimal

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SEED_DATA", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from barbershop.db import create_db_and_tables, get_session, seed_catalog
from barbershop.main import app
from barbershop.payments import PaymentGateway, get_payment_gateway

WEBHOOK_SECRET = "whsec_test_secret"


class FakeGateway(PaymentGateway):
    """Records payment intents instead of calling Stripe; webhook checks stay real."""

    def __init__(self):
        super().__init__("sk_test_fake", WEBHOOK_SECRET, "usd")
        self.intents = []
        self.refunds = []

    def create_payment_intent(self, amount: Decimal, metadata: dict) -> dict:
        intent_id = f"pi_test_{len(self.intents) + 1}"
        self.intents.append({"id": intent_id, "amount": amount, "metadata": metadata})
        return {"id": intent_id, "client_secret": f"{intent_id}_secret_abc"}

    def refund_payment(self, intent_id: str) -> str:
        self.refunds.append(intent_id)
        return f"re_test_{len(self.refunds)}"


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"), f"{timestamp}.{payload}".encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        seed_catalog(session)
        yield session


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(engine, session, gateway):
    def _get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, username, password="s3cret-pass"):
    resp = client.post("/api/register", json={"username": username, "password": password})
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/login", data={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    # first registered user is promoted to admin
    return register_and_login(client, "owner")


@pytest.fixture
def customer_headers(client, admin_headers):
    return register_and_login(client, "customer")
