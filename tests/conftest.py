import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Generator, List, Optional

import pytest
import stripe
from fastapi.testclient import TestClient

# Pas de Redis en tests: le lifespan désactive fastapi-limiter
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

from storefront import config
from storefront.app import app as fastapi_app

WEBHOOK_SECRET = "whsec_test_secret"
SECRET_KEY = "sk_test_dummy"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)


def _sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """En-tête stripe-signature: t=<ts>,v1=<HMAC-SHA256(secret, "<ts>.<body brut>")>."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def _make_event(event_type: str, obj: Optional[Dict[str, Any]] = None, event_id: str = "evt_test_1") -> bytes:
    event = {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj or {"id": "cs_test_123", "object": "checkout.session"}},
    }
    return json.dumps(event).encode("utf-8")


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET


@pytest.fixture
def sign_payload():
    return _sign_payload


@pytest.fixture
def make_event():
    return _make_event


@pytest.fixture(autouse=True)
def _stripe_settings(monkeypatch):
    """Clés Stripe de test lues par le lifespan au démarrage de l'app."""
    monkeypatch.setattr(config, "STRIPE_SECRET_KEY", SECRET_KEY)
    monkeypatch.setattr(config, "STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setattr(config, "STRIPE_PUBLISHABLE_KEY", "pk_test_dummy")
    monkeypatch.setattr(config, "FRONTEND_URL", "http://localhost:3000")
    monkeypatch.setattr(config, "CHECKOUT_CURRENCY", "aud")
    monkeypatch.setattr(config, "WEBHOOK_TIMESTAMP_TOLERANCE", 300)
    monkeypatch.setattr(config, "WEBHOOK_DEDUP_SIZE", 1000)
    # Le gateway configure le SDK globalement: restauré après chaque test
    monkeypatch.setattr(stripe, "max_network_retries", stripe.max_network_retries)
    monkeypatch.setattr(stripe, "default_http_client", stripe.default_http_client)


@pytest.fixture(scope="session")
def app():
    return fastapi_app


@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def stripe_sessions(monkeypatch) -> List[Dict[str, Any]]:
    """Remplace stripe.checkout.Session.create; chaque appel est enregistré."""
    calls: List[Dict[str, Any]] = []

    def _fake_create(**params):
        calls.append(params)
        return {"id": "cs_test_123", "object": "checkout.session", "url": "https://checkout.stripe.test/c/pay/cs_test_123"}

    monkeypatch.setattr(stripe.checkout.Session, "create", _fake_create)
    return calls


@pytest.fixture()
def dispatched(client) -> List[tuple]:
    """Espionne les handlers du dispatcher de l'app: [(type, data.object), ...]."""
    calls: List[tuple] = []
    dispatcher = client.app.state.webhook_dispatcher
    for event_type in dispatcher.event_types:
        dispatcher.register(event_type)(lambda obj, _t=event_type: calls.append((_t, obj)))
    return calls
