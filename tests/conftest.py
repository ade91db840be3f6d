# tests/conftest.py
import os, sys
from datetime import datetime, timezone

# put the project root (the folder containing "valdicass") first on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
from fastapi.testclient import TestClient

from valdicass.server.errors import EmailDeliveryError, NotFound, TokenVerificationError
from valdicass.server.main import create_app
from valdicass.server.schemas.quote import Quote
from valdicass.server.settings.config import Settings


class FakeQuoteStore:
    def __init__(self, docs=None):
        self.docs = {k: dict(v) for k, v in (docs or {}).items()}
        self.get_calls = []
        self.updates = []
        self.fail_with = None

    def get(self, quote_id):
        self.get_calls.append(quote_id)
        if self.fail_with:
            raise self.fail_with
        data = self.docs.get(quote_id)
        if data is None:
            return None
        return Quote(id=quote_id, **data)

    def mark_viewed(self, quote_id):
        if self.fail_with:
            raise self.fail_with
        if quote_id not in self.docs:
            raise NotFound()
        self.docs[quote_id]["viewed"] = True
        self.docs[quote_id]["viewedAt"] = datetime.now(timezone.utc)
        self.updates.append(quote_id)


class FakeVerifier:
    def __init__(self, tokens=None):
        self.tokens = tokens or {}
        self.seen = []

    def verify(self, token):
        self.seen.append(token)
        if token not in self.tokens:
            raise TokenVerificationError("Decoding Firebase ID token failed.")
        return {"uid": self.tokens[token], "email": f"{self.tokens[token]}@valdicass.com"}


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, message):
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append(message)


@pytest.fixture
def settings():
    return Settings(
        public_base_url="https://relay.valdicass.test",
        sendgrid_api_key="SG.test-key",
    )


@pytest.fixture
def store():
    return FakeQuoteStore(
        {
            "Q1": {"total": 250, "createdBy": "U1", "viewed": False},
            "Q2": {"total": 1999.5, "userId": "U2"},
            "Q3": {"total": 10},
        }
    )


@pytest.fixture
def verifier():
    return FakeVerifier({"token-u1": "U1", "token-u2": "U2"})


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(settings, store, verifier, mailer):
    app = create_app(settings, quote_store=store, token_verifier=verifier, mailer=mailer)
    with TestClient(app) as c:
        yield c
