import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from db import SummaryStore
from services.llm_client import GeminiClient

TOKENINFO = {
    "sub": "1234567890",
    "email": "reader@example.com",
    "aud": "client-id.apps.googleusercontent.com",
    "azp": "client-id.apps.googleusercontent.com",
}

GEMINI_OK = {
    "candidates": [
        {"content": {"parts": [{"text": "Paris is France's capital."}], "role": "model"}}
    ]
}


class FakeResponse:
    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json = json_data

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


class FakeCollection:
    def __init__(self, gate=None, error=None):
        self.documents = []
        self.gate = gate
        self.error = error

    def insert_one(self, document):
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        self.documents.append(document)


class FakeMongoClient:
    def __init__(self, uri, collection=None):
        self.uri = uri
        self.collection = collection or FakeCollection()
        self.closed = False

    def __getitem__(self, db_name):
        return {"summaries": self.collection}

    def close(self):
        self.closed = True


def wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def settings():
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        gemini_api_key="test-key",
    )


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def mongo_clients(collection):
    created = []

    def factory(uri):
        client = FakeMongoClient(uri, collection)
        created.append(client)
        return client

    factory.created = created
    return factory


@pytest.fixture
def store(settings, mongo_clients):
    return SummaryStore(settings.mongodb_uri, client_factory=mongo_clients)


@pytest.fixture
def tokeninfo(monkeypatch):
    """Google tokeninfo stub; accepts every token except 'bad-token'."""
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append({"url": url, "params": params})
        if params["access_token"] == "bad-token":
            return FakeResponse(400, {"error": "invalid_token"})
        return FakeResponse(200, dict(TOKENINFO))

    monkeypatch.setattr("services.auth.requests.get", fake_get)
    return calls


@pytest.fixture
def gemini(monkeypatch):
    """Gemini REST stub; set `.status` / `.payload` to change the reply."""

    stub = SimpleNamespace(status=200, payload=GEMINI_OK, calls=[])

    def fake_post(url, json=None, headers=None, timeout=None):
        stub.calls.append({"url": url, "json": json, "headers": headers})
        return FakeResponse(stub.status, stub.payload)

    monkeypatch.setattr("services.llm_client.requests.post", fake_post)
    return stub


@pytest.fixture
def client(settings, store, tokeninfo, gemini):
    app = create_app(
        settings=settings,
        llm_client=GeminiClient(api_key=settings.gemini_api_key),
        summary_store=store,
    )
    with TestClient(app) as test_client:
        yield test_client

