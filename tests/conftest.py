"""
Pytest configuration for ReunItems tests.

The app reads its settings at import time, so the environment is prepared
before anything from reunitems is imported. Firestore is replaced by an
in-memory client with the subset of the API the store adapter uses.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-0123456789")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["CLOUD_LOGGING_ENABLED"] = "false"

import itertools
import threading
from datetime import datetime, timezone

import pytest
from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from httpx import ASGITransport, AsyncClient

from reunitems.core.firebase import set_db


# ---------------------------------------------------------------------------
# In-memory Firestore
# ---------------------------------------------------------------------------

_OPS = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
}


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, client, path):
        self._client = client
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    def __eq__(self, other):
        return isinstance(other, FakeDocumentRef) and other.path == self.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"FakeDocumentRef({self.path!r})"

    def get(self):
        self._client._check("get", self.path)
        with self._client._lock:
            data = self._client.docs.get(self.path)
            return FakeSnapshot(self, dict(data) if data is not None else None)

    def set(self, data, merge=False):
        self._client._check("set", self.path)
        with self._client._lock:
            payload = self._client._resolve(data)
            if merge and self.path in self._client.docs:
                self._client.docs[self.path].update(payload)
            else:
                self._client.docs[self.path] = payload

    def update(self, data):
        self._client._check("update", self.path)
        with self._client._lock:
            if self.path not in self._client.docs:
                raise NotFound(f"No document to update: {self.path}")
            self._client.docs[self.path].update(self._client._resolve(data))

    def delete(self):
        self._client._check("delete", self.path)
        with self._client._lock:
            self._client.docs.pop(self.path, None)


class FakeQuery:
    def __init__(self, client, path, filters=(), limit=None):
        self._client = client
        self._path = path
        self._filters = list(filters)
        self._limit = limit

    def where(self, field, op, value):
        return FakeQuery(self._client, self._path, self._filters + [(field, op, value)], self._limit)

    def limit(self, count):
        return FakeQuery(self._client, self._path, self._filters, count)

    def stream(self):
        self._client._check("list", self._path)
        with self._client._lock:
            rows = [
                (path, dict(data))
                for path, data in self._client.docs.items()
                if path.rsplit("/", 1)[0] == self._path
            ]
        results = []
        for path, data in rows:
            if all(_OPS[op](data.get(field), value) for field, op, value in self._filters):
                results.append(FakeSnapshot(FakeDocumentRef(self._client, path), data))
        if self._limit:
            results = results[: self._limit]
        return iter(results)


class FakeCollection(FakeQuery):
    def document(self, document_id=None):
        if document_id is None:
            document_id = f"auto{next(self._client._ids):06d}"
        return FakeDocumentRef(self._client, f"{self._path}/{document_id}")


class FakeFirestore:
    """
    Just enough of google.cloud.firestore.Client for the store adapter.

    `fail_on` holds (operation, path) pairs; a matching call raises, the way a
    dropped connection would.
    """

    project = "reunitems-test"

    def __init__(self):
        self.docs = {}
        self.fail_on = set()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _check(self, operation, path):
        if (operation, path) in self.fail_on:
            raise RuntimeError(f"injected failure: {operation} {path}")

    def _resolve(self, data):
        now = datetime.now(timezone.utc)
        return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in data.items()}

    def document(self, path):
        return FakeDocumentRef(self, path)

    def collection(self, path):
        return FakeCollection(self, path)

    # test helpers
    def seed(self, path, data):
        self.docs[path] = self._resolve(data)

    def data(self, path):
        return self.docs.get(path)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_db():
    db = FakeFirestore()
    set_db(db)
    yield db
    set_db(None)


@pytest.fixture
async def client(fake_db):
    from reunitems.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(client):
    """Sign a user up through the API; returns (user_id, auth headers)."""

    async def _make(email, password="secret123", display_name=None):
        body = {"email": email, "password": password}
        if display_name:
            body["display_name"] = display_name
        resp = await client.post("/auth/signup", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["user"]["id"], {"Authorization": f"Bearer {data['access_token']}"}

    return _make


@pytest.fixture
def make_site_owner(fake_db):
    def _grant(user_id):
        fake_db.seed(f"AppAdmins/{user_id}", {})

    return _grant
