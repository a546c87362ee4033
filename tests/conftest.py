import os

# La configuration est lue à l'import de lawdesk: fixer l'environnement de test avant tout import
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/lawdesk_test")
os.environ["DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS"] = "1"
os.environ.pop("LOCAL_RATE_LIMIT_FALLBACK", None)

import pytest
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple
from unittest.mock import MagicMock

import httpx
from fastapi.testclient import TestClient

from lawdesk import config
from lawdesk.app import app as fastapi_app
from lawdesk.chat.thread import chat_threads
from lawdesk.infra import http_client
from lawdesk.payments.checkout_state import checkout_stores
from lawdesk.utils.security import require_user

API_BASE = "http://payments.test/api"
BACKEND_URL = "http://backend.test"

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)
        elif "tests/functional/" in nodeid:
            item.add_marker(pytest.mark.functional)

@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

# Simuler un utilisateur authentifié pour les endpoints protégés
TEST_USER: Dict[str, Any] = {
    "id": "test-user",
    "email": "test@example.com",
    "role": "user",
    "metadata": {"full_name": "Test User"},
    "token": "fake-token",
}

@pytest.fixture(autouse=True)
def _override_require_user(app):
    app.dependency_overrides[require_user] = lambda: dict(TEST_USER)
    try:
        yield
    finally:
        app.dependency_overrides.pop(require_user, None)

@pytest.fixture
def as_user(app):
    """Remplace l'utilisateur courant: as_user(id="u1", role="freelancer")."""
    def _set(**fields: Any) -> Dict[str, Any]:
        user = {**TEST_USER, **fields}
        app.dependency_overrides[require_user] = lambda: dict(user)
        return user
    return _set

@pytest.fixture(autouse=True)
def _collaborator_urls(monkeypatch):
    monkeypatch.setattr(config, "API_BASE", API_BASE)
    monkeypatch.setattr(config, "BACKEND_URL", BACKEND_URL)
    monkeypatch.setattr(config, "BASE_URL", BACKEND_URL)

@pytest.fixture(autouse=True)
def _reset_shared_state():
    checkout_stores.clear()
    chat_threads.clear()
    yield
    checkout_stores.clear()
    chat_threads.clear()
    http_client.set_http_client(None)

# Mock des accès Supabase pour tous les tests
@pytest.fixture(autouse=True)
def mock_supabase(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr("lawdesk.infra.supabase_client.get_supabase", lambda: fake)
    monkeypatch.setattr("lawdesk.auth.repository.get_supabase", lambda: fake)
    monkeypatch.setattr("lawdesk.users.repository.get_user_supabase", lambda token: fake)
    return fake

# --- Collaborateurs HTTP (httpx.MockTransport) ---

Handler = Callable[[httpx.Request], httpx.Response]

class FakeBackend:
    """Routes (méthode, hôte+chemin) -> réponse; chaque requête reçue est enregistrée dans calls."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[httpx.Request] = []

    @staticmethod
    def _key(method: str, url: httpx.URL) -> Tuple[str, str]:
        return method.upper(), f"{url.host}{url.path}"

    def add(self, method: str, url: str, status: int = 200, json: Any = None, handler: Optional[Handler] = None, content: Optional[bytes] = None):
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if content is not None:
                    return httpx.Response(status, content=content)
                return httpx.Response(status, json=json)
        self.routes[self._key(method, httpx.URL(url))] = handler

    def fail(self, method: str, url: str):
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)
        self.add(method, url, handler=_raise)

    def calls_to(self, method: str, url: str) -> List[httpx.Request]:
        key = self._key(method, httpx.URL(url))
        return [r for r in self.calls if self._key(r.method, r.url) == key]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        handler = self.routes.get(self._key(request.method, request.url))
        if handler is None:
            return httpx.Response(404, json={"message": f"no route for {request.method} {request.url}"})
        return handler(request)

@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    http_client.set_http_client(httpx.Client(transport=httpx.MockTransport(fake)))
    return fake

# --- MongoDB en mémoire ---

class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = list(docs)

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def __iter__(self):
        return iter([dict(d) for d in self._docs])

class FakeCollection:
    def __init__(self, docs: Optional[List[Dict[str, Any]]] = None):
        self.docs: List[Dict[str, Any]] = list(docs or [])
        self._next_id = 1

    @staticmethod
    def _match(doc: Dict[str, Any], flt: Dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in (flt or {}).items())

    def find(self, flt: Optional[Dict[str, Any]] = None) -> FakeCursor:
        return FakeCursor([d for d in self.docs if self._match(d, flt or {})])

    def find_one(self, flt: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        for d in self.docs:
            if self._match(d, flt):
                return dict(d)
        return None

    def update_one(self, flt: Dict[str, Any], update: Dict[str, Any]):
        for d in self.docs:
            if self._match(d, flt):
                d.update(update.get("$set", {}))
                return MagicMock(matched_count=1, modified_count=1)
        return MagicMock(matched_count=0, modified_count=0)

    def insert_one(self, doc: Dict[str, Any]):
        doc = dict(doc)
        doc.setdefault("_id", f"oid-{self._next_id}")
        self._next_id += 1
        self.docs.append(doc)
        return MagicMock(inserted_id=doc["_id"])

class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    def seed(self, name: str, docs: List[Dict[str, Any]]) -> FakeCollection:
        self.collections[name] = FakeCollection(docs)
        return self.collections[name]

@pytest.fixture
def mongo(monkeypatch) -> FakeDatabase:
    db = FakeDatabase()
    monkeypatch.setattr("lawdesk.consultations.repository.get_collection", lambda name: db[name])
    monkeypatch.setattr("lawdesk.documents.repository.get_collection", lambda name: db[name])
    return db
