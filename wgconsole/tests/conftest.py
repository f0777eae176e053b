import json
import os
import pytest
import httpx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE environment variables before any other imports that might read settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEBUG"] = "true"
os.environ["PROXY_URL"] = "http://proxy.test/api/router/proxy"
os.environ["BACKEND_API_URL"] = "http://proxy.test/api"

import sys
from pathlib import Path

# Add project root to sys.path so we can import 'wgconsole'
# This assumes conftest.py is in wgconsole/tests/
sys.path.append(str(Path(__file__).parent.parent.parent))

from wgconsole.config_store import RouterConnectionProfile
from wgconsole.console import build_console, get_console
from wgconsole.db import Base
from wgconsole.main import app

# Create in-memory engine
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRouterProxy:
    """Stands in for the local proxy; records every envelope it receives."""

    def __init__(self):
        self.calls = []
        self.requests = []
        self.replies = []
        self.default = (200, {"success": True, "status": 200, "data": []})

    def reply(self, body, http_status=200):
        self.replies.append((http_status, body))
        return self

    def raw(self, text, http_status=200):
        self.replies.append((http_status, text))
        return self

    def fail(self, exc):
        self.replies.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.content:
            self.calls.append(json.loads(request.content))
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def methods(self):
        return [(c["method"], c["path"]) for c in self.calls]


def mikrotik_profile(**overrides) -> RouterConnectionProfile:
    data = {
        "routerType": "mikrotik",
        "endpoint": "192.0.2.1",
        "port": "80",
        "user": "admin",
        "password": "secret",
        "useHttps": False,
    }
    data.update(overrides)
    return RouterConnectionProfile.model_validate(data)


@pytest.fixture(scope="function")
def session_factory():
    # Create tables
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        # Drop tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def fake_proxy():
    return FakeRouterProxy()


@pytest.fixture(scope="function")
def fake_backend():
    return FakeRouterProxy()


@pytest.fixture(scope="function")
def console(session_factory, fake_proxy, fake_backend):
    return build_console(
        session_factory=session_factory,
        transport=fake_proxy.transport,
        backend_transport=fake_backend.transport,
    )


@pytest.fixture(scope="function")
def configured(console):
    console.store.save(mikrotik_profile())
    return console


@pytest.fixture(scope="function")
def client(console):
    app.dependency_overrides[get_console] = lambda: console
    yield TestClient(app)
    app.dependency_overrides.clear()
