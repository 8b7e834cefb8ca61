"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides settings, started test clients, admin headers and a fake remote
product service.

==============================================================================
"""

from typing import Callable, Dict, Generator, Optional

import pytest
from fastapi.testclient import TestClient

from product_portal.catalog import CatalogBackend
from product_portal.config import Settings
from product_portal.main import Application

from helpers import ADMIN_PASSCODE, FakeProductService, make_settings, product_record


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return make_settings()


# ============================================================================
# REMOTE SERVICE FIXTURES
# ============================================================================

@pytest.fixture
def remote_service() -> FakeProductService:
    return FakeProductService([product_record("r1"), product_record("r2")])


# ============================================================================
# CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def make_client() -> Generator[Callable[..., TestClient], None, None]:
    """Factory for started test clients; each one is shut down after the test."""
    clients = []

    def factory(backend: Optional[CatalogBackend] = None, **overrides) -> TestClient:
        application = Application(settings=make_settings(**overrides), backend=backend)
        client = TestClient(application.app)
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    """Client with an empty memory-backed catalog."""
    return make_client()


@pytest.fixture
def admin_token(client: TestClient) -> str:
    """Access token for the admin session."""
    response = client.post("/api/v1/auth/login", json={"passcode": ADMIN_PASSCODE})
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def admin_headers(admin_token: str) -> Dict[str, str]:
    """Authorization headers for the admin session."""
    return {"Authorization": f"Bearer {admin_token}"}
