"""
Shared test data builders and a fake remote product service.
"""

import json
import uuid
from typing import Dict, List, Optional

import httpx

from product_portal.catalog import Product, ProductFormData
from product_portal.config import Settings


ADMIN_PASSCODE = "letmein-123"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment defaults."""
    values = {
        "app_env": "development",
        "debug": False,
        "storage_backend": "memory",
        "seed_catalog": False,
        "max_products": 150,
        "admin_passcode": ADMIN_PASSCODE,
        "jwt_secret_key": "test-secret-key-for-portal-tests",
        "database_url": "sqlite://",
    }
    values.update(overrides)
    return Settings(**values)


def form_data(name: str = "Widget", **overrides) -> ProductFormData:
    """Valid form data with predictable values."""
    values = {
        "name": name,
        "description": f"{name} description",
        "usage_instructions": f"Use {name} carefully",
        "external_link": f"https://example.com/{name.lower()}",
    }
    values.update(overrides)
    return ProductFormData(**values)


def form_payload(name: str = "Widget", **overrides) -> Dict[str, str]:
    """Wire-shaped JSON body for product create/update endpoints."""
    payload = {
        "name": name,
        "description": f"{name} description",
        "usageInstructions": f"Use {name} carefully",
        "externalLink": f"https://example.com/{name.lower()}",
    }
    payload.update(overrides)
    return payload


def product_record(product_id: str, name: Optional[str] = None, **overrides) -> Dict[str, str]:
    """Wire-shaped product record."""
    name = name or f"Product {product_id}"
    record = {
        "id": product_id,
        "name": name,
        "description": f"{name} description",
        "usageInstructions": f"How to use {name}",
        "externalLink": f"https://example.com/{product_id}",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }
    record.update(overrides)
    return record


def make_products(count: int) -> List[Product]:
    return [Product.model_validate(product_record(f"p{i}")) for i in range(count)]


class FakeProductService:
    """
    In-process stand-in for the remote product service.

    Serves the REST contract RemoteBackend expects through
    httpx.MockTransport. Setting ``fail_with`` makes every write answer
    with that status code.
    """

    def __init__(self, records: Optional[List[Dict]] = None) -> None:
        self.records: Dict[str, Dict] = {r["id"]: dict(r) for r in (records or [])}
        self.fail_with: Optional[int] = None
        self.requests: List[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = [p for p in request.url.path.split("/") if p]
        if "products" in parts:
            parts = parts[parts.index("products"):]

        if request.method != "GET" and self.fail_with:
            return httpx.Response(self.fail_with, json={"message": "Service unavailable"})

        if parts == ["products"] and request.method == "GET":
            return httpx.Response(200, json=list(self.records.values()))

        if parts == ["products"] and request.method == "POST":
            body = json.loads(request.content)
            body["id"] = f"srv-{uuid.uuid4().hex[:8]}"
            self.records[body["id"]] = body
            return httpx.Response(201, json=body)

        if len(parts) == 2 and parts[0] == "products":
            product_id = parts[1]
            if product_id not in self.records:
                return httpx.Response(404, json={"message": "Not found"})

            if request.method == "PUT":
                body = json.loads(request.content)
                self.records[product_id] = body
                return httpx.Response(200, json=body)

            if request.method == "DELETE":
                del self.records[product_id]
                return httpx.Response(204)

        return httpx.Response(405)
