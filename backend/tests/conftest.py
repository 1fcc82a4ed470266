"""
Storefront Gateway: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests never talk to Firestore, Cloudinary or Razorpay. Collaborators
       are replaced by an in-memory Firestore collection and mocks.

Fixture Hierarchy:
    ├── product_collection: In-memory stand-in for a Firestore collection
    ├── razorpay_client:    MagicMock with a canned order response
    ├── gateway_context:    GatewayContext with payments disabled
    ├── test_client:        HTTPX AsyncClient on an app without payments
    └── payments_client:    HTTPX AsyncClient on an app with payments enabled
"""

import os
import uuid
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ALLOWED_ORIGINS"] = "https://shop.example.com"
os.environ.pop("RAZORPAY_KEY_ID", None)
os.environ.pop("RAZORPAY_KEY_SECRET", None)

import pytest
import pytest_asyncio
from google.api_core.exceptions import NotFound
from httpx import ASGITransport, AsyncClient

from storefront.config import Settings
from storefront.context import GatewayContext
from storefront.main import create_app
from storefront.services.media_service import MediaService
from storefront.services.payment_service import PaymentService
from storefront.services.product_service import ProductService

ALLOWED_ORIGIN = "https://shop.example.com"


# ══════════════════════════════════════════════════════════════════════════
# In-memory Firestore double
# ══════════════════════════════════════════════════════════════════════════

class FakeSnapshot:
    def __init__(self, doc_id: str, data: Dict[str, Any]):
        self.id = doc_id
        self._data = data

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


class FakeDocumentReference:
    def __init__(self, collection: "InMemoryCollection", doc_id: str):
        self._collection = collection
        self.id = doc_id

    async def update(self, fields: Dict[str, Any]) -> None:
        self._collection.calls += 1
        if not fields:
            raise ValueError("Cannot update with an empty document.")
        if self.id not in self._collection.docs:
            raise NotFound(f"No document to update: products/{self.id}")
        self._collection.docs[self.id].update(fields)

    async def delete(self) -> None:
        self._collection.calls += 1
        self._collection.docs.pop(self.id, None)


class InMemoryCollection:
    """
    Mirrors the AsyncCollectionReference calls ProductService makes:
    stream(), add() and document(id).update()/delete().

    `calls` counts every collaborator round trip.
    """

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.calls = 0

    async def stream(self):
        self.calls += 1
        for doc_id, data in list(self.docs.items()):
            yield FakeSnapshot(doc_id, data)

    async def add(self, data: Dict[str, Any]):
        self.calls += 1
        doc_id = uuid.uuid4().hex[:20]
        self.docs[doc_id] = dict(data)
        return object(), FakeDocumentReference(self, doc_id)

    def document(self, doc_id: str) -> FakeDocumentReference:
        return FakeDocumentReference(self, doc_id)


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def product_collection():
    return InMemoryCollection()


@pytest.fixture
def razorpay_client():
    """Stands in for razorpay.Client; order.create echoes a created order."""
    client = MagicMock()

    def create(data):
        return {
            "id": "order_TEST123",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }

    client.order.create.side_effect = create
    return client


@pytest.fixture
def media_service():
    return MediaService(folder="test-products")


@pytest.fixture
def gateway_context(product_collection, media_service):
    return GatewayContext(
        products=ProductService(product_collection),
        media=media_service,
        payments=None,
    )


def build_test_app(context: GatewayContext, app_settings: Optional[Settings] = None):
    return create_app(
        app_settings=app_settings or Settings(cors_allowed_origins=ALLOWED_ORIGIN),
        context=context,
    )


@pytest_asyncio.fixture
async def test_client(gateway_context):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    ASGITransport does not run the lifespan, so the injected context is the
    one every request sees.
    """
    app = build_test_app(gateway_context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def client_for(gateway_context):
    """
    Factory for clients on apps with non-default settings.

    Usage:
        async with client_for(cors_allow_no_origin=False) as client:
            response = await client.get("/api/products")
    """
    def factory(**overrides) -> AsyncClient:
        app_settings = Settings(**{"cors_allowed_origins": ALLOWED_ORIGIN, **overrides})
        app = build_test_app(gateway_context, app_settings)
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return factory


@pytest_asyncio.fixture
async def payments_client(gateway_context, razorpay_client):
    gateway_context.payments = PaymentService(client=razorpay_client, currency="INR")
    app = build_test_app(gateway_context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_png_bytes():
    """PNG signature plus an IHDR chunk header; enough to look like a PNG."""
    return b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
