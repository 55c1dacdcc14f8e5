"""Tests for API endpoints."""

from __future__ import annotations

from typing import Annotated

import pytest
from litestar import Litestar, get
from litestar.params import Dependency
from litestar.testing import TestClient

from sitebuildr_py.app import create_app
from sitebuildr_py.core.models import Document, Element
from sitebuildr_py.core.serialization import document_to_dict
from sitebuildr_py.core.types import ElementType
from sitebuildr_py.exceptions import PersistenceError
from sitebuildr_py.plugin import SitebuildrConfig, SitebuildrPlugin
from sitebuildr_py.storage.memory import InMemoryDocumentStore


class UnavailableStore(InMemoryDocumentStore):
    """Store whose backend is down."""

    async def load_document(self, website_id: str) -> Document | None:
        msg = "backend unreachable"
        raise PersistenceError(msg)


def _payload() -> dict:
    section = Element(ElementType.SECTION, props={"name": "Hero"})
    heading = Element(ElementType.HEADING, props={"text": "Hello"}, responsive={"mobile": {"fontSize": "12px"}})
    return document_to_dict(Document().insert(section).insert(heading, section.id))


class TestContentAPI:
    """Tests for the content endpoints."""

    def test_save_and_get(self, client: TestClient[Litestar], store: InMemoryDocumentStore) -> None:
        """Test that a saved document is served back unchanged."""
        payload = _payload()
        response = client.put("/api/v1/content/site-1", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["website_id"] == "site-1"
        assert data["elements"] == 2
        assert "saved_at" in data
        assert store.save_count == 1

        response = client.get("/api/v1/content/site-1")
        assert response.status_code == 200
        assert response.json() == payload

    def test_save_replaces(self, client: TestClient[Litestar]) -> None:
        """Test that the last write wins."""
        client.put("/api/v1/content/site-1", json=_payload())
        client.put("/api/v1/content/site-1", json={"elements": []})
        assert client.get("/api/v1/content/site-1").json()["elements"] == []

    def test_get_unknown_website(self, client: TestClient[Litestar]) -> None:
        """Test that an unknown website returns 404."""
        response = client.get("/api/v1/content/missing")
        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "document_not_found"
        assert data["details"][0]["field"] == "website_id"

    def test_invalid_document(self, client: TestClient[Litestar]) -> None:
        """Test that a malformed document returns 422 and is not stored."""
        response = client.put("/api/v1/content/site-1", json={"elements": [{"id": "a", "type": "carousel"}]})
        assert response.status_code == 422
        data = response.json()
        assert data["code"] == "validation_error"
        assert data["details"][0]["field"] == "type"
        assert client.get("/api/v1/content/site-1").status_code == 404

    @pytest.mark.parametrize(
        ("element", "field"),
        [
            ({"id": "a", "type": "text", "position": [1, 2]}, "position"),
            ({"id": "a", "type": "text", "style": [1, 2]}, "style"),
            ({"id": "a", "type": "text", "responsive": {"tablet": 5}}, "responsive"),
        ],
    )
    def test_invalid_element_shape(self, client: TestClient[Litestar], element: dict, field: str) -> None:
        """Test that element fields of the wrong JSON type return 422."""
        response = client.put("/api/v1/content/site-1", json={"elements": [element]})
        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == field

    def test_invalid_settings_shape(self, client: TestClient[Litestar]) -> None:
        """Test that settings that are not an object return 422."""
        response = client.put("/api/v1/content/site-1", json={"settings": "dark"})
        assert response.status_code == 422
        assert response.json()["details"][0]["field"] == "settings"

    def test_invalid_body(self, client: TestClient[Litestar]) -> None:
        """Test that a body that is not an object returns 422."""
        response = client.put("/api/v1/content/site-1", json=["not", "a", "document"])
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_delete(self, client: TestClient[Litestar]) -> None:
        """Test deleting a saved document."""
        client.put("/api/v1/content/site-1", json=_payload())
        assert client.delete("/api/v1/content/site-1").status_code == 204
        assert client.get("/api/v1/content/site-1").status_code == 404
        assert client.delete("/api/v1/content/site-1").status_code == 404

    def test_store_failure(self) -> None:
        """Test that a failing store returns 502."""
        with TestClient(app=create_app(UnavailableStore())) as client:
            response = client.get("/api/v1/content/site-1")
        assert response.status_code == 502
        assert response.json()["code"] == "persistence_error"

    def test_custom_api_path(self, store: InMemoryDocumentStore) -> None:
        """Test mounting the API under another path."""
        with TestClient(app=create_app(store, api_path="/cms")) as client:
            assert client.put("/cms/content/site-1", json={}).status_code == 200
            assert client.get("/api/v1/content/site-1").status_code == 404


class TestObservability:
    """Tests for health checks and request correlation."""

    def test_health(self, client: TestClient[Litestar]) -> None:
        """Test the health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert {c["name"] for c in data["components"]} == {"application", "document_store"}

    def test_health_reports_store_failure(self) -> None:
        """Test that a failing store makes the service unhealthy."""
        with TestClient(app=create_app(UnavailableStore())) as client:
            data = client.get("/health").json()
        assert data["status"] == "unhealthy"

    def test_ready(self, client: TestClient[Litestar]) -> None:
        """Test the readiness endpoint."""
        assert client.get("/ready").json()["ready"] is True

    def test_correlation_id_is_returned(self, client: TestClient[Litestar]) -> None:
        """Test that responses carry a correlation id."""
        response = client.get("/api/v1/content/missing")
        correlation_id = response.headers["x-correlation-id"]
        assert correlation_id
        assert response.json()["correlation_id"] == correlation_id

    def test_correlation_id_is_propagated(self, client: TestClient[Litestar]) -> None:
        """Test that a client supplied correlation id is echoed back."""
        response = client.get("/ready", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["x-correlation-id"] == "abc-123"


class TestPlugin:
    """Tests for SitebuildrPlugin."""

    def test_store_before_init(self) -> None:
        """Test that the store is unavailable before app initialization."""
        plugin = SitebuildrPlugin()
        with pytest.raises(RuntimeError):
            _ = plugin.store

    def test_default_store(self) -> None:
        """Test that an in-memory store is used by default."""
        plugin = SitebuildrPlugin()
        Litestar(plugins=[plugin])
        assert isinstance(plugin.store, InMemoryDocumentStore)
        assert plugin.config.api_path == "/api/v1"

    def test_dependency_alias(self, store: InMemoryDocumentStore) -> None:
        """Test that the store is also injected under the configured key."""

        @get("/count")
        async def count(documents: Annotated[InMemoryDocumentStore, Dependency(skip_validation=True)]) -> int:
            return len(await documents.list_websites())

        app = Litestar(
            route_handlers=[count],
            plugins=[SitebuildrPlugin(SitebuildrConfig(store=store, dependency_key="documents"))],
        )
        with TestClient(app=app) as client:
            client.put("/api/v1/content/site-1", json={})
            assert client.get("/count").json() == 1

    def test_routes_can_be_disabled(self) -> None:
        """Test mounting only what is enabled."""
        app = Litestar(plugins=[SitebuildrPlugin(SitebuildrConfig(enable_api=False, enable_health=False))])
        with TestClient(app=app) as client:
            assert client.get("/api/v1/content/site-1").status_code == 404
            assert client.get("/health").status_code == 404
