"""Document store backed by the content HTTP API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from sitebuildr_py.core.serialization import document_from_dict, document_to_dict
from sitebuildr_py.exceptions import PersistenceError, ValidationError

if TYPE_CHECKING:
    from types import TracebackType

    from sitebuildr_py.config import EditorSettings
    from sitebuildr_py.core.models import Document

logger = structlog.get_logger(__name__)

CONTENT_PATH = "/api/v1/content"


class HttpDocumentStore:
    """Persist documents through ``PUT /api/v1/content/{website_id}``.

    Transport failures and error responses are raised as ``PersistenceError``
    so the autosave coordinator can surface them.

    Attributes:
        base_url: Base URL of the content API.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        client: httpx.AsyncClient | None = None,
        token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Base URL of the content API. Ignored path-wise when the
                injected client already has a base URL.
            client: Optional preconfigured client. The store closes only
                clients it created itself.
            token: Optional bearer token.
            timeout: Request timeout in seconds for a self-created client.
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._token = token

    @classmethod
    def from_settings(cls, settings: EditorSettings) -> HttpDocumentStore:
        """Create a store from editor settings."""
        return cls(settings.api_base_url, token=settings.api_token, timeout=settings.request_timeout)

    def _url(self, website_id: str) -> str:
        return f"{self.base_url}{CONTENT_PATH}/{website_id}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(self, method: str, website_id: str, json: Any = None) -> httpx.Response:
        try:
            return await self._client.request(method, self._url(website_id), json=json, headers=self._headers())
        except httpx.HTTPError as e:
            logger.warning("Content request failed", method=method, website_id=website_id, error=str(e))
            msg = f"Could not reach content API: {e}"
            raise PersistenceError(msg) from e

    async def save_document(self, website_id: str, document: Document) -> None:
        """PUT the serialized document to the content API."""
        response = await self._request("PUT", website_id, json=document_to_dict(document))
        if response.is_error:
            logger.warning("Content save rejected", website_id=website_id, status_code=response.status_code)
            msg = f"Content API rejected save with status {response.status_code}"
            raise PersistenceError(msg, status_code=response.status_code)
        logger.debug("Document saved", website_id=website_id, elements=len(document))

    async def load_document(self, website_id: str) -> Document | None:
        """GET the stored document, or None on 404."""
        response = await self._request("GET", website_id)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.is_error:
            msg = f"Content API returned status {response.status_code}"
            raise PersistenceError(msg, status_code=response.status_code)
        try:
            return document_from_dict(response.json())
        except (ValueError, ValidationError) as e:
            msg = f"Content API returned an invalid document: {e}"
            raise PersistenceError(msg) from e

    async def delete_document(self, website_id: str) -> bool:
        """DELETE the stored document."""
        response = await self._request("DELETE", website_id)
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        if response.is_error:
            msg = f"Content API returned status {response.status_code}"
            raise PersistenceError(msg, status_code=response.status_code)
        return True

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpDocumentStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
