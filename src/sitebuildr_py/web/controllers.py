"""Litestar controllers for the sitebuildr-py content API."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar

import structlog
from litestar import Controller, delete, get, put
from litestar.params import Dependency
from litestar.status_codes import HTTP_200_OK

from sitebuildr_py.core.serialization import document_from_dict, document_to_dict
from sitebuildr_py.exceptions import DocumentNotFoundError
from sitebuildr_py.storage.base import DocumentStoreProtocol

logger = structlog.get_logger(__name__)

Store = Annotated[DocumentStoreProtocol, Dependency(skip_validation=True)]


class ContentController(Controller):
    """Controller for the documents saved by the editor.

    The editor's autosave sends the whole document to ``PUT``; the last write
    wins.
    """

    path = "/content"
    tags: ClassVar[list[str]] = ["Content"]

    @get("/{website_id:str}")
    async def get_content(self, website_id: str, store: Store) -> dict[str, Any]:
        """Get the saved document of a website.

        Args:
            website_id: The website ID.
            store: The document store (injected).

        Returns:
            The serialized document.

        Raises:
            DocumentNotFoundError: If nothing is stored for the website.
        """
        document = await store.load_document(website_id)
        if document is None:
            raise DocumentNotFoundError(website_id)
        return document_to_dict(document)

    @put("/{website_id:str}", status_code=HTTP_200_OK)
    async def save_content(self, website_id: str, data: dict[str, Any], store: Store) -> dict[str, Any]:
        """Replace the saved document of a website.

        Args:
            website_id: The website ID.
            data: The serialized document.
            store: The document store (injected).

        Returns:
            A summary of the saved document.

        Raises:
            ValidationError: If the body is not a valid document.
        """
        document = document_from_dict(data)
        await store.save_document(website_id, document)
        logger.info("Content saved", website_id=website_id, elements=len(document))
        return {
            "website_id": website_id,
            "elements": len(document),
            "saved_at": datetime.now(UTC).isoformat(),
        }

    @delete("/{website_id:str}")
    async def delete_content(self, website_id: str, store: Store) -> None:
        """Delete the saved document of a website.

        Raises:
            DocumentNotFoundError: If nothing is stored for the website.
        """
        if not await store.delete_document(website_id):
            raise DocumentNotFoundError(website_id)
        logger.info("Content deleted", website_id=website_id)
