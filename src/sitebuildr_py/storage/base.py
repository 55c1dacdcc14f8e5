"""Storage protocol definition for sitebuildr-py."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sitebuildr_py.core.models import Document


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Protocol defining where editor documents are persisted.

    Documents are keyed by website id. Saving is last-write-wins: there is no
    version check, the latest document sent replaces whatever was stored.
    """

    async def save_document(self, website_id: str, document: Document) -> None:
        """Persist a document for a website.

        Args:
            website_id: The website the document belongs to.
            document: The document to store.

        Raises:
            PersistenceError: If the document cannot be stored.
        """
        ...

    async def load_document(self, website_id: str) -> Document | None:
        """Load the stored document for a website.

        Args:
            website_id: The website to load.

        Returns:
            The stored document, or None if nothing is stored.

        Raises:
            PersistenceError: If the backend cannot be reached.
        """
        ...

    async def delete_document(self, website_id: str) -> bool:
        """Delete the stored document for a website.

        Args:
            website_id: The website to delete.

        Returns:
            True if a document was deleted, False if none was stored.

        Raises:
            PersistenceError: If the backend cannot be reached.
        """
        ...
