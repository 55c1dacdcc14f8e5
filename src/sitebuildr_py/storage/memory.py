"""In-memory document store for sitebuildr-py."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitebuildr_py.core.models import Document


class InMemoryDocumentStore:
    """In-memory document store.

    Documents are immutable, so they are stored and returned as-is. Access to
    the underlying dictionaries is serialized with an asyncio lock.

    Note:
        All data is lost when the application stops. This store is suitable for
        development, testing, or ephemeral sessions.

    Attributes:
        _documents: Internal dictionary mapping website IDs to documents.
        _updated_at: When each website's document was last saved.
        _lock: Asyncio lock for safe concurrent access.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._documents: dict[str, Document] = {}
        self._updated_at: dict[str, datetime] = {}
        self._lock = asyncio.Lock()
        self.save_count = 0

    async def save_document(self, website_id: str, document: Document) -> None:
        """Store a document, replacing any previous one."""
        async with self._lock:
            self._documents[website_id] = document
            self._updated_at[website_id] = datetime.now(UTC)
            self.save_count += 1

    async def load_document(self, website_id: str) -> Document | None:
        """Return the stored document for a website, if any."""
        async with self._lock:
            return self._documents.get(website_id)

    async def delete_document(self, website_id: str) -> bool:
        """Delete a website's document."""
        async with self._lock:
            self._updated_at.pop(website_id, None)
            return self._documents.pop(website_id, None) is not None

    async def list_websites(self) -> list[str]:
        """List stored website IDs, most recently saved first."""
        async with self._lock:
            return sorted(self._documents, key=lambda wid: self._updated_at[wid], reverse=True)

    async def last_saved_at(self, website_id: str) -> datetime | None:
        """When a website's document was last saved."""
        async with self._lock:
            return self._updated_at.get(website_id)
