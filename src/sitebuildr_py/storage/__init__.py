"""Storage backends for sitebuildr-py."""

from __future__ import annotations

from sitebuildr_py.storage.base import DocumentStoreProtocol
from sitebuildr_py.storage.http import HttpDocumentStore
from sitebuildr_py.storage.memory import InMemoryDocumentStore

__all__ = ["DocumentStoreProtocol", "HttpDocumentStore", "InMemoryDocumentStore"]
