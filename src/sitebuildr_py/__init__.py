"""Sitebuildr-py: the document model and edit session of a website editor.

This package implements what a drag-and-drop website editor keeps in memory
while a page is being edited: an element tree with per-kind props, a linear
undo/redo history, responsive style overrides for tablet and mobile, and a
debounced autosave to a content API. A small Litestar plugin serves that
content API.

Key Components:
    - Core Models: Document, Element, Position, DocumentSettings
    - History: HistoryManager (linear undo/redo, capped at 50 steps)
    - Services: EditorSession, AutosaveCoordinator, build_layers
    - Storage: DocumentStoreProtocol, InMemoryDocumentStore, HttpDocumentStore
    - Plugin: SitebuildrPlugin for Litestar integration

Quick Start:
    >>> from sitebuildr_py import EditorSession, Element, ElementType
    >>>
    >>> session = EditorSession()
    >>> heading = session.add_element(Element(ElementType.HEADING, props={"text": "Welcome"}))
    >>> session.set_style(heading.id, {"fontSize": "14px"}, "tablet")
    >>> session.undo()
    True

Autosave:
    >>> from sitebuildr_py import AutosaveCoordinator, HttpDocumentStore
    >>>
    >>> store = HttpDocumentStore("http://localhost:8000")
    >>> autosave = AutosaveCoordinator(store, "my-website", delay=1.5)
    >>> session = EditorSession(autosave=autosave)
"""

from __future__ import annotations

from sitebuildr_py.config import EditorSettings
from sitebuildr_py.core import (
    Breakpoint,
    Document,
    DocumentSettings,
    Element,
    ElementType,
    HistoryManager,
    Language,
    Position,
    SaveStatus,
)
from sitebuildr_py.exceptions import (
    DocumentNotFoundError,
    ElementNotFoundError,
    PersistenceError,
    SitebuildrError,
    ValidationError,
)
from sitebuildr_py.plugin import SitebuildrConfig, SitebuildrPlugin
from sitebuildr_py.services import AutosaveCoordinator, EditorSession, build_layers
from sitebuildr_py.storage import DocumentStoreProtocol, HttpDocumentStore, InMemoryDocumentStore
from sitebuildr_py.web import ContentController, create_router

__all__ = [
    "AutosaveCoordinator",
    "Breakpoint",
    "ContentController",
    "Document",
    "DocumentNotFoundError",
    "DocumentSettings",
    "DocumentStoreProtocol",
    "EditorSession",
    "EditorSettings",
    "Element",
    "ElementNotFoundError",
    "ElementType",
    "HistoryManager",
    "HttpDocumentStore",
    "InMemoryDocumentStore",
    "Language",
    "PersistenceError",
    "Position",
    "SaveStatus",
    "SitebuildrConfig",
    "SitebuildrError",
    "SitebuildrPlugin",
    "ValidationError",
    "build_layers",
    "create_router",
]

__version__ = "0.1.0"
