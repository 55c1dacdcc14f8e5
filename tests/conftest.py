"""Pytest configuration and fixtures for sitebuildr-py tests."""

from __future__ import annotations

import asyncio

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from sitebuildr_py.app import create_app
from sitebuildr_py.core.models import Document, Element, Position
from sitebuildr_py.core.types import ElementType
from sitebuildr_py.exceptions import PersistenceError
from sitebuildr_py.services.editor import EditorSession
from sitebuildr_py.storage.memory import InMemoryDocumentStore


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory store that can be told to fail, or to hold saves until released."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False
        self.attempts = 0
        self.saved: list[Document] = []
        self.started = asyncio.Event()
        self.gate: asyncio.Event | None = None

    async def save_document(self, website_id: str, document: Document) -> None:
        self.attempts += 1
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            msg = "Content API rejected save with status 503"
            raise PersistenceError(msg, status_code=503)
        self.saved.append(document)
        await super().save_document(website_id, document)


# Storage fixtures


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Create a fresh InMemoryDocumentStore for each test."""
    return InMemoryDocumentStore()


@pytest.fixture
def flaky_store() -> FlakyDocumentStore:
    """Create a store whose failures can be switched on."""
    return FlakyDocumentStore()


# Model fixtures


@pytest.fixture
def heading() -> Element:
    """Create a heading element."""
    return Element(ElementType.HEADING, props={"text": "Welcome", "level": 1}, style={"fontSize": "16px"})


@pytest.fixture
def text_element() -> Element:
    """Create a text element placed away from the origin."""
    return Element(ElementType.TEXT, props={"content": "Hello"}, position=Position(x=200, y=100))


@pytest.fixture
def section() -> Element:
    """Create an empty section."""
    return Element(ElementType.SECTION, props={"name": "About"})


# Session fixtures


@pytest.fixture
def session() -> EditorSession:
    """Create an editing session over an empty document."""
    return EditorSession()


# App and client fixtures


@pytest.fixture
def app(store: InMemoryDocumentStore) -> Litestar:
    """Create the content service backed by the in-memory store."""
    return create_app(store)


@pytest.fixture
def client(app: Litestar) -> TestClient[Litestar]:
    """Create a test client for the app."""
    return TestClient(app=app)
