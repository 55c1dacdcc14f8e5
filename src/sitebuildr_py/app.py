"""Main Litestar application for sitebuildr-py.

Serves the content API that the editor's autosave writes to. Run it with
``uvicorn sitebuildr_py.app:app``.
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from litestar import Litestar
from litestar.openapi import OpenAPIConfig

from sitebuildr_py import __version__
from sitebuildr_py.core.error_handling import get_exception_handlers
from sitebuildr_py.core.logging import configure_logging, get_middleware
from sitebuildr_py.plugin import SitebuildrConfig, SitebuildrPlugin

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sitebuildr_py.storage.base import DocumentStoreProtocol

logger = structlog.get_logger(__name__)


def create_app(
    store: DocumentStoreProtocol | None = None,
    *,
    api_path: str = "/api/v1",
    debug: bool = False,
    json_logs: bool | None = None,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        store: Document store behind the content API. Defaults to an
            in-memory store.
        api_path: Base path of the content API.
        debug: Whether to enable debug mode.
        json_logs: Whether to output logs as JSON (for production).

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)
    plugin = SitebuildrPlugin(SitebuildrConfig(store=store, api_path=api_path))

    @asynccontextmanager
    async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:
        logger.info("Content service started", store=type(plugin.store).__name__, api_path=api_path)
        try:
            yield
        finally:
            aclose = getattr(plugin.store, "aclose", None)
            if aclose is not None:
                await aclose()
            logger.info("Content service stopped")

    return Litestar(
        plugins=[plugin],
        debug=debug,
        lifespan=[lifespan],
        middleware=get_middleware(),
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="sitebuildr-py API",
            version=__version__,
            description="Content API receiving documents saved by the website editor",
            path="/schema",
            use_handler_docstrings=True,
        ),
    )


# Default application instance for uvicorn
# Use SITEBUILDR_DEBUG=true for dev mode, defaults to False (production)
_debug = os.environ.get("SITEBUILDR_DEBUG", "").lower() in ("true", "1", "yes")
app = create_app(debug=_debug)
