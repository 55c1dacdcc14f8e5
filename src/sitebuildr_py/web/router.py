"""Router configuration for the sitebuildr-py API."""

from __future__ import annotations

from litestar import Router

from sitebuildr_py.web.controllers import ContentController


def create_router(path: str = "/api/v1") -> Router:
    """Create the content API router.

    Args:
        path: The base path for all API routes. Defaults to "/api/v1", where
            the editor's autosave sends documents.

    Returns:
        A configured Litestar Router instance.

    Example:
        >>> router = create_router("/api/v1")
        >>> # Use the router in your Litestar app configuration
    """
    return Router(path=path, route_handlers=[ContentController])
