"""Litestar plugin for sitebuildr-py integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from sitebuildr_py.storage.base import DocumentStoreProtocol  # noqa: TC001
from sitebuildr_py.storage.memory import InMemoryDocumentStore
from sitebuildr_py.web.health import HealthController
from sitebuildr_py.web.router import create_router

if TYPE_CHECKING:
    from litestar.config.app import AppConfig


@dataclass
class SitebuildrConfig:
    """Configuration for the Sitebuildr plugin.

    Attributes:
        store: Document store behind the content API. If None, an
            InMemoryDocumentStore is used.
        enable_api: Whether to mount the content API routes.
        enable_health: Whether to mount the ``/health`` and ``/ready`` probes.
        api_path: Base path for the content API. The editor's autosave
            expects ``/api/v1``.
        dependency_key: Additional dependency injection key under which the
            store is provided to custom route handlers. The built-in
            controllers always receive it as ``store``.

    Example:
        >>> from sitebuildr_py.storage.memory import InMemoryDocumentStore
        >>> config = SitebuildrConfig(store=InMemoryDocumentStore(), dependency_key="documents")
    """

    store: DocumentStoreProtocol | None = None
    enable_api: bool = True
    enable_health: bool = True
    api_path: str = "/api/v1"
    dependency_key: str = "store"


class SitebuildrPlugin(InitPluginProtocol):
    """Litestar plugin serving the documents saved by the editor.

    The plugin registers the document store for dependency injection and
    mounts the content API.

    Example:
        >>> from litestar import Litestar
        >>> from sitebuildr_py import SitebuildrConfig, SitebuildrPlugin
        >>>
        >>> app = Litestar(plugins=[SitebuildrPlugin(SitebuildrConfig())])

        Accessing the store in route handlers:

        >>> from litestar import get
        >>>
        >>> @get("/websites/{website_id:str}/size")
        ... async def size(website_id: str, store: InMemoryDocumentStore) -> dict:
        ...     document = await store.load_document(website_id)
        ...     return {"elements": len(document) if document else 0}
    """

    def __init__(self, config: SitebuildrConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. Defaults to SitebuildrConfig().
        """
        self._config = config or SitebuildrConfig()
        self._store: DocumentStoreProtocol | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Register the store and mount the routes.

        Called by Litestar during app initialization.
        """
        self._store = self._config.store or InMemoryDocumentStore()

        def provide_store() -> DocumentStoreProtocol:
            if self._store is None:
                msg = "Document store not initialized"
                raise RuntimeError(msg)
            return self._store

        provider = Provide(provide_store, sync_to_thread=False)
        app_config.dependencies["store"] = provider
        if self._config.dependency_key != "store":
            app_config.dependencies[self._config.dependency_key] = provider

        if self._config.enable_api:
            app_config.route_handlers.append(create_router(path=self._config.api_path))
        if self._config.enable_health:
            app_config.route_handlers.append(HealthController)
        return app_config

    @property
    def config(self) -> SitebuildrConfig:
        """The plugin configuration."""
        return self._config

    @property
    def store(self) -> DocumentStoreProtocol:
        """The document store.

        Raises:
            RuntimeError: If accessed before the plugin is initialized.
        """
        if self._store is None:
            msg = "Plugin not initialized. Store is only available after app initialization."
            raise RuntimeError(msg)
        return self._store
