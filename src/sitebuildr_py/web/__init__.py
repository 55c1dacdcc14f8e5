"""Web layer for the sitebuildr-py content API."""

from sitebuildr_py.web.controllers import ContentController
from sitebuildr_py.web.health import HealthController
from sitebuildr_py.web.router import create_router

__all__ = ["ContentController", "HealthController", "create_router"]
