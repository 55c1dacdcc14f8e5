"""Editor configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sitebuildr_py.core.history import DEFAULT_MAX_HISTORY
from sitebuildr_py.core.models import DEFAULT_GRID_SIZE


@dataclass
class EditorSettings:
    """Editor configuration settings.

    Attributes:
        autosave_delay: Quiet period in seconds before an autosave is sent.
        max_history: Maximum number of undo steps per session.
        grid_size: Snap grid unit in pixels.
        snap_to_grid: Whether new documents snap drops to the grid.
        api_base_url: Base URL of the content API used by autosave.
        request_timeout: Timeout in seconds for persistence requests.
        api_token: Optional bearer token sent with persistence requests.
    """

    autosave_delay: float = 1.5
    max_history: int = DEFAULT_MAX_HISTORY
    grid_size: int = DEFAULT_GRID_SIZE
    snap_to_grid: bool = True
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0
    api_token: str | None = None

    @classmethod
    def from_env(cls) -> EditorSettings:
        """Create settings from environment variables.

        Environment variables:
            SITEBUILDR_AUTOSAVE_DELAY: Autosave quiet period in seconds.
            SITEBUILDR_MAX_HISTORY: Maximum undo steps.
            SITEBUILDR_GRID_SIZE: Snap grid unit in pixels.
            SITEBUILDR_SNAP_TO_GRID: Set to "false" to disable snapping by default.
            SITEBUILDR_API_URL: Base URL of the content API.
            SITEBUILDR_REQUEST_TIMEOUT: Persistence request timeout in seconds.
            SITEBUILDR_API_TOKEN: Bearer token for the content API.

        Returns:
            EditorSettings configured from environment.
        """
        return cls(
            autosave_delay=float(os.environ.get("SITEBUILDR_AUTOSAVE_DELAY", "1.5")),
            max_history=int(os.environ.get("SITEBUILDR_MAX_HISTORY", str(DEFAULT_MAX_HISTORY))),
            grid_size=int(os.environ.get("SITEBUILDR_GRID_SIZE", str(DEFAULT_GRID_SIZE))),
            snap_to_grid=os.environ.get("SITEBUILDR_SNAP_TO_GRID", "true").lower() != "false",
            api_base_url=os.environ.get("SITEBUILDR_API_URL", "http://localhost:8000"),
            request_timeout=float(os.environ.get("SITEBUILDR_REQUEST_TIMEOUT", "10")),
            api_token=os.environ.get("SITEBUILDR_API_TOKEN") or None,
        )
