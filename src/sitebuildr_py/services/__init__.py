"""Business logic services for sitebuildr-py."""

from sitebuildr_py.services.autosave import AutosaveCoordinator
from sitebuildr_py.services.editor import EditorSession
from sitebuildr_py.services.layers import LayerItem, LayerSort, build_layers

__all__ = ["AutosaveCoordinator", "EditorSession", "LayerItem", "LayerSort", "build_layers"]
