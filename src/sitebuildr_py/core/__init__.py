"""Core document model for sitebuildr-py."""

from sitebuildr_py.core.history import HistoryEntry, HistoryManager
from sitebuildr_py.core.models import Document, DocumentSettings, Element, Position, snap_to_grid
from sitebuildr_py.core.props import ElementProps, parse_props
from sitebuildr_py.core.responsive import breakpoint_for_width, override_keys, resolve_style
from sitebuildr_py.core.rtl import detect_language, direction_for, mirror_style
from sitebuildr_py.core.serialization import document_from_dict, document_to_dict
from sitebuildr_py.core.shortcuts import EditorAction, ShortcutMap
from sitebuildr_py.core.types import Breakpoint, ElementType, Language, SaveStatus, TextDirection

__all__ = [
    "Breakpoint",
    "Document",
    "DocumentSettings",
    "EditorAction",
    "Element",
    "ElementProps",
    "ElementType",
    "HistoryEntry",
    "HistoryManager",
    "Language",
    "Position",
    "SaveStatus",
    "ShortcutMap",
    "TextDirection",
    "breakpoint_for_width",
    "detect_language",
    "direction_for",
    "document_from_dict",
    "document_to_dict",
    "mirror_style",
    "override_keys",
    "parse_props",
    "resolve_style",
    "snap_to_grid",
]
