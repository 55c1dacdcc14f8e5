"""Core type definitions for sitebuildr-py."""

from __future__ import annotations

from enum import StrEnum


class ElementType(StrEnum):
    """Enumeration of element kinds that can be placed on a page."""

    HERO = "hero"
    FEATURES = "features"
    HEADING = "heading"
    TEXT = "text"
    IMAGE = "image"
    BUTTON = "button"
    CONTAINER = "container"
    SECTION = "section"
    DIVIDER = "divider"
    SPACER = "spacer"
    VIDEO = "video"
    FORM = "form"
    GROUP = "group"


CONTAINER_TYPES = frozenset({ElementType.CONTAINER, ElementType.SECTION, ElementType.FORM, ElementType.GROUP})


class Breakpoint(StrEnum):
    """Responsive viewport buckets, ordered from widest to narrowest."""

    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class Language(StrEnum):
    """Content languages supported by the editor."""

    ENGLISH = "en"
    URDU = "ur"


class TextDirection(StrEnum):
    """Text direction of the canvas."""

    LTR = "ltr"
    RTL = "rtl"


class SaveStatus(StrEnum):
    """States of the autosave indicator."""

    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"
    ERROR = "error"
