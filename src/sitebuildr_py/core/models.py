"""Core domain models for the sitebuildr-py editor document.

Elements and documents are immutable. A document keeps its elements in a flat
mapping keyed by id and expresses the tree through child-id tuples, so an edit
only copies the mapping and the elements it actually touches; every other
element is shared with the previous document. Mapping fields are exposed as
read-only views, so a snapshot kept in the history cannot be changed in place.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from sitebuildr_py.core.props import ElementProps, parse_props, props_class_for
from sitebuildr_py.core.types import CONTAINER_TYPES, Breakpoint, ElementType, Language, TextDirection
from sitebuildr_py.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator

RESPONSIVE_BREAKPOINTS = (Breakpoint.TABLET, Breakpoint.MOBILE)
MIN_ZOOM = 25
MAX_ZOOM = 200
DEFAULT_GRID_SIZE = 20


def new_element_id() -> str:
    """Generate a fresh element id."""
    return uuid4().hex


def snap_to_grid(value: float, grid_size: int) -> float:
    """Round a coordinate to the nearest multiple of ``grid_size``.

    Halves round up, so 130 on a 20px grid snaps to 140.
    """
    if grid_size <= 0:
        return value
    return float(math.floor(value / grid_size + 0.5) * grid_size)


@dataclass(frozen=True)
class Position:
    """Placement of an element on the canvas.

    Attributes:
        x: Left offset in pixels.
        y: Top offset in pixels.
        width: Width in pixels.
        height: Height in pixels.
        z_index: Layer ordering (higher values are rendered on top).
    """

    x: float = 0.0
    y: float = 0.0
    width: float = 100.0
    height: float = 100.0
    z_index: int = 0

    def moved_by(self, dx: float, dy: float) -> Position:
        """Return the position shifted by a delta."""
        return replace(self, x=self.x + dx, y=self.y + dy)

    def snapped(self, grid_size: int) -> Position:
        """Return the position with x and y snapped to the grid."""
        return replace(self, x=snap_to_grid(self.x, grid_size), y=snap_to_grid(self.y, grid_size))


def _normalize_responsive(responsive: Any) -> MappingProxyType[Breakpoint, Mapping[str, Any]]:
    if not isinstance(responsive, Mapping):
        msg = f"Responsive overrides must be a mapping, got {type(responsive).__name__}"
        raise ValidationError(msg, field="responsive")
    normalized: dict[Breakpoint, Mapping[str, Any]] = {}
    for key, overrides in responsive.items():
        try:
            breakpoint = Breakpoint(key)
        except ValueError:
            breakpoint = None
        if breakpoint not in RESPONSIVE_BREAKPOINTS:
            msg = f"Responsive overrides are only allowed for tablet and mobile, got {key!r}"
            raise ValidationError(msg, field="responsive")
        if not isinstance(overrides, Mapping):
            msg = f"Overrides for {key!r} must be a mapping, got {type(overrides).__name__}"
            raise ValidationError(msg, field="responsive")
        if overrides:
            normalized[breakpoint] = MappingProxyType(dict(overrides))
    return MappingProxyType(normalized)


@dataclass(frozen=True)
class Element:
    """An element placed on a page.

    Attributes:
        element_type: Kind of the element.
        id: Identifier, unique within a document.
        props: Typed props for the element kind. A plain mapping is validated
            and converted on construction.
        style: Base (desktop) style properties, read-only.
        responsive: Partial style overrides keyed by tablet or mobile, read-only.
        position: Placement and z-index on the canvas.
        visible: Whether the element is rendered.
        locked: Whether the element rejects structural edits.
        parent_id: Id of the containing element, None for root elements.
        parent_group_id: Id of the group this element belongs to, if any.
        children: Ordered ids of the child elements.
    """

    element_type: ElementType
    id: str = field(default_factory=new_element_id)
    props: ElementProps | Mapping[str, Any] | None = None
    style: Mapping[str, Any] = field(default_factory=dict)
    responsive: Mapping[Breakpoint, Mapping[str, Any]] = field(default_factory=dict)
    position: Position = field(default_factory=Position)
    visible: bool = True
    locked: bool = False
    parent_id: str | None = None
    parent_group_id: str | None = None
    children: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate props and responsive overrides for the element kind."""
        kind = ElementType(self.element_type)
        object.__setattr__(self, "element_type", kind)
        if self.props is None or isinstance(self.props, Mapping):
            object.__setattr__(self, "props", parse_props(kind, self.props))
        elif not isinstance(self.props, props_class_for(kind)):
            msg = f"{type(self.props).__name__} is not valid for a {kind} element"
            raise ValidationError(msg, field="props")
        if not isinstance(self.style, Mapping):
            msg = f"Style must be a mapping, got {type(self.style).__name__}"
            raise ValidationError(msg, field="style")
        object.__setattr__(self, "style", MappingProxyType(dict(self.style)))
        object.__setattr__(self, "responsive", _normalize_responsive(self.responsive))
        object.__setattr__(self, "children", tuple(self.children))
        if self.children and not self.accepts_children:
            msg = f"A {kind} element cannot have children"
            raise ValidationError(msg, field="children")

    @property
    def accepts_children(self) -> bool:
        """Whether other elements can be placed inside this one."""
        return self.element_type in CONTAINER_TYPES

    @property
    def is_group(self) -> bool:
        """Whether this element is a group."""
        return self.element_type is ElementType.GROUP


@dataclass(frozen=True)
class DocumentSettings:
    """Editor view settings stored with the document.

    Attributes:
        device_mode: Breakpoint currently being edited.
        zoom: Canvas zoom in percent.
        snap_to_grid: Whether drops snap to the grid.
        grid_size: Grid unit in pixels.
        show_grid: Whether the grid overlay is drawn.
        language: Content language; Urdu switches the canvas to RTL.
    """

    device_mode: Breakpoint = Breakpoint.DESKTOP
    zoom: int = 100
    snap_to_grid: bool = True
    grid_size: int = DEFAULT_GRID_SIZE
    show_grid: bool = False
    language: Language = Language.ENGLISH

    def __post_init__(self) -> None:
        """Clamp zoom and coerce enum values."""
        object.__setattr__(self, "device_mode", Breakpoint(self.device_mode))
        object.__setattr__(self, "language", Language(self.language))
        object.__setattr__(self, "zoom", max(MIN_ZOOM, min(MAX_ZOOM, int(self.zoom))))
        if self.grid_size <= 0:
            msg = f"grid_size must be positive, got {self.grid_size}"
            raise ValidationError(msg, field="grid_size")

    @property
    def direction(self) -> TextDirection:
        """Text direction implied by the language."""
        return TextDirection.RTL if self.language is Language.URDU else TextDirection.LTR


@dataclass(frozen=True)
class Document:
    """The page being edited.

    Attributes:
        elements: All elements keyed by id, read-only.
        root_ids: Ordered ids of the top-level elements.
        settings: View settings of the editor.
        theme: Site-wide design tokens (colors, fonts, spacing), read-only.
    """

    elements: Mapping[str, Element] = field(default_factory=dict)
    root_ids: tuple[str, ...] = ()
    settings: DocumentSettings = field(default_factory=DocumentSettings)
    theme: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze the containers into the expected shapes."""
        object.__setattr__(self, "elements", MappingProxyType(dict(self.elements)))
        object.__setattr__(self, "theme", MappingProxyType(dict(self.theme)))
        object.__setattr__(self, "root_ids", tuple(self.root_ids))

    def __contains__(self, element_id: object) -> bool:
        return element_id in self.elements

    def __len__(self) -> int:
        return len(self.elements)

    def get(self, element_id: str) -> Element | None:
        """Return an element by id, or None."""
        return self.elements.get(element_id)

    def child_ids(self, parent_id: str | None) -> tuple[str, ...]:
        """Ordered child ids of an element, or the root ids for None."""
        if parent_id is None:
            return self.root_ids
        return self.elements[parent_id].children

    def children_of(self, parent_id: str | None) -> list[Element]:
        """Ordered children of an element, or the root elements for None."""
        return [self.elements[cid] for cid in self.child_ids(parent_id)]

    def roots(self) -> list[Element]:
        """Top-level elements in order."""
        return self.children_of(None)

    def walk(self, parent_id: str | None = None, depth: int = 0) -> Iterator[tuple[Element, int]]:
        """Yield ``(element, depth)`` pairs depth-first in document order."""
        for child_id in self.child_ids(parent_id):
            element = self.elements[child_id]
            yield element, depth
            yield from self.walk(child_id, depth + 1)

    def subtree_ids(self, element_id: str) -> list[str]:
        """Ids of an element and all of its descendants, in document order."""
        ids = [element_id]
        for child_id in self.elements[element_id].children:
            ids.extend(self.subtree_ids(child_id))
        return ids

    def ancestor_ids(self, element_id: str) -> list[str]:
        """Ids of the ancestors of an element, nearest first."""
        ids: list[str] = []
        parent_id = self.elements[element_id].parent_id
        while parent_id is not None:
            ids.append(parent_id)
            parent_id = self.elements[parent_id].parent_id
        return ids

    # Copy-on-write edits. Each returns a new document sharing untouched elements.

    def with_element(self, element: Element) -> Document:
        """Return a document with one element replaced."""
        elements = dict(self.elements)
        elements[element.id] = element
        return replace(self, elements=elements)

    def with_elements(self, updated: Mapping[str, Element]) -> Document:
        """Return a document with several elements replaced."""
        elements = dict(self.elements)
        elements.update(updated)
        return replace(self, elements=elements)

    def with_settings(self, **changes: Any) -> Document:
        """Return a document with updated view settings."""
        return replace(self, settings=replace(self.settings, **changes))

    def with_theme(self, changes: Mapping[str, Any]) -> Document:
        """Return a document with theme entries merged in; a ``None`` value removes the entry."""
        theme = dict(self.theme)
        for key, value in changes.items():
            if value is None:
                theme.pop(key, None)
            else:
                theme[key] = value
        return replace(self, theme=theme)

    def _with_child_ids(self, parent_id: str | None, child_ids: tuple[str, ...]) -> Document:
        if parent_id is None:
            return replace(self, root_ids=child_ids)
        parent = self.elements[parent_id]
        return self.with_element(replace(parent, children=child_ids))

    def insert(self, element: Element, parent_id: str | None = None, index: int | None = None) -> Document:
        """Return a document with ``element`` attached under ``parent_id``.

        ``element`` must not already be a child anywhere; its own ``parent_id``
        is overwritten.
        """
        siblings = list(self.child_ids(parent_id))
        if index is None or index > len(siblings):
            index = len(siblings)
        siblings.insert(max(index, 0), element.id)
        doc = self.with_element(replace(element, parent_id=parent_id))
        return doc._with_child_ids(parent_id, tuple(siblings))

    def detach(self, element_id: str) -> Document:
        """Return a document with ``element_id`` removed from its parent's child list.

        The element itself stays in the mapping.
        """
        parent_id = self.elements[element_id].parent_id
        siblings = tuple(cid for cid in self.child_ids(parent_id) if cid != element_id)
        return self._with_child_ids(parent_id, siblings)

    def without_subtree(self, element_id: str) -> Document:
        """Return a document with an element and all its descendants removed."""
        doc = self.detach(element_id)
        elements = dict(doc.elements)
        for removed_id in self.subtree_ids(element_id):
            del elements[removed_id]
        return replace(doc, elements=elements)
