"""Layers panel: a flattened, searchable view of the element tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitebuildr_py.core.models import Document, Element
    from sitebuildr_py.core.types import ElementType


class LayerSort(StrEnum):
    """Sort keys of the layers panel."""

    Z_INDEX = "z_index"
    NAME = "name"
    TYPE = "type"


@dataclass(frozen=True)
class LayerItem:
    """A row of the layers panel.

    Attributes:
        id: Element ID.
        name: Display name.
        element_type: Kind of the element.
        visible: Whether the element is rendered.
        locked: Whether the element is locked.
        z_index: Layer ordering.
        depth: Nesting depth, 0 for top-level elements.
        parent_group_id: Group the element belongs to, if any.
    """

    id: str
    name: str
    element_type: ElementType
    visible: bool
    locked: bool
    z_index: int
    depth: int
    parent_group_id: str | None = None


def layer_name(element: Element) -> str:
    """Display name of an element: its title or name prop, else its kind."""
    for attr in ("title", "name"):
        value = getattr(element.props, attr, "")
        if value:
            return value
    return str(element.element_type)


def _sort_key(element: Element, sort_by: LayerSort) -> tuple[int | str, ...]:
    match sort_by:
        case LayerSort.Z_INDEX:
            return (element.position.z_index,)
        case LayerSort.NAME:
            return (layer_name(element).lower(),)
        case LayerSort.TYPE:
            return (str(element.element_type),)


def build_layers(
    document: Document,
    *,
    query: str = "",
    visible_only: bool = False,
    locked_only: bool = False,
    sort_by: LayerSort = LayerSort.Z_INDEX,
    descending: bool = True,
) -> list[LayerItem]:
    """Flatten the document into layer rows.

    Siblings are sorted by ``sort_by`` and each element is followed by its
    descendants. A search keeps the elements whose name or kind contains the
    query, together with their ancestors so the tree stays readable.

    Args:
        document: The document to list.
        query: Case-insensitive search on name and kind.
        visible_only: Only list visible elements.
        locked_only: Only list locked elements.
        sort_by: Sort key applied among siblings.
        descending: Sort order. The default lists the topmost layer first.

    Returns:
        Layer rows in display order.
    """
    needle = query.strip().lower()

    def matches(element: Element) -> bool:
        return needle in layer_name(element).lower() or needle in str(element.element_type)

    def subtree_matches(element: Element) -> bool:
        return matches(element) or any(subtree_matches(child) for child in document.children_of(element.id))

    rows: list[LayerItem] = []

    def visit(parent_id: str | None, depth: int) -> None:
        children = sorted(document.children_of(parent_id), key=lambda e: _sort_key(e, sort_by), reverse=descending)
        for element in children:
            if needle and not subtree_matches(element):
                continue
            if (visible_only and not element.visible) or (locked_only and not element.locked):
                continue
            rows.append(
                LayerItem(
                    id=element.id,
                    name=layer_name(element),
                    element_type=element.element_type,
                    visible=element.visible,
                    locked=element.locked,
                    z_index=element.position.z_index,
                    depth=depth,
                    parent_group_id=element.parent_group_id,
                ),
            )
            visit(element.id, depth + 1)

    visit(None, 0)
    return rows
