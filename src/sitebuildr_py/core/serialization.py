"""Conversion between documents and their JSON wire form.

On the wire a document is a nested tree (each element carries its children
inline), which is what the content endpoint stores. In memory the tree is
flattened into the id-keyed mapping used by :class:`Document`.
"""

from __future__ import annotations

import json
from typing import Any

from sitebuildr_py.core.models import Document, DocumentSettings, Element, Position
from sitebuildr_py.core.props import props_to_dict
from sitebuildr_py.core.types import ElementType
from sitebuildr_py.exceptions import ValidationError


def position_to_dict(position: Position) -> dict[str, Any]:
    """Convert a position to a dictionary."""
    return {
        "x": position.x,
        "y": position.y,
        "width": position.width,
        "height": position.height,
        "z_index": position.z_index,
    }


def element_to_dict(document: Document, element: Element) -> dict[str, Any]:
    """Convert an element and its subtree to a nested dictionary."""
    return {
        "id": element.id,
        "type": element.element_type.value,
        "props": props_to_dict(element.props),
        "style": dict(element.style),
        "responsive": {bp.value: dict(overrides) for bp, overrides in element.responsive.items()},
        "position": position_to_dict(element.position),
        "visible": element.visible,
        "locked": element.locked,
        "parent_group_id": element.parent_group_id,
        "children": [element_to_dict(document, child) for child in document.children_of(element.id)],
    }


def settings_to_dict(settings: DocumentSettings) -> dict[str, Any]:
    """Convert view settings to a dictionary."""
    return {
        "device_mode": settings.device_mode.value,
        "zoom": settings.zoom,
        "snap_to_grid": settings.snap_to_grid,
        "grid_size": settings.grid_size,
        "show_grid": settings.show_grid,
        "language": settings.language.value,
        "direction": settings.direction.value,
    }


def document_to_dict(document: Document) -> dict[str, Any]:
    """Convert a document to its nested wire form."""
    return {
        "elements": [element_to_dict(document, root) for root in document.roots()],
        "settings": settings_to_dict(document.settings),
        "theme": dict(document.theme),
    }


def _mapping_field(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        msg = f"{name} must be an object, got {type(value).__name__}"
        raise ValidationError(msg, field=name)
    return value


def _list_field(data: dict[str, Any], name: str) -> list[Any]:
    value = data.get(name) or []
    if not isinstance(value, list):
        msg = f"{name} must be an array, got {type(value).__name__}"
        raise ValidationError(msg, field=name)
    return value


def _position_from_dict(data: dict[str, Any]) -> Position:
    try:
        return Position(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            width=float(data.get("width", 100.0)),
            height=float(data.get("height", 100.0)),
            z_index=int(data.get("z_index", 0)),
        )
    except (TypeError, ValueError) as e:
        msg = f"Invalid position: {data!r}"
        raise ValidationError(msg, field="position") from e


def _collect(
    data: Any,
    parent_id: str | None,
    elements: dict[str, Element],
) -> str:
    if not isinstance(data, dict):
        msg = f"Element must be an object, got {type(data).__name__}"
        raise ValidationError(msg)
    try:
        kind = ElementType(data["type"])
    except KeyError as e:
        msg = "Element is missing its type"
        raise ValidationError(msg, field="type") from e
    except ValueError as e:
        msg = f"Unknown element type {data['type']!r}"
        raise ValidationError(msg, field="type") from e

    element_id = str(data.get("id") or "")
    if not element_id:
        msg = "Element is missing its id"
        raise ValidationError(msg, field="id")
    if element_id in elements:
        msg = f"Duplicate element id {element_id!r}"
        raise ValidationError(msg, field="id")

    # Reserve the id before descending so a descendant reusing it is rejected.
    elements[element_id] = None  # type: ignore[assignment]
    child_ids = tuple(_collect(child, element_id, elements) for child in _list_field(data, "children"))
    elements[element_id] = Element(
        element_type=kind,
        id=element_id,
        props=data.get("props") or {},
        style=_mapping_field(data, "style"),
        responsive=_mapping_field(data, "responsive"),
        position=_position_from_dict(_mapping_field(data, "position")),
        visible=bool(data.get("visible", True)),
        locked=bool(data.get("locked", False)),
        parent_id=parent_id,
        parent_group_id=data.get("parent_group_id"),
        children=child_ids,
    )
    return element_id


def document_from_dict(data: dict[str, Any]) -> Document:
    """Build a document from its nested wire form.

    Raises:
        ValidationError: If the payload is malformed.
    """
    if not isinstance(data, dict):
        msg = "Document must be an object"
        raise ValidationError(msg)
    elements: dict[str, Element] = {}
    root_ids = tuple(_collect(item, None, elements) for item in _list_field(data, "elements"))

    raw_settings = dict(_mapping_field(data, "settings"))
    raw_settings.pop("direction", None)
    try:
        settings = DocumentSettings(**raw_settings)
    except (TypeError, ValueError) as e:
        msg = f"Invalid settings: {e}"
        raise ValidationError(msg, field="settings") from e
    return Document(elements=elements, root_ids=root_ids, settings=settings, theme=_mapping_field(data, "theme"))


def dumps_document(document: Document) -> str:
    """Serialize a document to a JSON string."""
    return json.dumps(document_to_dict(document), ensure_ascii=False)


def loads_document(payload: str | bytes) -> Document:
    """Parse a document from a JSON string."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON: {e.msg}"
        raise ValidationError(msg) from e
    return document_from_dict(data)
