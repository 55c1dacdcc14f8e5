"""Edit session providing business logic for the element tree."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, assert_never

import structlog

from sitebuildr_py.config import EditorSettings
from sitebuildr_py.core.history import HistoryManager
from sitebuildr_py.core.models import (
    RESPONSIVE_BREAKPOINTS,
    Document,
    DocumentSettings,
    Element,
    Position,
    new_element_id,
    snap_to_grid,
)
from sitebuildr_py.core.props import GroupProps, merge_props
from sitebuildr_py.core.responsive import resolve_style
from sitebuildr_py.core.rtl import mirror_style
from sitebuildr_py.core.shortcuts import EditorAction, ShortcutMap
from sitebuildr_py.core.types import Breakpoint, ElementType, Language, TextDirection
from sitebuildr_py.exceptions import ElementNotFoundError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Coroutine, Iterable, Mapping

    from sitebuildr_py.services.autosave import AutosaveCoordinator

logger = structlog.get_logger(__name__)


def _merge_style(base: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Apply style changes; a ``None`` value removes the property."""
    merged = dict(base)
    for key, value in changes.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


def _breakpoint(value: Breakpoint | str) -> Breakpoint:
    try:
        return Breakpoint(value)
    except ValueError:
        msg = f"Unknown breakpoint {value!r}"
        raise ValidationError(msg, field="breakpoint") from None


def _override_breakpoint(value: Breakpoint | str) -> Breakpoint:
    breakpoint = _breakpoint(value)
    if breakpoint not in RESPONSIVE_BREAKPOINTS:
        msg = f"Responsive overrides are only allowed for tablet and mobile, got {value!r}"
        raise ValidationError(msg, field="breakpoint")
    return breakpoint


def _next_z_index(document: Document) -> int:
    return max((e.position.z_index for e in document.elements.values()), default=-1) + 1


def _group_id_for(document: Document, parent_id: str | None) -> str | None:
    """Group membership implied by placing an element under ``parent_id``."""
    if parent_id is not None and document.elements[parent_id].is_group:
        return parent_id
    return None


def _clone_subtree(source: Document, root_id: str, dx: float, dy: float) -> tuple[str, dict[str, Element]]:
    """Copy an element and its descendants with fresh ids, shifted by a delta.

    Returns the id of the copied root and the copies keyed by their new ids.
    The root copy is not attached to any parent yet.
    """
    clones: dict[str, Element] = {}

    def clone(element_id: str, parent_id: str | None, group_id: str | None) -> str:
        original = source.elements[element_id]
        new_id = new_element_id()
        child_group = new_id if original.is_group else None
        child_ids = tuple(clone(cid, new_id, child_group) for cid in original.children)
        clones[new_id] = replace(
            original,
            id=new_id,
            parent_id=parent_id,
            parent_group_id=group_id,
            children=child_ids,
            position=original.position.moved_by(dx, dy),
        )
        return new_id

    return clone(root_id, None, None), clones


class EditorSession:
    """A single editing session over one document.

    The session owns the current document, its undo/redo history, the
    selection and the clipboard. Every edit builds a new immutable document,
    records it in the history and, when an autosave coordinator is attached,
    hands it over for saving.

    Edits addressing an id that no longer exists are logged and return
    ``None`` or ``False``. Structural edits of locked elements are blocked the
    same way. Malformed edits raise ``ValidationError``.

    Attributes:
        settings: Editor configuration.
        history: Undo/redo history of the session.
        autosave: Optional coordinator notified of every document change.
        shortcuts: Keyboard shortcut bindings.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        settings: EditorSettings | None = None,
        autosave: AutosaveCoordinator | None = None,
        shortcuts: ShortcutMap | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            document: Document to edit. Defaults to an empty page using the
                grid settings from ``settings``.
            settings: Editor configuration.
            autosave: Coordinator to notify on every change.
            shortcuts: Keyboard bindings. Defaults to the standard bindings.
        """
        self.settings = settings or EditorSettings()
        if document is None:
            document = Document(
                settings=DocumentSettings(snap_to_grid=self.settings.snap_to_grid, grid_size=self.settings.grid_size),
            )
        self.history = HistoryManager(document, self.settings.max_history)
        self.autosave = autosave
        self.shortcuts = shortcuts or ShortcutMap()
        self._selection: list[str] = []
        self._clipboard: tuple[Document, tuple[str, ...]] | None = None

    @property
    def document(self) -> Document:
        """The current document."""
        return self.history.present

    def load(self, document: Document) -> None:
        """Replace the edited document and start a fresh history."""
        self.history.reset(document)
        self._selection.clear()
        logger.info("Document loaded", elements=len(document))

    # Internal helpers

    def _commit(self, document: Document, label: str) -> None:
        self.history.record(document, label)
        self._prune_selection()
        if self.autosave is not None:
            self.autosave.notify_change(document)
        logger.debug("Document changed", action=label, elements=len(document))

    def _find(self, element_id: str, action: str) -> Element | None:
        element = self.document.get(element_id)
        if element is None:
            logger.warning("Element not found", action=action, element_id=element_id)
        return element

    def _blocked(self, element: Element, action: str) -> bool:
        if element.locked:
            logger.warning("Action blocked", action=action, element_id=element.id, reason="element is locked")
            return True
        return False

    def _target_ok(self, parent_id: str | None, action: str) -> bool:
        """Check that elements may be placed under ``parent_id``.

        Raises:
            ValidationError: If the target cannot hold children.
        """
        if parent_id is None:
            return True
        parent = self._find(parent_id, action)
        if parent is None:
            return False
        if not parent.accepts_children:
            msg = f"A {parent.element_type} element cannot have children"
            raise ValidationError(msg, field="parent_id")
        if parent.locked:
            logger.warning("Action blocked", action=action, element_id=parent_id, reason="target parent is locked")
            return False
        return True

    def _replace(self, element: Element, label: str, **changes: Any) -> Element:
        updated = replace(element, **changes)
        if updated != element:
            self._commit(self.document.with_element(updated), label)
        return updated

    def _snap(self, value: float) -> float:
        settings = self.document.settings
        return snap_to_grid(value, settings.grid_size) if settings.snap_to_grid else value

    # Queries

    def get_element(self, element_id: str) -> Element:
        """Get an element by ID.

        Raises:
            ElementNotFoundError: If the element does not exist.
        """
        element = self.document.get(element_id)
        if element is None:
            raise ElementNotFoundError(element_id)
        return element

    def resolved_style(self, element_id: str, breakpoint: Breakpoint | str | None = None) -> dict[str, Any]:
        """Effective style of an element as the canvas renders it.

        Args:
            element_id: The element ID.
            breakpoint: Breakpoint to resolve for. Defaults to the device mode
                being edited.

        Returns:
            The resolved style, mirrored when the document is right-to-left.

        Raises:
            ElementNotFoundError: If the element does not exist.
        """
        element = self.get_element(element_id)
        style = resolve_style(element, _breakpoint(breakpoint or self.document.settings.device_mode))
        if self.document.settings.direction is TextDirection.RTL:
            return mirror_style(style)
        return style

    # Element operations

    def add_element(self, element: Element, parent_id: str | None = None, index: int | None = None) -> Element | None:
        """Add an element to the document.

        The element is placed on top of the z-order, and its position is
        snapped when snap-to-grid is on.

        Args:
            element: The element to add. It must not have children yet.
            parent_id: Container to add it to, or None for the page root.
            index: Position among the siblings. Defaults to the end.

        Returns:
            The added element, or None if the parent is gone or locked.

        Raises:
            ValidationError: If the id is taken, the element carries children
                or the parent cannot hold children.
        """
        document = self.document
        if element.id in document:
            msg = f"Element id {element.id!r} already exists"
            raise ValidationError(msg, field="id")
        if element.children:
            msg = "Elements are added without children"
            raise ValidationError(msg, field="children")
        if not self._target_ok(parent_id, "add"):
            return None

        position = element.position
        if document.settings.snap_to_grid:
            position = position.snapped(document.settings.grid_size)
        position = replace(position, z_index=_next_z_index(document))
        element = replace(element, position=position, parent_group_id=_group_id_for(document, parent_id))

        document = document.insert(element, parent_id, index)
        self._commit(document, "add")
        return document.elements[element.id]

    def update_element(
        self,
        element_id: str,
        *,
        props: Mapping[str, Any] | None = None,
        style: Mapping[str, Any] | None = None,
        responsive: Mapping[Breakpoint | str, Mapping[str, Any]] | None = None,
        position: Position | None = None,
        visible: bool | None = None,
        locked: bool | None = None,
    ) -> Element | None:
        """Update element fields.

        Only provided fields are updated. Props and styles are merged into the
        existing values; a style value of ``None`` removes that property.
        Locked elements accept content changes but not a new position, unless
        the same call unlocks them.

        Returns:
            The updated element, or None if it is gone or the edit is blocked.

        Raises:
            ValidationError: If a prop or breakpoint is invalid.
        """
        element = self._find(element_id, "update")
        if element is None:
            return None
        if position is not None and locked is not False and self._blocked(element, "update"):
            return None

        changes: dict[str, Any] = {}
        if props:
            changes["props"] = merge_props(element.props, props)
        if style is not None:
            changes["style"] = _merge_style(element.style, style)
        if responsive is not None:
            merged = {bp: dict(overrides) for bp, overrides in element.responsive.items()}
            for key, overrides in responsive.items():
                bp = _override_breakpoint(key)
                merged[bp] = _merge_style(merged.get(bp, {}), overrides)
            changes["responsive"] = merged
        if position is not None:
            changes["position"] = position
        if visible is not None:
            changes["visible"] = visible
        if locked is not None:
            changes["locked"] = locked
        return self._replace(element, "update", **changes)

    def remove_element(self, element_id: str) -> bool:
        """Remove an element together with its descendants.

        Returns:
            True if the element was removed, False if it is gone or locked.
        """
        element = self._find(element_id, "remove")
        if element is None or self._blocked(element, "remove"):
            return False
        self._commit(self.document.without_subtree(element_id), "remove")
        return True

    def move_element(self, element_id: str, new_parent_id: str | None, index: int | None = None) -> bool:
        """Move an element to another parent or position among its siblings.

        Args:
            element_id: The element to move.
            new_parent_id: Container to move into, or None for the page root.
            index: Position among the new siblings. Defaults to the end.

        Returns:
            True if moved, False if an id is gone or a lock blocks the move.

        Raises:
            ValidationError: If the target cannot hold children or lies inside
                the moved element.
        """
        element = self._find(element_id, "move")
        if element is None or self._blocked(element, "move"):
            return False
        document = self.document
        if new_parent_id is not None and new_parent_id in document and new_parent_id in document.subtree_ids(element_id):
            msg = "An element cannot be moved into itself or its descendants"
            raise ValidationError(msg, field="parent_id")
        if not self._target_ok(new_parent_id, "move"):
            return False

        document = document.detach(element_id)
        moved = replace(element, parent_group_id=_group_id_for(document, new_parent_id))
        self._commit(document.insert(moved, new_parent_id, index), "move")
        return True

    def _duplicated(self, document: Document, element_id: str) -> tuple[Document, str]:
        element = document.elements[element_id]
        offset = document.settings.grid_size
        copy_id, clones = _clone_subtree(document, element_id, offset, offset)
        root = clones[copy_id]
        clones[copy_id] = replace(
            root,
            parent_group_id=element.parent_group_id,
            position=replace(root.position, z_index=_next_z_index(document)),
        )
        siblings = document.child_ids(element.parent_id)
        document = document.with_elements(clones)
        return document.insert(clones[copy_id], element.parent_id, siblings.index(element_id) + 1), copy_id

    def duplicate_element(self, element_id: str) -> Element | None:
        """Duplicate an element and its descendants.

        The copy gets fresh ids, is inserted right after the original and is
        offset by one grid unit.

        Returns:
            The copy, or None if the element does not exist.
        """
        if self._find(element_id, "duplicate") is None:
            return None
        document, copy_id = self._duplicated(self.document, element_id)
        self._commit(document, "duplicate")
        return document.elements[copy_id]

    def drag_element(self, element_id: str, x: float, y: float) -> bool:
        """Commit a drop of an element at a canvas position.

        Coordinates are snapped when snap-to-grid is on. Descendants move by
        the same delta, so a group moves as a unit.

        Returns:
            True if the element is at the new position, False if it is gone or
            locked.
        """
        element = self._find(element_id, "drag")
        if element is None or self._blocked(element, "drag"):
            return False
        x, y = self._snap(x), self._snap(y)
        dx, dy = x - element.position.x, y - element.position.y
        if dx == 0 and dy == 0:
            return True

        document = self.document
        updates = {
            sid: replace(document.elements[sid], position=document.elements[sid].position.moved_by(dx, dy))
            for sid in document.subtree_ids(element_id)[1:]
        }
        updates[element_id] = replace(element, position=replace(element.position, x=x, y=y))
        self._commit(document.with_elements(updates), "drag")
        return True

    def resize_element(self, element_id: str, width: float, height: float) -> bool:
        """Resize an element; sizes snap to the grid when snapping is on.

        Raises:
            ValidationError: If a dimension is not positive.
        """
        if width <= 0 or height <= 0:
            msg = f"Size must be positive, got {width}x{height}"
            raise ValidationError(msg, field="position")
        element = self._find(element_id, "resize")
        if element is None or self._blocked(element, "resize"):
            return False
        settings = self.document.settings
        if settings.snap_to_grid:
            width = max(self._snap(width), settings.grid_size)
            height = max(self._snap(height), settings.grid_size)
        self._replace(element, "resize", position=replace(element.position, width=width, height=height))
        return True

    # Styles

    def set_style(
        self,
        element_id: str,
        changes: Mapping[str, Any],
        breakpoint: Breakpoint | str | None = None,
    ) -> Element | None:
        """Set style properties for a breakpoint.

        Desktop writes the base style; tablet and mobile write responsive
        overrides. A ``None`` value removes the property.

        Args:
            element_id: The element ID.
            changes: Style properties to set.
            breakpoint: Target breakpoint. Defaults to the current device mode.

        Returns:
            The updated element, or None if it does not exist.
        """
        element = self._find(element_id, "style")
        if element is None:
            return None
        bp = _breakpoint(breakpoint or self.document.settings.device_mode)
        if bp is Breakpoint.DESKTOP:
            return self._replace(element, "style", style=_merge_style(element.style, changes))
        responsive = {key: dict(value) for key, value in element.responsive.items()}
        responsive[bp] = _merge_style(responsive.get(bp, {}), changes)
        return self._replace(element, "style", responsive=responsive)

    def clear_override(
        self,
        element_id: str,
        breakpoint: Breakpoint | str,
        keys: Iterable[str] | None = None,
    ) -> Element | None:
        """Remove responsive overrides so the breakpoint inherits again.

        Args:
            element_id: The element ID.
            breakpoint: Tablet or mobile.
            keys: Properties to clear. Defaults to all overrides of the
                breakpoint.
        """
        bp = _override_breakpoint(breakpoint)
        element = self._find(element_id, "clear_override")
        if element is None:
            return None
        responsive = {key: dict(value) for key, value in element.responsive.items()}
        if keys is None:
            responsive.pop(bp, None)
        else:
            responsive[bp] = _merge_style(responsive.get(bp, {}), dict.fromkeys(keys))
        return self._replace(element, "clear_override", responsive=responsive)

    # Visibility and lock

    def set_visibility(self, element_id: str, *, visible: bool) -> Element | None:
        """Show or hide an element."""
        element = self._find(element_id, "visibility")
        if element is None:
            return None
        return self._replace(element, "visibility", visible=visible)

    def toggle_visibility(self, element_id: str) -> Element | None:
        """Toggle element visibility."""
        element = self._find(element_id, "visibility")
        if element is None:
            return None
        return self._replace(element, "visibility", visible=not element.visible)

    def set_lock(self, element_id: str, *, locked: bool) -> Element | None:
        """Lock or unlock an element."""
        element = self._find(element_id, "lock")
        if element is None:
            return None
        return self._replace(element, "lock", locked=locked)

    def toggle_lock(self, element_id: str) -> Element | None:
        """Toggle element lock state."""
        element = self._find(element_id, "lock")
        if element is None:
            return None
        return self._replace(element, "lock", locked=not element.locked)

    # Z-order

    def _reorder(self, element_id: str, action: str, new_z: Any) -> Element | None:
        element = self._find(element_id, action)
        if element is None or self._blocked(element, action):
            return None
        z_index = new_z(element) if callable(new_z) else new_z
        return self._replace(element, action, position=replace(element.position, z_index=z_index))

    def bring_to_front(self, element_id: str) -> Element | None:
        """Bring an element to the front (highest z-index)."""
        return self._reorder(element_id, "bring_to_front", _next_z_index(self.document))

    def send_to_back(self, element_id: str) -> Element | None:
        """Send an element to the back (lowest z-index)."""
        lowest = min((e.position.z_index for e in self.document.elements.values()), default=0)
        return self._reorder(element_id, "send_to_back", lowest - 1)

    def move_forward(self, element_id: str) -> Element | None:
        """Move an element one layer forward."""
        return self._reorder(element_id, "move_forward", lambda e: e.position.z_index + 1)

    def move_backward(self, element_id: str) -> Element | None:
        """Move an element one layer backward."""
        return self._reorder(element_id, "move_backward", lambda e: e.position.z_index - 1)

    # Grouping

    def group_elements(self, element_ids: Iterable[str], name: str = "") -> Element | None:
        """Group sibling elements.

        The group takes the slot of the first member and the members become
        its children, in their previous order. The group becomes the
        selection.

        Args:
            element_ids: Elements to group. They must share a parent.
            name: Display name of the group.

        Returns:
            The new group, or None if a member is gone or locked.

        Raises:
            ValidationError: If fewer than two elements are given or they do
                not share a parent.
        """
        ids = list(dict.fromkeys(element_ids))
        if len(ids) < 2:  # noqa: PLR2004
            msg = "At least two elements are required to form a group"
            raise ValidationError(msg, field="element_ids")
        members = [self._find(eid, "group") for eid in ids]
        if any(m is None for m in members):
            return None
        if any(self._blocked(m, "group") for m in members):
            return None
        parent_ids = {m.parent_id for m in members}
        if len(parent_ids) != 1:
            msg = "Only elements with the same parent can be grouped"
            raise ValidationError(msg, field="element_ids")
        (parent_id,) = parent_ids
        if not self._target_ok(parent_id, "group"):
            return None

        document = self.document
        siblings = document.child_ids(parent_id)
        order = tuple(cid for cid in siblings if cid in ids)
        index = siblings.index(order[0])
        for member_id in order:
            document = document.detach(member_id)

        boxes = [document.elements[mid].position for mid in order]
        left, top = min(p.x for p in boxes), min(p.y for p in boxes)
        group = Element(
            ElementType.GROUP,
            props=GroupProps(name=name),
            position=Position(
                x=left,
                y=top,
                width=max(p.x + p.width for p in boxes) - left,
                height=max(p.y + p.height for p in boxes) - top,
                z_index=max(p.z_index for p in boxes),
            ),
            parent_group_id=_group_id_for(document, parent_id),
            children=order,
        )
        document = document.insert(group, parent_id, index)
        document = document.with_elements(
            {mid: replace(document.elements[mid], parent_id=group.id, parent_group_id=group.id) for mid in order},
        )
        self._commit(document, "group")
        self._selection = [group.id]
        logger.info("Elements grouped", group_id=group.id, members=len(order))
        return document.elements[group.id]

    def _ungrouped(self, document: Document, group_id: str) -> tuple[Document, list[str]]:
        group = document.elements[group_id]
        parent_id = group.parent_id
        index = document.child_ids(parent_id).index(group_id)
        document = document.detach(group_id)
        group_of_parent = _group_id_for(document, parent_id)
        for offset, member_id in enumerate(group.children):
            member = replace(document.elements[member_id], parent_group_id=group_of_parent)
            document = document.insert(member, parent_id, index + offset)
        elements = {eid: e for eid, e in document.elements.items() if eid != group_id}
        return replace(document, elements=elements), list(group.children)

    def ungroup(self, group_id: str) -> list[Element] | None:
        """Dissolve a group, putting its members back in its place.

        Returns:
            The former members, or None if the group is gone or locked.

        Raises:
            ValidationError: If the element is not a group.
        """
        group = self._find(group_id, "ungroup")
        if group is None or self._blocked(group, "ungroup"):
            return None
        if not group.is_group:
            msg = f"Element {group_id} is not a group"
            raise ValidationError(msg, field="group_id")
        document, member_ids = self._ungrouped(self.document, group_id)
        self._commit(document, "ungroup")
        self._selection = list(member_ids)
        return [document.elements[mid] for mid in member_ids]

    # Selection

    @property
    def selected_ids(self) -> tuple[str, ...]:
        """Ids of the selected elements, in selection order."""
        return tuple(self._selection)

    def _prune_selection(self) -> None:
        self._selection = [eid for eid in self._selection if eid in self.document]

    def select(self, element_id: str, *, additive: bool = False) -> bool:
        """Select an element, optionally adding it to the current selection."""
        if self._find(element_id, "select") is None:
            return False
        if not additive:
            self._selection = []
        if element_id not in self._selection:
            self._selection.append(element_id)
        return True

    def deselect(self, element_id: str) -> None:
        """Remove an element from the selection."""
        if element_id in self._selection:
            self._selection.remove(element_id)

    def clear_selection(self) -> None:
        """Deselect everything."""
        self._selection = []

    def select_all(self) -> tuple[str, ...]:
        """Select every top-level element."""
        self._selection = list(self.document.root_ids)
        return self.selected_ids

    def _selected_roots(self) -> list[str]:
        """Selected ids without those nested inside another selected element."""
        selected = set(self._selection)
        return [
            eid
            for eid in self._selection
            if eid in self.document and not selected.intersection(self.document.ancestor_ids(eid))
        ]

    def remove_selection(self) -> int:
        """Remove the selected elements as a single undo step.

        Returns:
            Number of elements removed. Locked elements are skipped.
        """
        document = self.document
        removed = 0
        for element_id in self._selected_roots():
            if self._blocked(document.elements[element_id], "remove"):
                continue
            document = document.without_subtree(element_id)
            removed += 1
        if removed:
            self._commit(document, "remove")
        return removed

    def duplicate_selection(self) -> list[Element]:
        """Duplicate the selected elements as a single undo step and select the copies."""
        document = self.document
        copy_ids: list[str] = []
        for element_id in self._selected_roots():
            document, copy_id = self._duplicated(document, element_id)
            copy_ids.append(copy_id)
        if not copy_ids:
            return []
        self._commit(document, "duplicate")
        self._selection = copy_ids
        return [document.elements[cid] for cid in copy_ids]

    def group_selection(self, name: str = "") -> Element | None:
        """Group the selected elements."""
        if len(self._selection) < 2:  # noqa: PLR2004
            logger.warning("Action blocked", action="group", reason="select at least two elements")
            return None
        try:
            return self.group_elements(self._selection, name)
        except ValidationError as e:
            logger.warning("Action blocked", action="group", reason=str(e))
            return None

    def ungroup_selection(self) -> list[Element]:
        """Dissolve every selected group as a single undo step."""
        document = self.document
        member_ids: list[str] = []
        for element_id in self._selected_roots():
            element = document.elements[element_id]
            if not element.is_group or self._blocked(element, "ungroup"):
                continue
            document, members = self._ungrouped(document, element_id)
            member_ids.extend(members)
        if not member_ids:
            return []
        self._commit(document, "ungroup")
        self._selection = member_ids
        return [document.elements[mid] for mid in member_ids]

    # Clipboard

    @property
    def clipboard_count(self) -> int:
        """Number of elements on the clipboard."""
        return len(self._clipboard[1]) if self._clipboard else 0

    def copy_selection(self) -> int:
        """Copy the selected elements to the clipboard.

        Returns:
            Number of elements copied.
        """
        roots = tuple(self._selected_roots())
        if roots:
            self._clipboard = (self.document, roots)
        return len(roots)

    def paste(self, offset: float | None = None) -> list[Element]:
        """Paste the clipboard at the page root.

        Args:
            offset: Shift applied to the pasted copies. Defaults to one grid
                unit.

        Returns:
            The pasted elements, which become the selection.
        """
        if self._clipboard is None:
            return []
        source, root_ids = self._clipboard
        if offset is None:
            offset = self.document.settings.grid_size

        document = self.document
        pasted: list[str] = []
        for root_id in root_ids:
            copy_id, clones = _clone_subtree(source, root_id, offset, offset)
            root = clones[copy_id]
            clones[copy_id] = replace(root, position=replace(root.position, z_index=_next_z_index(document)))
            document = document.with_elements(clones).insert(clones[copy_id])
            pasted.append(copy_id)
        self._commit(document, "paste")
        self._selection = pasted
        return [document.elements[pid] for pid in pasted]

    # View settings. These change how the document is viewed, so they do not
    # create undo steps and are not autosaved on their own.

    def _set_view(self, **changes: Any) -> DocumentSettings:
        document = self.document.with_settings(**changes)
        self.history.replace_present(document)
        logger.debug("View settings changed", **changes)
        return document.settings

    def set_device_mode(self, mode: Breakpoint | str) -> Breakpoint:
        """Switch the breakpoint being edited."""
        return self._set_view(device_mode=_breakpoint(mode)).device_mode

    def set_zoom(self, zoom: int) -> int:
        """Set the canvas zoom in percent, clamped to the allowed range."""
        return self._set_view(zoom=zoom).zoom

    def toggle_grid(self) -> bool:
        """Toggle the grid overlay."""
        return self._set_view(show_grid=not self.document.settings.show_grid).show_grid

    def toggle_snap_to_grid(self) -> bool:
        """Toggle snapping of drops to the grid."""
        return self._set_view(snap_to_grid=not self.document.settings.snap_to_grid).snap_to_grid

    def set_language(self, language: Language | str) -> TextDirection:
        """Set the content language and return the resulting text direction."""
        try:
            language = Language(language)
        except ValueError:
            msg = f"Unsupported language {language!r}"
            raise ValidationError(msg, field="language") from None
        return self._set_view(language=language).direction

    # Theme

    def update_theme(self, **changes: Any) -> Mapping[str, Any]:
        """Merge entries into the site theme as one undoable edit.

        Entries are replaced whole; a ``None`` value removes the entry.

        Returns:
            The updated theme.
        """
        if not changes:
            return self.document.theme
        document = self.document.with_theme(changes)
        if document.theme == self.document.theme:
            return document.theme
        self._commit(document, "update_theme")
        return document.theme

    # History

    def _restore(self, restored: Document, settings: DocumentSettings, label: str) -> None:
        if restored.settings != settings:
            restored = replace(restored, settings=settings)
            self.history.replace_present(restored)
        self._prune_selection()
        if self.autosave is not None:
            self.autosave.notify_change(restored)
        logger.debug("History step", action=label, undo=self.history.undo_count, redo=self.history.redo_count)

    def undo(self) -> bool:
        """Undo the last edit.

        View settings are kept as they are.

        Returns:
            True if an edit was undone, False if there was nothing to undo.
        """
        settings = self.document.settings
        restored = self.history.undo()
        if restored is None:
            return False
        self._restore(restored, settings, "undo")
        return True

    def redo(self) -> bool:
        """Redo the last undone edit.

        Returns:
            True if an edit was redone, False if there was nothing to redo.
        """
        settings = self.document.settings
        restored = self.history.redo()
        if restored is None:
            return False
        self._restore(restored, settings, "redo")
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.history.can_undo()

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.history.can_redo()

    # Keyboard

    def save_now(self) -> Coroutine[Any, Any, bool] | None:
        """Return a coroutine saving immediately, or None without autosave."""
        if self.autosave is None:
            logger.warning("Action blocked", action="save", reason="autosave is not configured")
            return None
        return self.autosave.save_now()

    def handle_shortcut(self, key_combo: str) -> Any:  # noqa: PLR0911
        """Run the action bound to a key combination.

        Args:
            key_combo: Key combination such as ``"ctrl+shift+z"``.

        Returns:
            The result of the action, or None if nothing is bound. The save
            action returns a coroutine the caller must await.
        """
        action = self.shortcuts.resolve(key_combo)
        if action is None:
            return None
        logger.debug("Shortcut pressed", combo=key_combo, action=action)
        match action:
            case EditorAction.UNDO:
                return self.undo()
            case EditorAction.REDO:
                return self.redo()
            case EditorAction.DUPLICATE:
                return self.duplicate_selection()
            case EditorAction.DELETE:
                return self.remove_selection()
            case EditorAction.SELECT_ALL:
                return self.select_all()
            case EditorAction.COPY:
                return self.copy_selection()
            case EditorAction.PASTE:
                return self.paste()
            case EditorAction.GROUP:
                return self.group_selection()
            case EditorAction.UNGROUP:
                return self.ungroup_selection()
            case EditorAction.SAVE:
                return self.save_now()
            case _:
                assert_never(action)
