"""Keyboard shortcuts of the editor."""

from __future__ import annotations

from enum import StrEnum


class EditorAction(StrEnum):
    """Actions reachable from the keyboard."""

    UNDO = "undo"
    REDO = "redo"
    DUPLICATE = "duplicate"
    DELETE = "delete"
    SELECT_ALL = "select_all"
    COPY = "copy"
    PASTE = "paste"
    GROUP = "group"
    UNGROUP = "ungroup"
    SAVE = "save"


DEFAULT_SHORTCUTS: dict[str, EditorAction] = {
    "ctrl+z": EditorAction.UNDO,
    "ctrl+shift+z": EditorAction.REDO,
    "ctrl+y": EditorAction.REDO,
    "ctrl+d": EditorAction.DUPLICATE,
    "delete": EditorAction.DELETE,
    "backspace": EditorAction.DELETE,
    "ctrl+a": EditorAction.SELECT_ALL,
    "ctrl+c": EditorAction.COPY,
    "ctrl+v": EditorAction.PASTE,
    "ctrl+g": EditorAction.GROUP,
    "ctrl+shift+g": EditorAction.UNGROUP,
    "ctrl+s": EditorAction.SAVE,
}

_MODIFIER_ORDER = ("ctrl", "meta", "alt", "shift")
_ALIASES = {"control": "ctrl", "cmd": "meta", "command": "meta", "option": "alt", "del": "delete"}


def normalize_combo(combo: str) -> str:
    """Normalize a key combination such as ``"Control+Shift+Z"``.

    Modifiers are lower-cased, aliased and put in a fixed order so that
    ``"shift+ctrl+z"`` and ``"Ctrl+Shift+z"`` compare equal. ``meta`` (the
    command key) is treated as ``ctrl``.
    """
    parts = [_ALIASES.get(p, p) for p in (part.strip().lower() for part in combo.split("+")) if p]
    modifiers = {p for p in parts if p in _MODIFIER_ORDER}
    if "meta" in modifiers:
        modifiers.discard("meta")
        modifiers.add("ctrl")
    keys = [p for p in parts if p not in _MODIFIER_ORDER]
    ordered = [m for m in _MODIFIER_ORDER if m in modifiers]
    return "+".join(ordered + keys)


class ShortcutMap:
    """Lookup table from key combinations to editor actions."""

    def __init__(self, bindings: dict[str, EditorAction] | None = None) -> None:
        """Initialize the map.

        Args:
            bindings: Key combinations to bind. Defaults to ``DEFAULT_SHORTCUTS``.
        """
        self._bindings: dict[str, EditorAction] = {}
        for combo, action in (bindings if bindings is not None else DEFAULT_SHORTCUTS).items():
            self.bind(combo, action)

    def bind(self, combo: str, action: EditorAction) -> None:
        """Bind a key combination to an action."""
        self._bindings[normalize_combo(combo)] = action

    def unbind(self, combo: str) -> None:
        """Remove a binding, if present."""
        self._bindings.pop(normalize_combo(combo), None)

    def resolve(self, combo: str) -> EditorAction | None:
        """Return the action bound to a key combination, if any."""
        return self._bindings.get(normalize_combo(combo))
