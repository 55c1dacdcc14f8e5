"""Tests for keyboard shortcut bindings."""

from __future__ import annotations

import pytest

from sitebuildr_py.core.shortcuts import DEFAULT_SHORTCUTS, EditorAction, ShortcutMap, normalize_combo


class TestNormalizeCombo:
    """Tests for key combination normalization."""

    @pytest.mark.parametrize(
        ("combo", "expected"),
        [
            ("Ctrl+Z", "ctrl+z"),
            ("shift+ctrl+z", "ctrl+shift+z"),
            ("Control+Shift+Z", "ctrl+shift+z"),
            ("cmd+z", "ctrl+z"),
            ("Meta+Shift+G", "ctrl+shift+g"),
            ("Del", "delete"),
            ("option+a", "alt+a"),
        ],
    )
    def test_normalize(self, combo: str, expected: str) -> None:
        """Test that equivalent spellings normalize to the same combo."""
        assert normalize_combo(combo) == expected


class TestShortcutMap:
    """Tests for ShortcutMap."""

    def test_default_bindings(self) -> None:
        """Test the standard editor bindings."""
        shortcuts = ShortcutMap()
        assert shortcuts.resolve("ctrl+z") is EditorAction.UNDO
        assert shortcuts.resolve("ctrl+shift+z") is EditorAction.REDO
        assert shortcuts.resolve("ctrl+y") is EditorAction.REDO
        assert shortcuts.resolve("Backspace") is EditorAction.DELETE
        assert shortcuts.resolve("cmd+s") is EditorAction.SAVE
        assert shortcuts.resolve("ctrl+q") is None

    def test_every_default_resolves(self) -> None:
        """Test that every default combo resolves to its action."""
        shortcuts = ShortcutMap()
        for combo, action in DEFAULT_SHORTCUTS.items():
            assert shortcuts.resolve(combo) is action

    def test_bind_and_unbind(self) -> None:
        """Test customizing the bindings."""
        shortcuts = ShortcutMap({})
        assert shortcuts.resolve("ctrl+z") is None

        shortcuts.bind("Alt+Z", EditorAction.UNDO)
        assert shortcuts.resolve("alt+z") is EditorAction.UNDO

        shortcuts.unbind("alt+z")
        assert shortcuts.resolve("alt+z") is None
