"""Linear undo/redo history of document snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitebuildr_py.core.models import Document

DEFAULT_MAX_HISTORY = 50


@dataclass(frozen=True)
class HistoryEntry:
    """A document snapshot in the history.

    Attributes:
        document: The snapshot. Documents are immutable, so the snapshot shares
            unchanged elements with its neighbours.
        label: Short name of the edit that produced the snapshot.
        timestamp: When the snapshot was taken.
    """

    document: Document
    label: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class HistoryManager:
    """Manages the undo/redo history of a single editing session.

    The history is a ``past`` stack, the ``present`` entry and a ``future``
    stack. Recording a new entry clears ``future``, so history never branches.

    Attributes:
        max_history: Maximum number of entries kept in ``past``.
    """

    def __init__(self, initial: Document, max_history: int = DEFAULT_MAX_HISTORY) -> None:
        """Initialize the history.

        Args:
            initial: The document the session starts from.
            max_history: Maximum number of undo steps to keep.
        """
        self.max_history = max_history
        self._past: list[HistoryEntry] = []
        self._present = HistoryEntry(initial, label="load")
        self._future: list[HistoryEntry] = []

    @property
    def present(self) -> Document:
        """The current document."""
        return self._present.document

    @property
    def present_entry(self) -> HistoryEntry:
        """The current history entry."""
        return self._present

    def record(self, document: Document, label: str = "") -> None:
        """Make ``document`` the present and push the old present onto ``past``.

        This clears the redo stack since a new edit invalidates any previously
        undone entries.

        Args:
            document: The new document.
            label: Short name of the edit.
        """
        self._past.append(self._present)
        self._present = HistoryEntry(document, label=label)
        self._future.clear()

        # Limit history size
        if len(self._past) > self.max_history:
            del self._past[: len(self._past) - self.max_history]

    def replace_present(self, document: Document) -> None:
        """Swap the present document without creating an undo step."""
        self._present = HistoryEntry(document, label=self._present.label, timestamp=self._present.timestamp)

    def undo(self) -> Document | None:
        """Step back one entry.

        Returns:
            The restored document, or None if there is nothing to undo.
        """
        if not self._past:
            return None
        self._future.insert(0, self._present)
        self._present = self._past.pop()
        return self._present.document

    def redo(self) -> Document | None:
        """Step forward one entry.

        Returns:
            The restored document, or None if there is nothing to redo.
        """
        if not self._future:
            return None
        self._past.append(self._present)
        self._present = self._future.pop(0)
        return self._present.document

    def can_undo(self) -> bool:
        """Check if there are entries to undo."""
        return len(self._past) > 0

    def can_redo(self) -> bool:
        """Check if there are entries to redo."""
        return len(self._future) > 0

    def reset(self, document: Document) -> None:
        """Clear all history and start again from ``document``."""
        self._past.clear()
        self._future.clear()
        self._present = HistoryEntry(document, label="load")

    @property
    def undo_count(self) -> int:
        """Number of entries that can be undone."""
        return len(self._past)

    @property
    def redo_count(self) -> int:
        """Number of entries that can be redone."""
        return len(self._future)

    @property
    def undo_label(self) -> str | None:
        """Label of the edit that ``undo`` would revert."""
        return self._present.label if self._past else None

    @property
    def redo_label(self) -> str | None:
        """Label of the edit that ``redo`` would re-apply."""
        return self._future[0].label if self._future else None
