"""Tests for the undo/redo history."""

from __future__ import annotations

from sitebuildr_py.core.history import DEFAULT_MAX_HISTORY, HistoryManager
from sitebuildr_py.core.models import Document, Element
from sitebuildr_py.core.types import ElementType


def _docs(count: int) -> list[Document]:
    docs = [Document()]
    for _ in range(count):
        docs.append(docs[-1].insert(Element(ElementType.TEXT)))
    return docs


class TestHistoryManager:
    """Tests for HistoryManager."""

    def test_initial_state(self) -> None:
        """Test that a new history has nothing to undo or redo."""
        initial = Document()
        history = HistoryManager(initial)
        assert history.present is initial
        assert not history.can_undo()
        assert not history.can_redo()
        assert history.undo() is None
        assert history.redo() is None

    def test_undo_redo_are_inverse(self) -> None:
        """Test that redo after undo restores the exact present."""
        d0, d1, d2 = _docs(2)
        history = HistoryManager(d0)
        history.record(d1, "add")
        history.record(d2, "add")

        assert history.undo() is d1
        assert history.redo() is d2
        assert history.present is d2

    def test_round_trip_to_initial(self) -> None:
        """Test that undoing every edit returns the initial document."""
        docs = _docs(10)
        history = HistoryManager(docs[0])
        for doc in docs[1:]:
            history.record(doc)
        for _ in docs[1:]:
            history.undo()
        assert history.present is docs[0]
        assert history.redo_count == 10

    def test_record_clears_future(self) -> None:
        """Test that a new edit after undo makes redo unavailable."""
        d0, d1, d2 = _docs(2)
        history = HistoryManager(d0)
        history.record(d1)
        history.undo()
        assert history.can_redo()

        history.record(d2)
        assert not history.can_redo()
        assert history.undo() is d0

    def test_past_is_capped(self) -> None:
        """Test that the oldest entries are dropped beyond the limit."""
        docs = _docs(DEFAULT_MAX_HISTORY + 10)
        history = HistoryManager(docs[0])
        for doc in docs[1:]:
            history.record(doc)

        assert history.undo_count == DEFAULT_MAX_HISTORY
        while history.can_undo():
            history.undo()
        assert history.present is docs[10]

    def test_custom_limit(self) -> None:
        """Test a smaller history limit."""
        docs = _docs(5)
        history = HistoryManager(docs[0], max_history=2)
        for doc in docs[1:]:
            history.record(doc)
        assert history.undo_count == 2

    def test_labels(self) -> None:
        """Test the labels of the next undo and redo steps."""
        d0, d1, d2 = _docs(2)
        history = HistoryManager(d0)
        assert history.undo_label is None
        history.record(d1, "add")
        history.record(d2, "style")
        assert history.undo_label == "style"

        history.undo()
        assert history.undo_label == "add"
        assert history.redo_label == "style"

    def test_replace_present_adds_no_step(self) -> None:
        """Test swapping the present without an undo step."""
        d0, d1 = _docs(1)
        history = HistoryManager(d0)
        history.replace_present(d1)
        assert history.present is d1
        assert not history.can_undo()

    def test_reset(self) -> None:
        """Test that reset clears both stacks."""
        d0, d1, d2 = _docs(2)
        history = HistoryManager(d0)
        history.record(d1)
        history.undo()
        history.reset(d2)
        assert history.present is d2
        assert not history.can_undo()
        assert not history.can_redo()
