"""Tests for the layers panel view."""

from __future__ import annotations

import pytest

from sitebuildr_py.core.models import Document, Element, Position
from sitebuildr_py.core.types import ElementType
from sitebuildr_py.services.layers import LayerSort, build_layers, layer_name


@pytest.fixture
def document() -> Document:
    """Create a page with a hero, a section holding a button and an image, and a hidden spacer."""
    hero = Element(ElementType.HERO, props={"title": "Launch"}, position=Position(z_index=3))
    section = Element(ElementType.SECTION, props={"name": "Pricing"}, position=Position(z_index=1))
    button = Element(ElementType.BUTTON, position=Position(z_index=5), locked=True)
    image = Element(ElementType.IMAGE, position=Position(z_index=2))
    spacer = Element(ElementType.SPACER, position=Position(z_index=0), visible=False)
    return (
        Document()
        .insert(hero)
        .insert(section)
        .insert(button, section.id)
        .insert(image, section.id)
        .insert(spacer)
    )


def _names(document: Document, **kwargs: object) -> list[str]:
    return [row.name for row in build_layers(document, **kwargs)]  # type: ignore[arg-type]


class TestLayerName:
    """Tests for layer display names."""

    def test_title_and_name_props(self) -> None:
        """Test that a title or name prop is used when set."""
        assert layer_name(Element(ElementType.HERO, props={"title": "Launch"})) == "Launch"
        assert layer_name(Element(ElementType.GROUP, props={"name": "Header"})) == "Header"

    def test_falls_back_to_kind(self) -> None:
        """Test that unnamed elements show their kind."""
        assert layer_name(Element(ElementType.IMAGE)) == "image"
        assert layer_name(Element(ElementType.SECTION)) == "section"


class TestBuildLayers:
    """Tests for build_layers."""

    def test_topmost_first(self, document: Document) -> None:
        """Test that siblings are listed from the highest z-index down, each followed by its children."""
        rows = build_layers(document)
        assert [row.name for row in rows] == ["Launch", "Pricing", "button", "image", "spacer"]
        assert [row.depth for row in rows] == [0, 0, 1, 1, 0]

    def test_ascending(self, document: Document) -> None:
        """Test the reverse order."""
        assert _names(document, descending=False) == ["spacer", "Pricing", "image", "button", "Launch"]

    def test_sort_by_name(self, document: Document) -> None:
        """Test sorting siblings by display name."""
        assert _names(document, sort_by=LayerSort.NAME, descending=False) == [
            "Launch",
            "Pricing",
            "button",
            "image",
            "spacer",
        ]

    def test_filters(self, document: Document) -> None:
        """Test the visible and locked filters."""
        assert "spacer" not in _names(document, visible_only=True)
        assert _names(document, locked_only=True) == []

    def test_search_keeps_ancestors(self, document: Document) -> None:
        """Test that a match inside a section keeps the section in the list."""
        rows = build_layers(document, query="IMAGE")
        assert [row.name for row in rows] == ["Pricing", "image"]
        assert rows[1].depth == 1

    def test_search_without_match(self, document: Document) -> None:
        """Test a search that matches nothing."""
        assert build_layers(document, query="video") == []

    def test_row_fields(self, document: Document) -> None:
        """Test the fields carried by each row."""
        button = next(row for row in build_layers(document) if row.element_type is ElementType.BUTTON)
        assert button.locked
        assert button.visible
        assert button.z_index == 5

    def test_group_membership(self) -> None:
        """Test that rows report the group an element belongs to."""
        group = Element(ElementType.GROUP, props={"name": "Pair"})
        member = Element(ElementType.TEXT, parent_group_id=group.id)
        document = Document().insert(group).insert(member, group.id)
        rows = build_layers(document)
        assert rows[1].parent_group_id == group.id

    def test_empty_document(self) -> None:
        """Test listing an empty page."""
        assert build_layers(Document()) == []
