"""Tests for the document JSON codec."""

from __future__ import annotations

import json

import pytest

from sitebuildr_py.core.models import Document, DocumentSettings, Element, Position
from sitebuildr_py.core.serialization import (
    document_from_dict,
    document_to_dict,
    dumps_document,
    loads_document,
)
from sitebuildr_py.core.types import ElementType, Language
from sitebuildr_py.exceptions import ValidationError


@pytest.fixture
def document() -> Document:
    """Create a document with a section holding a heading, plus a button."""
    section = Element(ElementType.SECTION, props={"name": "Intro"}, position=Position(x=0, y=0, z_index=1))
    heading = Element(
        ElementType.HEADING,
        props={"text": "خوش آمدید"},
        style={"fontSize": "16px"},
        responsive={"mobile": {"fontSize": "12px"}},
    )
    button = Element(ElementType.BUTTON, props={"text": "Buy"}, locked=True, visible=False)
    return (
        Document(
            settings=DocumentSettings(zoom=150, language=Language.URDU),
            theme={"colors": {"primary": "#0f766e"}, "borderRadius": "8px"},
        )
        .insert(section)
        .insert(heading, section.id)
        .insert(button)
    )


class TestDocumentCodec:
    """Tests for converting documents to and from the wire form."""

    def test_wire_form_is_nested(self, document: Document) -> None:
        """Test that children are serialized inline."""
        data = document_to_dict(document)
        assert [e["type"] for e in data["elements"]] == ["section", "button"]
        section = data["elements"][0]
        assert section["children"][0]["type"] == "heading"
        assert section["children"][0]["responsive"] == {"mobile": {"fontSize": "12px"}}
        assert data["elements"][1]["locked"] is True
        assert data["settings"]["direction"] == "rtl"
        assert data["settings"]["zoom"] == 150
        assert data["theme"] == {"colors": {"primary": "#0f766e"}, "borderRadius": "8px"}

    def test_loads_back_equal(self, document: Document) -> None:
        """Test that a serialized document loads into an equal document."""
        assert document_from_dict(document_to_dict(document)) == document

    def test_json_round_trip(self, document: Document) -> None:
        """Test the JSON string helpers, keeping non-ASCII text readable."""
        payload = dumps_document(document)
        assert "خوش آمدید" in payload
        assert loads_document(payload) == document

    def test_empty_payload(self) -> None:
        """Test that an empty object is an empty document."""
        assert document_from_dict({}) == Document()

    def test_missing_props_take_defaults(self) -> None:
        """Test that sparse elements are completed with defaults."""
        doc = document_from_dict({"elements": [{"id": "a", "type": "spacer"}]})
        assert doc.elements["a"].props.height == 40

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {"elements": ["not-an-object"]},
            {"elements": [{"id": "a"}]},
            {"elements": [{"id": "a", "type": "carousel"}]},
            {"elements": [{"type": "text"}]},
            {"elements": [{"id": "a", "type": "text", "props": {"unknown": 1}}]},
            {"elements": [{"id": "a", "type": "text", "position": {"x": "left"}}]},
            {"elements": [{"id": "a", "type": "text", "responsive": {"desktop": {}}}]},
            {"elements": {"id": "a", "type": "text"}},
            {"elements": [{"id": "a", "type": "section", "children": 5}]},
            {"elements": [{"id": "a", "type": "text", "position": [1, 2]}]},
            {"elements": [{"id": "a", "type": "text", "style": [1, 2]}]},
            {"elements": [{"id": "a", "type": "text", "responsive": ["tablet"]}]},
            {"elements": [{"id": "a", "type": "text", "responsive": {"tablet": 5}}]},
            {"settings": "dark"},
            {"theme": ["dark"]},
            {"settings": {"theme": "dark"}},
            {"settings": {"device_mode": "watch"}},
        ],
    )
    def test_malformed_payload(self, payload: object) -> None:
        """Test that malformed payloads raise ValidationError."""
        with pytest.raises(ValidationError):
            document_from_dict(payload)  # type: ignore[arg-type]

    def test_duplicate_ids_rejected(self) -> None:
        """Test that ids must be unique, including across nesting levels."""
        with pytest.raises(ValidationError):
            document_from_dict({"elements": [{"id": "a", "type": "text"}, {"id": "a", "type": "text"}]})
        with pytest.raises(ValidationError):
            document_from_dict({"elements": [{"id": "a", "type": "section", "children": [{"id": "a", "type": "text"}]}]})

    def test_children_on_leaf_rejected(self) -> None:
        """Test that a leaf kind with children is rejected."""
        payload = {"elements": [{"id": "a", "type": "image", "children": [{"id": "b", "type": "text"}]}]}
        with pytest.raises(ValidationError):
            document_from_dict(payload)

    def test_invalid_json(self) -> None:
        """Test that unparsable JSON raises ValidationError."""
        with pytest.raises(ValidationError):
            loads_document("{not json")

    def test_json_is_plain(self, document: Document) -> None:
        """Test that the wire form only holds JSON types."""
        assert json.loads(json.dumps(document_to_dict(document))) == document_to_dict(document)
