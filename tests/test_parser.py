"""Tests for the rich-text document parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from richdoc.exceptions import ParseError
from richdoc.models import Mark, NodeType, TargetKind
from richdoc.parser import DocumentParser, is_document_dict, node_from_dict


class TestNodeFromDict:
    """Test conversion of CMS JSON nodes."""

    def test_text_with_marks(self) -> None:
        node = node_from_dict({"nodeType": "text", "value": "Hi", "marks": [{"type": "bold"}, "italic"]})

        assert node.kind is NodeType.TEXT
        assert node.value == "Hi"
        assert node.marks == [Mark("bold"), Mark("italic")]

    def test_hyperlink_uri(self) -> None:
        node = node_from_dict({"nodeType": "hyperlink", "data": {"uri": "https://example.org"}, "content": []})
        assert node.data.uri == "https://example.org"

    def test_entry_target(self) -> None:
        node = node_from_dict(
            {
                "nodeType": "embedded-entry-block",
                "data": {"target": {"sys": {"id": "abc", "type": "Link", "linkType": "Entry"}}},
            }
        )
        assert node.target_id == "abc"
        assert node.data.target is not None
        assert node.data.target.kind is TargetKind.ENTRY

    def test_asset_target_kind_from_node_type(self) -> None:
        """Without a linkType, asset node types point at assets."""
        node = node_from_dict({"nodeType": "embedded-asset-block", "data": {"target": {"sys": {"id": "img"}}}})
        assert node.data.target is not None
        assert node.data.target.kind is TargetKind.ASSET

    def test_table_cell_spans(self) -> None:
        node = node_from_dict({"nodeType": "table-cell", "data": {"colspan": "2", "rowspan": 3}, "content": []})
        assert node.data.colspan == 2  # noqa: PLR2004
        assert node.data.rowspan == 3  # noqa: PLR2004

    def test_unknown_node_type_kept(self) -> None:
        node = node_from_dict({"nodeType": "mystery-node", "content": [{"nodeType": "text", "value": "x"}]})

        assert node.kind is None
        assert node.node_type == "mystery-node"
        assert node.children[0].value == "x"

    def test_heading_level(self) -> None:
        node = node_from_dict({"nodeType": "heading-3", "content": []})
        assert node.is_heading
        assert node.heading_level == 3  # noqa: PLR2004

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ("text", "must be a mapping"),
            ({"content": []}, "missing 'nodeType'"),
            ({"nodeType": "paragraph", "content": "x"}, "must be a list"),
            ({"nodeType": "text", "marks": [3]}, "Invalid mark"),
            ({"nodeType": "paragraph", "data": "x"}, "must be a mapping"),
            ({"nodeType": "table-cell", "data": {"colspan": "wide"}}, "Invalid colspan"),
        ],
    )
    def test_malformed(self, data: object, message: str) -> None:
        with pytest.raises(ParseError, match=message):
            node_from_dict(data)

    def test_is_document_dict(self) -> None:
        assert is_document_dict({"nodeType": "document"})
        assert not is_document_dict({"nodeType": "paragraph"})
        assert not is_document_dict("document")


class TestDocumentParser:
    """Test parsing document files."""

    def test_parse_json_fixture(self, fixtures_dir: Path) -> None:
        doc = DocumentParser().parse_file(fixtures_dir / "document.json")

        assert doc.kind is NodeType.DOCUMENT
        assert [child.node_type for child in doc.children] == [
            "heading-2",
            "paragraph",
            "embedded-entry-block",
            "heading-2",
            "embedded-entry-block",
        ]
        assert doc.children[1].children[1].marks == [Mark("bold")]

    def test_parse_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.yaml"
        path.write_text(
            """
nodeType: document
content:
  - nodeType: paragraph
    content:
      - nodeType: text
        value: Hello
"""
        )
        doc = DocumentParser().parse_file(path)
        assert doc.children[0].children[0].value == "Hello"

    def test_body_wrapper(self) -> None:
        doc = DocumentParser().parse_data({"body": {"nodeType": "document", "content": []}})
        assert doc.kind is NodeType.DOCUMENT

    def test_root_must_be_document(self) -> None:
        with pytest.raises(ParseError, match="Root node must be a 'document'"):
            DocumentParser().parse_data({"nodeType": "paragraph", "content": []})

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="File not found"):
            DocumentParser().parse_file(tmp_path / "nope.json")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"nodeType": "document", "content": [')
        with pytest.raises(ParseError, match="Failed to parse"):
            DocumentParser().parse_file(path)

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ParseError, match="mapping at the root"):
            DocumentParser().parse_file(path)
