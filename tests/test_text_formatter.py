"""Tests for markdown to rich-text conversion."""

from richdoc.models import Mark, NodeType
from richdoc.renderer import DocumentRenderer
from richdoc.store import EntityStore
from richdoc.text_formatter import parse_markdown


class TestInline:
    """Test inline markdown conversion."""

    def test_plain_paragraph(self) -> None:
        doc = parse_markdown("Hello world")

        assert doc.kind is NodeType.DOCUMENT
        assert len(doc.children) == 1
        assert doc.children[0].kind is NodeType.PARAGRAPH
        assert doc.children[0].children[0].value == "Hello world"

    def test_nested_emphasis_marks(self) -> None:
        """Marks accumulate outermost first."""
        paragraph = parse_markdown("Some **bold _both_** text").children[0]
        leaves = [(child.value, child.marks) for child in paragraph.children]

        assert leaves == [
            ("Some ", []),
            ("bold ", [Mark("bold")]),
            ("both", [Mark("bold"), Mark("italic")]),
            (" text", []),
        ]

    def test_no_empty_leaves(self) -> None:
        """Empty text tokens from the parser never become marked leaves."""
        paragraph = parse_markdown("**a _b_ c** and _**d**_").children[0]
        assert all(child.value for child in paragraph.children)

    def test_inline_code(self) -> None:
        leaf = parse_markdown("`x = 1`").children[0].children[0]
        assert leaf.value == "x = 1"
        assert leaf.marks == [Mark("code")]

    def test_link(self) -> None:
        link = parse_markdown("[site](https://example.org)").children[0].children[0]

        assert link.kind is NodeType.HYPERLINK
        assert link.data.uri == "https://example.org"
        assert link.children[0].value == "site"

    def test_soft_break_becomes_space(self) -> None:
        paragraph = parse_markdown("line one\nline two").children[0]
        assert "".join(child.value for child in paragraph.children) == "line one line two"

    def test_image_skipped(self) -> None:
        assert parse_markdown("![alt](pic.png)").children[0].children == []


class TestBlocks:
    """Test block markdown conversion."""

    def test_heading_levels(self) -> None:
        doc = parse_markdown("# One\n\n### Three")
        assert [child.heading_level for child in doc.children] == [1, 3]

    def test_unordered_list(self) -> None:
        lst = parse_markdown("- a\n- b").children[0]

        assert lst.kind is NodeType.UNORDERED_LIST
        assert [item.kind for item in lst.children] == [NodeType.LIST_ITEM, NodeType.LIST_ITEM]
        assert lst.children[1].children[0].children[0].value == "b"

    def test_ordered_list(self) -> None:
        assert parse_markdown("1. one\n2. two").children[0].kind is NodeType.ORDERED_LIST

    def test_blockquote(self) -> None:
        quote = parse_markdown("> quoted").children[0]
        assert quote.kind is NodeType.BLOCKQUOTE
        assert quote.children[0].kind is NodeType.PARAGRAPH

    def test_thematic_break(self) -> None:
        doc = parse_markdown("above\n\n***\n\nbelow")
        assert [child.kind for child in doc.children] == [NodeType.PARAGRAPH, NodeType.HR, NodeType.PARAGRAPH]

    def test_code_block(self) -> None:
        leaf = parse_markdown("```\nprint()\n```").children[0].children[0]
        assert leaf.value == "print()"
        assert leaf.marks == [Mark("code")]

    def test_empty_text(self) -> None:
        assert parse_markdown("").children == []


class TestRendering:
    """Test that converted markdown renders like CMS rich text."""

    def test_render(self) -> None:
        doc = parse_markdown("# Title\n\nSome **bold _both_** text\n\n- a\n- b")
        result = DocumentRenderer(EntityStore()).render(doc)

        assert result == (
            '<h1 id="title">Title</h1>\n\n'
            "<p>Some <strong>bold </strong><strong><em>both</em></strong> text</p>\n\n"
            "<ul>\n<li>a</li>\n<li>b</li>\n</ul>"
        )
