"""Base abstractions for markup backends."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class MarkupBackend(Protocol):
    """Protocol for markup backends.

    The renderers decide structure (which node becomes what, where markers
    go, which rows survive filtering). Backends only know how to spell that
    structure in a target markup.
    """

    def escape(self, text: str) -> str:
        """Escape literal text for element content."""
        ...

    def mark(self, mark_type: str, content: str) -> str | None:
        """Wrap content in an inline mark.

        Returns:
            Wrapped content, or None if the backend has no spelling for the mark
        """
        ...

    def paragraph(self, content: str, css_class: str | None = None) -> str:
        """Render a paragraph of inline content."""
        ...

    def heading(
        self, level: int, content: str, anchor_id: str | None = None, css_class: str | None = None
    ) -> str:
        """Render a heading, with an anchor id when one is given."""
        ...

    def division(self, content: str, css_class: str, element_id: str | None = None) -> str:
        """Render a styled block container around block content."""
        ...

    def list_block(self, items: Sequence[str], ordered: bool, css_class: str | None = None) -> str:
        """Render a list from already-rendered item bodies."""
        ...

    def list_item(self, content: str) -> str:
        """Render one list item."""
        ...

    def blockquote(self, content: str) -> str:
        """Render a blockquote around block content."""
        ...

    def rule(self) -> str:
        """Render a horizontal rule."""
        ...

    def link(self, url: str, content: str, *, new_tab: bool = False, css_class: str | None = None) -> str:
        """Render a hyperlink around inline content."""
        ...

    def table(self, rows: Sequence[str]) -> str:
        """Render a rich-text table from rendered rows."""
        ...

    def table_row(self, cells: Sequence[str]) -> str:
        """Render a table row from rendered cells."""
        ...

    def table_cell(self, content: str, *, header: bool, colspan: int | None, rowspan: int | None) -> str:
        """Render a table cell; spans greater than 1 are emitted."""
        ...

    def data_table(self, header: Sequence[str], rows: Sequence[Sequence[str]], css_class: str) -> str:
        """Render a header + rows dataset table."""
        ...

    def figure(self, url: str, alt: str, caption: str | None) -> str:
        """Render an image with optional caption."""
        ...

    def placeholder(self, text: str) -> str:
        """Render an inert, invisible placeholder."""
        ...
