"""Rendering of text leaves and their marks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .logger import get_logger

if TYPE_CHECKING:
    from .backends.base import MarkupBackend
    from .models import DocumentNode

logger = get_logger()


class TextRenderer:
    """Render a text node: escape the value, then apply its marks.

    The first mark in the list ends up outermost, so ``[bold, italic]``
    renders as ``<strong><em>text</em></strong>``. A mark the backend cannot
    spell is skipped with a warning; the other marks still apply.
    """

    def __init__(self, backend: MarkupBackend):
        self.backend = backend

    def render_text(self, node: DocumentNode) -> str:
        result = self.backend.escape(node.value or "")
        if not node.marks:
            return result

        for mark in reversed(node.marks):
            wrapped = self.backend.mark(mark.type, result)
            if wrapped is None:
                logger.warning(f"Unknown mark type: {mark.type}")
                continue
            result = wrapped
        return result
