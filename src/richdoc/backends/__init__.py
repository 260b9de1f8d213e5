"""Markup backends."""

from richdoc.backends.base import MarkupBackend
from richdoc.backends.html import HtmlBackend

__all__ = [
    "HtmlBackend",
    "MarkupBackend",
]
