"""Marker wire format shared by the render and display stages.

A marker is a bracketed tag with double-quoted attributes::

    [richdoc_table id="3JnIHQENe4ZtihjpWwphGI" key="area-agency-on-aging"]

``id`` is required, ``key`` is optional, other attributes are free-form.
Scanning accepts hyphenated tag spellings (``richdoc-table``), attributes in
any order and attributes it does not know.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .exceptions import MarkerSyntaxError
from .logger import get_logger
from .models import Marker, MarkerKind
from .text import escape_attr

logger = get_logger()

_TAG_NAMES = "|".join(kind.value.split("_", 1)[1] for kind in MarkerKind)
_MARKER_RE = re.compile(
    rf"\[richdoc[_-](?P<tag>{_TAG_NAMES})(?P<attrs>(?:\s+[A-Za-z_][\w-]*=\"[^\"]*\")*)\s*\]"
)
_ATTR_RE = re.compile(r"([A-Za-z_][\w-]*)=\"([^\"]*)\"")


@dataclass(frozen=True)
class MarkerMatch:
    """A marker found in a fragment, with its span."""

    marker: Marker | None  # None when the marker has no id
    start: int
    end: int
    raw: str


def format_marker(marker: Marker) -> str:
    """Serialize a marker. Attribute order is id, key, then extra attrs."""
    parts = [marker.kind.value, f'id="{escape_attr(marker.entity_id)}"']
    if marker.key_hint:
        parts.append(f'key="{escape_attr(marker.key_hint)}"')
    for name, value in marker.attrs.items():
        if name in ("id", "key"):
            continue
        parts.append(f'{name}="{escape_attr(value)}"')
    return f"[{' '.join(parts)}]"


def _build_marker(tag: str, attr_text: str) -> Marker | None:
    kind = MarkerKind(f"richdoc_{tag}")
    attrs = {name.lower(): html.unescape(value) for name, value in _ATTR_RE.findall(attr_text)}
    entity_id = attrs.pop("id", "").strip()
    if not entity_id:
        return None
    key_hint = attrs.pop("key", "").strip() or None
    return Marker(kind=kind, entity_id=entity_id, key_hint=key_hint, attrs=attrs)


def parse_marker(text: str) -> Marker:
    """Parse a single marker string.

    Raises:
        MarkerSyntaxError: If the text is not exactly one valid marker
    """
    match = _MARKER_RE.fullmatch(text.strip())
    if not match:
        raise MarkerSyntaxError(f"Not a marker: {text!r}")
    marker = _build_marker(match.group("tag"), match.group("attrs"))
    if marker is None:
        raise MarkerSyntaxError(f"Marker has no id attribute: {text!r}")
    return marker


def scan_markers(fragment: str) -> Iterator[MarkerMatch]:
    """Yield every marker in a fragment, in document order."""
    for match in _MARKER_RE.finditer(fragment):
        marker = _build_marker(match.group("tag"), match.group("attrs"))
        yield MarkerMatch(marker=marker, start=match.start(), end=match.end(), raw=match.group(0))


def replace_markers(fragment: str, render: Callable[[Marker], str]) -> str:
    """Replace each marker in a fragment with ``render(marker)``.

    Markers without an id are left untouched and logged.
    """
    pieces: list[str] = []
    position = 0
    for found in scan_markers(fragment):
        pieces.append(fragment[position : found.start])
        if found.marker is None:
            logger.warning(f"Marker without id left in place: {found.raw}")
            pieces.append(found.raw)
        else:
            pieces.append(render(found.marker))
        position = found.end
    pieces.append(fragment[position:])
    return "".join(pieces)
