"""Display stage: expand markers in a rendered fragment.

Each marker is looked up in the snapshot and replaced by its HTML view.
Failures never raise; a marker whose data is missing becomes an error box
or a placeholder, and the rest of the fragment is still expanded.
"""

from __future__ import annotations

import html
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any

from .backends.base import MarkupBackend
from .backends.html import HtmlBackend
from .config import RichdocConfig
from .filtering import TableFilterEngine, cell_at, visible_columns
from .logger import get_logger
from .markers import replace_markers
from .models import ComponentKind, ComponentRecord, Marker, MarkerKind, TableDataset
from .store import EntityStore
from .text import escape_attr, escape_text, slugify, strip_tags

logger = get_logger()

_HEADING_RE = re.compile(r"<h([1-6])\b([^>]*)>(.*?)</h\1>", re.IGNORECASE | re.DOTALL)
_ID_ATTR_RE = re.compile(r"\bid=\"([^\"]*)\"")
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")
_LABEL_SUFFIX_RE = re.compile(r"\s+string$", re.IGNORECASE)

DEFAULT_TOC_HEADER_TAGS = ("H2",)


@dataclass(frozen=True)
class PageHeading:
    """A heading found in a rendered fragment."""

    level: int
    anchor: str
    text: str


def scan_headings(fragment: str) -> list[PageHeading]:
    """Find headings in a fragment, in document order.

    Headings without an id attribute get a slug of their text as anchor.
    """
    headings: list[PageHeading] = []
    for match in _HEADING_RE.finditer(fragment):
        text = strip_tags(match.group(3)).strip()
        id_match = _ID_ATTR_RE.search(match.group(2))
        anchor = html.unescape(id_match.group(1)) if id_match else slugify(text)
        if text:
            headings.append(PageHeading(level=int(match.group(1)), anchor=anchor, text=text))
    return headings


def format_header_label(header: str) -> str:
    """Turn a raw column name into a display label.

    >>> format_header_label("base_pricing_string")
    'Base Pricing'
    """
    label = header.replace("_", " ").replace("-", " ")
    label = _LABEL_SUFFIX_RE.sub("", label).strip()
    return " ".join(word[:1].upper() + word[1:] for word in label.split(" "))


def format_chart_value(cell: str, label_prefix: str) -> str:
    """Prefix numeric chart cells and group their thousands."""
    if not label_prefix or not _NUMERIC_RE.match(cell):
        return cell
    return f"{label_prefix}{float(cell):,.0f}"


def _error_box(message: str) -> str:
    return f'<div class="richdoc-error">{escape_text(message)}</div>'


def _css_classes(*names: str) -> str:
    return escape_attr(" ".join(name for name in names if name))


def _selected_columns(record: ComponentRecord | None) -> list[str] | None:
    """Column names from a record's ``filters.selectedColumns``, if any."""
    if record is None:
        return None
    filters = record.fields.get("filters")
    if not isinstance(filters, dict):
        return None
    names = []
    for column in filters.get("selectedColumns") or []:
        name = column.get("name") if isinstance(column, dict) else column
        if isinstance(name, str) and name.strip():
            names.append(name)
    return names or None


class MarkerExpander:
    """Replace every marker in a fragment with its rendered view."""

    def __init__(
        self,
        store: EntityStore,
        backend: MarkupBackend | None = None,
        config: RichdocConfig | None = None,
        engine: TableFilterEngine | None = None,
    ):
        self.store = store
        self.backend = backend or HtmlBackend()
        self.config = config or RichdocConfig()
        self.engine = engine or TableFilterEngine(self.config.tables, backend=self.backend)

        self._renderers: dict[MarkerKind, Callable[[Marker, Sequence[PageHeading]], str]] = {
            MarkerKind.TABLE: self.render_table,
            MarkerKind.TOC: self.render_toc,
            MarkerKind.CHART: self.render_chart,
            MarkerKind.CARDS: self.render_cards,
            MarkerKind.FORM: self.render_form,
        }

    def expand(self, fragment: str) -> str:
        """Expand all markers in a fragment.

        Tables of contents list the headings of the fragment itself.
        """
        headings = scan_headings(fragment)
        return replace_markers(fragment, lambda marker: self.render_marker(marker, headings))

    def render_marker(self, marker: Marker, headings: Sequence[PageHeading] = ()) -> str:
        logger.debug(f"Expanding {marker.kind.value} marker for '{marker.entity_id}'")
        return self._renderers[marker.kind](marker, headings)

    # Tables

    def render_table(self, marker: Marker, headings: Sequence[PageHeading] = ()) -> str:
        dataset = self.store.dataset(marker.entity_id)
        if dataset is None:
            logger.warning(f"Table marker refers to unknown dataset '{marker.entity_id}'")
            available = ", ".join(self.store.dataset_ids)
            return _error_box(f'Error: Table "{marker.entity_id}" not found. Available tables: {available}')

        record = self.store.entry(marker.entity_id)
        aliases = self.config.content_types.aliases
        if record is not None and record.kind(aliases) is ComponentKind.TABLE_OF_CONTENTS:
            return self.render_toc(marker, headings)

        filters = marker.attrs.get("filters", "").strip()
        if filters:
            marker = replace(marker, key_hint=filters)
        title = marker.attrs.get("title", "").strip()
        if title:
            dataset = replace(dataset, title=title)

        return self.engine.render_filtered(dataset, marker, _selected_columns(record))

    # Table of contents

    def render_toc(self, marker: Marker, headings: Sequence[PageHeading] = ()) -> str:
        record = self.store.entry(marker.entity_id)
        if record is None:
            logger.warning(f"TOC marker refers to unknown entry '{marker.entity_id}'")
            return _error_box(f'Error: TOC "{marker.entity_id}" not found.')

        style = record.field_str("style", "List").lower()
        classes = _css_classes(
            "richdoc-toc",
            f"toc-style-{slugify(style)}",
            "toc-sticky" if record.fields.get("isSticky") else "",
            marker.attrs.get("class", ""),
        )

        parts = [f'<div class="{classes}" id="richdoc-toc-{escape_attr(marker.entity_id)}">']
        title = marker.attrs.get("title") or record.field_str("title")
        if title:
            parts.append(f'<h3 class="toc-title">{escape_text(title)}</h3>')

        items = record.fields.get("items")
        if isinstance(items, list):
            links = self._static_toc_items(items)
        else:
            links = self._heading_toc_items(record, headings)
        if not links:
            logger.warning(f"TOC '{marker.entity_id}' has no entries")
            return self.backend.placeholder(f"Table of contents: {marker.entity_id} (no headings)")

        parts.append(self.backend.list_block(links, ordered=False, css_class="toc-list"))
        parts.append("</div>")
        return "\n".join(parts)

    def _toc_item(self, anchor: str, text: str) -> str:
        return self.backend.list_item(self.backend.link(f"#{anchor}", escape_text(text)))

    def _static_toc_items(self, items: list[Any]) -> list[str]:
        links = []
        for item in items:
            if not isinstance(item, dict):
                continue
            text = str(item.get("text") or "")
            if text:
                links.append(self._toc_item(str(item.get("anchor") or slugify(text)), text))
        return links

    def _heading_toc_items(self, record: ComponentRecord, headings: Sequence[PageHeading]) -> list[str]:
        tags = record.fields.get("headerTags") or list(DEFAULT_TOC_HEADER_TAGS)
        levels = set()
        for tag in tags if isinstance(tags, list) else [tags]:
            name = str(tag).strip().lower()
            if len(name) == 2 and name[0] == "h" and name[1].isdigit():  # noqa: PLR2004
                levels.add(int(name[1]))
        return [self._toc_item(h.anchor, h.text) for h in headings if h.level in levels]

    # Charts

    def render_chart(self, marker: Marker, headings: Sequence[PageHeading] = ()) -> str:
        record = self.store.entry(marker.entity_id)
        dataset = self.store.dataset(marker.entity_id)

        title = marker.attrs.get("title") or (record.field_str("title") if record else "")
        if not title and dataset:
            title = dataset.title
        viz_type = (record.field_str("visualizationType") if record else "") or marker.attrs.get("type", "")

        parts = [
            f'<div class="{_css_classes("richdoc-chart", marker.attrs.get("class", ""))}" '
            f'id="richdoc-chart-{escape_attr(marker.entity_id)}">'
        ]
        if title:
            parts.append(f'<h3 class="chart-title">{escape_text(title)}</h3>')

        if dataset is None:
            logger.warning(f"Chart '{marker.entity_id}' has no dataset; rendering placeholder")
            parts.append(f'<p class="chart-placeholder">[{escape_text(viz_type)}]</p>')
        else:
            prefix = (record.field_str("labelPrefix") if record else "") or self.config.charts.label_prefix
            rows = [
                [cell if i == 0 else format_chart_value(cell, prefix) for i, cell in enumerate(row)]
                for row in dataset.data_rows
            ]
            parts.append(self.backend.data_table(dataset.header_row, rows, "richdoc-table richdoc-chart-table"))

        parts.append("</div>")
        return "\n".join(parts)

    # Cards

    def render_cards(self, marker: Marker, headings: Sequence[PageHeading] = ()) -> str:
        record = self.store.entry(marker.entity_id)
        dataset = self.store.dataset(marker.entity_id)

        title = marker.attrs.get("title") or (record.field_str("title") if record else "")
        parts = [
            f'<div class="{_css_classes("richdoc-cards", marker.attrs.get("class", ""))}" '
            f'id="richdoc-cards-{escape_attr(marker.entity_id)}">'
        ]
        if title:
            parts.append(f'<h3 class="cards-title">{escape_text(title)}</h3>')

        if dataset is None:
            logger.warning(f"Cards '{marker.entity_id}' have no dataset; rendering placeholder")
            parts.append('<p class="cards-placeholder">[Provider listings]</p>')
        else:
            parts.append(self._card_grid(dataset, marker, record))

        parts.append("</div>")
        return "\n".join(parts)

    def _card_grid(self, dataset: TableDataset, marker: Marker, record: ComponentRecord | None) -> str:
        rows = dataset.data_rows
        hint = marker.attrs.get("filters", "").strip() or marker.key_hint
        if hint and dataset.has_key_column:
            keys = self.engine.resolve_keys(dataset, hint)
            if keys:
                rows = [row for row in rows if cell_at(row, dataset.key_column_index).strip().lower() in keys]

        hidden = {name.strip().lower() for name in self.config.cards.hidden_columns}
        selected = _selected_columns(record)
        if selected:
            columns = visible_columns(dataset.header_row, dataset.key_column_index, selected)
        else:
            columns = [
                i
                for i, header in enumerate(dataset.header_row)
                if header.strip().lower() not in hidden and i != dataset.key_column_index
            ]

        if not rows:
            return '<p class="cards-placeholder">No listings found.</p>'

        cards = []
        for row in rows:
            fields = []
            for i in columns:
                cell = cell_at(row, i)
                if not cell:
                    continue
                header = dataset.header_row[i]
                label = ""
                if header:
                    label = f'<span class="card-label">{escape_text(format_header_label(header))}:</span> '
                value = f'<span class="card-value">{escape_text(cell)}</span>'
                fields.append(f'<div class="card-field">{label}{value}</div>')
            cards.append(f'<div class="richdoc-card">{"".join(fields)}</div>')
        return f'<div class="cards-grid">{"".join(cards)}</div>'

    # Forms

    def render_form(self, marker: Marker, headings: Sequence[PageHeading] = ()) -> str:
        title = marker.attrs.get("title") or "Contact Us"
        submit = marker.attrs.get("submit") or "Send"
        classes = _css_classes("richdoc-form-container", marker.attrs.get("class", ""))
        return "".join(
            [
                f'<div class="{classes}" id="richdoc-form-{escape_attr(marker.entity_id)}">',
                f"<h3>{escape_text(title)}</h3>",
                '<form class="richdoc-form" method="post">',
                '<div class="form-field"><label for="name">Name</label>'
                '<input type="text" id="name" name="name" required /></div>',
                '<div class="form-field"><label for="email">Email</label>'
                '<input type="email" id="email" name="email" required /></div>',
                '<div class="form-field"><label for="message">Message</label>'
                '<textarea id="message" name="message" rows="5" required></textarea></div>',
                '<div class="form-submit">'
                f'<button type="submit" class="wp-button">{escape_text(submit)}</button></div>',
                "</form>",
                "</div>",
            ]
        )
