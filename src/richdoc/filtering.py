"""Row filtering and column selection for shared data tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .backends.base import MarkupBackend
from .backends.html import HtmlBackend
from .config import TableConfig
from .logger import get_logger
from .matcher import KeyHeadingMatcher
from .models import Marker, TableDataset

logger = get_logger()

TABLE_CSS_CLASS = "richdoc-table"
WRAPPER_CSS_CLASS = "richdoc-data-table"


@dataclass(frozen=True)
class FilteredTable:
    """The visible part of a dataset after filtering."""

    header: list[str]
    rows: list[list[str]]
    resolved_keys: tuple[str, ...] = ()

    @property
    def resolved_key(self) -> str | None:
        """The first resolved key, or None when rows were not filtered."""
        return self.resolved_keys[0] if self.resolved_keys else None


def cell_at(row: Sequence[str], index: int) -> str:
    """Cell at index, or "" for a short row."""
    return row[index] if index < len(row) else ""


def split_hint(hint: str | None) -> list[str]:
    """Split a key hint into its comma-separated values."""
    if not hint:
        return []
    return [value.strip().lower() for value in hint.split(",") if value.strip()]


def visible_columns(
    header: Sequence[str], key_column_index: int, display_columns: Sequence[str] = ()
) -> list[int]:
    """Indices of the columns to show, in display order.

    With a display-column selection, the named columns (matched
    case-insensitively) are shown in the order given. Without one, or when
    none of the names match, every column is shown. The key column is never
    shown.
    """
    lowered = [h.strip().lower() for h in header]
    selected: list[int] = []
    for name in display_columns:
        wanted = name.strip().lower()
        if wanted in lowered:
            index = lowered.index(wanted)
            if index != key_column_index and index not in selected:
                selected.append(index)

    if selected:
        return selected
    return [i for i in range(len(header)) if i != key_column_index]


class TableFilterEngine:
    """Filter a dataset's rows by a marker's key hint and render the result."""

    def __init__(
        self,
        config: TableConfig | None = None,
        matcher: KeyHeadingMatcher | None = None,
        backend: MarkupBackend | None = None,
    ):
        self.config = config or TableConfig()
        self.matcher = matcher or KeyHeadingMatcher()
        self.backend = backend or HtmlBackend()

    def resolve_keys(self, dataset: TableDataset, hint: str | None) -> tuple[str, ...]:
        """Resolve each comma-separated hint value against the dataset's keys."""
        resolved: dict[str, None] = {}
        for value in split_hint(hint):
            key = self.matcher.resolve_key(value, dataset.known_key_values)
            if key is not None:
                resolved.setdefault(key, None)
        return tuple(resolved)

    def filter_table(
        self, dataset: TableDataset, marker: Marker, display_columns: Sequence[str] | None = None
    ) -> FilteredTable:
        """Apply the marker's key hint and column selection to a dataset.

        Rows are kept when their key cell (trimmed, lower-cased) equals a
        resolved key, in their original order. When the marker has no hint,
        the dataset has no key column, or no hint value resolves, all rows are
        kept.

        Args:
            dataset: Dataset to filter
            marker: Table marker carrying the key hint
            display_columns: Column names to show; defaults to the configured selection
        """
        rows = dataset.data_rows
        resolved: tuple[str, ...] = ()

        if marker.key_hint and dataset.has_key_column:
            resolved = self.resolve_keys(dataset, marker.key_hint)
            if resolved:
                key_index = dataset.key_column_index
                rows = [row for row in rows if cell_at(row, key_index).strip().lower() in resolved]
                logger.changes(
                    f"Table '{dataset.id}': key hint '{marker.key_hint}' kept {len(rows)} of "
                    f"{len(dataset.data_rows)} rows for {', '.join(resolved)}"
                )
            else:
                logger.warning(
                    f"Table '{dataset.id}': key hint '{marker.key_hint}' matched no key; showing all rows"
                )

        if display_columns is None:
            display_columns = self.config.display_columns
        columns = visible_columns(dataset.header_row, dataset.key_column_index, display_columns)

        return FilteredTable(
            header=[dataset.header_row[i] for i in columns],
            rows=[[cell_at(row, i) for i in columns] for row in rows],
            resolved_keys=resolved,
        )

    def render_filtered(
        self, dataset: TableDataset, marker: Marker, display_columns: Sequence[str] | None = None
    ) -> str:
        """Filter a dataset and render it as a data table block.

        The dataset title is shown only when the marker carries no key hint.
        """
        table = self.filter_table(dataset, marker, display_columns)

        parts: list[str] = []
        if dataset.title and self.config.show_title and not marker.key_hint:
            parts.append(self.backend.heading(3, self.backend.escape(dataset.title)))
        parts.append(self.backend.data_table(table.header, table.rows, TABLE_CSS_CLASS))

        return self.backend.division("\n".join(parts), WRAPPER_CSS_CLASS, element_id=f"richdoc-table-{dataset.id}")
