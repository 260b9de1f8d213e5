"""CSV loading for table datasets."""

from __future__ import annotations

import csv
import io
from pathlib import Path

from .exceptions import ParseError
from .logger import get_logger
from .models import TableDataset

logger = get_logger()

_BOM = "\ufeff"


def parse_csv(text: str) -> list[list[str]]:
    """Parse CSV text into rows of trimmed cells.

    A leading byte order mark is dropped and rows whose cells are all empty
    are skipped. Quoted cells may contain commas, newlines and doubled quotes.
    """
    if text.startswith(_BOM):
        text = text[len(_BOM) :]

    rows: list[list[str]] = []
    for row in csv.reader(io.StringIO(text)):
        cells = [cell.strip() for cell in row]
        if any(cells):
            rows.append(cells)
    return rows


def dataset_from_rows(
    dataset_id: str,
    rows: list[list[str]],
    *,
    title: str = "",
    key_column: str | None = "key",
) -> TableDataset:
    """Build a dataset whose first row is the header."""
    if not rows:
        logger.warning(f"Dataset '{dataset_id}' has no rows")
        return TableDataset(id=dataset_id, title=title)
    return TableDataset.from_rows(dataset_id, rows[0], rows[1:], title=title, key_column=key_column)


def dataset_from_csv(
    dataset_id: str,
    csv_path: Path | str,
    *,
    title: str = "",
    key_column: str | None = "key",
) -> TableDataset:
    """Load a dataset from a CSV file with a header row.

    Raises:
        ParseError: If the file is missing or not valid UTF-8 CSV
    """
    path = Path(csv_path)
    if not path.exists():
        raise ParseError(f"CSV file not found for dataset '{dataset_id}': {path}")

    try:
        text = path.read_text(encoding="utf-8")
        rows = parse_csv(text)
    except (UnicodeDecodeError, csv.Error) as e:
        raise ParseError(f"Failed to read CSV for dataset '{dataset_id}': {e}") from e

    logger.debug(f"Loaded {max(len(rows) - 1, 0)} rows for dataset '{dataset_id}' from {path}")
    return dataset_from_rows(dataset_id, rows, title=title, key_column=key_column)
