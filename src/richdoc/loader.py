"""Snapshot and document loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_CONFIG_NAME, RichdocConfig, load_config
from .datasets import dataset_from_csv
from .exceptions import ParseError, ValidationError
from .logger import get_logger
from .models import AssetRecord, ComponentRecord, DocumentNode, TableDataset
from .parser import DocumentParser
from .schemas import SnapshotSchema
from .store import EntityStore

logger = get_logger()


def _discover_config(
    input_path: Path,
    config_path: Path | None = None,
) -> RichdocConfig | None:
    """Discover config from various locations.

    Search order:
    1. Explicit config_path argument (the CLI passes --config here)
    2. input file directory / richdoc_config.yaml
    3. Current directory / richdoc_config.yaml
    """
    # 1. Explicit argument
    if config_path and config_path.exists():
        return load_config(config_path)

    # 2. Input file directory
    dir_config = Path(input_path).parent / DEFAULT_CONFIG_NAME
    if dir_config.exists():
        return load_config(dir_config)

    # 3. Current directory
    cwd_config = Path(DEFAULT_CONFIG_NAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return None


def resolve_config(input_path: Path | str, config_path: Path | None = None) -> RichdocConfig:
    """Discover config for an input file, falling back to defaults."""
    return _discover_config(Path(input_path), config_path) or RichdocConfig()


def unwrap_locale(value: Any, locale: str) -> Any:
    """Unwrap a localized field value (``{"en-US": value}``).

    Mappings that carry a ``nodeType`` or ``sys`` key are content, not
    localizations, and are returned unchanged.
    """
    if isinstance(value, dict) and locale in value and "nodeType" not in value and "sys" not in value:
        return value[locale]
    return value


def _unwrap_fields(fields: dict[str, Any], locale: str) -> dict[str, Any]:
    return {name: unwrap_locale(value, locale) for name, value in fields.items()}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ParseError(f"File not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse {path.name}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError(f"{path.name} must contain a mapping at the root level")
    return data


def _prepare_asset(data: Any, locale: str) -> Any:
    """Flatten a CMS asset (localized fields, nested ``file``) into the snapshot shape."""
    if not isinstance(data, dict):
        return data
    flat = _unwrap_fields(data, locale)
    file_info = flat.pop("file", None)
    if isinstance(file_info, dict):
        file_info = _unwrap_fields(file_info, locale)
        for key in ("url", "fileName", "contentType"):
            if key in file_info:
                flat.setdefault(key, file_info[key])
    return flat


def load_snapshot(path: Path | str, config: RichdocConfig | None = None) -> EntityStore:
    """Load a snapshot file into an EntityStore.

    Localized field values are unwrapped with ``config.locale``. Datasets
    given as ``csv`` paths are read relative to the snapshot file.

    Raises:
        ParseError: If the file or a referenced CSV cannot be read
        ValidationError: If the snapshot structure is invalid
    """
    path = Path(path)
    config = config or RichdocConfig()
    data = _read_yaml(path)

    assets_data = data.get("assets")
    if isinstance(assets_data, dict):
        data = {**data, "assets": {k: _prepare_asset(v, config.locale) for k, v in assets_data.items()}}

    try:
        schema = SnapshotSchema(**data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid snapshot structure in {path.name}: {e}") from e

    entries = [
        ComponentRecord(
            id=entry_id,
            content_type=entry.content_type,
            fields=_unwrap_fields(entry.fields, config.locale),
        )
        for entry_id, entry in schema.entries.items()
    ]

    assets = [
        AssetRecord(
            id=asset_id,
            url=asset.url,
            title=asset.title,
            file_name=asset.file_name,
            mime_type=asset.content_type,
        )
        for asset_id, asset in schema.assets.items()
    ]

    datasets: list[TableDataset] = []
    for dataset_id, dataset in schema.datasets.items():
        key_column = dataset.key_column or config.tables.key_column
        if dataset.csv:
            csv_path = Path(dataset.csv)
            if not csv_path.is_absolute():
                csv_path = path.parent / csv_path
            datasets.append(dataset_from_csv(dataset_id, csv_path, title=dataset.title, key_column=key_column))
        else:
            datasets.append(
                TableDataset.from_rows(
                    dataset_id, dataset.header, dataset.rows, title=dataset.title, key_column=key_column
                )
            )

    logger.debug(
        f"Loaded snapshot {path.name}: {len(entries)} entries, {len(assets)} assets, {len(datasets)} datasets"
    )
    return EntityStore(entries=entries, assets=assets, datasets=datasets)


def load_document(path: Path | str) -> DocumentNode:
    """Load a rich-text document file."""
    return DocumentParser().parse_file(path)
