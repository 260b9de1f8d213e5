"""Configuration loader for richdoc.

A single YAML file (richdoc_config.yaml) holds link policy, table display
options, component-type aliases and snapshot settings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from .models import ComponentKind

DEFAULT_CONFIG_NAME = "richdoc_config.yaml"


class LinkConfig(BaseModel):
    """Hyperlink rendering policy."""

    site_domain: str | None = None  # Links to other hosts count as external
    external_new_tab: bool = True  # Add target="_blank" to external links
    back_to_top_anchor: str = "top"


class TableConfig(BaseModel):
    """Data table display options."""

    key_column: str = "key"  # Header name of the hidden key column
    display_columns: list[str] = Field(default_factory=list)  # Empty = all non-key columns
    show_title: bool = True  # Title is still omitted when a key filter applies


class CardsConfig(BaseModel):
    """Card grid display options."""

    hidden_columns: list[str] = Field(default_factory=lambda: ["key", "slug"])


class ChartConfig(BaseModel):
    """Chart display options."""

    label_prefix: str = ""  # Prefix for numeric cells, e.g. "$"


class RichTextConfig(BaseModel):
    """Nested rich-text component options."""

    text_format: Literal["plain", "markdown"] = "plain"


class ContentTypesConfig(BaseModel):
    """Extra content type tags mapped onto component kinds."""

    aliases: dict[str, str] = Field(default_factory=dict)

    @field_validator("aliases")
    @classmethod
    def validate_kinds(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject aliases that point at a kind that does not exist."""
        valid = {kind.value for kind in ComponentKind if kind is not ComponentKind.UNKNOWN}
        for tag, kind in v.items():
            if kind not in valid:
                raise ValueError(
                    f"Invalid component kind '{kind}' for content type '{tag}'. "
                    f"Valid kinds: {', '.join(sorted(valid))}"
                )
        return v


class RichdocConfig(BaseModel):
    """Top-level configuration."""

    locale: str = "en-US"  # Used to unwrap localized snapshot fields
    links: LinkConfig = Field(default_factory=LinkConfig)
    tables: TableConfig = Field(default_factory=TableConfig)
    cards: CardsConfig = Field(default_factory=CardsConfig)
    charts: ChartConfig = Field(default_factory=ChartConfig)
    rich_text: RichTextConfig = Field(default_factory=RichTextConfig)
    content_types: ContentTypesConfig = Field(default_factory=ContentTypesConfig)


def load_config(config_path: Path | str) -> RichdocConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to richdoc_config.yaml

    Returns:
        Validated RichdocConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is empty or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if not data:
        raise ValueError("Empty configuration file")

    if not isinstance(data, dict):
        raise ValueError("Configuration must be a mapping at the root level")

    # pydantic's ValidationError subclasses ValueError
    return RichdocConfig.model_validate(data)
