"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from richdoc.config import ContentTypesConfig, RichdocConfig, load_config


class TestLoadConfig:
    """Test reading richdoc_config.yaml."""

    def test_full_config(self, tmp_path: Path) -> None:
        path = tmp_path / "richdoc_config.yaml"
        path.write_text(
            """
locale: en-GB
links:
  site_domain: example.com
  external_new_tab: false
tables:
  key_column: section
  display_columns: [Name, Phone]
  show_title: false
cards:
  hidden_columns: [key]
charts:
  label_prefix: "$"
rich_text:
  text_format: markdown
content_types:
  aliases:
    providerTable: data-table
"""
        )
        config = load_config(path)

        assert config.locale == "en-GB"
        assert config.links.site_domain == "example.com"
        assert not config.links.external_new_tab
        assert config.tables.key_column == "section"
        assert config.tables.display_columns == ["Name", "Phone"]
        assert config.cards.hidden_columns == ["key"]
        assert config.charts.label_prefix == "$"
        assert config.rich_text.text_format == "markdown"
        assert config.content_types.aliases == {"providerTable": "data-table"}

    def test_defaults(self) -> None:
        config = RichdocConfig()

        assert config.links.external_new_tab
        assert config.links.back_to_top_anchor == "top"
        assert config.tables.key_column == "key"
        assert config.tables.show_title
        assert config.cards.hidden_columns == ["key", "slug"]
        assert config.rich_text.text_format == "plain"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "richdoc_config.yaml"
        path.write_text("")
        with pytest.raises(ValueError, match="Empty configuration"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "richdoc_config.yaml"
        path.write_text("- a\n")
        with pytest.raises(ValueError, match="mapping at the root"):
            load_config(path)

    def test_invalid_text_format(self, tmp_path: Path) -> None:
        path = tmp_path / "richdoc_config.yaml"
        path.write_text("rich_text:\n  text_format: html\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestContentTypeAliases:
    """Test alias validation."""

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Invalid component kind 'spreadsheet'"):
            ContentTypesConfig(aliases={"sheet": "spreadsheet"})

    def test_unknown_kind_itself_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ContentTypesConfig(aliases={"sheet": "unknown"})
