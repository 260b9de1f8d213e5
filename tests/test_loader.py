"""Tests for snapshot loading and config discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from richdoc.config import RichdocConfig, TableConfig
from richdoc.exceptions import ParseError, ValidationError
from richdoc.loader import load_document, load_snapshot, resolve_config, unwrap_locale
from richdoc.models import NodeType


def write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadSnapshot:
    """Test loading snapshot files into an EntityStore."""

    def test_fixture_snapshot(self, fixtures_dir: Path) -> None:
        store = load_snapshot(fixtures_dir / "snapshot.yaml")

        record = store.entry("providerTable")
        assert record is not None
        assert record.field_str("title") == "Local Providers"
        assert store.entry_ids == ["providerTable", "toc1"]

        dataset = store.dataset("providerTable")
        assert dataset is not None
        assert dataset.title == "Local Providers"
        assert dataset.known_key_values == ("agency", "food")
        assert len(dataset.data_rows) == 3  # noqa: PLR2004

    def test_inline_dataset(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "snap.yaml",
            """
datasets:
  costs:
    title: Costs
    header: [Type, Monthly, Section]
    rows:
      - [Assisted, 4500, care]
      - [Respite, null, care]
    keyColumn: Section
""",
        )
        dataset = load_snapshot(path).dataset("costs")

        assert dataset is not None
        assert dataset.data_rows == [["Assisted", "4500", "care"], ["Respite", "", "care"]]
        assert dataset.key_column_index == 2  # noqa: PLR2004

    def test_configured_key_column(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "snap.yaml",
            """
datasets:
  t:
    header: [Name, Topic]
    rows: [[A, food]]
""",
        )
        config = RichdocConfig(tables=TableConfig(key_column="topic"))
        dataset = load_snapshot(path, config).dataset("t")

        assert dataset is not None
        assert dataset.known_key_values == ("food",)

    def test_assets_flattened(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "snap.yaml",
            """
assets:
  photo:
    title:
      en-US: Garden
    file:
      en-US:
        url: //images.example.com/garden.jpg
        fileName: garden.jpg
        contentType: image/jpeg
""",
        )
        asset = load_snapshot(path).asset("photo")

        assert asset is not None
        assert asset.url == "//images.example.com/garden.jpg"
        assert asset.title == "Garden"
        assert asset.file_name == "garden.jpg"
        assert asset.is_image

    def test_locale_from_config(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "snap.yaml",
            """
entries:
  e:
    contentType: link
    fields:
      linkText:
        en-US: Hello
        es: Hola
""",
        )
        record = load_snapshot(path, RichdocConfig(locale="es")).entry("e")
        assert record is not None
        assert record.field_str("linkText") == "Hola"

    def test_rich_text_body_not_unwrapped(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "snap.yaml",
            """
entries:
  rt:
    contentType: richText
    fields:
      body:
        nodeType: document
        en-US: not a locale
        content: []
""",
        )
        record = load_snapshot(path).entry("rt")
        assert record is not None
        assert record.fields["body"]["nodeType"] == "document"

    def test_empty_file(self, tmp_path: Path) -> None:
        store = load_snapshot(write(tmp_path / "snap.yaml", ""))
        assert len(store) == 0

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ParseError, match="File not found"):
            load_snapshot(tmp_path / "nope.yaml")

    def test_missing_content_type(self, tmp_path: Path) -> None:
        path = write(tmp_path / "snap.yaml", "entries:\n  e:\n    fields: {}\n")
        with pytest.raises(ValidationError, match="Invalid snapshot structure"):
            load_snapshot(path)

    def test_csv_and_rows_conflict(self, tmp_path: Path) -> None:
        path = write(
            tmp_path / "snap.yaml",
            "datasets:\n  t:\n    csv: t.csv\n    header: [a]\n",
        )
        with pytest.raises(ValidationError):
            load_snapshot(path)

    def test_missing_csv(self, tmp_path: Path) -> None:
        path = write(tmp_path / "snap.yaml", "datasets:\n  t:\n    csv: gone.csv\n")
        with pytest.raises(ParseError, match="CSV file not found"):
            load_snapshot(path)


class TestUnwrapLocale:
    """Test localized field unwrapping."""

    def test_unwraps(self) -> None:
        assert unwrap_locale({"en-US": "x"}, "en-US") == "x"

    def test_plain_values_unchanged(self) -> None:
        assert unwrap_locale("x", "en-US") == "x"
        assert unwrap_locale({"de": "x"}, "en-US") == {"de": "x"}

    def test_links_unchanged(self) -> None:
        value = {"sys": {"id": "a"}, "en-US": "x"}
        assert unwrap_locale(value, "en-US") is value


class TestConfigDiscovery:
    """Test where richdoc_config.yaml is looked up."""

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert resolve_config(tmp_path / "doc.json") == RichdocConfig()

    def test_next_to_input(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        docs = tmp_path / "docs"
        docs.mkdir()
        write(docs / "richdoc_config.yaml", "locale: fr\n")

        assert resolve_config(docs / "doc.json").locale == "fr"

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        write(tmp_path / "richdoc_config.yaml", "locale: fr\n")
        explicit = write(tmp_path / "other.yaml", "locale: de\n")

        assert resolve_config(tmp_path / "doc.json", explicit).locale == "de"


class TestLoadDocument:
    """Test the document loading entry point."""

    def test_load_fixture(self, fixtures_dir: Path) -> None:
        assert load_document(fixtures_dir / "document.json").kind is NodeType.DOCUMENT
