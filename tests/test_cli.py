"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from richdoc.cli import app

runner = CliRunner()


@pytest.fixture
def document_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "document.json"


@pytest.fixture
def snapshot_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "snapshot.yaml"


class TestRenderCommand:
    """Test the render command."""

    def test_render_emits_markers(self, document_path: Path, snapshot_path: Path) -> None:
        result = runner.invoke(app, ["render", str(document_path), "--snapshot", str(snapshot_path)])

        assert result.exit_code == 0
        assert '<h2 id="area-agency-on-aging">Area Agency on Aging</h2>' in result.stdout
        assert "<p>Local agencies <strong>can help</strong>.</p>" in result.stdout
        assert '[richdoc_table id="providerTable" key="area-agency-on-aging"]' in result.stdout
        assert '[richdoc_table id="providerTable" key="food-assistance-programs"]' in result.stdout

    def test_render_to_file(self, document_path: Path, snapshot_path: Path, tmp_path: Path) -> None:
        output = tmp_path / "out.html"
        result = runner.invoke(app, ["render", str(document_path), "-s", str(snapshot_path), "-o", str(output)])

        assert result.exit_code == 0
        assert "Output written to" in result.output
        assert output.read_text().startswith('<h2 id="area-agency-on-aging">')

    def test_verbose_logs_changes(self, document_path: Path, snapshot_path: Path) -> None:
        result = runner.invoke(app, ["-v", "1", "render", str(document_path), "-s", str(snapshot_path)])

        assert result.exit_code == 0
        assert "CHANGES: Emitted marker" in result.output

    def test_missing_snapshot(self, document_path: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["render", str(document_path), "-s", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "Error: File not found" in result.output

    def test_invalid_document(self, snapshot_path: Path, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('{"nodeType": "paragraph", "content": []}')
        result = runner.invoke(app, ["render", str(bad), "-s", str(snapshot_path)])

        assert result.exit_code == 1
        assert "Root node must be a 'document'" in result.output

    def test_missing_config(self, document_path: Path, snapshot_path: Path, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["-c", str(tmp_path / "none.yaml"), "render", str(document_path), "-s", str(snapshot_path)]
        )

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestExpandCommand:
    """Test the expand command."""

    def test_expand_fragment(self, snapshot_path: Path, tmp_path: Path) -> None:
        fragment = tmp_path / "page.html"
        fragment.write_text('<h2 id="food">Food</h2>\n\n[richdoc_table id="providerTable" key="food"]\n')
        result = runner.invoke(app, ["expand", str(fragment), "-s", str(snapshot_path)])

        assert result.exit_code == 0
        assert "<td>B Foods</td>" in result.stdout
        assert "A Corp" not in result.stdout
        assert "[richdoc" not in result.stdout

    def test_missing_fragment(self, snapshot_path: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["expand", str(tmp_path / "gone.html"), "-s", str(snapshot_path)])

        assert result.exit_code == 1
        assert "Error: File not found" in result.output


class TestBuildCommand:
    """Test the build command (render and expand)."""

    def test_build_filters_each_section(self, document_path: Path, snapshot_path: Path) -> None:
        result = runner.invoke(app, ["build", str(document_path), "-s", str(snapshot_path)])

        assert result.exit_code == 0
        first, second = result.stdout.split("Food Assistance Programs</h2>")
        assert "<td>A Corp</td>" in first
        assert "<td>C Agency, Inc.</td>" in first
        assert "B Foods" not in first
        assert "<td>B Foods</td>" in second
        assert "A Corp" not in second
        assert "[richdoc" not in result.stdout

    def test_build_with_config(self, document_path: Path, snapshot_path: Path, tmp_path: Path) -> None:
        config = tmp_path / "custom.yaml"
        config.write_text("tables:\n  display_columns: [Name]\n")
        result = runner.invoke(app, ["-c", str(config), "build", str(document_path), "-s", str(snapshot_path)])

        assert result.exit_code == 0
        assert "<th>Name</th>" in result.stdout
        assert "<th>Phone</th>" not in result.stdout


class TestMarkersCommand:
    """Test the markers listing command."""

    def test_lists_markers(self, tmp_path: Path) -> None:
        fragment = tmp_path / "page.html"
        fragment.write_text(
            '[richdoc_table id="t1" key="food"]\n<p>x</p>\n[richdoc-toc id="toc1"]\n[richdoc_chart title="No id"]\n'
        )
        result = runner.invoke(app, ["markers", str(fragment)])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            "richdoc_table\tt1\tfood",
            "richdoc_toc\ttoc1\t-",
            'invalid\t-\t-\t[richdoc_chart title="No id"]',
        ]

    def test_no_markers(self, tmp_path: Path) -> None:
        fragment = tmp_path / "page.html"
        fragment.write_text("<p>plain</p>")
        result = runner.invoke(app, ["markers", str(fragment)])

        assert result.exit_code == 0
        assert "No markers found" in result.output
