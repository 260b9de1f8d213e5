"""Command-line interface for richdoc."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .config import RichdocConfig
from .display import MarkerExpander
from .exceptions import RichdocError
from .loader import load_document, load_snapshot, resolve_config
from .logger import setup_logger
from .markers import scan_markers
from .renderer import DocumentRenderer
from .store import EntityStore

app = typer.Typer(
    name="richdoc",
    help="Render CMS rich-text documents to HTML fragments and expand data markers",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=warnings (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: richdoc_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for richdoc commands."""
    setup_logger(verbose)
    ctx.obj = config


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _load_inputs(ctx: typer.Context, input_path: Path, snapshot: Path) -> tuple[RichdocConfig, EntityStore]:
    """Load config and snapshot, turning load failures into a CLI error."""
    config_path: Path | None = ctx.obj
    if config_path and not config_path.exists():
        raise _fail(f"Config file not found: {config_path}")

    try:
        config = resolve_config(input_path, config_path)
        store = load_snapshot(snapshot, config)
    except (RichdocError, FileNotFoundError, ValueError) as e:
        raise _fail(str(e)) from e
    return config, store


def _write_output(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Output written to {output}", err=True)
    else:
        typer.echo(text)


def _read_fragment(fragment: Path) -> str:
    if not fragment.exists():
        raise _fail(f"File not found: {fragment}")
    return fragment.read_text(encoding="utf-8")


def _render_document(document: Path, config: RichdocConfig, store: EntityStore) -> str:
    try:
        root = load_document(document)
    except RichdocError as e:
        raise _fail(str(e)) from e
    return DocumentRenderer(store, config=config).render(root)


@app.command()
def render(
    ctx: typer.Context,
    document: Annotated[Path, typer.Argument(help="Path to the rich-text document (JSON or YAML)")],
    snapshot: Annotated[Path, typer.Option("--snapshot", "-s", help="Snapshot of entries, assets and datasets")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Render a document to an HTML fragment with data markers."""
    config, store = _load_inputs(ctx, document, snapshot)
    _write_output(_render_document(document, config, store), output)


@app.command()
def expand(
    ctx: typer.Context,
    fragment: Annotated[Path, typer.Argument(help="Path to a rendered HTML fragment")],
    snapshot: Annotated[Path, typer.Option("--snapshot", "-s", help="Snapshot of entries, assets and datasets")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Expand the data markers in a rendered fragment."""
    text = _read_fragment(fragment)
    config, store = _load_inputs(ctx, fragment, snapshot)
    _write_output(MarkerExpander(store, config=config).expand(text), output)


@app.command()
def build(
    ctx: typer.Context,
    document: Annotated[Path, typer.Argument(help="Path to the rich-text document (JSON or YAML)")],
    snapshot: Annotated[Path, typer.Option("--snapshot", "-s", help="Snapshot of entries, assets and datasets")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Render a document and expand its markers in one step."""
    config, store = _load_inputs(ctx, document, snapshot)
    fragment = _render_document(document, config, store)
    _write_output(MarkerExpander(store, config=config).expand(fragment), output)


@app.command()
def markers(
    fragment: Annotated[Path, typer.Argument(help="Path to a rendered HTML fragment")],
) -> None:
    """List the markers found in a fragment."""
    text = _read_fragment(fragment)
    found = list(scan_markers(text))
    if not found:
        typer.echo("No markers found", err=True)
        return

    for match in found:
        if match.marker is None:
            typer.echo(f"invalid\t-\t-\t{match.raw}")
            continue
        marker = match.marker
        typer.echo(f"{marker.kind.value}\t{marker.entity_id}\t{marker.key_hint or '-'}")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
