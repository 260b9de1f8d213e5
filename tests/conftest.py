"""Pytest configuration and fixtures for richdoc tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from richdoc.backends import HtmlBackend
from richdoc.logger import reset_logger
from richdoc.models import AssetRecord, ComponentRecord, TableDataset
from richdoc.renderer import DocumentRenderer
from richdoc.store import EntityStore

AGENCY_TABLE_ID = "providerTable"


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """CLI tests reconfigure the shared logger; restore it after each test."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def provider_dataset() -> TableDataset:
    """Shared dataset split into sections by its key column."""
    return TableDataset.from_rows(
        AGENCY_TABLE_ID,
        ["Name", "Phone", "key"],
        [
            ["A Corp", "555-0001", "agency"],
            ["B Foods", "555-0002", "food"],
            ["C Agency", "555-0003", "Agency "],
        ],
        title="Local Providers",
    )


@pytest.fixture
def store(provider_dataset: TableDataset) -> EntityStore:
    """Snapshot with one record of each component kind."""
    entries = [
        ComponentRecord(AGENCY_TABLE_ID, "dataVisualizationTables", {"title": "Local Providers"}),
        ComponentRecord("toc1", "tableOfContents", {"title": "On this page"}),
        ComponentRecord("chart1", "dataVisualizationCharts", {"title": "Costs", "visualizationType": "Pie Chart"}),
        ComponentRecord("cards1", "dataVisualizationCards", {"title": "Listings"}),
        ComponentRecord("top", "link", {"type": "backtotop", "linkText": "Back to top"}),
        ComponentRecord("ext", "link", {"linkText": "Visit", "url": "https://example.org/page"}),
        ComponentRecord("internal", "link", {"type": "internal", "linkText": "Memory Care Costs"}),
        ComponentRecord("nav", "navigationBlock", {"name": "State links"}),
        ComponentRecord("form1", "form", {"title": "Ask us", "submitText": "Go"}),
        ComponentRecord("modal", "modalForm", {"title": "Get help", "buttonColor": "blue"}),
        ComponentRecord("img", "image", {"title": "A garden", "image": {"sys": {"id": "photo"}}}),
        ComponentRecord("page", "page", {"slug": "memory-care"}),
        ComponentRecord("mystery", "carousel", {}),
    ]
    assets = [
        AssetRecord("photo", "//images.example.com/garden.jpg", title="Garden", mime_type="image/jpeg"),
        AssetRecord("guide", "https://files.example.com/guide.pdf", title="Guide", mime_type="application/pdf"),
        AssetRecord("sheet", "https://files.example.com/data.xlsx", file_name="data.xlsx", mime_type="text/csv"),
    ]
    return EntityStore(entries=entries, assets=assets, datasets=[provider_dataset])


@pytest.fixture
def backend() -> HtmlBackend:
    return HtmlBackend()


@pytest.fixture
def renderer(store: EntityStore) -> DocumentRenderer:
    return DocumentRenderer(store)


@pytest.fixture
def fixtures_dir() -> Path:
    """Get the fixtures directory."""
    return Path(__file__).parent / "fixtures"
