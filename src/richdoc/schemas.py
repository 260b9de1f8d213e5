"""Pydantic schemas for snapshot file validation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EntrySchema(BaseModel):
    """Schema for a CMS entry in a snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    content_type: str = Field(alias="contentType")
    fields: dict[str, Any] = Field(default_factory=dict)

    @field_validator("fields", mode="before")
    @classmethod
    def ensure_dict(cls, v: Any) -> dict[str, Any]:
        """Treat a missing fields block as empty."""
        if v is None:
            return {}
        return v


class AssetSchema(BaseModel):
    """Schema for a media asset in a snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    title: str = ""
    file_name: str = Field(default="", alias="fileName")
    content_type: str = Field(default="", alias="contentType")

    @field_validator("title", "file_name", "content_type", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        """Ensure optional text is a string."""
        if v is None:
            return ""
        return str(v)


class DatasetSchema(BaseModel):
    """Schema for a table dataset: inline rows or a CSV file."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    header: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    key_column: str | None = Field(default=None, alias="keyColumn")
    csv: str | None = None  # Path relative to the snapshot file

    @field_validator("header", mode="before")
    @classmethod
    def coerce_header(cls, v: Any) -> list[str]:
        """Ensure header cells are strings."""
        if v is None:
            return []
        return [str(cell) for cell in v]

    @field_validator("rows", mode="before")
    @classmethod
    def coerce_rows(cls, v: Any) -> list[list[str]]:
        """Ensure cells are strings; empty cells become ''."""
        if v is None:
            return []
        return [["" if cell is None else str(cell) for cell in row] for row in v]

    @model_validator(mode="after")
    def check_source(self) -> DatasetSchema:
        """A dataset comes from exactly one source."""
        if self.csv and (self.header or self.rows):
            raise ValueError("Dataset cannot have both 'csv' and inline 'header'/'rows'")
        if not self.csv and self.rows and not self.header:
            raise ValueError("Dataset with inline 'rows' needs a 'header'")
        return self


class SnapshotSchema(BaseModel):
    """Schema for the entire snapshot file."""

    entries: dict[str, EntrySchema] = Field(default_factory=dict)
    assets: dict[str, AssetSchema] = Field(default_factory=dict)
    datasets: dict[str, DatasetSchema] = Field(default_factory=dict)

    @field_validator("entries", "assets", "datasets", mode="before")
    @classmethod
    def ensure_mapping(cls, v: Any) -> Any:
        """Treat an empty section as no records."""
        if v is None:
            return {}
        return v
