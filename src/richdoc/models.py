"""Data models for richdoc."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeType(str, Enum):
    """Rich-text node tags, using the CMS wire names."""

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    UNORDERED_LIST = "unordered-list"
    ORDERED_LIST = "ordered-list"
    LIST_ITEM = "list-item"
    BLOCKQUOTE = "blockquote"
    HR = "hr"
    HYPERLINK = "hyperlink"
    ENTRY_HYPERLINK = "entry-hyperlink"
    ASSET_HYPERLINK = "asset-hyperlink"
    EMBEDDED_ENTRY_BLOCK = "embedded-entry-block"
    EMBEDDED_ENTRY_INLINE = "embedded-entry-inline"
    EMBEDDED_ASSET_BLOCK = "embedded-asset-block"
    TEXT = "text"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    TABLE_HEADER_CELL = "table-header-cell"


HEADING_TYPES = frozenset(
    {
        NodeType.HEADING_1,
        NodeType.HEADING_2,
        NodeType.HEADING_3,
        NodeType.HEADING_4,
        NodeType.HEADING_5,
        NodeType.HEADING_6,
    }
)

_NODE_TYPES_BY_TAG = {member.value: member for member in NodeType}


class MarkType(str, Enum):
    """Inline text marks."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


class TargetKind(str, Enum):
    """What an embedded or hyperlink target points at."""

    ASSET = "asset"
    ENTRY = "entry"


class ComponentKind(str, Enum):
    """Embedded component kinds the resolver knows how to render."""

    TABLE_OF_CONTENTS = "table-of-contents"
    DATA_TABLE = "data-table"
    CHART = "chart"
    CARDS = "cards"
    LINK = "link"
    LINK_COLLECTION = "link-collection"
    NAVIGATION = "navigation"
    FORM = "form"
    MODAL_FORM = "modal-form"
    RICH_TEXT = "rich-text"
    IMAGE = "image"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str, aliases: Mapping[str, str] | None = None) -> ComponentKind:
        """Map a content type tag to a kind.

        Aliases map extra tags to kind values (e.g. {"providerTable": "data-table"})
        and take precedence over the built-in tags.
        """
        if aliases and tag in aliases:
            try:
                return cls(aliases[tag])
            except ValueError:
                return cls.UNKNOWN
        return DEFAULT_CONTENT_TYPE_TAGS.get(tag, cls.UNKNOWN)


DEFAULT_CONTENT_TYPE_TAGS: dict[str, ComponentKind] = {
    "tableOfContents": ComponentKind.TABLE_OF_CONTENTS,
    "dataVisualizationTables": ComponentKind.DATA_TABLE,
    "dataVisualizationCharts": ComponentKind.CHART,
    "dataVisualizationCards": ComponentKind.CARDS,
    "link": ComponentKind.LINK,
    "linkReference": ComponentKind.LINK_COLLECTION,
    "navigationBlock": ComponentKind.NAVIGATION,
    "form": ComponentKind.FORM,
    "modalForm": ComponentKind.MODAL_FORM,
    "richText": ComponentKind.RICH_TEXT,
    "image": ComponentKind.IMAGE,
}


class MarkerKind(str, Enum):
    """Marker tags bridging the render and display stages."""

    TABLE = "richdoc_table"
    TOC = "richdoc_toc"
    CHART = "richdoc_chart"
    CARDS = "richdoc_cards"
    FORM = "richdoc_form"


def _default_nodes() -> list[DocumentNode]:
    return []


def _default_marks() -> list[Mark]:
    return []


def _default_dict() -> dict[str, Any]:
    return {}


def _default_rows() -> list[list[str]]:
    return []


def _default_str_dict() -> dict[str, str]:
    return {}


@dataclass(frozen=True)
class Mark:
    """An inline mark; unknown mark names are kept as-is."""

    type: str


@dataclass(frozen=True)
class TargetRef:
    """Reference to an out-of-band entity."""

    entity_id: str
    kind: TargetKind = TargetKind.ENTRY


@dataclass(frozen=True)
class NodeData:
    """Optional per-node payload."""

    uri: str | None = None
    target: TargetRef | None = None
    colspan: int | None = None
    rowspan: int | None = None


@dataclass
class DocumentNode:
    """A node in the rich-text tree.

    ``node_type`` holds the raw tag so that tags this version does not know
    about still reach the renderer's fallback path.
    """

    node_type: str
    children: list[DocumentNode] = field(default_factory=_default_nodes)
    value: str = ""
    marks: list[Mark] = field(default_factory=_default_marks)
    data: NodeData = field(default_factory=NodeData)

    @property
    def kind(self) -> NodeType | None:
        """The known node type, or None for an unrecognized tag."""
        return _NODE_TYPES_BY_TAG.get(self.node_type)

    @property
    def is_heading(self) -> bool:
        return self.kind in HEADING_TYPES

    @property
    def heading_level(self) -> int | None:
        """Heading level 1-6, or None when the node is not a heading."""
        if not self.is_heading:
            return None
        return int(self.node_type.rsplit("-", 1)[1])

    @property
    def target_id(self) -> str | None:
        """Entity id of the node's target, if any."""
        return self.data.target.entity_id if self.data.target else None


@dataclass(frozen=True)
class ComponentRecord:
    """A resolved CMS entry referenced from the document."""

    id: str
    content_type: str
    fields: dict[str, Any] = field(default_factory=_default_dict)

    def kind(self, aliases: Mapping[str, str] | None = None) -> ComponentKind:
        """The component kind for this record's content type tag."""
        return ComponentKind.from_tag(self.content_type, aliases)

    def field_str(self, name: str, default: str = "") -> str:
        """Get a field as a string, falling back to default when missing or empty."""
        value = self.fields.get(name)
        if value is None or value == "":
            return default
        return str(value)


@dataclass(frozen=True)
class AssetRecord:
    """A resolved media asset."""

    id: str
    url: str
    title: str = ""
    file_name: str = ""
    mime_type: str = ""

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


@dataclass(frozen=True)
class TableDataset:
    """Rows backing a data component.

    Every data row has the same length as ``header_row``. ``known_key_values``
    holds the distinct, trimmed, lower-cased key cells in first-seen order.
    """

    id: str
    title: str = ""
    header_row: list[str] = field(default_factory=list)
    data_rows: list[list[str]] = field(default_factory=_default_rows)
    key_column_index: int = -1
    known_key_values: tuple[str, ...] = ()

    @property
    def has_key_column(self) -> bool:
        return 0 <= self.key_column_index < len(self.header_row)

    @classmethod
    def from_rows(
        cls,
        dataset_id: str,
        header: list[str],
        rows: list[list[str]],
        *,
        title: str = "",
        key_column: str | None = "key",
        key_column_index: int | None = None,
    ) -> TableDataset:
        """Build a dataset, normalizing row widths and collecting key values.

        Short rows are padded with empty strings and long rows are truncated.
        The key column is taken from ``key_column_index`` when given, otherwise
        from the first header matching ``key_column`` case-insensitively.
        """
        width = len(header)
        normalized = [[str(cell) for cell in row[:width]] + [""] * (width - len(row)) for row in rows]

        index = -1
        if key_column_index is not None and 0 <= key_column_index < width:
            index = key_column_index
        elif key_column:
            lowered = [h.strip().lower() for h in header]
            wanted = key_column.strip().lower()
            if wanted in lowered:
                index = lowered.index(wanted)

        known: dict[str, None] = {}
        if index >= 0:
            for row in normalized:
                value = row[index].strip().lower()
                if value:
                    known.setdefault(value, None)

        return cls(
            id=dataset_id,
            title=title,
            header_row=[str(h) for h in header],
            data_rows=normalized,
            key_column_index=index,
            known_key_values=tuple(known),
        )


@dataclass(frozen=True)
class Marker:
    """Placeholder emitted at render time and expanded at display time.

    ``attrs`` carries extra attributes (title, type, submit, ...) beyond the
    entity id and key hint.
    """

    kind: MarkerKind
    entity_id: str
    key_hint: str | None = None
    attrs: dict[str, str] = field(default_factory=_default_str_dict)
