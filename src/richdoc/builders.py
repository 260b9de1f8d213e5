"""Convenience constructors for DocumentNode trees.

Used by the markdown importer and handy for building documents in code:

    doc = document(heading(2, "Food"), paragraph(text("Hello", "bold")))
"""

from __future__ import annotations

from .models import DocumentNode, Mark, NodeData, NodeType, TargetKind, TargetRef


def text(value: str, *marks: str) -> DocumentNode:
    """A text leaf with marks applied in the given order."""
    return DocumentNode(NodeType.TEXT.value, value=value, marks=[Mark(m) for m in marks])


def _node(node_type: NodeType | str, children: tuple[DocumentNode | str, ...], **data: object) -> DocumentNode:
    tag = node_type.value if isinstance(node_type, NodeType) else node_type
    nodes = [text(child) if isinstance(child, str) else child for child in children]
    return DocumentNode(tag, children=nodes, data=NodeData(**data))  # type: ignore[arg-type]


def document(*children: DocumentNode) -> DocumentNode:
    return _node(NodeType.DOCUMENT, children)


def paragraph(*children: DocumentNode | str) -> DocumentNode:
    return _node(NodeType.PARAGRAPH, children)


def heading(level: int, *children: DocumentNode | str) -> DocumentNode:
    if not 1 <= level <= 6:  # noqa: PLR2004
        raise ValueError(f"Heading level must be 1-6, got {level}")
    return _node(f"heading-{level}", children)


def list_item(*children: DocumentNode | str) -> DocumentNode:
    """A list item; bare strings are wrapped in a paragraph."""
    nodes = tuple(paragraph(child) if isinstance(child, str) else child for child in children)
    return _node(NodeType.LIST_ITEM, nodes)


def unordered_list(*items: DocumentNode) -> DocumentNode:
    return _node(NodeType.UNORDERED_LIST, items)


def ordered_list(*items: DocumentNode) -> DocumentNode:
    return _node(NodeType.ORDERED_LIST, items)


def blockquote(*children: DocumentNode) -> DocumentNode:
    return _node(NodeType.BLOCKQUOTE, children)


def hr() -> DocumentNode:
    return _node(NodeType.HR, ())


def hyperlink(uri: str, *children: DocumentNode | str) -> DocumentNode:
    return _node(NodeType.HYPERLINK, children, uri=uri)


def entry_hyperlink(entity_id: str, *children: DocumentNode | str) -> DocumentNode:
    return _node(NodeType.ENTRY_HYPERLINK, children, target=TargetRef(entity_id, TargetKind.ENTRY))


def asset_hyperlink(entity_id: str, *children: DocumentNode | str) -> DocumentNode:
    return _node(NodeType.ASSET_HYPERLINK, children, target=TargetRef(entity_id, TargetKind.ASSET))


def embedded_entry(entity_id: str, *, inline: bool = False) -> DocumentNode:
    node_type = NodeType.EMBEDDED_ENTRY_INLINE if inline else NodeType.EMBEDDED_ENTRY_BLOCK
    return _node(node_type, (), target=TargetRef(entity_id, TargetKind.ENTRY))


def embedded_asset(entity_id: str) -> DocumentNode:
    return _node(NodeType.EMBEDDED_ASSET_BLOCK, (), target=TargetRef(entity_id, TargetKind.ASSET))


def table(*rows: DocumentNode) -> DocumentNode:
    return _node(NodeType.TABLE, rows)


def table_row(*cells: DocumentNode) -> DocumentNode:
    return _node(NodeType.TABLE_ROW, cells)


def table_cell(
    *children: DocumentNode | str,
    header: bool = False,
    colspan: int | None = None,
    rowspan: int | None = None,
) -> DocumentNode:
    """A table cell; bare strings are wrapped in a paragraph."""
    node_type = NodeType.TABLE_HEADER_CELL if header else NodeType.TABLE_CELL
    nodes = tuple(paragraph(child) if isinstance(child, str) else child for child in children)
    return _node(node_type, nodes, colspan=colspan, rowspan=rowspan)
