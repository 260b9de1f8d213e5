"""Parser for rich-text document files (CMS JSON shape, as JSON or YAML)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ParseError
from .models import DocumentNode, Mark, NodeData, NodeType, TargetKind, TargetRef

_ASSET_NODE_TYPES = frozenset({NodeType.EMBEDDED_ASSET_BLOCK.value, NodeType.ASSET_HYPERLINK.value})


def _parse_span(value: Any, node_type: str, name: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid {name} {value!r} on '{node_type}' node") from e


def _parse_target(target: Any, node_type: str) -> TargetRef | None:
    """Read ``{"sys": {"id": ..., "linkType": ...}}`` into a TargetRef."""
    if not isinstance(target, dict):
        return None
    sys_data: Any = target.get("sys", target)
    if not isinstance(sys_data, dict):
        return None
    entity_id = sys_data.get("id")
    if not entity_id:
        return None

    link_type = str(sys_data.get("linkType", "")).lower()
    if link_type in ("asset", "entry"):
        kind = TargetKind(link_type)
    elif node_type in _ASSET_NODE_TYPES:
        kind = TargetKind.ASSET
    else:
        kind = TargetKind.ENTRY
    return TargetRef(entity_id=str(entity_id), kind=kind)


def _parse_data_field(data: Any, node_type: str) -> NodeData:
    if data is None:
        return NodeData()
    if not isinstance(data, dict):
        raise ParseError(f"'data' of '{node_type}' node must be a mapping")
    uri = data.get("uri")
    return NodeData(
        uri=str(uri) if uri else None,
        target=_parse_target(data.get("target"), node_type),
        colspan=_parse_span(data.get("colspan"), node_type, "colspan"),
        rowspan=_parse_span(data.get("rowspan"), node_type, "rowspan"),
    )


def node_from_dict(data: Any) -> DocumentNode:
    """Convert one CMS rich-text node (and its subtree) into a DocumentNode.

    Unknown node types are kept so the renderer can apply its fallback.

    Raises:
        ParseError: If the structure is not a rich-text node
    """
    if isinstance(data, DocumentNode):
        return data
    if not isinstance(data, dict):
        raise ParseError(f"Rich-text node must be a mapping, got {type(data).__name__}")

    node_type = data.get("nodeType")
    if not isinstance(node_type, str) or not node_type:
        raise ParseError("Rich-text node is missing 'nodeType'")

    content = data.get("content") or []
    if not isinstance(content, list):
        raise ParseError(f"'content' of '{node_type}' node must be a list")

    marks: list[Mark] = []
    for mark in data.get("marks") or []:
        if isinstance(mark, dict) and mark.get("type"):
            marks.append(Mark(str(mark["type"])))
        elif isinstance(mark, str):
            marks.append(Mark(mark))
        else:
            raise ParseError(f"Invalid mark {mark!r} on '{node_type}' node")

    value = data.get("value")
    return DocumentNode(
        node_type=node_type,
        children=[node_from_dict(child) for child in content],
        value="" if value is None else str(value),
        marks=marks,
        data=_parse_data_field(data.get("data"), node_type),
    )


def is_document_dict(data: Any) -> bool:
    """Check whether a raw field value looks like a rich-text document."""
    return isinstance(data, dict) and data.get("nodeType") == NodeType.DOCUMENT.value


class DocumentParser:
    """Parser for rich-text document files.

    JSON is read through the YAML loader, so one code path accepts both.
    """

    def parse_file(self, file_path: Path | str) -> DocumentNode:
        """Parse a document file into a DocumentNode tree."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse {path.name}: {e}") from e

        if not isinstance(data, dict):
            raise ParseError("Document file must contain a mapping at the root level")

        return self.parse_data(data)

    def parse_data(self, data: dict[str, Any]) -> DocumentNode:
        """Parse already-loaded data into a DocumentNode tree.

        Accepts either a bare document node or a wrapper holding one under
        ``body`` (the shape of an exported entry field).
        """
        if "nodeType" not in data and is_document_dict(data.get("body")):
            data = data["body"]

        if not is_document_dict(data):
            raise ParseError(f"Root node must be a 'document', got {data.get('nodeType')!r}")

        return node_from_dict(data)
