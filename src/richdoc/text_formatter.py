"""Markdown to rich-text conversion for plain text component fields."""

from __future__ import annotations

from typing import Any

import mistune

from .builders import blockquote, document, heading, hr, list_item, ordered_list, paragraph, unordered_list
from .logger import get_logger
from .models import DocumentNode, Mark, MarkType, NodeData, NodeType

logger = get_logger()

_INLINE_MARKS = {
    "strong": MarkType.BOLD.value,
    "emphasis": MarkType.ITALIC.value,
}


def _text_leaf(value: str, marks: tuple[str, ...]) -> DocumentNode:
    return DocumentNode(NodeType.TEXT.value, value=value, marks=[Mark(m) for m in marks])


def _convert_inline_tokens(tokens: list[dict[str, Any]], marks: tuple[str, ...] = ()) -> list[DocumentNode]:
    """Convert mistune inline tokens to text and hyperlink nodes.

    Nested emphasis accumulates marks outermost first, so ``**_x_**``
    becomes a text leaf with marks ``[bold, italic]``.

    Args:
        tokens: List of inline tokens from mistune AST
        marks: Marks inherited from enclosing tokens

    Returns:
        List of DocumentNode objects
    """
    nodes: list[DocumentNode] = []

    for token in tokens:
        token_type = token["type"]

        if token_type == "text":
            # Newer mistune emits empty text tokens around nested emphasis
            if token["raw"]:
                nodes.append(_text_leaf(token["raw"], marks))
        elif token_type in _INLINE_MARKS:
            nodes.extend(_convert_inline_tokens(token["children"], (*marks, _INLINE_MARKS[token_type])))
        elif token_type == "codespan":
            nodes.append(_text_leaf(token["raw"], (*marks, MarkType.CODE.value)))
        elif token_type == "link":
            children = _convert_inline_tokens(token["children"], marks)
            nodes.append(
                DocumentNode(NodeType.HYPERLINK.value, children=children, data=NodeData(uri=token["attrs"]["url"]))
            )
        elif token_type in {"softbreak", "linebreak"}:
            nodes.append(_text_leaf(" ", marks))
        else:
            # Images and raw HTML have no rich-text counterpart
            logger.debug(f"Skipping markdown inline token: {token_type}")

    return nodes


def _convert_block_tokens(tokens: list[dict[str, Any]]) -> list[DocumentNode]:
    """Convert mistune block tokens to block DocumentNodes.

    Args:
        tokens: List of block tokens from mistune AST

    Returns:
        List of block nodes (paragraphs, headings, lists, quotes, rules)
    """
    nodes: list[DocumentNode] = []

    for token in tokens:
        token_type = token["type"]

        if token_type in {"paragraph", "block_text"}:
            nodes.append(paragraph(*_convert_inline_tokens(token["children"])))
        elif token_type == "heading":
            level = min(max(int(token["attrs"]["level"]), 1), 6)
            nodes.append(heading(level, *_convert_inline_tokens(token["children"])))
        elif token_type == "block_code":
            code = token["raw"].rstrip()
            nodes.append(paragraph(_text_leaf(code, (MarkType.CODE.value,))))
        elif token_type == "list":
            items = [
                list_item(*_convert_block_tokens(item["children"]))
                for item in token["children"]
                if item["type"] == "list_item"
            ]
            make_list = ordered_list if token["attrs"]["ordered"] else unordered_list
            nodes.append(make_list(*items))
        elif token_type == "block_quote":
            nodes.append(blockquote(*_convert_block_tokens(token["children"])))
        elif token_type == "thematic_break":
            nodes.append(hr())
        elif token_type != "blank_line":
            logger.debug(f"Skipping markdown block token: {token_type}")

    return nodes


def parse_markdown(text: str) -> DocumentNode:
    """Parse markdown text into a rich-text document.

    Args:
        text: Markdown-formatted text

    Returns:
        A document node ready for DocumentRenderer
    """
    markdown = mistune.create_markdown(renderer="ast")
    result = markdown(text)

    # When using 'ast' renderer, result is always a list of tokens
    assert isinstance(result, list), "AST renderer must return a list"

    return document(*_convert_block_tokens(result))
