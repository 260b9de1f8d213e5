"""Backend-agnostic rich-text document renderer."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .backends.base import MarkupBackend
from .backends.html import HtmlBackend
from .components import ComponentResolver, EmbeddedRef
from .config import RichdocConfig
from .logger import get_logger
from .matcher import KeyHeadingMatcher
from .models import ComponentRecord, DocumentNode, NodeType
from .store import EntityStore
from .text import is_external_url, normalize_url, plain_text, slugify
from .text_renderer import TextRenderer

logger = get_logger()

# Maps an entry id (and its record, if any) to a page URL
EntryUrlResolver = Callable[[str, ComponentRecord | None], str | None]

# Optional override for embedded entry blocks; returning None falls through
EntryRenderer = Callable[[str, ComponentRecord | None], str | None]

_NodeHandler = Callable[[DocumentNode, Sequence[DocumentNode], int, tuple[str, ...]], str]

BLOCK_SEPARATOR = "\n\n"


class DocumentRenderer:
    """Render a rich-text document into a markup fragment.

    This class walks the tree and decides structure, delegating format-specific
    spelling to the backend and embedded entries to a ComponentResolver.

    Every node is rendered with its parent's child list and its own index,
    so embedded tables can see the heading that precedes them. The renderer
    keeps no per-document state: one instance can render any number of
    documents against the same snapshot.
    """

    def __init__(
        self,
        store: EntityStore,
        backend: MarkupBackend | None = None,
        config: RichdocConfig | None = None,
        *,
        resolve_entry_url: EntryUrlResolver | None = None,
        render_entry: EntryRenderer | None = None,
        matcher: KeyHeadingMatcher | None = None,
    ):
        """Initialize with a snapshot, backend, and optional configuration.

        Args:
            store: Entries, assets and datasets referenced by documents
            backend: Markup backend (HTML by default)
            config: Rendering configuration (defaults when omitted)
            resolve_entry_url: Page URL lookup for entry hyperlinks
            render_entry: Hook that may take over rendering of embedded entry blocks
            matcher: Key hint matcher used for data tables
        """
        self.store = store
        self.backend = backend or HtmlBackend()
        self.config = config or RichdocConfig()
        self.resolve_entry_url = resolve_entry_url
        self.render_entry = render_entry
        self.text_renderer = TextRenderer(self.backend)
        self.components = ComponentResolver(
            store, self.backend, self.config, render_nested=self._render_nested, matcher=matcher
        )

        self._handlers: dict[NodeType, _NodeHandler] = {
            NodeType.DOCUMENT: self._render_container,
            NodeType.PARAGRAPH: self._render_paragraph,
            NodeType.UNORDERED_LIST: self._render_list,
            NodeType.ORDERED_LIST: self._render_list,
            NodeType.LIST_ITEM: self._render_list_item,
            NodeType.BLOCKQUOTE: self._render_blockquote,
            NodeType.HR: self._render_rule,
            NodeType.HYPERLINK: self._render_hyperlink,
            NodeType.ENTRY_HYPERLINK: self._render_entry_hyperlink,
            NodeType.ASSET_HYPERLINK: self._render_asset_hyperlink,
            NodeType.EMBEDDED_ENTRY_BLOCK: self._render_embedded_entry,
            NodeType.EMBEDDED_ENTRY_INLINE: self._render_embedded_entry,
            NodeType.EMBEDDED_ASSET_BLOCK: self._render_embedded_asset,
            NodeType.TEXT: self._render_text,
            NodeType.TABLE: self._render_table,
            NodeType.TABLE_ROW: self._render_table_row,
            NodeType.TABLE_CELL: self._render_table_cell,
            NodeType.TABLE_HEADER_CELL: self._render_table_cell,
        }

    def render(self, document: DocumentNode) -> str:
        """Render a document node to a fragment.

        Returns an empty string when the root is not a document.
        """
        if document.kind is not NodeType.DOCUMENT:
            logger.warning(f"Expected a document root, got '{document.node_type}'")
            return ""
        return self._render_blocks(document.children, ())

    def _render_nested(self, document: DocumentNode, trail: tuple[str, ...]) -> str:
        return self._render_blocks(document.children, trail)

    def _render_blocks(self, nodes: Sequence[DocumentNode], trail: tuple[str, ...]) -> str:
        rendered = (self.render_node(node, nodes, i, trail) for i, node in enumerate(nodes))
        return BLOCK_SEPARATOR.join(part for part in rendered if part)

    def _render_inline(self, nodes: Sequence[DocumentNode], trail: tuple[str, ...]) -> str:
        return "".join(self.render_node(node, nodes, i, trail) for i, node in enumerate(nodes))

    def _render_flattened(self, nodes: Sequence[DocumentNode], trail: tuple[str, ...]) -> str:
        """Render children, unwrapping paragraphs into inline content."""
        parts = []
        for i, child in enumerate(nodes):
            if child.kind is NodeType.PARAGRAPH:
                parts.append(self._render_inline(child.children, trail))
            else:
                parts.append(self.render_node(child, nodes, i, trail))
        return "".join(parts)

    def render_node(
        self,
        node: DocumentNode,
        siblings: Sequence[DocumentNode] = (),
        index: int = -1,
        trail: tuple[str, ...] = (),
    ) -> str:
        """Render one node, given its sibling list and position in it."""
        kind = node.kind
        if kind is not None and node.is_heading:
            return self._render_heading(node, trail)

        handler = self._handlers.get(kind) if kind is not None else None
        if handler is None:
            logger.warning(f"Unknown node type: {node.node_type}")
            return self._render_inline(node.children, trail) if node.children else ""
        return handler(node, siblings, index, trail)

    # Blocks

    def _render_container(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        return self._render_blocks(node.children, trail)

    def _render_paragraph(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        content = self._render_inline(node.children, trail)
        if not content.strip():
            return ""
        return self.backend.paragraph(content)

    def _render_heading(self, node: DocumentNode, trail: tuple[str, ...]) -> str:
        level = node.heading_level or 1
        content = self._render_inline(node.children, trail)
        return self.backend.heading(level, content, slugify(plain_text(node)))

    def _render_list(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        items = [self.render_node(child, node.children, i, trail) for i, child in enumerate(node.children)]
        return self.backend.list_block(items, ordered=node.kind is NodeType.ORDERED_LIST)

    def _render_list_item(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        return self.backend.list_item(self._render_flattened(node.children, trail))

    def _render_blockquote(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        content = "\n".join(self.render_node(child, node.children, i, trail) for i, child in enumerate(node.children))
        return self.backend.blockquote(content)

    def _render_rule(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        return self.backend.rule()

    # Tables

    def _render_table(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        rows = [self.render_node(child, node.children, i, trail) for i, child in enumerate(node.children)]
        return self.backend.table(rows)

    def _render_table_row(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        cells = [self.render_node(child, node.children, i, trail) for i, child in enumerate(node.children)]
        return self.backend.table_row(cells)

    def _render_table_cell(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        return self.backend.table_cell(
            self._render_flattened(node.children, trail),
            header=node.kind is NodeType.TABLE_HEADER_CELL,
            colspan=node.data.colspan,
            rowspan=node.data.rowspan,
        )

    # Inline

    def _render_text(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        return self.text_renderer.render_text(node)

    def _render_hyperlink(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        url = node.data.uri or "#"
        content = self._render_inline(node.children, trail)
        links = self.config.links
        new_tab = links.external_new_tab and is_external_url(url, links.site_domain)
        return self.backend.link(url, content, new_tab=new_tab)

    def _render_entry_hyperlink(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        entry_id = node.target_id
        content = self._render_inline(node.children, trail)
        if not entry_id:
            return content

        record = self.store.entry(entry_id)
        if self.resolve_entry_url:
            url = self.resolve_entry_url(entry_id, record)
            if url:
                return self.backend.link(url, content)

        slug = record.field_str("slug") if record else ""
        if slug:
            return self.backend.link(f"/{slug}", content)

        logger.warning(f"Entry hyperlink to '{entry_id}' has no URL; rendering text only")
        return content

    def _render_asset_hyperlink(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        content = self._render_inline(node.children, trail)
        asset = self.store.asset(node.target_id)
        if asset is None or not asset.url:
            logger.warning(f"Asset hyperlink to '{node.target_id}' not resolved; rendering text only")
            return content
        return self.backend.link(normalize_url(asset.url), content, new_tab=True)

    # Embedded

    def _render_embedded_entry(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        inline = node.kind is NodeType.EMBEDDED_ENTRY_INLINE
        entry_id = node.target_id

        if self.render_entry and entry_id and not inline:
            custom = self.render_entry(entry_id, self.store.entry(entry_id))
            if custom:
                return custom

        ref = EmbeddedRef(entity_id=entry_id, siblings=siblings, index=index, inline=inline, trail=trail)
        return self.components.resolve_embedded(ref)

    def _render_embedded_asset(
        self, node: DocumentNode, siblings: Sequence[DocumentNode], index: int, trail: tuple[str, ...]
    ) -> str:
        return self.components.resolve_asset(node.target_id)
