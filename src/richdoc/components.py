"""Rendering of embedded entries and assets.

Data components (tables, charts, cards, forms, tables of contents) become
markers that the display stage expands later. Everything else is rendered
directly. Nothing here raises: an entry that cannot be rendered becomes a
named placeholder and a warning.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .backends.base import MarkupBackend
from .config import RichdocConfig
from .exceptions import ParseError
from .logger import get_logger
from .markers import format_marker
from .matcher import KeyHeadingMatcher
from .models import AssetRecord, ComponentKind, ComponentRecord, DocumentNode, Marker, MarkerKind
from .parser import is_document_dict, node_from_dict
from .store import EntityStore
from .text import normalize_url, slugify
from .text_formatter import parse_markdown

logger = get_logger()

# Renders a nested document given the chain of entry ids being expanded
NestedRenderer = Callable[[DocumentNode, tuple[str, ...]], str]

_PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class EmbeddedRef:
    """An embedded node's target plus the context it was found in."""

    entity_id: str | None
    siblings: Sequence[DocumentNode] = ()
    index: int = -1
    inline: bool = False
    trail: tuple[str, ...] = ()  # Entry ids of enclosing rich-text blocks


def ref_id(value: Any) -> str | None:
    """Extract an entity id from a link field (``{"sys": {"id": ...}}`` or a bare id)."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        sys_data = value.get("sys", value)
        if isinstance(sys_data, dict) and sys_data.get("id"):
            return str(sys_data["id"])
    return None


class ComponentResolver:
    """Dispatch embedded entries on their component kind."""

    def __init__(
        self,
        store: EntityStore,
        backend: MarkupBackend,
        config: RichdocConfig,
        render_nested: NestedRenderer,
        matcher: KeyHeadingMatcher | None = None,
    ):
        self.store = store
        self.backend = backend
        self.config = config
        self.render_nested = render_nested
        self.matcher = matcher or KeyHeadingMatcher()

        self._block_renderers: dict[ComponentKind, Callable[[ComponentRecord, EmbeddedRef], str]] = {
            ComponentKind.TABLE_OF_CONTENTS: self._render_toc,
            ComponentKind.DATA_TABLE: self._render_data_table,
            ComponentKind.CHART: self._render_chart,
            ComponentKind.CARDS: self._render_cards,
            ComponentKind.LINK: self._render_link,
            ComponentKind.LINK_COLLECTION: self._render_link_collection,
            ComponentKind.NAVIGATION: self._render_navigation,
            ComponentKind.FORM: self._render_form,
            ComponentKind.MODAL_FORM: self._render_modal_form,
            ComponentKind.RICH_TEXT: self._render_rich_text,
            ComponentKind.IMAGE: self._render_image,
        }

    # Entries

    def resolve_embedded(self, ref: EmbeddedRef) -> str:
        """Render an embedded entry, block or inline."""
        if ref.inline:
            return self._resolve_inline(ref)

        if not ref.entity_id:
            logger.warning("Embedded entry without a target id")
            return self.backend.placeholder("Embedded entry: missing ID")

        record = self.store.entry(ref.entity_id)
        if record is None:
            logger.warning(f"Embedded entry '{ref.entity_id}' not found in snapshot")
            return self.backend.placeholder(f"Embedded entry: {ref.entity_id} (not resolved)")

        kind = record.kind(self.config.content_types.aliases)
        render = self._block_renderers.get(kind)
        if render is None:
            logger.warning(f"No renderer for entry '{record.id}' of type '{record.content_type}'")
            return self.backend.placeholder(f"Embedded entry: {record.id} (type: {record.content_type})")

        logger.debug(f"Rendering entry '{record.id}' as {kind.value}")
        return render(record, ref)

    def _resolve_inline(self, ref: EmbeddedRef) -> str:
        if not ref.entity_id:
            logger.warning("Inline entry without a target id")
            return self.backend.placeholder("Inline entry: missing ID")

        record = self.store.entry(ref.entity_id)
        if record is None:
            logger.warning(f"Inline entry '{ref.entity_id}' not found in snapshot")
            return self.backend.placeholder(f"Inline entry: {ref.entity_id} (not resolved)")

        kind = record.kind(self.config.content_types.aliases)
        if kind is ComponentKind.LINK:
            return self._inline_link(record)
        if kind is ComponentKind.MODAL_FORM:
            return self._cta_button(record)

        logger.warning(f"Entry '{record.id}' of type '{record.content_type}' cannot be rendered inline")
        return self.backend.placeholder(f"Inline entry: {record.id} (type: {record.content_type})")

    # Markers

    def _marker(self, marker: Marker) -> str:
        text = format_marker(marker)
        logger.changes(f"Emitted marker {text}")
        return text

    def _render_toc(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        return self._marker(Marker(MarkerKind.TOC, record.id))

    def _render_data_table(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        hint = self.matcher.derive_hint(ref.siblings, ref.index)
        return self._marker(Marker(MarkerKind.TABLE, record.id, key_hint=hint))

    def _render_chart(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        attrs = {
            "type": record.field_str("visualizationType", "Bar Chart"),
            "title": record.field_str("title"),
        }
        return self._marker(Marker(MarkerKind.CHART, record.id, attrs=attrs))

    def _render_cards(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        attrs = {"type": record.field_str("type", "Summary"), "title": record.field_str("title")}
        return self._marker(Marker(MarkerKind.CARDS, record.id, attrs=attrs))

    def _render_form(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        attrs = {
            "title": record.field_str("title", "Contact Form"),
            "submit": record.field_str("submitText", "Submit"),
        }
        return self._marker(Marker(MarkerKind.FORM, record.id, attrs=attrs))

    # Links

    def _link_text(self, record: ComponentRecord, default: str) -> str:
        return record.field_str("linkText") or record.field_str("title", default)

    def _back_to_top(self, text: str) -> str:
        anchor = f"#{self.config.links.back_to_top_anchor}"
        return self.backend.link(anchor, f"↑ {self.backend.escape(text)}")

    def _render_link(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        link_type = record.field_str("type")
        text = self._link_text(record, "Learn More")
        url = record.field_str("url")

        if link_type == "backtotop":
            return self.backend.paragraph(self._back_to_top(text), css_class="back-to-top")
        if link_type == "internal" and text:
            anchor = self.backend.link(f"/{slugify(text)}", self.backend.escape(text), css_class="wp-button")
            return self.backend.paragraph(anchor)
        if url:
            anchor = self.backend.link(normalize_url(url), self.backend.escape(text), css_class="wp-button")
            return self.backend.paragraph(anchor)

        logger.warning(f"Link entry '{record.id}' has no usable target")
        return self.backend.placeholder(f"Link component: {record.id} (type: {link_type})")

    def _inline_link(self, record: ComponentRecord) -> str:
        link_type = record.field_str("type")
        text = self._link_text(record, "Link")
        url = record.field_str("url")

        if link_type == "backtotop":
            return self._back_to_top(text)
        if url:
            return self.backend.link(normalize_url(url), self.backend.escape(text))
        if link_type == "internal":
            return self.backend.link(f"/{slugify(text)}", self.backend.escape(text))
        return self.backend.escape(text)

    def _render_link_collection(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        links = record.fields.get("links") or []
        items: list[str] = []
        for link_ref in links if isinstance(links, list) else []:
            linked = self.store.entry(ref_id(link_ref))
            if linked is None:
                logger.warning(f"Link collection '{record.id}' refers to missing entry {link_ref!r}")
                continue
            text = self._link_text(linked, "Link")
            url = normalize_url(linked.field_str("url", "#"))
            items.append(self.backend.list_item(self.backend.link(url, self.backend.escape(text))))

        if not items:
            return self.backend.placeholder(f"Link reference: {record.id} (empty)")

        parts = []
        title = record.field_str("title")
        if title:
            parts.append(self.backend.heading(3, self.backend.escape(title)))
        parts.append(self.backend.list_block(items, ordered=False, css_class="link-reference-list"))
        return "\n".join(parts)

    def _render_navigation(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        return self.backend.placeholder(f"Navigation Block: {record.field_str('name')}")

    def _cta_button(self, record: ComponentRecord) -> str:
        color = record.field_str("buttonColor", "green")
        title = record.field_str("title", "Get Started")
        return self.backend.link("#contact", self.backend.escape(title), css_class=f"wp-button cta-button cta-{color}")

    def _render_modal_form(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        return self.backend.division(self._cta_button(record), "cta-button-container")

    # Content

    def _render_rich_text(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        if record.id in ref.trail:
            logger.warning(f"Rich text entry '{record.id}' embeds itself; not expanding again")
            return self.backend.placeholder(f"Rich text block: {record.id} (recursive)")

        trail = (*ref.trail, record.id)
        body = record.fields.get("body")
        if isinstance(body, DocumentNode) or is_document_dict(body):
            try:
                nested = node_from_dict(body)
            except ParseError as e:
                logger.warning(f"Rich text entry '{record.id}' has a malformed body: {e}")
                return self.backend.placeholder(f"Rich text block: {record.id} (malformed)")
            return self.backend.division(self.render_nested(nested, trail), "rich-text-block")

        text = record.field_str("text") or record.field_str("content")
        if not text:
            return self.backend.placeholder(f"Rich text block: {record.id} (empty)")

        if self.config.rich_text.text_format == "markdown":
            return self.backend.division(self.render_nested(parse_markdown(text), trail), "rich-text-block")
        return self.backend.division(self.backend.escape(text), "rich-text-block")

    def _render_image(self, record: ComponentRecord, ref: EmbeddedRef) -> str:
        title = record.field_str("title")
        asset = self.store.asset(ref_id(record.fields.get("image")))
        if asset is None or not asset.url:
            logger.warning(f"Image entry '{record.id}' has no resolvable asset")
            return self.backend.placeholder(f"Image component: {record.id}")
        return self.backend.figure(normalize_url(asset.url), title or asset.title, title or None)

    # Assets

    def resolve_asset(self, asset_id: str | None) -> str:
        """Render an embedded asset: image figure, PDF link or download link."""
        asset: AssetRecord | None = self.store.asset(asset_id)
        if asset is None or not asset.url:
            logger.warning(f"Embedded asset '{asset_id}' not found in snapshot")
            return self.backend.placeholder(f"Embedded asset: {asset_id} (not resolved)")

        url = normalize_url(asset.url)
        if asset.is_image:
            return self.backend.figure(url, asset.title or asset.file_name, asset.title or None)

        if asset.mime_type == _PDF_MIME_TYPE:
            label = asset.title or asset.file_name or "Download PDF"
            link = self.backend.link(
                url, f"\U0001f4c4 {self.backend.escape(label)}", new_tab=True, css_class="wp-block-file"
            )
            return self.backend.paragraph(link)

        label = asset.title or asset.file_name or "Download file"
        return self.backend.paragraph(self.backend.link(url, f"\U0001f4ce {self.backend.escape(label)}", new_tab=True))
