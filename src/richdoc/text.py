"""Text helpers shared by the render and display stages."""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from urllib.parse import urlparse

from .logger import get_logger
from .models import DocumentNode

logger = get_logger()

_SLUG_STRIP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SEPARATORS = re.compile(r"[\s-]+")
_HINT_STRIP = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")
_TAGS = re.compile(r"<[^>]*>")
_DASH_RUNS = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Create an anchor id from text.

    Lower-cases, drops everything except letters, digits, whitespace and
    hyphens, then collapses runs of whitespace/hyphens into single hyphens.

    >>> slugify("Food Assistance Programs!")
    'food-assistance-programs'
    """
    slug = _SLUG_STRIP.sub("", text.lower())
    slug = _SLUG_SEPARATORS.sub("-", slug)
    return slug.strip("-")


def heading_hint_slug(text: str) -> str:
    """Normalize heading text into a key hint.

    Unlike slugify(), hyphens in the source text are dropped rather than kept,
    so "Senior-Living" becomes "seniorliving".
    """
    slug = _HINT_STRIP.sub("", text.lower()).strip()
    return _WHITESPACE.sub("-", slug)


def plain_text(node: DocumentNode) -> str:
    """Concatenate all leaf text values under a node, ignoring marks."""
    if node.value:
        return node.value
    return "".join(plain_text(child) for child in node.children)


def plain_text_of(nodes: Iterable[DocumentNode]) -> str:
    return "".join(plain_text(node) for node in nodes)


def escape_text(text: str) -> str:
    """Escape text content (&, <, >, and both quote characters)."""
    return html.escape(text, quote=True)


def escape_attr(text: str) -> str:
    """Escape an attribute value so it can sit inside double quotes."""
    return text.replace("&", "&amp;").replace('"', "&quot;").replace("'", "&#x27;")


def strip_tags(markup: str) -> str:
    """Remove tags from a markup snippet and unescape entities."""
    return html.unescape(_TAGS.sub("", markup))


def normalize_url(url: str) -> str:
    """Give protocol-relative URLs an https scheme."""
    if url.startswith("//"):
        return f"https:{url}"
    return url


def is_external_url(url: str, site_domain: str | None) -> bool:
    """Check whether an absolute http(s) URL points away from the site.

    Without a site domain every absolute http(s) URL counts as external.
    Subdomains of the site domain are treated as internal.
    """
    try:
        parsed = urlparse(normalize_url(url))
        host = (parsed.hostname or "").lower()
    except ValueError as e:
        logger.warning(f"Malformed link URL '{url}' treated as internal: {e}")
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    if not site_domain:
        return True
    domain = site_domain.lower().lstrip(".")
    return not (host == domain or host.endswith(f".{domain}"))


def comment(text: str) -> str:
    """Build an HTML comment, neutralizing any comment terminators inside."""
    safe = _DASH_RUNS.sub("-", text).replace(">", "&gt;")
    return f"<!-- {safe} -->"
