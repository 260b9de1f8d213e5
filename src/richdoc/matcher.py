"""Association of document sections with dataset filter keys.

A shared dataset can be embedded several times in one document, each time
under a heading that names the subset of rows to show ("Area Agency on
Aging" -> rows keyed ``agency``). Matching happens in two steps at two
different times:

1. At render time, derive_hint() turns the nearest preceding heading into a
   slug and stores it in the table marker. The dataset's key values are not
   needed (or known) yet.
2. At display time, resolve_key() matches that slug against the dataset's
   known key values.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence, Set

from .logger import checks_enabled, get_logger
from .models import DocumentNode, NodeType
from .text import heading_hint_slug, plain_text

logger = get_logger()

_WORD_SPLIT = re.compile(r"[\s\-]+")


class KeyHeadingMatcher:
    """Derive key hints from headings and resolve them against known keys."""

    def derive_hint(self, siblings: Sequence[DocumentNode] | None, index: int) -> str | None:
        """Find the key hint for the node at ``siblings[index]``.

        Walks backwards from the previous sibling. The first heading found
        provides the hint. An embedded entry block met before any heading is a
        section boundary: the node is not under any heading's scope.

        Returns:
            The heading slug, or None when no heading applies
        """
        if not siblings or index <= 0:
            return None

        for i in range(min(index, len(siblings)) - 1, -1, -1):
            sibling = siblings[i]

            if sibling.is_heading:
                heading_text = plain_text(sibling).strip()
                if not heading_text:
                    # Empty headings carry no hint; keep looking further back
                    continue
                slug = heading_hint_slug(heading_text)
                logger.checks(f"Heading '{heading_text}' at index {i} gives key hint '{slug}'")
                return slug or None

            if sibling.node_type == NodeType.EMBEDDED_ENTRY_BLOCK.value:
                logger.checks(f"Section boundary at index {i}; no key hint for index {index}")
                return None

        return None

    def resolve_key(self, hint: str | None, known_key_values: Iterable[str]) -> str | None:
        """Resolve a hint to one of the known key values.

        Rules, first success wins:
        1. exact: the hint equals a key
        2. word: a hyphen/whitespace separated word of the hint equals a key
        3. prefix: the hint starts with a key
        4. substring: the hint contains a key

        Within a rule, keys are tried in order. Sets are tried in sorted order
        so the result does not depend on hash ordering.

        Returns:
            The matched key, or None when no rule matches
        """
        if not hint:
            return None

        slug = hint.strip().lower()
        keys = _ordered_keys(known_key_values)
        if not slug or not keys:
            return None

        words = [w for w in _WORD_SPLIT.split(slug) if w]
        rules = (
            ("exact", lambda key: slug == key),
            ("word", lambda key: key in words),
            ("prefix", lambda key: slug.startswith(key)),
            ("substring", lambda key: key in slug),
        )

        for rule_name, matches in rules:
            for key in keys:
                if matches(key):
                    logger.checks(f"Key hint '{slug}' resolved to '{key}' by {rule_name} match")
                    return key

        if checks_enabled():
            logger.checks(f"Key hint '{slug}' matched none of: {', '.join(keys)}")
        return None


def _ordered_keys(known_key_values: Iterable[str]) -> list[str]:
    """Trim, lower-case and de-duplicate keys, dropping empties."""
    source = sorted(known_key_values) if isinstance(known_key_values, Set) else known_key_values
    seen: dict[str, None] = {}
    for key in source:
        normalized = key.strip().lower()
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)
