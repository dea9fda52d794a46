"""
Structured Data Parser - Schema.org JSON-LD

Decodes JSON-LD blocks, flattens top-level arrays and ``@graph`` wrappers,
and selects the item describing the dataset or page. Malformed blocks are
skipped; they never fail an extraction.
"""

from __future__ import annotations

import json
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import structlog

logger = structlog.get_logger(__name__)

ACCEPTED_TYPES: FrozenSet[str] = frozenset({"Dataset", "DataCatalog", "Article", "WebPage"})


def _short_type(value: str) -> str:
    """Strip vocabulary prefixes: ``schema:Dataset`` and ``https://schema.org/Dataset`` both become ``Dataset``."""
    value = value.strip()
    for separator in ("/", "#", ":"):
        if separator in value:
            value = value.rsplit(separator, 1)[-1]
    return value


def as_text(value: Any) -> Optional[str]:
    """Reduce a JSON-LD value to display text.

    Nested objects contribute their ``name`` (or ``url``/``@id``); lists
    contribute their first usable member.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        for key in ("name", "url", "@id"):
            text = as_text(value.get(key))
            if text:
                return text
        return None
    if isinstance(value, list):
        for item in value:
            text = as_text(item)
            if text:
                return text
    return None


def as_text_list(value: Any) -> List[str]:
    """Reduce a JSON-LD value to a list of display strings."""
    if value is None:
        return []
    items = value if isinstance(value, list) else [value]
    texts: List[str] = []
    for item in items:
        text = as_text(item)
        if text:
            texts.append(text)
    return texts


def split_keywords(value: Any) -> List[str]:
    """Keywords may arrive as a comma-separated string or a list."""
    if isinstance(value, str):
        return [keyword.strip() for keyword in value.split(",") if keyword.strip()]
    return as_text_list(value)


class StructuredDataParser:
    """Parser for embedded Schema.org JSON-LD."""

    def __init__(self, accepted_types: Iterable[str] = ACCEPTED_TYPES) -> None:
        self.accepted_types = frozenset(accepted_types)

    def parse_blocks(self, blocks: Iterable[str]) -> List[Dict[str, Any]]:
        """Decode every block and flatten arrays and ``@graph`` containers."""
        items: List[Dict[str, Any]] = []
        for block in blocks:
            if not block or not block.strip():
                continue
            try:
                data = json.loads(block)
            except json.JSONDecodeError as e:
                logger.debug("Skipping malformed JSON-LD block", error=str(e))
                continue
            items.extend(self._flatten(data))
        return items

    def _flatten(self, data: Any) -> List[Dict[str, Any]]:
        if isinstance(data, list):
            flattened: List[Dict[str, Any]] = []
            for item in data:
                flattened.extend(self._flatten(item))
            return flattened
        if isinstance(data, dict):
            graph = data.get("@graph")
            if isinstance(graph, list):
                return self._flatten(graph)
            return [data]
        return []

    def is_accepted(self, item: Dict[str, Any]) -> bool:
        declared = item.get("@type")
        types = declared if isinstance(declared, list) else [declared]
        return any(isinstance(t, str) and _short_type(t) in self.accepted_types for t in types)

    def select(self, items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """The last accepted item in document order wins."""
        selected: Optional[Dict[str, Any]] = None
        for item in items:
            if self.is_accepted(item):
                selected = item
        return selected

    def parse(self, blocks: Iterable[str]) -> Optional[Dict[str, Any]]:
        return self.select(self.parse_blocks(blocks))
