"""
Parsed document adapter over BeautifulSoup, plus summaries for CSV and JSON
payloads.

Every extraction call builds its own ParsedDocument; documents are never
shared between calls.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from bs4 import BeautifulSoup
from bs4.element import PreformattedString, Tag

from datalandscape.protocols import ContentKind, RawDocument

logger = structlog.get_logger(__name__)

NON_CONTENT_TAGS = frozenset({"script", "style", "noscript", "template"})


def visible_text(element: Optional[Tag]) -> str:
    """Concatenated text of an element, skipping script/style bodies and comments."""
    if element is None:
        return ""
    parts: List[str] = []
    for string in element.find_all(string=True):
        if isinstance(string, PreformattedString):
            continue
        if string.parent is not None and string.parent.name in NON_CONTENT_TAGS:
            continue
        parts.append(str(string))
    return "".join(parts)


def format_size(num_bytes: int) -> str:
    kilobytes = num_bytes // 1024
    if kilobytes > 1024:
        return f"{kilobytes / 1024:.1f} MB"
    return f"{kilobytes} KB"


@dataclass(frozen=True)
class TabularSummary:
    """Shape of a CSV payload."""

    headers: List[str]
    row_count: int

    @property
    def column_count(self) -> int:
        return len(self.headers)

    @property
    def text(self) -> str:
        return (
            f"CSV file with {self.column_count} columns and {self.row_count} rows. "
            f"Headers: {', '.join(self.headers)}"
        )

    @property
    def title(self) -> str:
        return f"CSV Dataset: {', '.join(self.headers)}"


@dataclass(frozen=True)
class JsonSummary:
    """Shape of a JSON payload."""

    structure: str
    record_count: int
    keys: List[str] = field(default_factory=list)
    description: Optional[str] = None

    @property
    def text(self) -> str:
        if self.structure == "Array":
            text = f"JSON file containing array with {self.record_count} items"
        elif self.structure == "Object":
            text = f"JSON file containing object with {len(self.keys)} properties: {', '.join(self.keys)}"
        elif self.structure == "Invalid":
            text = "JSON file that could not be decoded"
        else:
            text = "JSON file containing a primitive value"
        if self.description:
            text = f"{text}. {self.description}"
        return text

    @property
    def title(self) -> str:
        return f"JSON Dataset: {self.structure}"


def summarize_csv(text: str) -> TabularSummary:
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if not rows:
        return TabularSummary(headers=[], row_count=0)
    headers = [cell.strip() for cell in rows[0]]
    return TabularSummary(headers=headers, row_count=len(rows) - 1)


def summarize_json(text: str) -> JsonSummary:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.debug("JSON payload could not be decoded", error=str(e))
        return JsonSummary(structure="Invalid", record_count=0)

    if isinstance(data, list):
        return JsonSummary(structure="Array", record_count=len(data))
    if isinstance(data, dict):
        description = data.get("description")
        return JsonSummary(
            structure="Object",
            record_count=1,
            keys=[str(key) for key in data.keys()],
            description=description if isinstance(description, str) else None,
        )
    return JsonSummary(structure="Primitive", record_count=1)


class ParsedDocument:
    """Navigable view over a fetched document.

    HTML documents expose CSS-selector queries through BeautifulSoup. CSV and
    JSON documents carry a summary whose text stands in for the body.
    """

    def __init__(
        self,
        url: str,
        soup: Optional[BeautifulSoup] = None,
        *,
        content_kind: ContentKind = ContentKind.HTML,
        summary: TabularSummary | JsonSummary | None = None,
        size_bytes: int = 0,
    ) -> None:
        self.url = url
        self.soup = soup
        self.content_kind = content_kind
        self.summary = summary
        self.size_bytes = size_bytes

    @property
    def is_html(self) -> bool:
        return self.soup is not None

    @property
    def title(self) -> Optional[str]:
        if self.summary is not None:
            return self.summary.title
        title_tag = self.select_one("title") or self.select_one("h1")
        if title_tag is None:
            return None
        title = visible_text(title_tag).strip()
        return title or None

    def select_one(self, selector: str) -> Optional[Tag]:
        if self.soup is None:
            return None
        return self.soup.select_one(selector)

    def select(self, selector: str) -> List[Tag]:
        if self.soup is None:
            return []
        return list(self.soup.select(selector))

    def meta_elements(self) -> List[Tag]:
        return self.select("meta")

    def json_ld_blocks(self) -> List[str]:
        """Raw text of every JSON-LD script block, in document order."""
        blocks: List[str] = []
        if self.soup is None:
            return blocks
        for script in self.soup.find_all("script"):
            script_type = (script.get("type") or "").strip().lower()
            if script_type == "application/ld+json":
                blocks.append(script.string or script.get_text() or "")
        return blocks

    def body_text(self) -> str:
        if self.summary is not None:
            return self.summary.text
        if self.soup is None:
            return ""
        return visible_text(self.soup.body or self.soup)

    def seed_fields(self) -> Dict[str, Any]:
        """Values known from the payload shape, recorded at body priority."""
        if isinstance(self.summary, TabularSummary):
            return {"format": "CSV", "records": self.summary.row_count, "size": format_size(self.size_bytes)}
        if isinstance(self.summary, JsonSummary):
            return {"format": "JSON", "records": self.summary.record_count, "size": format_size(self.size_bytes)}
        return {}


def parse_document(raw: RawDocument, *, parser: str = "html.parser") -> ParsedDocument:
    """Build a ParsedDocument for the raw payload's content kind."""
    if raw.content_kind is ContentKind.CSV:
        return ParsedDocument(
            raw.url, content_kind=raw.content_kind, summary=summarize_csv(raw.text), size_bytes=raw.size_bytes
        )
    if raw.content_kind is ContentKind.JSON:
        return ParsedDocument(
            raw.url, content_kind=raw.content_kind, summary=summarize_json(raw.text), size_bytes=raw.size_bytes
        )
    return ParsedDocument(raw.url, BeautifulSoup(raw.text, parser), size_bytes=raw.size_bytes)
