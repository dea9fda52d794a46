"""
Metadata Extractor - meta tags and JSON-LD merged into one priority map

Values are recorded with the source they came from. A structured (JSON-LD)
value always beats a meta-tag value, which always beats a value derived
from the payload body; among writes of equal priority the first one stays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import structlog

from ..extractor.document import ParsedDocument
from .structured_data_parser import StructuredDataParser, as_text, as_text_list, split_keywords

logger = structlog.get_logger(__name__)


class MetadataSource(IntEnum):
    """Where a metadata value came from. Higher wins."""

    BODY = 1
    META = 2
    STRUCTURED = 3


# Normalized field -> raw meta keys, most preferred first.
META_FIELD_KEYS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "title": ("og:title", "twitter:title"),
        "description": ("description", "og:description", "twitter:description"),
        "author": ("author", "article:author", "og:author"),
        "publishedDate": ("article:published_time", "dc.date"),
        "lastModified": ("article:modified_time", "og:updated_time"),
    }
)


class MetadataMap:
    """Normalized metadata with per-key source priority."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self._sources: Dict[str, MetadataSource] = {}

    def set(self, key: str, value: Any, source: MetadataSource) -> bool:
        """Record ``value`` unless an equal or higher priority value is already held.

        Empty values are ignored. Returns True when the value was stored.
        """
        if value is None or value == "" or value == []:
            return False
        current = self._sources.get(key)
        if current is not None and source <= current:
            return False
        self._values[key] = value
        self._sources[key] = source
        return True

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def source_of(self, key: str) -> Optional[MetadataSource]:
        return self._sources.get(key)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"MetadataMap({self._values!r})"


@dataclass(frozen=True)
class ExtractedMetadata:
    """Everything the metadata extractor found in one document."""

    meta_tags: Mapping[str, str] = field(default_factory=dict)
    structured_data: Optional[Dict[str, Any]] = None
    fields: MetadataMap = field(default_factory=MetadataMap)

    @property
    def has_structured_data(self) -> bool:
        return self.structured_data is not None


class MetadataExtractor:
    """Reads meta tags and JSON-LD out of a parsed document."""

    def __init__(self, structured_parser: Optional[StructuredDataParser] = None) -> None:
        self.structured_parser = structured_parser or StructuredDataParser()

    def extract(self, doc: ParsedDocument) -> ExtractedMetadata:
        fields = MetadataMap()
        for key, value in doc.seed_fields().items():
            fields.set(key, value, MetadataSource.BODY)

        meta_tags = self.collect_meta_tags(doc)
        self._apply_meta_tags(fields, meta_tags)

        structured = self.structured_parser.parse(doc.json_ld_blocks())
        if structured is not None:
            self._apply_structured(fields, structured)

        logger.debug(
            "Metadata extracted",
            url=doc.url,
            meta_tags=len(meta_tags),
            structured=structured is not None,
            structured_fields=sorted(key for key in fields if fields.source_of(key) is MetadataSource.STRUCTURED),
        )
        return ExtractedMetadata(
            meta_tags=MappingProxyType(meta_tags),
            structured_data=structured,
            fields=fields,
        )

    @staticmethod
    def collect_meta_tags(doc: ParsedDocument) -> Dict[str, str]:
        """Raw ``name``/``property`` -> ``content`` pairs, keys lowercased, first occurrence kept."""
        meta_tags: Dict[str, str] = {}
        for element in doc.meta_elements():
            key = element.get("name") or element.get("property")
            content = element.get("content")
            if not key or content is None:
                continue
            key = str(key).strip().lower()
            if key and key not in meta_tags:
                meta_tags[key] = str(content).strip()
        return meta_tags

    @staticmethod
    def _apply_meta_tags(fields: MetadataMap, meta_tags: Mapping[str, str]) -> None:
        for field_name, keys in META_FIELD_KEYS.items():
            for key in keys:
                if fields.set(field_name, meta_tags.get(key), MetadataSource.META):
                    break

        keywords = meta_tags.get("keywords")
        if keywords:
            fields.set("keywords", split_keywords(keywords), MetadataSource.META)

    @staticmethod
    def _apply_structured(fields: MetadataMap, data: Dict[str, Any]) -> None:
        source = MetadataSource.STRUCTURED
        fields.set("title", as_text(data.get("name") or data.get("headline")), source)
        fields.set("description", as_text(data.get("description")), source)
        fields.set("author", as_text(data.get("author")), source)
        fields.set("publisher", as_text(data.get("publisher") or data.get("creator")), source)
        fields.set("createdDate", as_text(data.get("dateCreated")), source)
        fields.set("publishedDate", as_text(data.get("datePublished")), source)
        fields.set("lastModified", as_text(data.get("dateModified")), source)
        fields.set("keywords", split_keywords(data.get("keywords")), source)
        fields.set("format", as_text(data.get("encodingFormat")), source)
        fields.set("license", as_text(data.get("license")), source)
        fields.set("size", as_text(data.get("contentSize")), source)
        fields.set("records", data.get("numberOfItems"), source)
        fields.set("version", as_text(data.get("version")), source)
        fields.set("variableMeasured", as_text_list(data.get("variableMeasured")), source)
        fields.set("parentDataset", as_text(data.get("isPartOf")), source)
        fields.set("childDatasets", as_text_list(data.get("hasPart")), source)
