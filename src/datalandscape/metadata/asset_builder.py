"""
Data asset builder - coordinates the extraction components

Runs metadata extraction, main-content location, classification, field
extraction, quality scoring and governance matching over one parsed
document and assembles the immutable result record. Everything here is
synchronous and free of I/O.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

import structlog
from bs4 import BeautifulSoup
from bs4.element import Tag

from ..config.config import ExtractionSettings, IngestionConfig, IngestionSource
from ..extractor.document import ParsedDocument, visible_text
from ..extractor.main_content import MainContentLocator
from ..models import (
    DEFAULT_TITLE,
    UNKNOWN,
    AssetMetadata,
    Availability,
    ContentAnalysis,
    ExtractionResult,
    GovernanceProfile,
    IngestedItem,
    Relationships,
)
from ..protocols import utc_now_iso
from . import field_extractors as fx
from .classifier import classify
from .governance import DEFAULT_PROFILE, analyze_governance
from .metadata_extractor import MetadataExtractor
from .quality_scorer import QualityScorer

logger = structlog.get_logger(__name__)


def build_fallback_result(title: Optional[str] = None) -> ExtractionResult:
    """Fully defaulted record returned when a source cannot be fetched or analysed."""
    title = title or DEFAULT_TITLE
    return ExtractionResult(
        description=f"Dataset information for {title}",
        metadata=AssetMetadata(tags=["dataset", "data"]),
        content_analysis=ContentAnalysis(
            summary=f"Dataset information extracted from {title}",
            key_topics=["data", "dataset"],
            data_types=[UNKNOWN],
            quality_score=5,
        ),
        data_governance=DEFAULT_PROFILE,
    )


def _apply_governance(
    availability: Availability, relationships: Relationships, profile: GovernanceProfile
) -> tuple[Availability, Relationships]:
    """Fill unknown custodian and empty relationship lists from a matched profile."""
    if profile.is_default:
        return availability, relationships

    if availability.custodian == UNKNOWN:
        availability = availability.model_copy(update={"custodian": profile.data_availability.data_custodian})

    lineage = profile.data_relationships
    updates = {}
    if not relationships.related_series:
        updates["related_series"] = list(lineage.related_datasets)
    if not relationships.dependencies:
        updates["dependencies"] = list(lineage.dependencies)
    if not relationships.derived_from:
        updates["derived_from"] = list(lineage.derived_from)
    if updates:
        relationships = relationships.model_copy(update=updates)
    return availability, relationships


def _select_text(container: Tag, selector: Optional[str]) -> str:
    if not selector:
        return ""
    return " ".join(visible_text(container.select_one(selector)).split())


def _item_url(container: Tag, base_url: str) -> str:
    link = container.select_one("a[href]")
    if link is None:
        return base_url
    try:
        return urljoin(base_url, str(link.get("href")))
    except ValueError:
        return base_url


def _unique(elements: List[Tag]) -> List[Tag]:
    seen: set[int] = set()
    unique = []
    for element in elements:
        if id(element) not in seen:
            seen.add(id(element))
            unique.append(element)
    return unique


class DataAssetBuilder:
    """Turns a ParsedDocument into an ExtractionResult.

    The same builder also harvests listing pages: every item found on an
    ingestion source page is analysed as its own fragment document.
    """

    def __init__(
        self, settings: Optional[ExtractionSettings] = None, ingestion: Optional[IngestionConfig] = None
    ) -> None:
        self.settings = settings or ExtractionSettings()
        self.ingestion = ingestion or IngestionConfig()
        self.metadata_extractor = MetadataExtractor()
        self.locator = MainContentLocator(self.settings)
        self.scorer = QualityScorer()

    def build(
        self, doc: ParsedDocument, title: Optional[str] = None, *, extra_text: Optional[str] = None
    ) -> ExtractionResult:
        """Build the record for ``doc``.

        ``extra_text`` is caller-supplied content appended to the page text
        for topic, data-type and governance matching only.
        """
        title = title or doc.title or DEFAULT_TITLE
        extracted = self.metadata_extractor.extract(doc)
        fields, structured = extracted.fields, extracted.structured_data
        url = doc.url

        text = self.locator.locate(doc) or doc.body_text()
        analysed_text = f"{text} {extra_text}" if extra_text else text

        classification = classify(analysed_text, title, url, structured, max_topics=self.settings.max_topics)
        description = fx.extract_description(fields, structured, text, url, title=title)
        quality_score = self.scorer.score(extracted.meta_tags, structured, text, url)
        governance = analyze_governance(analysed_text, classification.topics)
        now = utc_now_iso()

        availability = Availability(
            status=fx.determine_availability_status(fields, structured, text, url),
            custodian=fx.extract_custodian(fields, structured, text, url) or UNKNOWN,
            contact_email=fx.extract_contact_email(fields, structured, text, url) or "",
            request_process=fx.extract_request_process(fields, structured, text, url) or "Direct access",
        )
        lineage = fx.extract_relationships(fields, structured, text, url)
        relationships = Relationships(
            parent_dataset=lineage.parent_dataset or "",
            child_datasets=lineage.child_datasets,
            related_series=lineage.related_series,
            dependencies=lineage.dependencies,
            derived_from=lineage.derived_from,
        )
        availability, relationships = _apply_governance(availability, relationships, governance)

        result = ExtractionResult(
            description=description or f"Dataset information for {title}",
            collection_date=fx.extract_collection_date(fields, structured, text, url) or now,
            purpose=fx.extract_purpose(fields, structured, text, url) or "Data analysis and research",
            department=fx.extract_department(fields, structured, text, url, title=title) or UNKNOWN,
            metadata=AssetMetadata(
                format=fx.extract_format(fields, structured, text, url) or UNKNOWN,
                size=fx.extract_size(fields, structured, text, url) or UNKNOWN,
                records=fx.extract_records(fields, structured, text, url) or 0,
                last_updated=fx.extract_last_updated(fields, structured, text, url) or now,
                version=fx.extract_version(fields, structured, text, url) or "1.0.0",
                license=fx.extract_license(fields, structured, text, url),
                tags=fx.extract_tags(fields, structured, text, url),
            ),
            availability=availability,
            relationships=relationships,
            content_analysis=ContentAnalysis(
                summary=fx.generate_summary(description, text, length=self.settings.summary_length),
                key_topics=classification.topics,
                data_types=classification.data_types,
                quality_score=quality_score,
                update_frequency=fx.extract_update_frequency(fields, structured, text, url) or UNKNOWN,
            ),
            data_governance=governance,
        )
        logger.debug(
            "Data asset built",
            url=url,
            quality_score=quality_score,
            topics=classification.topics,
            governance=governance.key,
        )
        return result

    # ------------------------------------------------------------------
    # Listing pages
    # ------------------------------------------------------------------

    def extract_items(self, doc: ParsedDocument, source: IngestionSource) -> List[IngestedItem]:
        """Harvest up to ``max_items`` listing items from an ingestion source page.

        Item containers are tried first. When the page has none, the parent
        of every long enough headline matching the source's title selector
        stands in for a container. When neither yields an item, whole-page
        containers are tried.
        """
        if not doc.is_html:
            return []
        settings = self.ingestion

        candidates = doc.select(", ".join(settings.item_containers))
        if not candidates:
            headlines = [
                headline
                for headline in doc.select(source.selectors.title)
                if len(visible_text(headline).strip()) > settings.min_headline_length
            ]
            candidates = _unique([headline.parent for headline in headlines if headline.parent is not None])

        items = self._collect_items(candidates, doc.url, source)
        if not items:
            items = self._collect_items(doc.select(", ".join(settings.page_containers)), doc.url, source)

        logger.debug("Listing items extracted", source=source.id, url=doc.url, items=len(items))
        return items

    def _collect_items(self, containers: List[Tag], base_url: str, source: IngestionSource) -> List[IngestedItem]:
        items: List[IngestedItem] = []
        for container in containers:
            item = self._build_item(container, base_url, source)
            if item is None:
                continue
            items.append(item)
            if len(items) >= self.ingestion.max_items:
                break
        return items

    def _build_item(self, container: Tag, base_url: str, source: IngestionSource) -> Optional[IngestedItem]:
        selectors = source.selectors
        title = _select_text(container, selectors.title)
        if not title or len(title) < self.ingestion.min_title_length:
            return None

        content = _select_text(container, selectors.content)
        tags_text = _select_text(container, selectors.tags)
        tags = [tag.strip() for tag in tags_text.split(",") if tag.strip()] if tags_text else [source.category]
        url = _item_url(container, base_url)
        now = utc_now_iso()

        fragment = ParsedDocument(url, BeautifulSoup(str(container), "html.parser"))
        return IngestedItem(
            title=title,
            content=content or title,
            url=url,
            source=source.name,
            category=_select_text(container, selectors.category) or source.category,
            date=_select_text(container, selectors.date) or now,
            author=_select_text(container, selectors.author) or UNKNOWN,
            tags=tags,
            metadata={"sourceId": source.id, "sourceType": source.type, "ingestedAt": now},
            data_asset=self.build(fragment, title),
        )
