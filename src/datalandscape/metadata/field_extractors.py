"""
Single-purpose field extractors.

Every extractor takes ``(fields, structured, text, url)`` and returns a value
or ``None``; the caller substitutes the record default. Each one walks its own
precedence chain: structured data, then meta tags (both already merged by
priority into ``fields``), then patterns over the body text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from ..protocols import AvailabilityStatus
from .metadata_extractor import MetadataMap
from .structured_data_parser import as_text, as_text_list
from .tables import COMMON_TAGS, DOMAIN_ORGANIZATIONS, HOST_CUSTODIANS

Structured = Optional[Dict[str, Any]]

DESCRIPTION_MIN_LINE_LENGTH = 50
SUMMARY_LENGTH = 200
SUMMARY_MIN_SENTENCE_LENGTH = 20
SUMMARY_KEY_TERMS = ("data", "dataset", "information", "statistics", "research", "study", "analysis", "report")

_ORG_WORDS = "department|ministry|agency|bureau|institute|foundation|organization|organisation"
_ACADEMIC_SUFFIXES = "university|college|institute|foundation|organization|organisation"

# At most eleven words before an anchor phrase, so a failed search stays
# linear in the text length.
_LEADING_WORDS = r"\b[a-zA-Z]+(?:\s+[a-zA-Z]+){0,10}"

DEPARTMENT_PATTERNS = (
    re.compile(rf"(?:{_ORG_WORDS})\s+of\s+([a-zA-Z\s]+)", re.IGNORECASE),
    re.compile(rf"({_LEADING_WORDS})\s+(?:{_ORG_WORDS})", re.IGNORECASE),
    re.compile(rf"(?:by|from|at)\s+((?:[a-zA-Z]+\s+){{0,10}}[a-zA-Z]*(?:{_ACADEMIC_SUFFIXES}))", re.IGNORECASE),
    re.compile(r"(?:published|released|maintained)\s+by\s+([a-zA-Z\s]+)", re.IGNORECASE),
)

AFFILIATION_PATTERNS = (
    re.compile(r"author[:\s]+([a-zA-Z\s]+)", re.IGNORECASE),
    re.compile(r"organization[:\s]+([a-zA-Z\s]+)", re.IGNORECASE),
    re.compile(r"institution[:\s]+([a-zA-Z\s]+)", re.IGNORECASE),
    re.compile(r"affiliation[:\s]+([a-zA-Z\s]+)", re.IGNORECASE),
)

CUSTODIAN_PATTERNS = (
    re.compile(r"(?:maintained by|provided by|curated by)\s+([a-zA-Z\s]+)", re.IGNORECASE),
    re.compile(rf"({_LEADING_WORDS})\s+(?:is responsible|maintains|provides)", re.IGNORECASE),
)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# (label, triggers) checked in order over text + url.
FORMAT_HINTS = (
    ("CSV", ("csv",)),
    ("JSON", ("json",)),
    ("XML", ("xml",)),
    ("Excel", ("excel", "xlsx", "xls")),
    ("PDF", ("pdf",)),
    ("Text", ("txt", "text")),
    ("Compressed", ("zip", "compressed")),
    ("RDF", ("rdf",)),
    ("API", ("api", "rest", "endpoint")),
    ("Web Page", ("html", "web")),
    ("Database", ("database", "db")),
    ("Tabular", ("spreadsheet", "table")),
)

URL_FORMAT_HINTS = (
    ("CSV", (".csv",)),
    ("JSON", (".json",)),
    ("XML", (".xml",)),
    ("Excel", (".xlsx", ".xls")),
    ("PDF", (".pdf",)),
    ("API", ("api",)),
)

LICENSE_PHRASES = (
    ("creative commons", "Creative Commons"),
    ("open data", "Open Data License"),
    ("public domain", "Public Domain"),
)

PURPOSE_HINTS = (
    ("research", "Research and analysis"),
    ("policy", "Policy development"),
    ("planning", "Planning and decision making"),
    ("monitoring", "Monitoring and evaluation"),
)

FREQUENCY_HINTS = (
    ("Daily", ("daily",)),
    ("Weekly", ("weekly",)),
    ("Monthly", ("monthly",)),
    ("Quarterly", ("quarterly",)),
    ("Annually", ("annually", "yearly")),
)

REQUEST_PROCESS_HINTS = (
    ("api", "API access"),
    ("download", "Direct download"),
    ("email", "Email request"),
    ("form", "Online form"),
)


def _contains_any(haystack: str, needles) -> bool:
    return any(needle in haystack for needle in needles)


def _collapse(value: str) -> str:
    return " ".join(value.split())


def truncate(text: str, length: int = SUMMARY_LENGTH) -> str:
    return text[:length] + "..." if len(text) > length else text


def _first_group(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = _collapse(match.group(1))
            if value:
                return value
    return None


def _structured(structured: Structured, *keys: str) -> Any:
    if not structured:
        return None
    for key in keys:
        value = structured.get(key)
        if value not in (None, "", []):
            return value
    return None


# ============================================================================
# Descriptive fields
# ============================================================================


def extract_description(
    fields: MetadataMap, structured: Structured, text: str, url: str, *, title: str = ""
) -> Optional[str]:
    description = fields.get("description")
    if description:
        return description

    for line in text.split("\n"):
        line = line.strip()
        if len(line) > DESCRIPTION_MIN_LINE_LENGTH:
            return truncate(line)

    return f"Information about {title}" if title else None


def generate_summary(description: Optional[str], text: str, *, length: int = SUMMARY_LENGTH) -> str:
    """Short summary: the description when known, else the first informative sentence."""
    if description:
        return truncate(description, length)

    sentences = [s for s in re.split(r"[.!?]+", text) if len(s.strip()) > SUMMARY_MIN_SENTENCE_LENGTH]
    best = sentences[0] if sentences else ""
    for sentence in sentences:
        if _contains_any(sentence.lower(), SUMMARY_KEY_TERMS):
            best = sentence
            break

    best = best.strip()
    if best:
        return truncate(best, length)
    return "Information extracted from webpage content."


def extract_purpose(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    purpose = as_text(_structured(structured, "purpose"))
    if purpose:
        return purpose
    lowered = text.lower()
    for phrase, label in PURPOSE_HINTS:
        if phrase in lowered:
            return label
    return None


def extract_update_frequency(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    frequency = as_text(_structured(structured, "updateFrequency", "accrualPeriodicity"))
    if frequency:
        return frequency
    lowered = text.lower()
    for label, triggers in FREQUENCY_HINTS:
        if _contains_any(lowered, triggers):
            return label
    return None


def extract_tags(fields: MetadataMap, structured: Structured, text: str, url: str) -> List[str]:
    tags: List[str] = list(fields.get("keywords") or [])
    lowered = text.lower()
    tags.extend(tag for tag in COMMON_TAGS if tag in lowered)
    return list(dict.fromkeys(tags))


# ============================================================================
# Technical metadata
# ============================================================================


def extract_format(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    declared = fields.get("format")
    if declared:
        return declared

    combined = f"{text} {url}".lower()
    for label, triggers in FORMAT_HINTS:
        if _contains_any(combined, triggers):
            return label
    url_lower = url.lower()
    for label, triggers in URL_FORMAT_HINTS:
        if _contains_any(url_lower, triggers):
            return label
    return "Web Content"


def extract_license(fields: MetadataMap, structured: Structured, text: str, url: str) -> str:
    declared = fields.get("license")
    if declared:
        return declared
    lowered = text.lower()
    for phrase, label in LICENSE_PHRASES:
        if phrase in lowered:
            return label
    return "Unknown"


def extract_collection_date(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    return fields.get("createdDate") or fields.get("publishedDate")


def extract_last_updated(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    return fields.get("lastModified")


def extract_size(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    size = fields.get("size")
    return str(size) if size else None


def extract_records(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[int]:
    records = fields.get("records")
    if records is None or isinstance(records, bool):
        return None
    try:
        if isinstance(records, (int, float)):
            return int(records)
        return int(str(records).replace(",", "").strip())
    except (ValueError, OverflowError):
        return None


def extract_version(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    return fields.get("version")


# ============================================================================
# Custodianship and access
# ============================================================================


def extract_department(
    fields: MetadataMap, structured: Structured, text: str, url: str, *, title: str = ""
) -> Optional[str]:
    url_lower = url.lower()
    for domain, organization in DOMAIN_ORGANIZATIONS.items():
        if domain in url_lower:
            return organization

    for source in (text, title):
        department = _first_group(DEPARTMENT_PATTERNS, source)
        if department:
            return department

    for key in ("publisher", "author"):
        value = fields.get(key)
        if value:
            return value

    return _first_group(AFFILIATION_PATTERNS, text)


def extract_custodian(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    host = (urlparse(url).hostname or "").lower()
    for domain, custodian in HOST_CUSTODIANS.items():
        if domain in host:
            return custodian
    return _first_group(CUSTODIAN_PATTERNS, text)


def extract_contact_email(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def extract_request_process(fields: MetadataMap, structured: Structured, text: str, url: str) -> Optional[str]:
    lowered = text.lower()
    for phrase, label in REQUEST_PROCESS_HINTS:
        if phrase in lowered:
            return label
    return None


def determine_availability_status(
    fields: MetadataMap, structured: Structured, text: str, url: str
) -> AvailabilityStatus:
    lowered = text.lower()
    if _contains_any(lowered, ("restricted", "private", "confidential")):
        return AvailabilityStatus.RESTRICTED
    if _contains_any(lowered, ("request", "apply", "permission")):
        return AvailabilityStatus.REQUEST_REQUIRED
    return AvailabilityStatus.PUBLIC


@dataclass(frozen=True)
class ExtractedRelationships:
    parent_dataset: Optional[str] = None
    child_datasets: List[str] = field(default_factory=list)
    related_series: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    derived_from: List[str] = field(default_factory=list)


def extract_relationships(
    fields: MetadataMap, structured: Structured, text: str, url: str
) -> ExtractedRelationships:
    return ExtractedRelationships(
        parent_dataset=fields.get("parentDataset"),
        child_datasets=list(fields.get("childDatasets") or []),
        related_series=as_text_list(_structured(structured, "relatedSeries")),
        dependencies=as_text_list(_structured(structured, "dependencies")),
        derived_from=as_text_list(_structured(structured, "derivedFrom", "isBasedOn")),
    )
