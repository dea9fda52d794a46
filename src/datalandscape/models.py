"""
Pydantic models for the externally visible records.

Field names are snake_case in Python and camelCase on the wire. Every model
is frozen: a record is computed once and never mutated afterwards.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .protocols import AvailabilityStatus, utc_now_iso

UNKNOWN = "Unknown"
DEFAULT_VERSION = "1.0.0"
DEFAULT_PURPOSE = "Data analysis and research"
DEFAULT_REQUEST_PROCESS = "Direct access"
DEFAULT_TITLE = "Unknown Dataset"


class RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Governance profile
# ============================================================================


class DataAssets(RecordModel):
    description: str
    collection_date: str
    purpose: str
    department_catalogues: List[str] = Field(default_factory=list)
    metadata_available: bool = False
    metadata_details: str = ""


class DataAvailability(RecordModel):
    is_readily_available: bool
    access_method: str
    data_custodian: str
    request_required: bool
    request_process: str


class DataAccess(RecordModel):
    download_available: bool = False
    api_available: bool = False
    access_url: str = ""
    format: List[str] = Field(default_factory=list)
    authentication_required: bool = False


class DataRelationships(RecordModel):
    is_part_of_series: bool = False
    series_name: str = ""
    related_datasets: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    derived_from: List[str] = Field(default_factory=list)
    used_to_create: List[str] = Field(default_factory=list)


class GovernanceProfile(RecordModel):
    """Canned custodianship, access and relationship facts for a topic domain."""

    key: str = Field(exclude=True)
    data_assets: DataAssets
    data_availability: DataAvailability
    data_access: DataAccess
    data_relationships: DataRelationships

    @property
    def is_default(self) -> bool:
        return self.key == "default"


# ============================================================================
# Extraction result
# ============================================================================


class AssetMetadata(RecordModel):
    format: str = UNKNOWN
    size: str = UNKNOWN
    records: int = 0
    last_updated: str = Field(default_factory=utc_now_iso)
    version: str = DEFAULT_VERSION
    license: str = UNKNOWN
    tags: List[str] = Field(default_factory=list)


class Availability(RecordModel):
    status: AvailabilityStatus = AvailabilityStatus.PUBLIC
    custodian: str = UNKNOWN
    contact_email: str = ""
    request_process: str = DEFAULT_REQUEST_PROCESS


class Relationships(RecordModel):
    parent_dataset: str = ""
    child_datasets: List[str] = Field(default_factory=list)
    related_series: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    derived_from: List[str] = Field(default_factory=list)


class ContentAnalysis(RecordModel):
    summary: str = ""
    key_topics: List[str] = Field(default_factory=list)
    data_types: List[str] = Field(default_factory=list)
    quality_score: int = Field(default=5, ge=0, le=10)
    update_frequency: str = UNKNOWN


class ExtractionResult(RecordModel):
    """The data asset record produced for one URL."""

    description: str
    collection_date: str = Field(default_factory=utc_now_iso)
    purpose: str = DEFAULT_PURPOSE
    department: str = UNKNOWN
    metadata: AssetMetadata = Field(default_factory=AssetMetadata)
    availability: Availability = Field(default_factory=Availability)
    relationships: Relationships = Field(default_factory=Relationships)
    content_analysis: ContentAnalysis = Field(default_factory=ContentAnalysis)
    data_governance: GovernanceProfile


# ============================================================================
# Ingestion
# ============================================================================


class IngestedItem(RecordModel):
    """One item harvested from a listing page, with its own data asset record."""

    title: str
    content: str
    url: str
    source: str
    category: str
    date: str = Field(default_factory=utc_now_iso)
    author: str = UNKNOWN
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, str] = Field(default_factory=dict)
    data_asset: ExtractionResult


class IngestionResult(RecordModel):
    """Outcome of harvesting one ingestion source."""

    source_id: str
    source_name: str
    url: str
    timestamp: str = Field(default_factory=utc_now_iso)
    success: bool = True
    data_count: int = 0
    errors: List[str] = Field(default_factory=list)
    data: List[IngestedItem] = Field(default_factory=list)
