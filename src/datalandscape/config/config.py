"""
Configuration management for DataLandscape using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_CONTENT_SELECTORS = [
    "main",
    "article",
    ".content",
    ".main-content",
    "#content",
    "#main",
    ".post-content",
    ".entry-content",
    ".article-content",
]

# --- Nested Configuration Models ---


class FetcherConfig(BaseModel):
    """Fetcher configuration."""

    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent string for HTTP requests.")
    accept: str = Field(
        default="text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.8,*/*;q=0.7",
        description="Accept header sent with every request.",
    )
    accept_language: str = Field(default="en-US,en;q=0.9", description="Accept-Language header.")
    max_concurrency: int = Field(default=8, ge=1, description="Max concurrent fetches for batch extraction.")


class ExtractionSettings(BaseModel):
    """Configuration for the extraction heuristics."""

    content_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        description="Ordered selectors tried when locating the main content container.",
    )
    min_container_length: int = Field(default=200, ge=0, description="Container text must be longer than this.")
    min_paragraph_length: int = Field(default=100, ge=0, description="Fallback paragraph must be longer than this.")
    max_topics: int = Field(default=5, ge=1, description="Maximum number of key topics reported.")
    summary_length: int = Field(default=200, ge=1, description="Descriptions and summaries are cut at this length.")

    @field_validator("content_selectors")
    @classmethod
    def validate_selectors(cls, v: List[str]) -> List[str]:
        """Ensure the selector list is not empty."""
        if not v:
            raise ValueError("content_selectors must contain at least one selector")
        return v


DEFAULT_ITEM_CONTAINERS = ["article", ".content", ".item", ".entry", ".post", ".publication", ".dataset"]
DEFAULT_PAGE_CONTAINERS = ["main", ".main-content", "#content", ".content"]


class SourceSelectors(BaseModel):
    """CSS selectors used to read one listing item. Only ``title`` is required."""

    title: str
    content: Optional[str] = None
    date: str = ".date"
    author: str = ".author"
    category: str = ".category"
    tags: str = ".tags"


class IngestionSource(BaseModel):
    """A listing page whose items are harvested as individual data assets."""

    id: str
    name: str
    url: str
    type: Literal["abs", "government", "research", "news", "custom"] = "custom"
    category: str = "general"
    description: str = ""
    selectors: SourceSelectors
    schedule: Literal["daily", "weekly", "monthly", "manual"] = "manual"


def _default_sources() -> List[IngestionSource]:
    return [
        IngestionSource(
            id="abs-statistics",
            name="Australian Bureau of Statistics - Statistics",
            url="https://www.abs.gov.au/statistics",
            type="abs",
            category="statistics",
            description="Official statistics from the Australian Bureau of Statistics",
            selectors=SourceSelectors(
                title="h1, h2, h3",
                content="p, .content, .description",
                date=".date, .published-date",
                category=".category, .topic",
                tags=".tags, .keywords",
            ),
            schedule="daily",
        ),
        IngestionSource(
            id="abs-publications",
            name="Australian Bureau of Statistics - Publications",
            url="https://www.abs.gov.au/publications",
            type="abs",
            category="publications",
            description="Research publications and reports from ABS",
            selectors=SourceSelectors(
                title="h1, h2, .publication-title",
                content=".publication-content, .abstract",
                date=".publication-date",
                author=".author, .contributor",
                category=".publication-type",
            ),
            schedule="weekly",
        ),
        IngestionSource(
            id="data-gov-au",
            name="Data.gov.au",
            url="https://data.gov.au",
            type="government",
            category="open-data",
            description="Australian Government open data portal",
            selectors=SourceSelectors(
                title="h1, .dataset-title",
                content=".dataset-description, .summary",
                date=".dataset-date, .updated",
                category=".dataset-category",
                tags=".dataset-tags",
            ),
            schedule="daily",
        ),
        IngestionSource(
            id="research-orgs",
            name="Research Organizations",
            url="https://www.research.gov.au",
            type="research",
            category="research",
            description="Government research organizations and institutes",
            selectors=SourceSelectors(
                title="h1, .research-title",
                content=".research-content, .abstract",
                date=".research-date",
                author=".researcher, .author",
                category=".research-field",
            ),
            schedule="weekly",
        ),
        IngestionSource(
            id="news-abc",
            name="ABC News - Data Stories",
            url="https://www.abc.net.au/news/data",
            type="news",
            category="news",
            description="Data journalism and statistics news from ABC",
            selectors=SourceSelectors(
                title="h1, .article-title",
                content=".article-content, .story-body",
                date=".article-date, .published",
                author=".article-author",
                category=".article-category",
            ),
            schedule="daily",
        ),
    ]


class IngestionConfig(BaseModel):
    """Configuration for harvesting listing pages into many data assets."""

    item_containers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_ITEM_CONTAINERS),
        description="Selectors whose matches are treated as one listing item each.",
    )
    page_containers: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PAGE_CONTAINERS),
        description="Whole-page containers tried when no item or headline yields anything.",
    )
    max_items: int = Field(default=50, ge=1, description="Items kept per source.")
    min_title_length: int = Field(default=5, ge=0, description="Item titles shorter than this are skipped.")
    min_headline_length: int = Field(default=10, ge=0, description="Headline fallback titles must be longer than this.")
    sources: List[IngestionSource] = Field(default_factory=_default_sources)

    @field_validator("sources")
    @classmethod
    def validate_unique_ids(cls, v: List[IngestionSource]) -> List[IngestionSource]:
        ids = [source.id for source in v]
        if len(ids) != len(set(ids)):
            raise ValueError("ingestion source ids must be unique")
        return v

    def get_source(self, source_id: str) -> Optional[IngestionSource]:
        return next((source for source in self.sources if source.id == source_id), None)


class StorageConfig(BaseModel):
    """Configuration for the in-memory result store."""

    max_jobs: int = Field(default=1000, ge=1, description="Jobs kept before the oldest are evicted.")


class WebConfig(BaseModel):
    """Configuration for the HTTP API."""

    host: str = Field(default="127.0.0.1", description="Host for the web server.")
    port: int = Field(default=8000, description="Port for the web server.")


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")
    prometheus_enabled: bool = Field(default=True, description="Expose Prometheus metrics on /metrics.")

    @field_validator("log_file", mode="before")
    @classmethod
    def create_parent_dir(cls, v: str | Path | None) -> str | None:
        if v is None:
            return None
        path = Path(v)
        path.parent.mkdir(parents=True, exist_ok=True)
        return str(path)


# --- Main Configuration Class ---


class Config(BaseSettings):
    project_name: str = "DataLandscape"
    version: str = "0.1.0"
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)

    model_config = SettingsConfigDict(env_prefix="DATALANDSCAPE_", env_nested_delimiter="__", case_sensitive=False)

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)


def find_config_file() -> Path | None:
    current_dir = Path.cwd()
    for path in (current_dir / "config.yaml", current_dir / "config.yml"):
        if path.exists():
            return path
    return None

