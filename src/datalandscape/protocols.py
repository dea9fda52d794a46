"""
Core contracts and dataclasses for DataLandscape.

This module defines the data structures shared by the extraction pipeline
and the protocols its collaborators (fetchers, result stores) satisfy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

# ============================================================================
# Enums
# ============================================================================


class ContentKind(Enum):
    """Kinds of raw content the fetcher can return."""

    HTML = "html"
    CSV = "csv"
    JSON = "json"


class AvailabilityStatus(str, Enum):
    """Access status reported for a data asset."""

    PUBLIC = "public"
    RESTRICTED = "restricted"
    REQUEST_REQUIRED = "request-required"


class JobStatus(str, Enum):
    """Lifecycle states of a batch extraction job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


# ============================================================================
# Errors
# ============================================================================


class DataLandscapeError(Exception):
    """Base exception for DataLandscape errors."""

    pass


class FetchError(DataLandscapeError):
    """Raised when a source URL cannot be retrieved."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"HTTP {status}: {message}" if status else message)
        self.status = status
        self.message = message


# ============================================================================
# Core Dataclasses
# ============================================================================


@dataclass(frozen=True)
class RawDocument:
    """Fetched content prior to parsing."""

    url: str
    text: str
    content_kind: ContentKind = ContentKind.HTML
    status: int = 200
    content_type: Optional[str] = None

    @property
    def size_bytes(self) -> int:
        return len(self.text.encode("utf-8"))


def utc_now_iso() -> str:
    """Current wall-clock time as an ISO 8601 timestamp."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class JobRecord:
    """Bookkeeping for a batch of extractions."""

    id: str
    urls: List[str]
    status: JobStatus = JobStatus.PENDING
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    result_keys: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "urls": list(self.urls),
            "status": self.status.value,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "resultKeys": list(self.result_keys),
            "errors": list(self.errors),
        }


# ============================================================================
# Protocols
# ============================================================================


@runtime_checkable
class DocumentFetcher(Protocol):
    """Anything that can turn a URL into a RawDocument."""

    async def fetch(self, url: str) -> RawDocument:
        """Fetch a URL, raising FetchError on failure."""
        ...


@runtime_checkable
class ResultStore(Protocol):
    """Key-value store for jobs and extraction results."""

    async def put_job(self, job: JobRecord) -> None: ...

    async def get_job(self, job_id: str) -> Optional[JobRecord]: ...

    async def list_jobs(self) -> List[JobRecord]: ...

    async def put_result(self, key: str, result: Dict[str, Any]) -> None: ...

    async def get_result(self, key: str) -> Optional[Dict[str, Any]]: ...
