"""
In-memory job and result store with an explicit lifecycle.
"""

from __future__ import annotations

import asyncio
import copy
from collections import OrderedDict
from typing import Any, Dict, List, Optional

import structlog

from datalandscape.config.config import StorageConfig
from datalandscape.protocols import JobRecord, ResultStore

logger = structlog.get_logger(__name__)


class StoreClosedError(RuntimeError):
    """Raised when a store is used outside its open/close window."""


class InMemoryResultStore(ResultStore):
    """
    Implements the ResultStore protocol over bounded in-process maps.

    Jobs and results are each capped at ``max_jobs`` entries; the oldest
    entry is evicted first. Stored values are copied on the way in and out
    so callers cannot mutate stored state.
    """

    def __init__(self, config: Optional[StorageConfig] = None) -> None:
        self.config = config or StorageConfig()
        self._jobs: "OrderedDict[str, JobRecord]" = OrderedDict()
        self._results: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    async def open(self) -> None:
        self._is_open = True
        logger.info("Result store opened", max_jobs=self.config.max_jobs)

    async def close(self) -> None:
        async with self._lock:
            self._jobs.clear()
            self._results.clear()
        self._is_open = False
        logger.info("Result store closed")

    async def __aenter__(self) -> "InMemoryResultStore":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _check_open(self) -> None:
        if not self._is_open:
            raise StoreClosedError("Result store is not open. Call open() first.")

    def _evict(self, entries: "OrderedDict[str, Any]", kind: str) -> None:
        while len(entries) > self.config.max_jobs:
            key, _ = entries.popitem(last=False)
            logger.debug("Evicted oldest entry", kind=kind, key=key)

    async def put_job(self, job: JobRecord) -> None:
        self._check_open()
        async with self._lock:
            self._jobs[job.id] = copy.deepcopy(job)
            self._jobs.move_to_end(job.id)
            self._evict(self._jobs, "job")

    async def get_job(self, job_id: str) -> Optional[JobRecord]:
        self._check_open()
        async with self._lock:
            job = self._jobs.get(job_id)
            return copy.deepcopy(job) if job is not None else None

    async def list_jobs(self) -> List[JobRecord]:
        self._check_open()
        async with self._lock:
            return [copy.deepcopy(job) for job in self._jobs.values()]

    async def put_result(self, key: str, result: Dict[str, Any]) -> None:
        self._check_open()
        async with self._lock:
            self._results[key] = copy.deepcopy(result)
            self._results.move_to_end(key)
            self._evict(self._results, "result")

    async def get_result(self, key: str) -> Optional[Dict[str, Any]]:
        self._check_open()
        async with self._lock:
            result = self._results.get(key)
            return copy.deepcopy(result) if result is not None else None
