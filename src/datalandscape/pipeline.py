"""
Pipeline orchestration for DataLandscape.

Fetch is the only suspension point. Parsing, extraction, scoring and
governance matching run synchronously once the bytes have arrived, and a
failed source always degrades to the fallback record.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

import structlog

from datalandscape.config.config import Config, IngestionSource
from datalandscape.extractor.document import parse_document
from datalandscape.fetcher.http_client import HttpClient
from datalandscape.metadata.asset_builder import DataAssetBuilder, build_fallback_result
from datalandscape.models import ExtractionResult, IngestedItem, IngestionResult
from datalandscape.observability.metrics import METRICS
from datalandscape.protocols import (
    DocumentFetcher,
    FetchError,
    JobRecord,
    JobStatus,
    RawDocument,
    ResultStore,
    utc_now_iso,
)
from datalandscape.storage.result_store import InMemoryResultStore

logger = structlog.get_logger(__name__)

JobWorker = Callable[[int, str], Awaitable[Tuple[Dict[str, Any], Optional[str]]]]


def _sort_result_keys(job: JobRecord) -> None:
    job.result_keys.sort(key=lambda key: int(key.rsplit(":", 1)[1]))


class DatasetInfoPipeline:
    """
    Fetches sources and turns them into data asset records.

    Collaborators are injectable. When none are given the pipeline owns an
    HttpClient and an InMemoryResultStore and manages their lifecycle.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        fetcher: Optional[DocumentFetcher] = None,
        store: Optional[ResultStore] = None,
        builder: Optional[DataAssetBuilder] = None,
    ) -> None:
        self.config = config or Config()
        self._owns_fetcher = fetcher is None
        self._owns_store = store is None
        self.fetcher: DocumentFetcher = fetcher or HttpClient(self.config)
        self.store: ResultStore = store or InMemoryResultStore(self.config.storage)
        self.builder = builder or DataAssetBuilder(self.config.extraction, self.config.ingestion)
        self._job_tasks: Dict[str, asyncio.Task] = {}

    async def initialize(self) -> None:
        if self._owns_fetcher and isinstance(self.fetcher, HttpClient):
            await self.fetcher.initialize()
        if self._owns_store and isinstance(self.store, InMemoryResultStore):
            await self.store.open()

    async def close(self) -> None:
        for task in list(self._job_tasks.values()):
            task.cancel()
        if self._owns_fetcher and isinstance(self.fetcher, HttpClient):
            await self.fetcher.close()
        if self._owns_store and isinstance(self.store, InMemoryResultStore):
            await self.store.close()

    async def __aenter__(self) -> "DatasetInfoPipeline":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Single extraction
    # ------------------------------------------------------------------

    def extract_from_raw(
        self, raw: RawDocument, title: Optional[str] = None, *, extra_text: Optional[str] = None
    ) -> ExtractionResult:
        """Parse and analyse an already fetched document. Never raises."""
        result, _ = self._build(raw, title, extra_text)
        return result

    def _build(
        self, raw: RawDocument, title: Optional[str], extra_text: Optional[str] = None
    ) -> Tuple[ExtractionResult, Optional[str]]:
        try:
            doc = parse_document(raw)
            result = self.builder.build(doc, title, extra_text=extra_text)
        except Exception as e:
            logger.error("Extraction failed, using fallback record", url=raw.url, error=str(e), exc_info=True)
            METRICS["extractions_total"].labels(outcome="error").inc()
            return build_fallback_result(title), str(e) or e.__class__.__name__

        METRICS["extractions_total"].labels(outcome="success").inc()
        METRICS["quality_score"].observe(result.content_analysis.quality_score)
        return result, None

    async def _extract(
        self, url: str, title: Optional[str], extra_text: Optional[str] = None
    ) -> Tuple[ExtractionResult, Optional[str]]:
        try:
            raw = await self.fetcher.fetch(url)
        except FetchError as e:
            logger.warning("Fetch failed, using fallback record", url=url, status=e.status, error=e.message)
            METRICS["extractions_total"].labels(outcome="fetch_error").inc()
            return build_fallback_result(title), str(e)
        except Exception as e:
            logger.error("Fetcher raised unexpectedly, using fallback record", url=url, error=str(e), exc_info=True)
            METRICS["extractions_total"].labels(outcome="error").inc()
            return build_fallback_result(title), str(e) or e.__class__.__name__
        return self._build(raw, title, extra_text)

    async def extract(
        self, url: str, title: Optional[str] = None, *, extra_text: Optional[str] = None
    ) -> ExtractionResult:
        """Fetch ``url`` and build its data asset record.

        ``extra_text`` is folded into the text used for topic and governance
        matching. Fetch failures and unexpected errors yield the fallback
        record instead of an exception. Cancellation propagates.
        """
        result, _ = await self._extract(url, title, extra_text)
        return result

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def ingest(self, source: IngestionSource) -> IngestionResult:
        """Fetch a source's listing page and harvest its items. Never raises except on cancellation."""
        errors: List[str] = []
        items: List[IngestedItem] = []
        try:
            raw = await self.fetcher.fetch(source.url)
            items = self.builder.extract_items(parse_document(raw), source)
        except FetchError as e:
            logger.warning("Ingestion fetch failed", source=source.id, url=source.url, error=str(e))
            errors.append(str(e))
        except Exception as e:
            logger.error("Ingestion failed", source=source.id, url=source.url, error=str(e), exc_info=True)
            errors.append(str(e) or e.__class__.__name__)

        METRICS["ingested_items_total"].labels(source=source.id).inc(len(items))
        logger.info("Source ingested", source=source.id, items=len(items), errors=len(errors))
        return IngestionResult(
            source_id=source.id,
            source_name=source.name,
            url=source.url,
            success=not errors,
            data_count=len(items),
            errors=errors,
            data=items,
        )

    # ------------------------------------------------------------------
    # Batch jobs
    # ------------------------------------------------------------------

    async def extract_many(self, urls: Iterable[str], *, job_id: Optional[str] = None) -> JobRecord:
        """Extract every URL concurrently and record the batch as a job.

        A failure for one URL never affects the others; each result is
        stored under ``<job id>:<index>``.
        """

        async def run_one(index: int, url: str) -> Tuple[Dict[str, Any], Optional[str]]:
            result, error = await self._extract(url, None)
            return {"url": url, "dataAsset": result.to_json_dict()}, error

        return await self._run_job(list(urls), run_one, job_id)

    async def ingest_sources(self, sources: Iterable[IngestionSource], *, job_id: Optional[str] = None) -> JobRecord:
        """Ingest every source concurrently as one job.

        Each source's IngestionResult is stored under ``<job id>:<index>``;
        the job's urls are the sources' listing page URLs.
        """
        source_list = list(sources)

        async def run_one(index: int, url: str) -> Tuple[Dict[str, Any], Optional[str]]:
            result = await self.ingest(source_list[index])
            return result.to_json_dict(), "; ".join(result.errors) or None

        return await self._run_job([source.url for source in source_list], run_one, job_id)

    async def _run_job(self, urls: List[str], run_one: JobWorker, job_id: Optional[str]) -> JobRecord:
        job = JobRecord(
            id=job_id or uuid4().hex,
            urls=urls,
            status=JobStatus.RUNNING,
            started_at=utc_now_iso(),
        )
        await self.store.put_job(job)

        with structlog.contextvars.bound_contextvars(job_id=job.id):
            logger.info("Batch extraction started", urls=len(job.urls))
            task = asyncio.create_task(self._run_batch(job, run_one))
            self._job_tasks[job.id] = task
            try:
                await task
                job.status = JobStatus.COMPLETED
            except asyncio.CancelledError:
                job.status = JobStatus.CANCELLED
                job.completed_at = utc_now_iso()
                _sort_result_keys(job)
                await self.store.put_job(job)
                logger.info("Batch extraction cancelled", completed=len(job.result_keys))
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
                return job
            except Exception as e:
                job.status = JobStatus.FAILED
                job.errors.append(str(e) or e.__class__.__name__)
                logger.error("Batch extraction failed", error=str(e), exc_info=True)
            finally:
                self._job_tasks.pop(job.id, None)

            job.completed_at = utc_now_iso()
            _sort_result_keys(job)
            await self.store.put_job(job)
            logger.info(
                "Batch extraction finished",
                status=job.status.value,
                results=len(job.result_keys),
                errors=len(job.errors),
            )
        return job

    async def _run_batch(self, job: JobRecord, run_one: JobWorker) -> None:
        semaphore = asyncio.Semaphore(self.config.fetcher.max_concurrency)

        async def run_indexed(index: int, url: str) -> None:
            async with semaphore:
                payload, error = await run_one(index, url)
            key = f"{job.id}:{index}"
            await self.store.put_result(key, payload)
            job.result_keys.append(key)
            if error:
                job.errors.append(f"{url}: {error}")
            await self.store.put_job(job)

        await asyncio.gather(*(run_indexed(index, url) for index, url in enumerate(job.urls)))

    async def cancel_job(self, job_id: str) -> bool:
        """Cancel a running batch. Returns False when the job is not running."""
        task = self._job_tasks.get(job_id)
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("Batch extraction cancellation requested", job_id=job_id)
        return True
