"""
FastAPI application exposing the extraction pipeline over HTTP.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Coroutine, Dict, List, Optional, Set
from uuid import uuid4

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from datalandscape import __version__
from datalandscape.config.config import Config
from datalandscape.pipeline import DatasetInfoPipeline
from datalandscape.protocols import JobRecord

logger = structlog.get_logger(__name__)


class DatasetInfoRequest(BaseModel):
    url: Optional[str] = None
    title: Optional[str] = None


class ContentAnalysisRequest(BaseModel):
    url: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None


class JobRequest(BaseModel):
    urls: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def _pipeline(request: Request) -> DatasetInfoPipeline:
    return request.app.state.pipeline


def create_app(config: Optional[Config] = None, pipeline: Optional[DatasetInfoPipeline] = None) -> FastAPI:
    """Build the application. A pipeline may be injected; otherwise one is created from ``config``."""
    if pipeline is not None:
        config = pipeline.config
    config = config or Config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage application lifecycle."""
        app.state.pipeline = pipeline or DatasetInfoPipeline(config)
        app.state.background_jobs = set()
        app.state.start_time = time.time()
        await app.state.pipeline.initialize()
        logger.info("DataLandscape API started", version=__version__)

        yield

        jobs: Set[asyncio.Task] = app.state.background_jobs
        for task in jobs:
            task.cancel()
        if jobs:
            await asyncio.gather(*jobs, return_exceptions=True)
        await app.state.pipeline.close()
        logger.info("DataLandscape API stopped")

    app = FastAPI(title="DataLandscape", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.post("/api/fetch-dataset-info")
    async def fetch_dataset_info(body: DatasetInfoRequest, request: Request) -> Any:
        if not body.url:
            return _bad_request("URL is required")
        result = await _pipeline(request).extract(body.url, body.title)
        return {"dataAsset": result.to_json_dict()}

    @app.post("/api/analyze-content")
    async def analyze_content(body: ContentAnalysisRequest, request: Request) -> Any:
        """Analyse a page. Caller-supplied ``content`` is folded into topic and governance matching."""
        if not body.url or not body.title:
            return _bad_request("URL and title are required")
        result = await _pipeline(request).extract(body.url, body.title, extra_text=body.content)
        record = result.to_json_dict()
        analysis = record["contentAnalysis"]
        return {
            "summary": analysis["summary"],
            "keyTopics": analysis["keyTopics"],
            "dataTypes": analysis["dataTypes"],
            "qualityScore": analysis["qualityScore"],
            "updateFrequency": analysis["updateFrequency"],
            "metadata": record["metadata"],
            "dataGovernance": record["dataGovernance"],
        }

    @app.get("/api/ingestion/sources")
    async def list_sources(request: Request) -> Dict[str, Any]:
        sources = _pipeline(request).config.ingestion.sources
        return {"sources": [source.model_dump(mode="json") for source in sources]}

    @app.post("/api/ingestion/sources/{source_id}")
    async def ingest_source(source_id: str, request: Request) -> Dict[str, Any]:
        pipeline_ = _pipeline(request)
        source = pipeline_.config.ingestion.get_source(source_id)
        if source is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Source not found")
        result = await pipeline_.ingest(source)
        return {"result": result.to_json_dict()}

    @app.post("/api/jobs", status_code=status.HTTP_202_ACCEPTED)
    async def create_job(body: JobRequest, request: Request) -> Any:
        """Start a batch job over ``urls``, or an ingestion job over configured ``sources``."""
        urls = [url for url in body.urls if url]
        source_ids = [source_id for source_id in body.sources if source_id]
        if urls and source_ids:
            return _bad_request("Provide either urls or sources, not both")
        if not urls and not source_ids:
            return _bad_request("At least one URL or source is required")

        pipeline_ = _pipeline(request)
        job_id = uuid4().hex
        runner: Coroutine[Any, Any, JobRecord]
        if source_ids:
            ingestion = pipeline_.config.ingestion
            sources = [ingestion.get_source(source_id) for source_id in source_ids]
            unknown = [source_id for source_id, source in zip(source_ids, sources) if source is None]
            if unknown:
                return _bad_request(f"Unknown sources: {', '.join(unknown)}")
            selected = [source for source in sources if source is not None]
            job = JobRecord(id=job_id, urls=[source.url for source in selected])
            runner = pipeline_.ingest_sources(selected, job_id=job_id)
        else:
            job = JobRecord(id=job_id, urls=urls)
            runner = pipeline_.extract_many(urls, job_id=job_id)

        await pipeline_.store.put_job(job)
        task = asyncio.create_task(runner)
        jobs: Set[asyncio.Task] = request.app.state.background_jobs
        jobs.add(task)
        task.add_done_callback(jobs.discard)
        return {"job": job.to_dict()}

    @app.get("/api/jobs/{job_id}")
    async def get_job(job_id: str, request: Request) -> Dict[str, Any]:
        store = _pipeline(request).store
        job = await store.get_job(job_id)
        if job is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
        results = []
        for key in job.result_keys:
            result = await store.get_result(key)
            if result is not None:
                results.append(result)
        return {"job": job.to_dict(), "results": results}

    @app.delete("/api/jobs/{job_id}")
    async def cancel_job(job_id: str, request: Request) -> Dict[str, Any]:
        pipeline_ = _pipeline(request)
        if await pipeline_.store.get_job(job_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
        return {"id": job_id, "cancelled": await pipeline_.cancel_job(job_id)}

    @app.get("/health")
    async def health_check(request: Request) -> Dict[str, Any]:
        """Liveness check."""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": __version__,
            "uptime_seconds": time.time() - request.app.state.start_time,
        }

    if config.monitoring.prometheus_enabled:

        @app.get("/metrics")
        async def get_prometheus_metrics() -> Any:
            """Endpoint for Prometheus to scrape."""
            return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
