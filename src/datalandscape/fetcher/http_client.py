"""
HTTP client that retrieves source documents for extraction.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional
from urllib.parse import urlparse

import aiohttp
import structlog

from datalandscape.config.config import Config
from datalandscape.observability.metrics import METRICS
from datalandscape.protocols import ContentKind, FetchError, RawDocument

from .user_agents import build_browser_headers

logger = structlog.get_logger(__name__)


def classify_content_kind(url: str) -> ContentKind:
    """Classify a URL by the file-extension substring it contains."""
    url_lower = url.lower()
    if ".csv" in url_lower:
        return ContentKind.CSV
    if ".json" in url_lower:
        return ContentKind.JSON
    return ContentKind.HTML


class HttpClient:
    """Fetches raw documents with a browser-like header set.

    Non-2xx responses, timeouts and transport failures are raised as
    FetchError. Nothing is retried here; callers decide whether to retry or
    fall back.
    """

    def __init__(self, config: Config):
        self.config = config
        self.fetcher_config = config.fetcher
        self.headers = build_browser_headers(self.fetcher_config)

        self.session: Optional[aiohttp.ClientSession] = None
        self._is_initialized = False

        logger.info(
            "HTTP client initialized",
            timeout=self.fetcher_config.timeout,
            user_agent=self.headers["User-Agent"],
        )

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.fetcher_config.timeout)
            connector = aiohttp.TCPConnector(limit=self.fetcher_config.max_concurrency * 2, ttl_dns_cache=30)
            self.session = aiohttp.ClientSession(connector=connector, timeout=timeout, headers=self.headers)
            self._is_initialized = True
            logger.info("HTTP client session initialized")

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
        self._is_initialized = False
        logger.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch(self, url: str, *, timeout: Optional[float] = None) -> RawDocument:
        """
        Fetch a URL and return its decoded body.

        Args:
            url: URL to fetch
            timeout: Request timeout in seconds (None = use config default)

        Returns:
            RawDocument classified by URL suffix

        Raises:
            FetchError: on malformed URLs, non-2xx responses, timeouts and
                network failures
        """
        if not self._is_initialized or self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        try:
            parsed_url = urlparse(url)
            well_formed = parsed_url.scheme in ("http", "https") and bool(parsed_url.hostname)
        except ValueError:
            well_formed = False
        if not well_formed:
            METRICS["fetch_errors_total"].labels(reason="malformed_url").inc()
            logger.warning("Malformed URL", url=url)
            raise FetchError(0, f"Malformed URL: {url!r}")

        request_timeout = timeout if timeout is not None else self.fetcher_config.timeout
        start_time = time.perf_counter()

        try:
            async with asyncio.timeout(request_timeout):
                async with self.session.get(url) as response:
                    body = await response.read()
                    status = response.status
                    reason = response.reason or ""
                    charset = response.charset
                    content_type = response.headers.get("Content-Type")
        except TimeoutError as e:
            METRICS["fetch_errors_total"].labels(reason="timeout").inc()
            logger.warning("Request timed out", url=url, timeout=request_timeout)
            raise FetchError(0, f"Request timed out after {request_timeout}s") from e
        except aiohttp.ClientError as e:
            METRICS["fetch_errors_total"].labels(reason="network").inc()
            logger.warning("Request failed", url=url, error=str(e))
            raise FetchError(0, str(e) or e.__class__.__name__) from e
        finally:
            METRICS["fetch_duration_seconds"].observe(time.perf_counter() - start_time)

        if not 200 <= status < 300:
            METRICS["fetch_errors_total"].labels(reason=f"{status // 100}xx").inc()
            logger.warning("Non-success response", url=url, status=status)
            raise FetchError(status, reason)

        try:
            text = body.decode(charset or "utf-8", errors="replace")
        except LookupError:
            text = body.decode("utf-8", errors="replace")

        logger.debug("Fetched document", url=url, status=status, bytes=len(body))
        return RawDocument(
            url=url,
            text=text,
            content_kind=classify_content_kind(url),
            status=status,
            content_type=content_type,
        )
