"""
Shared test configuration for DataLandscape.

Provides sample documents, a stub fetcher and pipeline fixtures so tests
never touch the network unless they mock it explicitly.
"""

from typing import AsyncGenerator, Dict, Optional

import pytest
import pytest_asyncio

from datalandscape.config import Config
from datalandscape.extractor.document import ParsedDocument, parse_document
from datalandscape.fetcher.http_client import classify_content_kind
from datalandscape.pipeline import DatasetInfoPipeline
from datalandscape.protocols import FetchError, RawDocument
from datalandscape.storage import InMemoryResultStore

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


# ============================================================================
# Sample Documents
# ============================================================================

DATASET_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="description" content="Meta description of regional hospital admissions">
    <meta name="keywords" content="health, hospitals, admissions">
    <meta name="author" content="Health Statistics Unit">
    <meta property="og:description" content="Open Graph description">
    <meta property="article:published_time" content="2023-06-01T00:00:00Z">
    <title>Hospital Admissions 2023</title>
    <script type="application/ld+json">
    {
        "@context": "https://schema.org",
        "@type": "Dataset",
        "name": "Hospital Admissions 2023",
        "description": "Structured description of hospital admissions by region",
        "dateCreated": "2023-01-15",
        "dateModified": "2024-02-01",
        "keywords": ["hospital", "admissions"],
        "encodingFormat": "CSV",
        "license": "https://creativecommons.org/licenses/by/4.0/",
        "contentSize": "12 MB",
        "numberOfItems": 52000,
        "version": "2.1",
        "variableMeasured": ["Admissions", {"@type": "PropertyValue", "name": "Length of stay"}],
        "isPartOf": {"@type": "DataCatalog", "name": "National Health Catalogue"},
        "hasPart": [{"name": "Admissions by State"}, {"name": "Admissions by Age"}]
    }
    </script>
</head>
<body>
    <nav>Home | Datasets | About</nav>
    <main>
        <h1>Hospital Admissions 2023</h1>
        <p>This dataset reports hospital admissions for every region, published by the Department of Health.
        It is updated quarterly and follows a documented methodology with quality assurance checks.</p>
        <p>Data can be downloaded as CSV or accessed through the API. Contact data@health.example.org
        for questions about the collection method.</p>
    </main>
</body>
</html>
"""

PLAIN_HTML = """
<html>
<head><title>Plain Page</title></head>
<body><p>Short note.</p></body>
</html>
"""

LISTING_URL = "https://www.abs.gov.au/statistics"

LISTING_HTML = """
<html>
<head><title>Statistics</title></head>
<body>
    <h1>Statistics</h1>
    <article>
        <h3>Labour Force, Australia</h3>
        <p>Headline estimates of employment, unemployment and hours worked from the monthly survey.</p>
        <span class="date">16/05/2024</span>
        <span class="topic">Labour</span>
        <span class="keywords">employment, unemployment</span>
        <a href="/statistics/labour/employment-and-unemployment">Latest release</a>
    </article>
    <article>
        <h3>CPI</h3>
    </article>
    <article>
        <h3>Hospital admissions by region</h3>
        <p>Health statistics covering hospital admissions across every region.</p>
        <a href="https://www.aihw.gov.au/hospitals">AIHW release</a>
    </article>
</body>
</html>
"""

SAMPLE_CSV = "region,year,admissions\nNorth,2023,1200\nSouth,2023,980\nEast,2023,1410\n"

SAMPLE_JSON = '{"description": "Monthly rainfall records", "station": "A1", "values": [1, 2, 3]}'


def make_doc(html: str, url: str = "https://example.org/page") -> ParsedDocument:
    return parse_document(RawDocument(url=url, text=html))


class StubFetcher:
    """In-memory DocumentFetcher keyed by URL."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, failures: Optional[Dict[str, FetchError]] = None):
        self.pages = pages or {}
        self.failures = failures or {}
        self.calls = []

    async def fetch(self, url: str) -> RawDocument:
        self.calls.append(url)
        if url in self.failures:
            raise self.failures[url]
        if url not in self.pages:
            raise FetchError(404, "Not Found")
        return RawDocument(url=url, text=self.pages[url], content_kind=classify_content_kind(url))


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def dataset_doc() -> ParsedDocument:
    return make_doc(DATASET_HTML, "https://example.org/datasets/hospital-admissions")


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher(
        pages={
            "https://example.org/datasets/hospital-admissions": DATASET_HTML,
            "https://example.org/plain": PLAIN_HTML,
            "https://example.org/files/admissions.csv": SAMPLE_CSV,
            LISTING_URL: LISTING_HTML,
        },
        failures={"https://example.org/broken": FetchError(503, "Service Unavailable")},
    )


@pytest_asyncio.fixture
async def pipeline(config: Config, stub_fetcher: StubFetcher) -> AsyncGenerator[DatasetInfoPipeline, None]:
    async with InMemoryResultStore(config.storage) as store:
        yield DatasetInfoPipeline(config, fetcher=stub_fetcher, store=store)


@pytest.fixture
def dataset_html() -> str:
    return DATASET_HTML


@pytest.fixture
def plain_html() -> str:
    return PLAIN_HTML


@pytest.fixture
def listing_html() -> str:
    return LISTING_HTML


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV


@pytest.fixture
def sample_json() -> str:
    return SAMPLE_JSON


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    return make_doc
