"""
Tests for harvesting listing pages from ingestion sources.
"""

import pytest
from prometheus_client import REGISTRY

from datalandscape.config import Config, IngestionConfig, IngestionSource, SourceSelectors
from datalandscape.extractor.document import parse_document
from datalandscape.metadata import DataAssetBuilder
from datalandscape.protocols import ContentKind, JobStatus, RawDocument

LISTING_URL = "https://www.abs.gov.au/statistics"


def _custom_source(**overrides) -> IngestionSource:
    values = {
        "id": "custom",
        "name": "Custom Listing",
        "url": "https://example.org/listing",
        "category": "reports",
        "selectors": SourceSelectors(title="h2", content="p"),
    }
    values.update(overrides)
    return IngestionSource(**values)


@pytest.fixture
def builder():
    return DataAssetBuilder()


@pytest.fixture
def abs_statistics(config):
    return config.ingestion.get_source("abs-statistics")


class TestExtractItems:
    def test_items_read_through_source_selectors(self, builder, abs_statistics, make_doc, listing_html):
        items = builder.extract_items(make_doc(listing_html, LISTING_URL), abs_statistics)

        assert [item.title for item in items] == ["Labour Force, Australia", "Hospital admissions by region"]
        labour = items[0]
        assert labour.content.startswith("Headline estimates of employment")
        assert labour.url == "https://www.abs.gov.au/statistics/labour/employment-and-unemployment"
        assert labour.date == "16/05/2024"
        assert labour.category == "Labour"
        assert labour.tags == ["employment", "unemployment"]
        assert labour.author == "Unknown"
        assert labour.source == abs_statistics.name
        assert labour.metadata["sourceId"] == "abs-statistics"
        assert labour.metadata["sourceType"] == "abs"
        assert labour.data_asset.department == "Australian Bureau of Statistics"

    def test_each_item_gets_its_own_analysis(self, builder, abs_statistics, make_doc, listing_html):
        hospital = builder.extract_items(make_doc(listing_html, LISTING_URL), abs_statistics)[1]

        assert hospital.url == "https://www.aihw.gov.au/hospitals"
        assert hospital.category == "statistics"
        assert hospital.tags == ["statistics"]
        assert hospital.date
        assert hospital.data_asset.data_governance.key == "health"

    def test_item_serializes_camel_case(self, builder, abs_statistics, make_doc, listing_html):
        payload = builder.extract_items(make_doc(listing_html, LISTING_URL), abs_statistics)[0].to_json_dict()
        assert "dataAsset" in payload
        assert payload["dataAsset"]["contentAnalysis"]["qualityScore"] >= 5

    def test_headline_parents_stand_in_for_containers(self, builder, make_doc):
        html = (
            "<html><body>"
            "<div><h2>Quarterly national accounts</h2><a href='/na'>more</a></div>"
            "<div><h2>Short</h2></div>"
            "</body></html>"
        )
        items = builder.extract_items(make_doc(html, "https://example.org/listing"), _custom_source())

        assert [item.title for item in items] == ["Quarterly national accounts"]
        assert items[0].url == "https://example.org/na"
        assert items[0].content == "Quarterly national accounts"

    def test_page_container_is_last_resort(self, builder, make_doc):
        html = "<html><body><main><h2>Releases</h2><p>Latest releases.</p></main></body></html>"
        items = builder.extract_items(make_doc(html, "https://example.org/listing"), _custom_source())

        assert [item.title for item in items] == ["Releases"]
        assert items[0].url == "https://example.org/listing"

    def test_item_count_is_capped(self, make_doc):
        builder = DataAssetBuilder(ingestion=IngestionConfig(max_items=2))
        articles = "".join(f"<article><h2>Release number {i}</h2></article>" for i in range(5))
        html = f"<html><body>{articles}</body></html>"
        items = builder.extract_items(make_doc(html, "https://example.org/listing"), _custom_source())
        assert [item.title for item in items] == ["Release number 0", "Release number 1"]

    def test_unparseable_link_falls_back_to_page_url(self, builder, make_doc):
        html = "<html><body><article><h2>Broken link item</h2><a href='http://[bad'>x</a></article></body></html>"
        items = builder.extract_items(make_doc(html, "https://example.org/listing"), _custom_source())
        assert items[0].url == "https://example.org/listing"

    def test_non_html_payload_has_no_items(self, builder, sample_csv):
        raw = RawDocument(url="https://example.org/x.csv", text=sample_csv, content_kind=ContentKind.CSV)
        doc = parse_document(raw)
        assert builder.extract_items(doc, _custom_source()) == []


@pytest.mark.asyncio
class TestPipelineIngestion:
    async def test_ingest_source(self, pipeline, abs_statistics):
        before = REGISTRY.get_sample_value("datalandscape_ingested_items_total", {"source": "abs-statistics"}) or 0.0
        result = await pipeline.ingest(abs_statistics)

        assert result.success
        assert result.source_id == "abs-statistics"
        assert result.url == LISTING_URL
        assert result.data_count == 2
        assert result.errors == []
        after = REGISTRY.get_sample_value("datalandscape_ingested_items_total", {"source": "abs-statistics"})
        assert after == before + 2

    async def test_unreachable_source_reports_error(self, pipeline):
        result = await pipeline.ingest(_custom_source(url="https://example.org/broken"))

        assert not result.success
        assert result.data_count == 0
        assert result.errors == ["HTTP 503: Service Unavailable"]

    async def test_ingestion_job(self, pipeline, abs_statistics):
        broken = _custom_source(url="https://example.org/broken")
        job = await pipeline.ingest_sources([abs_statistics, broken], job_id="ingest-1")

        assert job.status is JobStatus.COMPLETED
        assert job.urls == [LISTING_URL, "https://example.org/broken"]
        assert job.result_keys == ["ingest-1:0", "ingest-1:1"]
        assert len(job.errors) == 1
        assert job.errors[0].startswith("https://example.org/broken")

        stored = await pipeline.store.get_result("ingest-1:0")
        assert stored["sourceId"] == "abs-statistics"
        assert stored["dataCount"] == 2
        assert stored["data"][0]["dataAsset"]["department"] == "Australian Bureau of Statistics"


class TestIngestionConfig:
    def test_default_sources(self):
        ingestion = Config().ingestion
        assert [source.id for source in ingestion.sources] == [
            "abs-statistics",
            "abs-publications",
            "data-gov-au",
            "research-orgs",
            "news-abc",
        ]
        assert ingestion.max_items == 50
        assert ingestion.get_source("missing") is None

    def test_duplicate_source_ids_are_rejected(self):
        with pytest.raises(ValueError):
            IngestionConfig(sources=[_custom_source(), _custom_source()])

    def test_sources_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "ingestion:\n"
            "  max_items: 10\n"
            "  sources:\n"
            "    - id: council\n"
            "      name: City Council\n"
            "      url: https://council.example.org/data\n"
            "      selectors:\n"
            "        title: .tile-title\n",
            encoding="utf-8",
        )
        ingestion = Config.from_yaml(path).ingestion
        assert ingestion.max_items == 10
        source = ingestion.get_source("council")
        assert source.type == "custom"
        assert source.selectors.date == ".date"
