"""
Tests for the single-purpose field extractors.
"""

import time

import pytest

from datalandscape.metadata import MetadataMap, MetadataSource
from datalandscape.metadata import field_extractors as fx
from datalandscape.protocols import AvailabilityStatus

URL = "https://example.org/page"


@pytest.fixture
def fields():
    return MetadataMap()


class TestDepartment:
    def test_department_of_phrase(self, fields):
        text = "These figures are compiled by the Department of Health."
        assert fx.extract_department(fields, None, text, URL) == "Health"

    def test_domain_table_short_circuits(self, fields):
        text = "Published by the Department of Health."
        url = "https://data.abs.gov.au/data/ABS,CPI/all"
        assert fx.extract_department(fields, None, text, url) == "Australian Bureau of Statistics"

    def test_suffix_pattern(self, fields):
        text = "Contact the Treasury department today"
        assert fx.extract_department(fields, None, text, URL) == "Contact the Treasury"

    def test_university_pattern(self, fields):
        text = "Figures compiled at Monash University, 2021."
        assert fx.extract_department(fields, None, text, URL) == "Monash University"

    def test_title_is_searched_after_text(self, fields):
        title = "Bureau of Meteorology rainfall"
        assert fx.extract_department(fields, None, "nothing here.", URL, title=title) == "Meteorology rainfall"

    def test_publisher_then_affiliation(self, fields):
        fields.set("publisher", "Open Data Institute", MetadataSource.STRUCTURED)
        assert fx.extract_department(fields, None, "", URL) == "Open Data Institute"
        assert fx.extract_department(MetadataMap(), None, "Affiliation: Lab Group.", URL) == "Lab Group"

    def test_unknown_returns_none(self, fields):
        assert fx.extract_department(fields, None, "", URL) is None

    def test_long_name_keeps_nearest_words(self, fields):
        text = "Figures come from the " + "very " * 30 + "long named agency"
        assert fx.extract_department(fields, None, text, URL) == " ".join(["very"] * 9 + ["long", "named"])

    def test_long_text_without_anchor_is_fast(self, fields):
        text = "data catalogue records " * 5000
        start = time.perf_counter()
        assert fx.extract_department(fields, None, text, URL) is None
        assert fx.extract_custodian(fields, None, text, URL) is None
        assert time.perf_counter() - start < 2.0


class TestLicense:
    def test_no_phrase_is_unknown(self, fields):
        assert fx.extract_license(fields, None, "All rights reserved.", URL) == "Unknown"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Released under a Creative Commons licence", "Creative Commons"),
            ("This is open data for everyone", "Open Data License"),
            ("Dedicated to the public domain", "Public Domain"),
        ],
    )
    def test_canned_phrases(self, fields, text, expected):
        assert fx.extract_license(fields, None, text, URL) == expected

    def test_structured_license_wins(self, fields):
        fields.set("license", "CC-BY-4.0", MetadataSource.STRUCTURED)
        assert fx.extract_license(fields, None, "public domain", URL) == "CC-BY-4.0"


class TestFormat:
    def test_declared_format_wins(self, fields):
        fields.set("format", "text/csv", MetadataSource.STRUCTURED)
        assert fx.extract_format(fields, None, "json", URL) == "text/csv"

    @pytest.mark.parametrize(
        "text,url,expected",
        [
            ("download the CSV", URL, "CSV"),
            ("", "https://example.org/file.json", "JSON"),
            ("an xlsx workbook", URL, "Excel"),
            ("query the endpoint", URL, "API"),
            ("", "https://example.org/", "Web Content"),
        ],
    )
    def test_text_and_url_hints(self, fields, text, url, expected):
        assert fx.extract_format(fields, None, text, url) == expected


class TestContactAndAccess:
    def test_first_email_in_document_order(self, fields):
        text = "Write to first@example.org or second@example.org."
        assert fx.extract_contact_email(fields, None, text, URL) == "first@example.org"

    def test_no_email(self, fields):
        assert fx.extract_contact_email(fields, None, "no address", URL) is None

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Access is restricted to accredited researchers", AvailabilityStatus.RESTRICTED),
            ("Submit a request to obtain the files", AvailabilityStatus.REQUEST_REQUIRED),
            ("Freely available", AvailabilityStatus.PUBLIC),
        ],
    )
    def test_availability_status(self, fields, text, expected):
        assert fx.determine_availability_status(fields, None, text, URL) is expected

    def test_request_process(self, fields):
        assert fx.extract_request_process(fields, None, "Use our API", URL) == "API access"
        assert fx.extract_request_process(fields, None, "Download now", URL) == "Direct download"
        assert fx.extract_request_process(fields, None, "nothing", URL) is None

    def test_custodian(self, fields):
        assert fx.extract_custodian(fields, None, "", "https://www.abs.gov.au/x") == "Australian Bureau of Statistics"
        assert fx.extract_custodian(fields, None, "Maintained by City Council.", URL) == "City Council"
        assert fx.extract_custodian(fields, None, "", URL) is None


class TestDescriptiveFields:
    def test_description_precedence(self, fields):
        text = "short\n" + "A first substantial line of body text that is longer than fifty characters.\n"
        assert fx.extract_description(fields, None, text, URL).startswith("A first substantial line")
        fields.set("description", "meta", MetadataSource.META)
        assert fx.extract_description(fields, None, text, URL) == "meta"

    def test_description_truncates_long_lines(self, fields):
        text = "word " * 100
        description = fx.extract_description(fields, None, text, URL)
        assert description.endswith("...")
        assert len(description) == 203

    def test_description_title_fallback(self, fields):
        assert fx.extract_description(fields, None, "", URL, title="Rainfall") == "Information about Rainfall"
        assert fx.extract_description(fields, None, "", URL) is None

    def test_summary(self):
        assert fx.generate_summary("Short description", "") == "Short description"
        text = "Welcome to the home page of our site. This page holds statistics on rainfall. End."
        assert fx.generate_summary(None, text) == "This page holds statistics on rainfall"
        assert fx.generate_summary(None, "") == "Information extracted from webpage content."

    def test_purpose_and_frequency(self, fields):
        assert fx.extract_purpose(fields, {"purpose": "Budgeting"}, "research", URL) == "Budgeting"
        assert fx.extract_purpose(fields, None, "Supports policy work", URL) == "Policy development"
        assert fx.extract_update_frequency(fields, {"accrualPeriodicity": "P1M"}, "", URL) == "P1M"
        assert fx.extract_update_frequency(fields, None, "Published yearly", URL) == "Annually"
        assert fx.extract_update_frequency(fields, None, "", URL) is None

    def test_tags_combine_keywords_and_common_terms(self, fields):
        fields.set("keywords", ["rainfall", "data"], MetadataSource.META)
        tags = fx.extract_tags(fields, None, "An open data dataset", URL)
        assert tags == ["rainfall", "data", "dataset", "open data"]


class TestTechnicalFields:
    def test_dates(self, fields):
        fields.set("publishedDate", "2023-06-01", MetadataSource.META)
        assert fx.extract_collection_date(fields, None, "", URL) == "2023-06-01"
        fields.set("createdDate", "2023-01-01", MetadataSource.STRUCTURED)
        assert fx.extract_collection_date(fields, None, "", URL) == "2023-01-01"
        assert fx.extract_last_updated(fields, None, "", URL) is None

    @pytest.mark.parametrize(
        "value,expected",
        [(12, 12), (7.9, 7), ("1,024", 1024), ("many", None), (True, None), (float("nan"), None), (float("inf"), None)],
    )
    def test_records(self, fields, value, expected):
        fields.set("records", value, MetadataSource.STRUCTURED)
        assert fx.extract_records(fields, None, "", URL) == expected

    def test_relationships(self, fields):
        fields.set("parentDataset", "Catalogue", MetadataSource.STRUCTURED)
        structured = {"relatedSeries": ["A"], "isBasedOn": {"name": "Census"}}
        lineage = fx.extract_relationships(fields, structured, "", URL)
        assert lineage.parent_dataset == "Catalogue"
        assert lineage.related_series == ["A"]
        assert lineage.derived_from == ["Census"]
        assert lineage.child_datasets == []


@pytest.mark.parametrize("text,url", [("", ""), ("\n\n", "not a url"), ("@@@ ... !!!", "https://")])
def test_extractors_are_total(text, url):
    fields = MetadataMap()
    for extractor in (
        fx.extract_description,
        fx.extract_format,
        fx.extract_license,
        fx.extract_department,
        fx.extract_collection_date,
        fx.extract_last_updated,
        fx.extract_size,
        fx.extract_records,
        fx.extract_version,
        fx.extract_tags,
        fx.extract_purpose,
        fx.extract_update_frequency,
        fx.determine_availability_status,
        fx.extract_custodian,
        fx.extract_contact_email,
        fx.extract_request_process,
        fx.extract_relationships,
    ):
        extractor(fields, None, text, url)
