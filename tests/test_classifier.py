"""
Tests for keyword-driven topic and data-type classification.
"""

import pytest

from datalandscape.metadata import classify
from datalandscape.metadata.classifier import extract_data_types, extract_key_topics


class TestKeyTopics:
    def test_no_match_returns_information(self):
        assert extract_key_topics("", "", "") == ["Information"]

    def test_categories_in_table_order(self):
        topics = extract_key_topics("hospital wait times and school enrolment", "Report", "https://example.org/x")
        assert topics[:2] == ["Health & Medicine", "Education"]
        assert "Report" in topics

    def test_matching_is_case_insensitive_across_title_text_and_url(self):
        assert "Energy" in extract_key_topics("", "SOLAR output", "")
        assert "Economics & Finance" in extract_key_topics("", "", "https://example.org/GDP")

    def test_topics_are_capped_and_deduplicated(self):
        text = (
            "population economics health education transport environment social technology "
            "agriculture energy government business science culture dataset statistics survey"
        )
        topics = extract_key_topics(text, "", "")
        assert len(topics) == 5
        assert len(set(topics)) == len(topics)

    def test_cap_is_configurable(self):
        assert len(extract_key_topics("health school road", "", "", max_topics=2)) == 2

    def test_substring_collisions_are_kept(self):
        # "age" inside "page" still hits the demographics category.
        assert "Population & Demographics" in extract_key_topics("", "Home page", "")


class TestDataTypes:
    def test_csv_in_text_and_url(self):
        result = classify("download the csv file", "", "https://example.org/data.csv")
        assert "CSV" in result.data_types

    def test_variable_measured_comes_first(self):
        structured = {"variableMeasured": [{"name": "Rainfall"}, "Temperature"]}
        data_types = extract_data_types("time series of climate readings", "", structured)
        assert data_types[:2] == ["Rainfall", "Temperature"]
        assert "time series" in data_types
        assert "Environmental" in data_types

    def test_indicators(self):
        data_types = extract_data_types("REST endpoint over a spreadsheet of population figures", "")
        assert {"API", "Tabular", "Demographic"} <= set(data_types)

    def test_empty_returns_information(self):
        assert extract_data_types("", "") == ["Information"]

    def test_deduplicated(self):
        data_types = extract_data_types("api api rest endpoint", "API")
        assert data_types.count("API") == 1


@pytest.mark.parametrize(
    "text,title,url",
    [
        ("", "", ""),
        ("x" * 10000, "", ""),
        ("health " * 500, "economics", "https://data.gov.au/population"),
    ],
)
def test_classify_is_total_and_bounded(text, title, url):
    result = classify(text, title, url)
    assert 1 <= len(result.topics) <= 5
    assert result.data_types
