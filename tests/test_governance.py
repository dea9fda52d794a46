"""
Tests for governance profile selection.
"""

import pytest

from datalandscape.metadata import DEFAULT_PROFILE, GOVERNANCE_PROFILES, analyze_governance


@pytest.mark.parametrize(
    "text,key",
    [
        ("National HEALTH survey results", "health"),
        ("Estimated resident population", "population"),
        ("Quarterly economic indicators", "economic"),
    ],
)
def test_profile_selected_by_keyword(text, key):
    assert analyze_governance(text).key == key


def test_topics_are_searched_too():
    assert analyze_governance("", ["Health & Medicine"]).key == "health"
    assert analyze_governance("", ["Population & Demographics"]).key == "population"


def test_first_profile_in_order_wins():
    assert analyze_governance("economic and population health").key == "health"


def test_default_profile():
    profile = analyze_governance("rainfall in the catchment")
    assert profile is DEFAULT_PROFILE
    assert profile.is_default
    assert profile.data_availability.data_custodian == "Unknown"
    assert profile.data_access.format == ["Unknown"]


def test_profiles_serialize_without_key():
    payload = GOVERNANCE_PROFILES[0].to_json_dict()
    assert "key" not in payload
    assert set(payload) == {"dataAssets", "dataAvailability", "dataAccess", "dataRelationships"}
    assert payload["dataAccess"]["apiAvailable"] is True
