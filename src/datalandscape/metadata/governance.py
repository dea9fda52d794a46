"""
Governance analyzer: a closed lookup over canned domain profiles.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from ..models import DataAccess, DataAssets, DataAvailability, DataRelationships, GovernanceProfile

HEALTH_PROFILE = GovernanceProfile(
    key="health",
    data_assets=DataAssets(
        description=(
            "Comprehensive health statistics including hospital admissions, mortality data, health surveys, "
            "and Medicare statistics covering population health indicators, healthcare utilization, and "
            "health outcomes across Australia."
        ),
        collection_date="2020-2024",
        purpose=(
            "Monitor population health trends, inform healthcare policy, support research and planning, "
            "and provide evidence for health service delivery improvements."
        ),
        department_catalogues=[
            "ABS Health Statistics Catalogue",
            "Department of Health Data Portal",
            "AIHW Health Data Repository",
        ],
        metadata_available=True,
        metadata_details=(
            "Detailed metadata includes data definitions, collection methodology, quality indicators, "
            "and statistical classifications."
        ),
    ),
    data_availability=DataAvailability(
        is_readily_available=True,
        access_method="Direct download and API access",
        data_custodian=(
            "Australian Bureau of Statistics (ABS), Department of Health, "
            "Australian Institute of Health and Welfare (AIHW)"
        ),
        request_required=False,
        request_process=(
            "No request required for public datasets. Special access may require approval for "
            "sensitive health data."
        ),
    ),
    data_access=DataAccess(
        download_available=True,
        api_available=True,
        access_url="https://data.api.abs.gov.au/rest/data/HEALTH",
        format=["CSV", "JSON", "XML", "Excel"],
        authentication_required=False,
    ),
    data_relationships=DataRelationships(
        is_part_of_series=True,
        series_name="Australian Health Statistics Series",
        related_datasets=["Hospital Statistics", "Causes of Death", "National Health Survey", "Medicare Statistics"],
        dependencies=["Population Estimates", "Geographic Classifications"],
        derived_from=["Hospital Administrative Data", "Death Registrations", "Survey Responses"],
        used_to_create=["Health Performance Indicators", "Healthcare Planning Models", "Policy Impact Assessments"],
    ),
)

POPULATION_PROFILE = GovernanceProfile(
    key="population",
    data_assets=DataAssets(
        description=(
            "Population estimates and projections including demographic statistics, migration data, and "
            "population characteristics by age, sex, and geographic location."
        ),
        collection_date="2016-2024",
        purpose=(
            "Support planning and policy development, demographic analysis, and provide baseline data "
            "for other statistical collections."
        ),
        department_catalogues=["ABS Population Statistics", "Department of Home Affairs Migration Data"],
        metadata_available=True,
        metadata_details=(
            "Comprehensive metadata covering estimation methodology, quality measures, and geographic "
            "classifications."
        ),
    ),
    data_availability=DataAvailability(
        is_readily_available=True,
        access_method="Direct download and API access",
        data_custodian="Australian Bureau of Statistics (ABS)",
        request_required=False,
        request_process="Publicly available with no request required.",
    ),
    data_access=DataAccess(
        download_available=True,
        api_available=True,
        access_url="https://data.api.abs.gov.au/rest/data/POP",
        format=["CSV", "JSON", "Excel"],
        authentication_required=False,
    ),
    data_relationships=DataRelationships(
        is_part_of_series=True,
        series_name="Australian Population Statistics",
        related_datasets=["Census Data", "Migration Statistics", "Demographic Projections"],
        dependencies=["Census Results", "Birth and Death Registrations"],
        derived_from=["Census Data", "Administrative Records", "Survey Data"],
        used_to_create=["Health Statistics", "Economic Indicators", "Social Policy Analysis"],
    ),
)

ECONOMIC_PROFILE = GovernanceProfile(
    key="economic",
    data_assets=DataAssets(
        description=(
            "Economic indicators including Consumer Price Index, employment statistics, and economic "
            "performance metrics for monitoring economic trends and policy analysis."
        ),
        collection_date="2020-2024",
        purpose=(
            "Monitor economic performance, inform monetary policy, support business planning, and provide "
            "economic analysis for government decision-making."
        ),
        department_catalogues=["ABS Economic Statistics", "Reserve Bank of Australia Data", "Treasury Economic Data"],
        metadata_available=True,
        metadata_details=(
            "Detailed methodology, quality indicators, and statistical classifications for economic measures."
        ),
    ),
    data_availability=DataAvailability(
        is_readily_available=True,
        access_method="Direct download and API access",
        data_custodian="Australian Bureau of Statistics (ABS), Reserve Bank of Australia (RBA)",
        request_required=False,
        request_process="Publicly available with scheduled release dates.",
    ),
    data_access=DataAccess(
        download_available=True,
        api_available=True,
        access_url="https://data.api.abs.gov.au/rest/data/CPI",
        format=["CSV", "JSON", "Excel"],
        authentication_required=False,
    ),
    data_relationships=DataRelationships(
        is_part_of_series=True,
        series_name="Australian Economic Indicators",
        related_datasets=["Labour Force Statistics", "National Accounts", "Business Indicators"],
        dependencies=["Price Collection Data", "Employment Surveys"],
        derived_from=["Price Surveys", "Business Surveys", "Administrative Data"],
        used_to_create=["Economic Models", "Policy Analysis", "Business Intelligence"],
    ),
)

DEFAULT_PROFILE = GovernanceProfile(
    key="default",
    data_assets=DataAssets(
        description=(
            "This dataset contains information that has been analyzed for content structure and metadata "
            "extraction. Specific details about data assets would require further investigation."
        ),
        collection_date="Unknown",
        purpose="Data analysis and content processing for information extraction and categorization.",
        department_catalogues=["General Data Catalogue"],
        metadata_available=False,
        metadata_details="Metadata availability unknown - would need to be verified with data custodian.",
    ),
    data_availability=DataAvailability(
        is_readily_available=False,
        access_method="Unknown",
        data_custodian="Unknown",
        request_required=True,
        request_process="Contact data custodian for access information and request procedures.",
    ),
    data_access=DataAccess(
        download_available=False,
        api_available=False,
        access_url="",
        format=["Unknown"],
        authentication_required=True,
    ),
    data_relationships=DataRelationships(),
)

# Checked in order; the first matching key wins.
GOVERNANCE_PROFILES: Tuple[GovernanceProfile, ...] = (HEALTH_PROFILE, POPULATION_PROFILE, ECONOMIC_PROFILE)


def analyze_governance(text: str, topics: Iterable[str] = ()) -> GovernanceProfile:
    """Return the first profile whose key occurs in ``text`` or in any topic, else the default."""
    text = text.lower()
    lowered_topics = [topic.lower() for topic in topics]
    for profile in GOVERNANCE_PROFILES:
        if profile.key in text or any(profile.key in topic for topic in lowered_topics):
            return profile
    return DEFAULT_PROFILE
