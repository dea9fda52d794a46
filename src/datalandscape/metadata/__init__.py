"""
Metadata extraction, classification, scoring and governance matching.
"""

from .asset_builder import DataAssetBuilder, build_fallback_result
from .classifier import Classification, classify
from .governance import DEFAULT_PROFILE, GOVERNANCE_PROFILES, analyze_governance
from .metadata_extractor import ExtractedMetadata, MetadataExtractor, MetadataMap, MetadataSource
from .quality_scorer import QualityBreakdown, QualityScorer
from .structured_data_parser import StructuredDataParser

__all__ = [
    "Classification",
    "DEFAULT_PROFILE",
    "DataAssetBuilder",
    "ExtractedMetadata",
    "GOVERNANCE_PROFILES",
    "MetadataExtractor",
    "MetadataMap",
    "MetadataSource",
    "QualityBreakdown",
    "QualityScorer",
    "StructuredDataParser",
    "analyze_governance",
    "build_fallback_result",
    "classify",
]
