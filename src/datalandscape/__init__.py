"""
DataLandscape - data asset extraction and heuristic scoring for web sources.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .models import ExtractionResult
from .pipeline import DatasetInfoPipeline

__all__ = ["__version__", "Config", "DatasetInfoPipeline", "ExtractionResult"]
