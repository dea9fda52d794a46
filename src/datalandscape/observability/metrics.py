"""
Defines Prometheus metrics for the extraction pipeline.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple app instances) must not
# raise duplicate registration errors.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing

        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)
Histogram = _duplicate_safe_factory(_OrigHistogram)


def _create_metrics() -> Dict[str, Any]:
    return {
        "extractions_total": Counter(
            "datalandscape_extractions_total",
            "Extraction requests by outcome",
            ["outcome"],
        ),
        "fetch_errors_total": Counter(
            "datalandscape_fetch_errors_total",
            "Fetch failures by reason",
            ["reason"],
        ),
        "fetch_duration_seconds": Histogram(
            "datalandscape_fetch_duration_seconds",
            "Time spent fetching source documents",
            buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
        ),
        "ingested_items_total": Counter(
            "datalandscape_ingested_items_total",
            "Listing items harvested from ingestion sources",
            ["source"],
        ),
        "quality_score": Histogram(
            "datalandscape_quality_score",
            "Distribution of data asset quality scores",
            buckets=tuple(float(i) for i in range(11)),
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()
