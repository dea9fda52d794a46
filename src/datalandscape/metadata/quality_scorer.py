"""
Quality Scorer - additive rubric over metadata and content signals

Scores start at a base of 5, gain fixed points for each triggered signal,
and are clamped to 10. The rubric is fixed; it is not a trained model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import structlog

from .tables import REPUTABLE_DOMAINS

logger = structlog.get_logger(__name__)

BASE_SCORE = 5
MAX_SCORE = 10
LONG_CONTENT_LENGTH = 1000

SCORED_META_TAGS: Tuple[str, ...] = ("description", "keywords", "author", "og:description", "twitter:description")

# (signal name, triggers) each worth one point when any trigger occurs in the body.
# Triggers are lowercase and matched case-sensitively against the text as given.
CONTENT_SIGNALS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("methodology", ("methodology",)),
    ("documentation", ("documentation",)),
    ("data_source", ("data source",)),
    ("collection_method", ("collection method",)),
    ("quality_assurance", ("quality assurance",)),
    ("research", ("research", "study", "analysis")),
    ("peer_review", ("peer-reviewed", "journal")),
    ("academic", ("university", "institute")),
    ("dataset", ("dataset", "data set")),
    ("statistics", ("statistics", "statistical")),
    ("access", ("api", "download")),
)


@dataclass
class QualityBreakdown:
    """Triggered signals and their weights, before clamping."""

    signals: Dict[str, int] = field(default_factory=dict)

    @property
    def raw_total(self) -> int:
        return BASE_SCORE + sum(self.signals.values())

    @property
    def score(self) -> int:
        return min(self.raw_total, MAX_SCORE)


class QualityScorer:
    """Fixed additive rubric producing an integer score in [0, 10]."""

    def breakdown(
        self,
        meta_tags: Mapping[str, str],
        structured: Optional[Dict[str, Any]],
        text: str,
        url: str,
    ) -> QualityBreakdown:
        result = QualityBreakdown()
        signals = result.signals

        if structured:
            signals["structured_data"] = 2

        for key in SCORED_META_TAGS:
            if meta_tags.get(key):
                signals[f"meta:{key}"] = 1

        if len(text) > LONG_CONTENT_LENGTH:
            signals["long_content"] = 1

        url_lower = url.lower()
        for domain in REPUTABLE_DOMAINS:
            if domain in url_lower:
                signals["reputable_domain"] = 2
                break

        for name, triggers in CONTENT_SIGNALS:
            if any(trigger in text for trigger in triggers):
                signals[name] = 1

        return result

    def score(
        self,
        meta_tags: Mapping[str, str],
        structured: Optional[Dict[str, Any]],
        text: str,
        url: str,
    ) -> int:
        result = self.breakdown(meta_tags, structured, text, url)
        logger.debug("Quality scored", url=url, score=result.score, signals=sorted(result.signals))
        return result.score
