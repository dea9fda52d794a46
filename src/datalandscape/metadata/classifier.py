"""
Keyword-driven topic and data-type classification.

Matching is plain case-insensitive substring search over the concatenated
inputs. Short keywords such as ``ai`` or ``db`` also hit inside unrelated
words; that approximation is kept as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .structured_data_parser import as_text_list
from .tables import (
    DATA_TYPE_INDICATORS,
    DATA_TYPE_KEYWORDS,
    FILE_FORMAT_TOKENS,
    SPECIFIC_TERMS,
    TOPIC_KEYWORDS,
)

DEFAULT_MAX_TOPICS = 5
NO_CLASSIFICATION = "Information"


@dataclass(frozen=True)
class Classification:
    topics: List[str] = field(default_factory=lambda: [NO_CLASSIFICATION])
    data_types: List[str] = field(default_factory=lambda: [NO_CLASSIFICATION])


def _contains_any(haystack: str, needles: Iterable[str]) -> bool:
    return any(needle in haystack for needle in needles)


def _dedupe(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def extract_key_topics(text: str, title: str = "", url: str = "", *, max_topics: int = DEFAULT_MAX_TOPICS) -> List[str]:
    combined = f"{title} {text} {url}".lower()
    topics: List[str] = [
        category for category, keywords in TOPIC_KEYWORDS.items() if _contains_any(combined, keywords)
    ]
    topics.extend(label for label, triggers in SPECIFIC_TERMS if _contains_any(combined, triggers))
    topics = _dedupe(topics)[:max_topics]
    return topics or [NO_CLASSIFICATION]


def extract_data_types(text: str, title: str = "", structured_data: Optional[Dict[str, Any]] = None) -> List[str]:
    data_types: List[str] = []
    if structured_data:
        data_types.extend(as_text_list(structured_data.get("variableMeasured")))

    combined = f"{text} {title}".lower()
    data_types.extend(token.upper() for token in FILE_FORMAT_TOKENS if token in combined)
    data_types.extend(keyword for keyword in DATA_TYPE_KEYWORDS if keyword in combined)
    data_types.extend(label for label, triggers in DATA_TYPE_INDICATORS if _contains_any(combined, triggers))

    data_types = _dedupe(data_types)
    return data_types or [NO_CLASSIFICATION]


def classify(
    text: str,
    title: str = "",
    url: str = "",
    structured_data: Optional[Dict[str, Any]] = None,
    *,
    max_topics: int = DEFAULT_MAX_TOPICS,
) -> Classification:
    """Map text, title and URL to bounded topic categories and data-type tags."""
    return Classification(
        topics=extract_key_topics(text, title, url, max_topics=max_topics),
        data_types=extract_data_types(text, title, structured_data),
    )
