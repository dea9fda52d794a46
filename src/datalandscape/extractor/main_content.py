"""
Main-content locator: picks the text node most likely to hold the page's
substantive content.
"""

from __future__ import annotations

from typing import List, Optional

import structlog

from datalandscape.config.config import DEFAULT_CONTENT_SELECTORS, ExtractionSettings

from .document import ParsedDocument, visible_text

logger = structlog.get_logger(__name__)


class MainContentLocator:
    """Ranked-selector search with a paragraph fallback.

    The first selector whose first match has more than ``min_container_length``
    characters of text wins. Otherwise the first ``<p>`` longer than
    ``min_paragraph_length`` is used. An empty string means "no signal".
    """

    def __init__(self, settings: Optional[ExtractionSettings] = None) -> None:
        settings = settings or ExtractionSettings()
        self.selectors: List[str] = list(settings.content_selectors or DEFAULT_CONTENT_SELECTORS)
        self.min_container_length = settings.min_container_length
        self.min_paragraph_length = settings.min_paragraph_length

    def locate(self, doc: ParsedDocument) -> str:
        if not doc.is_html:
            return doc.body_text()

        for selector in self.selectors:
            element = doc.select_one(selector)
            if element is None:
                continue
            text = visible_text(element)
            if len(text) > self.min_container_length:
                logger.debug("Main content located", selector=selector, length=len(text))
                return text

        for paragraph in doc.select("p"):
            text = visible_text(paragraph)
            if len(text) > self.min_paragraph_length:
                logger.debug("Main content fell back to paragraph", length=len(text))
                return text

        return ""
