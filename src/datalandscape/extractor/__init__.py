"""
Document parsing and main-content location.
"""

from .document import JsonSummary, ParsedDocument, TabularSummary, parse_document, visible_text
from .main_content import MainContentLocator

__all__ = [
    "JsonSummary",
    "MainContentLocator",
    "ParsedDocument",
    "TabularSummary",
    "parse_document",
    "visible_text",
]
