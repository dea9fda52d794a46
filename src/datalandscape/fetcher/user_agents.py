"""
Browser-like request headers.

Many statistics portals and publisher sites reject requests that do not look
like they come from a desktop browser, so every fetch carries a conventional
header set.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict

from datalandscape.config.config import DEFAULT_USER_AGENT

if TYPE_CHECKING:
    from datalandscape.config.config import FetcherConfig


def build_browser_headers(config: FetcherConfig) -> Dict[str, str]:
    """Header set sent with every fetch. An empty user agent falls back to the desktop Chrome string."""
    return {
        "User-Agent": config.user_agent or DEFAULT_USER_AGENT,
        "Accept": config.accept,
        "Accept-Language": config.accept_language,
    }
