from .http_client import HttpClient, classify_content_kind
from .user_agents import build_browser_headers

__all__ = ["HttpClient", "build_browser_headers", "classify_content_kind"]
