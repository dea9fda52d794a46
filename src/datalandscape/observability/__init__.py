"""
Observability: structured logging and Prometheus metrics.
"""

from .logging import configure_logging
from .metrics import METRICS

__all__ = ["METRICS", "configure_logging"]
