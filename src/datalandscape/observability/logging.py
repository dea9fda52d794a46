"""
Structured logging for DataLandscape.

Pipeline code logs through structlog. Records from the standard library
(uvicorn, aiohttp, the YAML config loader) run through the same processor
chain, so one root handler renders both: readable lines on stderr, or one
JSON object per line when a log file is configured. A batch job's id is
bound with ``structlog.contextvars`` and lands on every record logged while
the job runs.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Dict, List

import structlog

if TYPE_CHECKING:
    from datalandscape.config.config import MonitoringConfig

# Per-request access lines from the server and the fetcher session; only
# shown when running at DEBUG.
ACCESS_LOGGERS = ("uvicorn.access", "aiohttp.access", "aiohttp.client")


def drop_color_message(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """uvicorn repeats every message with ANSI codes under ``color_message``."""
    event_dict.pop("color_message", None)
    return event_dict


def _shared_processors() -> List[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _build_handler(config: MonitoringConfig) -> logging.Handler:
    handler: logging.Handler
    if config.log_file:
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
        final: List[Any] = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        handler = logging.StreamHandler(sys.stderr)
        final = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[*_shared_processors(), structlog.stdlib.ExtraAdder(), drop_color_message],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
        )
    )
    return handler


def configure_logging(config: MonitoringConfig) -> None:
    """Route structlog and stdlib logging through a single root handler."""
    level = logging.getLevelName(config.log_level.upper())

    root = logging.getLogger()
    root.handlers = [_build_handler(config)]
    root.setLevel(level)

    access_level = logging.DEBUG if level == logging.DEBUG else logging.WARNING
    for name in ACCESS_LOGGERS:
        logging.getLogger(name).setLevel(access_level)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info(
        "Logging configured", level=config.log_level, output=config.log_file or "stderr"
    )
