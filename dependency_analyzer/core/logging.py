"""Logging setup for the dep-analyze command line tool (structlog over stdlib logging)."""

from __future__ import annotations

import logging
import os
import sys

import structlog

LOG_FORMATS = ("console", "json")

_LEVEL_ENV = "DEP_ANALYZER_LOG_LEVEL"
_FORMAT_ENV = "DEP_ANALYZER_LOG_FORMAT"


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get(_LEVEL_ENV) or "INFO").upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{name}'.")
    return numeric


def _resolve_format(log_format: str | None) -> str:
    fmt = (log_format or os.environ.get(_FORMAT_ENV) or "console").lower()
    if fmt not in LOG_FORMATS:
        raise ValueError(f"Unknown log format '{fmt}', expected one of {list(LOG_FORMATS)}.")
    return fmt


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Send analyzer logs to stderr, leaving stdout to the CLI output.

    Arguments win over the environment:
        DEP_ANALYZER_LOG_LEVEL    analyzer log level (default: INFO)
        DEP_ANALYZER_LOG_FORMAT   console | json (default: console)

    Loggers outside ``dependency_analyzer`` only pass WARNING and above.
    Raises ValueError for an unknown level or format.
    """
    numeric_level = _resolve_level(level)
    fmt = _resolve_format(log_format)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    render_chain: list[structlog.types.Processor]
    if fmt == "json":
        render_chain = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render_chain = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render_chain],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger("dependency_analyzer").setLevel(numeric_level)
