"""
Structlog configuration for the TV catalog API.

LOG_FORMAT picks the renderer: "json" (one object per line, for log
shippers), "console" (coloured, for development) or "auto", which uses the
console renderer only when the output stream is a terminal.

page_info tokens are cut down before rendering wherever they appear in an
event, so the opaque cursor values never reach the logs in full.
Call configure() once at app startup.
"""
import logging
import os
import sys
from typing import Any, MutableMapping, Optional, TextIO

import structlog

LOG_FORMATS = ("json", "console", "auto")

# Characters of a page_info token kept in log events
PAGE_INFO_LOG_CHARS = 16

# Loggers whose output duplicates RequestLoggingMiddleware or is too chatty
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "httpx": logging.WARNING,
}


def truncate_page_info(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Shorten page_info values, top level or inside a query_params dict."""
    targets = [event_dict]
    if isinstance(event_dict.get("query_params"), dict):
        event_dict["query_params"] = dict(event_dict["query_params"])
        targets.append(event_dict["query_params"])

    for target in targets:
        token = target.get("page_info")
        if isinstance(token, str) and len(token) > PAGE_INFO_LOG_CHARS:
            target["page_info"] = token[:PAGE_INFO_LOG_CHARS] + "..."
    return event_dict


def resolve_format(log_format: Optional[str], stream: TextIO) -> str:
    """Settle "auto" (or an unset format) into "json" or "console"."""
    log_format = (log_format or "auto").lower()
    if log_format not in LOG_FORMATS:
        raise ValueError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got '{log_format}'")
    if log_format == "auto":
        isatty = getattr(stream, "isatty", None)
        return "console" if isatty is not None and isatty() else "json"
    return log_format


def configure(
    log_level: str = "INFO",
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog and the stdlib root logger to share one renderer."""
    stream = stream or sys.stdout
    log_format = resolve_format(log_format or os.environ.get("LOG_FORMAT"), stream)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        truncate_page_info,
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if log_format == "console":
        renderers = [structlog.dev.ConsoleRenderer()]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    # uvicorn and sqlite warnings go through the same renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
