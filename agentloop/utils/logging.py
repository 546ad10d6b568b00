"""
Structured logging for agentloop.

All modules obtain their logger through get_logger() and log snake_case
event names with keyword context:

    logger = get_logger(__name__)
    logger.info("turn_started", turn=1, max_turns=10)
"""

import logging
import sys
from typing import Any

import structlog

SENSITIVE_KEYS = ("api_key", "apikey", "password", "secret", "authorization", "token")

# Counters that contain "token" in their name but carry no secret
_TOKEN_COUNTERS = ("tokens", "total_tokens", "input_tokens", "output_tokens", "max_tokens")

_configured = False


def filter_sensitive_data(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor that redacts credentials from the event dict."""
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if lowered in _TOKEN_COUNTERS:
            continue
        if any(marker in lowered for marker in SENSITIVE_KEYS):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """
    Configure structlog and the stdlib root handler.

    Args:
        level: Minimum log level name
        fmt: "console" for human readable output, "json" for log shipping
    """
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            filter_sensitive_data,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger bound to the given module name."""
    if not _configured:
        from agentloop.config.settings import settings

        configure_logging(settings.log_level, settings.log_format)
    return structlog.get_logger(name)


__all__ = ["configure_logging", "get_logger", "filter_sensitive_data"]
