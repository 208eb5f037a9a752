"""structlog setup for the routine builder API process."""

from __future__ import annotations

import logging

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from routine_builder.config import settings

# Longest string value kept in a log event; transcripts and provider bodies get cut
MAX_VALUE_CHARS = 500


def resolve_level(name: str) -> int:
    """Map a LOG_LEVEL string to a logging level, defaulting to INFO."""
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.INFO)


def truncate_long_values(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    """Clip oversized string values so chat text never floods a log line."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_VALUE_CHARS:
            event_dict[key] = f"{value[:MAX_VALUE_CHARS]}… ({len(value)} chars)"
    return event_dict


def build_processors(environment: str) -> list[Processor]:
    """Console output in development, JSON lines with formatted tracebacks elsewhere."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        truncate_long_values,
    ]
    if environment == "development":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return processors


def configure_logging() -> None:
    structlog.configure(
        processors=build_processors(settings.environment),
        wrapper_class=structlog.make_filtering_bound_logger(resolve_level(settings.log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
