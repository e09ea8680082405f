"""
Logging configuration for the consumer console.

Usage:
    from consumer_console.logging import configure_logging, get_logger, LogEventType

    # Once, at application start
    configure_logging(
        service_name="consumer_console",
        log_level=settings.LOG_LEVEL,
        json_format=settings.LOG_JSON_FORMAT,
    )

    # In any module
    logger = get_logger(__name__)
    logger.info("Consumer created", event_type=LogEventType.CONSUMER_MUTATION)
"""

import logging
import sys
from contextvars import ContextVar
from enum import Enum
from typing import Any

import structlog

correlation_id_ctx: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class LogEventType(str, Enum):
    """Event types for filtering in log aggregation."""

    # HTTP events
    REQUEST_OUT = "request_out"
    RESPONSE = "response"

    # Consumer registry events
    CONSUMER_LIST = "consumer_list"
    CONSUMER_MUTATION = "consumer_mutation"

    # Failed callback events
    CALLBACK_FETCH = "callback_fetch"
    CALLBACK_RETRY = "callback_retry"
    CALLBACK_DELETE = "callback_delete"
    CALLBACK_BULK = "callback_bulk"

    # Broker connection settings
    CONNECTION_CONFIG = "connection_config"
    CONNECTION_TEST = "connection_test"

    # General events
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"
    STARTUP = "startup"
    SHUTDOWN = "shutdown"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _add_correlation_id(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Processor to add correlation_id from context."""
    cid = correlation_id_ctx.get()
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def _make_service_processor(service_name: str):
    """Factory for processor that adds service name."""

    def processor(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["service"] = service_name
        return event_dict

    return processor


def _normalize_event_type(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Convert LogEventType enum to string if present."""
    event_type = event_dict.get("event_type")
    if isinstance(event_type, LogEventType):
        event_dict["event_type"] = event_type.value
    return event_dict


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    json_format: bool = True,
) -> None:
    """
    Configure structlog for the console.

    Args:
        service_name: Name stamped on every event
        log_level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON (production), False for console (development)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_correlation_id,
        _make_service_processor(service_name),
        _normalize_event_type,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=True, sort_keys=True)
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(cid: str) -> None:
    """Set correlation_id for current context."""
    correlation_id_ctx.set(cid)


def get_correlation_id() -> str | None:
    """Get current correlation_id."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    """Clear correlation_id from context."""
    correlation_id_ctx.set(None)


def clear_context() -> None:
    """Clear all context variables."""
    clear_correlation_id()
    structlog.contextvars.clear_contextvars()
