"""
Structured Logging Module

JSON logs for the assistant gateway. Every event carries the service name,
an ISO timestamp, its level, the emitting module and, inside a request,
the request's correlation ID plus whatever request fields the middleware
bound (method, path).

Request-scoped fields live in structlog's contextvars store, so they
follow the request into the tasks Starlette spawns for call_next.

Pattern: Singleton configuration (configure once at startup)
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Generator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

CORRELATION_ID_KEY = "correlation_id"

_configured: bool = False


# =============================================================================
# Request Context
# =============================================================================


@contextmanager
def request_context(correlation_id: str, **fields: Any) -> Generator[None, None, None]:
    """
    Bind a correlation ID (and extra request fields) for the enclosed block.

    Previous bindings are restored on exit, so nested contexts are safe.

    Example:
        >>> with request_context("req-12345", path="/api/assistant"):
        ...     logger.info("provider_attempt", provider="gemini")
    """
    bindings = {CORRELATION_ID_KEY: correlation_id, **fields}
    with structlog.contextvars.bound_contextvars(**bindings):
        yield


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the current request, or None outside one."""
    return structlog.contextvars.get_contextvars().get(CORRELATION_ID_KEY)


# =============================================================================
# Custom Processors
# =============================================================================


def rename_logger_name(
    logger: logging.Logger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Emit the module name bound by get_logger() under "logger"."""
    if "logger_name" in event_dict:
        event_dict["logger"] = event_dict.pop("logger_name")
    return event_dict


def _service_adder(service: str) -> Processor:
    def add_service(
        logger: logging.Logger, _method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return add_service


# =============================================================================
# Singleton Configuration
# =============================================================================


def configure_logging(
    level: str = "INFO",
    service: str = "assistant-gateway",
    stream: Optional[TextIO] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog for the application.

    Subsequent calls are no-ops unless force=True.

    Args:
        level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service: Service name stamped on every event
        stream: Output stream (default: sys.stdout)
        force: Force reconfiguration (for testing only)
    """
    global _configured

    if _configured and not force:
        return

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        rename_logger_name,
        _service_adder(service),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_to_int(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )

    # Adapters and middleware log through the stdlib
    logging.basicConfig(level=_level_to_int(level), stream=stream or sys.stdout)

    _configured = True


def reset_logging() -> None:
    """
    Reset logging configuration state.

    WARNING: This should only be used in tests.
    """
    global _configured
    _configured = False
    structlog.reset_defaults()


# =============================================================================
# Logger Factory
# =============================================================================


def get_logger(name: str) -> Any:
    """
    Get a structured logger for module ``name``.

    The returned proxy resolves configuration on each call, so module-level
    loggers pick up configure_logging() run later at startup.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("provider_attempt", provider="gemini", model="gemini-pro")
    """
    return structlog.get_logger(logger_name=name)


def _level_to_int(level: str) -> int:
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level.upper(), logging.INFO)
