"""structlog configuration.

production  -> one JSON object per line
development -> colored console output

Both add level, ISO timestamp, contextvars (tenant_id bound by
bind_request_context) and the correlation id. LOG_LEVEL filters.
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import cast
from uuid import UUID

import structlog
from structlog.typing import Processor

from gavel.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"


def _get_log_level() -> int:
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.INFO)


def configure_structlog(environment: str = "production") -> None:
    """Configure structlog once at process start.

    Args:
        environment: 'production' for JSON, anything else for console.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processor: Processor = structlog.processors.JSONRenderer()
    else:
        final_processor = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [final_processor],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def bind_request_context(
    tenant_id: UUID, correlation_id: str | None = None
) -> Iterator[str]:
    """Bind tenant and correlation id for the duration of a request.

    Yields:
        The correlation id in force.
    """
    correlation_id = correlation_id or generate_correlation_id()
    token = set_correlation_id(correlation_id)
    with structlog.contextvars.bound_contextvars(tenant_id=str(tenant_id)):
        try:
            yield correlation_id
        finally:
            reset_correlation_id(token)
