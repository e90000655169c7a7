"""Structured logging and correlation ids."""

from gavel.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from gavel.infrastructure.observability.logging import (
    bind_request_context,
    configure_structlog,
)

__all__: list[str] = [
    "bind_request_context",
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
