"""Correlation id carried through contextvars.

Set once per request (or per CLI invocation); every log line emitted in
that context gets a ``correlation_id`` field through the processor below.
"""

from contextvars import ContextVar, Token
from typing import Any

from uuid6 import uuid7

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """New time-ordered correlation id."""
    return str(uuid7())


def get_correlation_id() -> str:
    """Current correlation id, empty string when none is set."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Set the correlation id; keep the token to restore the previous one."""
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the correlation id that was in force before ``token``."""
    _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding the current correlation id, if any."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict
