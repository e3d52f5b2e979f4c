"""Correlation ID management for notification log lines."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# ContextVar so concurrent asyncio tasks each keep their own id.
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(correlation_id: str | None) -> Iterator[str | None]:
    """Bind *correlation_id* for the duration of the block.

    An id that is already bound wins, so a queue-level id set by the consumer
    is not overwritten by the notification id further down.
    """
    existing = _correlation_id.get()
    if existing is not None:
        yield existing
        return
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that stamps ``record.correlation_id``.

    Usage::

        handler.addFilter(CorrelationIdFilter())
        handler.setFormatter(logging.Formatter("%(correlation_id)s %(message)s"))
    """

    def __init__(self, default: str = "-") -> None:
        super().__init__()
        self._default = default

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or self._default
        return True
