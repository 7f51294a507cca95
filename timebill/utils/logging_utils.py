"""Structured logging helpers.

LogContext attaches fields such as the client being billed or the invoice
number being written to every record emitted inside its scope.
"""

import logging
import threading
from typing import Any, Dict

_thread_local = threading.local()


def _current_context() -> Dict[str, Any]:
    context = getattr(_thread_local, "context", None)
    if context is None:
        context = {}
        _thread_local.context = context
    return context


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently in scope."""
    return dict(_current_context())


class LogContext:
    """
    Context manager for adding structured fields to log records.

    Nested contexts merge their fields; leaving a context restores the
    fields that were in scope when it was entered.

    Example:
        with LogContext(client_name="Acme", invoice_number="inv.acme.2025-01-15"):
            logger.info("Writing line items")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous: Dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        self._previous = get_log_context()
        _current_context().update(self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        _thread_local.context = self._previous
        return False


class ContextFilter(logging.Filter):
    """Copy the active LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _current_context().items():
            setattr(record, key, value)
        return True
