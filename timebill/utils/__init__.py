"""Utility helpers."""

from timebill.utils.logging_utils import ContextFilter, LogContext, get_log_context

__all__ = ["ContextFilter", "LogContext", "get_log_context"]
