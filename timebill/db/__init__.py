"""Relational store: schema and session management."""

from timebill.db.database import (
    get_db_path,
    get_engine,
    get_session,
    get_session_factory,
    init_db,
)
from timebill.db.models import (
    Base,
    Client,
    Company,
    Contract,
    Invoice,
    InvoiceLineItem,
    InvoiceRecipient,
    TrackingSession,
)

__all__ = [
    "get_db_path",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_db",
    "Base",
    "Client",
    "Company",
    "Contract",
    "Invoice",
    "InvoiceLineItem",
    "InvoiceRecipient",
    "TrackingSession",
]
