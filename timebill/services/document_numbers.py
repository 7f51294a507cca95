"""Human-readable document numbers.

Invoice numbers look like ``inv.acme_corp.2025-01-15`` with ``_2``, ``_3``
appended on collisions. Contract numbers look like ``CTR-2025-001``.
"""

import datetime as dt
import logging
import re
import time

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timebill.db.models import Contract, Invoice
from timebill.services.errors import StoreError

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 50
MAX_SUFFIX = 100

_INVALID_CHARS = re.compile(r"[^a-z0-9_]+")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def sanitize_name(name: str) -> str:
    """Convert a display name to a lowercase, underscore-separated slug.

    Example:
        >>> sanitize_name("Acme Corp - Berlin!")
        'acme_corp_berlin'
    """
    slug = name.lower().replace(" ", "_").replace("-", "_")
    slug = _INVALID_CHARS.sub("", slug)
    slug = _REPEATED_UNDERSCORES.sub("_", slug)
    slug = slug.strip("_")
    return slug[:MAX_NAME_LENGTH]


def _invoice_number_taken(session: Session, number: str) -> bool:
    count = session.scalar(
        select(func.count()).select_from(Invoice).where(Invoice.invoice_num == number)
    )
    return bool(count)


def generate_invoice_number(
    session: Session, client_name: str, issued_date: dt.date
) -> str:
    """Allocate the next free invoice number for a client and date.

    Args:
        session: Open database session
        client_name: Client display name
        issued_date: Issue date of the invoice

    Returns:
        ``inv.<client>.<YYYY-MM-DD>``, suffixed ``_2`` to ``_99`` when taken,
        or with a unix timestamp once those are exhausted

    Raises:
        StoreError: If the duplicate check fails
    """
    base = f"inv.{sanitize_name(client_name)}.{issued_date.strftime('%Y-%m-%d')}"

    try:
        if not _invoice_number_taken(session, base):
            return base

        for suffix in range(2, MAX_SUFFIX):
            candidate = f"{base}_{suffix}"
            if not _invoice_number_taken(session, candidate):
                return candidate
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to check for duplicate invoice number: {e}") from e

    logger.warning(f"Exhausted numbered suffixes for {base}, using timestamp")
    return f"{base}_{int(time.time())}"


def generate_contract_number(session: Session, start_date: dt.date) -> str:
    """Allocate the next contract number for the start date's year.

    Example:
        With CTR-2025-001 and CTR-2025-004 on file, returns CTR-2025-005.

    Raises:
        StoreError: If existing numbers cannot be read
    """
    year = start_date.strftime("%Y")
    prefix = f"CTR-{year}-"

    try:
        existing = session.scalars(
            select(Contract.contract_num).where(Contract.contract_num.like(f"{prefix}%"))
        ).all()
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to query contracts: {e}") from e

    highest = 0
    for number in existing:
        tail = number[len(prefix):]
        if tail.isdigit():
            highest = max(highest, int(tail))

    return f"{prefix}{highest + 1:03d}"
