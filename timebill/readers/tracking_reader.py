"""Reader for unbilled tracking sessions.

This module runs the single query the reconciliation engine is built on:
every unbilled session joined with its client's name and its contract's
pricing fields, ordered so that sessions of one billing group arrive
together and in chronological order.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timebill.db.models import Client, Contract, TrackingSession
from timebill.models.contract import DEFAULT_CURRENCY, ContractTerms, PricingModel
from timebill.models.tracking import INVOICED_MARKER_PREFIX, TimeEntry
from timebill.services.errors import StoreError

logger = logging.getLogger(__name__)


@dataclass
class UnbilledSessionRow:
    """One unbilled session with the context needed to group and price it.

    Attributes:
        entry: The session itself
        client_name: Display name of the session's client
        terms: Pricing terms of the session's contract (defaults when absent)
    """

    entry: TimeEntry
    client_name: str
    terms: ContractTerms


class TrackingReader:
    """Reads unbilled tracking sessions from the store.

    A session is unbilled when it is billable, not soft-deleted, has hours,
    and its notes carry no ``[Invoiced:`` marker. Sessions without a client
    are never returned.

    Example:
        >>> with get_session() as session:
        ...     rows = TrackingReader(session).read_unbilled_rows()
        >>> rows[0].entry.hours
        Decimal('3.0')
    """

    def __init__(self, session: Session):
        """Initialize the reader.

        Args:
            session: Open database session
        """
        self.session = session

    def _unbilled_query(self, client_id: Optional[int] = None) -> Select:
        query = (
            select(
                TrackingSession,
                Client.name.label("client_name"),
                func.coalesce(Contract.name, "").label("contract_name"),
                func.coalesce(Contract.contract_type, PricingModel.HOURLY.value).label(
                    "contract_type"
                ),
                Contract.hourly_rate,
                Contract.fixed_price,
                func.coalesce(Contract.currency, DEFAULT_CURRENCY).label("currency"),
            )
            .join(Client, TrackingSession.client_id == Client.id)
            .outerjoin(Contract, TrackingSession.contract_id == Contract.id)
            .where(
                TrackingSession.billable.is_(True),
                TrackingSession.deleted_at.is_(None),
                TrackingSession.hours.is_not(None),
                or_(
                    TrackingSession.notes.is_(None),
                    TrackingSession.notes.not_like(f"%{INVOICED_MARKER_PREFIX}%"),
                ),
            )
            .order_by(
                TrackingSession.client_id,
                TrackingSession.contract_id,
                TrackingSession.start_time,
                TrackingSession.id,
            )
        )
        if client_id is not None:
            query = query.where(TrackingSession.client_id == client_id)
        return query

    def read_unbilled_rows(
        self, client_id: Optional[int] = None
    ) -> List[UnbilledSessionRow]:
        """Read all unbilled sessions, optionally for one client.

        Args:
            client_id: Restrict to this client's sessions (optional)

        Returns:
            Rows ordered by client_id, contract_id, start_time

        Raises:
            StoreError: If the query fails or a stored row is malformed
        """
        try:
            result = self.session.execute(self._unbilled_query(client_id)).all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read unbilled sessions: {e}") from e

        rows = []
        for record in result:
            tracked = record.TrackingSession
            try:
                entry = TimeEntry(
                    id=tracked.id,
                    client_id=tracked.client_id,
                    contract_id=tracked.contract_id,
                    project_label=tracked.project_name,
                    start_time=tracked.start_time,
                    end_time=tracked.end_time,
                    duration_seconds=tracked.duration,
                    hours=tracked.hours,
                    billable=tracked.billable,
                    notes=tracked.notes,
                    deleted=tracked.deleted_at is not None,
                )
                terms = ContractTerms(
                    name=record.contract_name,
                    pricing_model=record.contract_type,
                    hourly_rate=record.hourly_rate,
                    fixed_price=record.fixed_price,
                    currency=record.currency,
                )
            except ValidationError as e:
                raise StoreError(
                    f"Tracking session {tracked.id} holds invalid data: {e}"
                ) from e

            if terms.pricing_model == PricingModel.UNKNOWN:
                logger.warning(
                    f"Contract {tracked.contract_id} has unrecognized type "
                    f"'{record.contract_type}'; session {tracked.id} cannot be priced"
                )

            rows.append(
                UnbilledSessionRow(
                    entry=entry, client_name=record.client_name, terms=terms
                )
            )

        logger.debug(f"Read {len(rows)} unbilled session(s)")
        return rows
