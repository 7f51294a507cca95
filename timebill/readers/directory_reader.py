"""Lookups of clients and companies."""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timebill.db.models import Client, Company
from timebill.services.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)


class DirectoryReader:
    """Resolves the clients and companies an invoice refers to."""

    def __init__(self, session: Session):
        self.session = session

    def find_client_by_name(self, name: str) -> Client:
        """Find a client by case-insensitive partial name.

        Args:
            name: Full or partial client name

        Returns:
            The first matching client by id

        Raises:
            NotFoundError: If no client matches
            StoreError: If the lookup fails
        """
        query = (
            select(Client)
            .where(func.lower(Client.name).like(f"%{name.lower()}%"))
            .order_by(Client.id)
            .limit(1)
        )
        try:
            client = self.session.scalars(query).first()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up client '{name}': {e}") from e

        if client is None:
            raise NotFoundError(
                f"Client '{name}' not found",
                recovery_hint="Check the spelling or create the client first",
            )
        return client

    def resolve_company_id(self, company_id: Optional[int] = None) -> int:
        """Confirm a company exists, defaulting to the first one on file.

        Args:
            company_id: Explicit company id (optional)

        Returns:
            The id of an existing company

        Raises:
            NotFoundError: If the company (or any company) does not exist
            StoreError: If the lookup fails
        """
        try:
            if company_id is not None:
                found = self.session.get(Company, company_id)
                resolved = found.id if found is not None else None
            else:
                resolved = self.session.scalars(
                    select(Company.id).order_by(Company.id).limit(1)
                ).first()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up company: {e}") from e

        if resolved is None:
            if company_id is not None:
                raise NotFoundError(f"Company {company_id} not found")
            raise NotFoundError(
                "No company found",
                recovery_hint="Create the company that issues invoices first",
            )
        return resolved
