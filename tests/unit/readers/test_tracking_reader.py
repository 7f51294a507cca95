"""Unit tests for reading unbilled tracking sessions."""

import datetime as dt
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from timebill.models.contract import PricingModel
from timebill.readers.tracking_reader import TrackingReader
from timebill.services.errors import StoreError


class TestReadUnbilledRows:
    """Test the unbilled selection against a real database."""

    def test_eligible_session_is_returned_with_context(self, db_session, seed):
        acme = seed.client("Acme")
        contract = seed.contract(acme, hourly_rate=100.0, currency="EUR", name="Support")
        tracked = seed.tracking(acme, contract, hours=3.0, project="API", notes="Kickoff")

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert len(rows) == 1
        row = rows[0]
        assert row.entry.id == tracked.id
        assert row.entry.hours == Decimal("3.0")
        assert row.entry.project_label == "API"
        assert row.entry.notes == "Kickoff"
        assert row.client_name == "Acme"
        assert row.terms.name == "Support"
        assert row.terms.pricing_model == PricingModel.HOURLY
        assert row.terms.hourly_rate == Decimal("100.0")
        assert row.terms.currency == "EUR"

    def test_excluded_sessions(self, db_session, seed):
        acme = seed.client("Acme")
        seed.tracking(acme, billable=False)
        seed.tracking(acme, deleted=True)
        seed.tracking(acme, hours=None)
        seed.tracking(acme, notes="[Invoiced: inv.acme.2025-01-15]")
        seed.tracking(acme, notes="Review [Invoiced: inv.acme.2025-01-15]")
        seed.tracking(None, hours=2.0)
        kept = seed.tracking(acme, notes="Invoiced separately")

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert [row.entry.id for row in rows] == [kept.id]

    def test_null_notes_are_unbilled(self, db_session, seed):
        acme = seed.client("Acme")
        tracked = seed.tracking(acme, notes=None)

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert [row.entry.id for row in rows] == [tracked.id]
        assert rows[0].entry.notes == ""

    def test_missing_contract_gets_default_terms(self, db_session, seed):
        acme = seed.client("Acme")
        seed.tracking(acme, None, hours=2.0)

        terms = TrackingReader(db_session).read_unbilled_rows()[0].terms

        assert terms.name == ""
        assert terms.pricing_model == PricingModel.HOURLY
        assert terms.hourly_rate is None
        assert terms.fixed_price is None
        assert terms.currency == "USD"

    def test_rows_ordered_by_client_contract_and_start(self, db_session, seed):
        acme = seed.client("Acme")
        beta = seed.client("Beta")
        acme_contract = seed.contract(acme, hourly_rate=100.0)
        late = seed.tracking(acme, acme_contract, start=dt.datetime(2025, 1, 20, 9, 0))
        beta_entry = seed.tracking(beta, start=dt.datetime(2025, 1, 1, 9, 0))
        early = seed.tracking(acme, acme_contract, start=dt.datetime(2025, 1, 10, 9, 0))
        client_only = seed.tracking(acme, None, start=dt.datetime(2025, 1, 30, 9, 0))

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert [row.entry.id for row in rows] == [
            client_only.id,
            early.id,
            late.id,
            beta_entry.id,
        ]

    def test_client_filter(self, db_session, seed):
        acme = seed.client("Acme")
        beta = seed.client("Beta")
        seed.tracking(acme)
        beta_entry = seed.tracking(beta)

        rows = TrackingReader(db_session).read_unbilled_rows(client_id=beta.id)

        assert [row.entry.id for row in rows] == [beta_entry.id]
        assert rows[0].client_name == "Beta"

    def test_session_ending_before_start_is_read(self, db_session, seed):
        acme = seed.client("Acme")
        tracked = seed.tracking(acme, hours=1.0)
        tracked.end_time = tracked.start_time - dt.timedelta(minutes=1)
        db_session.commit()

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert [row.entry.id for row in rows] == [tracked.id]
        assert rows[0].entry.end_time < rows[0].entry.start_time

    def test_negative_hours_are_read(self, db_session, seed):
        acme = seed.client("Acme")
        tracked = seed.tracking(acme, hours=-2.0)

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert [row.entry.id for row in rows] == [tracked.id]
        assert rows[0].entry.hours == Decimal("-2.0")
        assert rows[0].entry.duration_seconds == -7200

    def test_unknown_contract_type_is_read_as_unknown(self, db_session, seed):
        acme = seed.client("Acme")
        contract = seed.contract(acme, contract_type="fixed", fixed_price=900.0)
        seed.tracking(acme, contract, hours=3.0)

        rows = TrackingReader(db_session).read_unbilled_rows()

        assert len(rows) == 1
        assert rows[0].terms.pricing_model == PricingModel.UNKNOWN
        assert rows[0].terms.fixed_price == Decimal("900.0")

    def test_empty_store(self, db_session):
        assert TrackingReader(db_session).read_unbilled_rows() == []


class TestReadErrors:
    """Test error wrapping."""

    def test_query_failure_raises_store_error(self):
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("locked"))

        with pytest.raises(StoreError) as exc_info:
            TrackingReader(session).read_unbilled_rows()

        assert "Failed to read unbilled sessions" in exc_info.value.message
