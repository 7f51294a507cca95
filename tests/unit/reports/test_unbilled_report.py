"""Unit tests for the unbilled group summary report."""

import datetime as dt
from decimal import Decimal

import pandas as pd

from timebill.models.billing import BillingGroup
from timebill.models.tracking import TimeEntry
from timebill.reports.unbilled_report import (
    SUMMARY_COLUMNS,
    export_groups_csv,
    groups_to_dataframe,
)


def make_group(hours, **fields):
    group = BillingGroup(**fields)
    group.add_entry(
        TimeEntry(
            id=1,
            client_id=fields["client_id"],
            start_time=dt.datetime(2025, 1, 6, 9, 0),
            hours=Decimal(hours),
        )
    )
    return group


class TestGroupsToDataFrame:
    """Test summarizing groups as a DataFrame."""

    def test_one_row_per_group(self):
        groups = [
            make_group(
                "5", client_id=1, client_name="Acme", contract_id=3,
                contract_name="Support", hourly_rate=100,
            ),
            make_group(
                "30", client_id=2, client_name="Beta", contract_id=4,
                contract_name="Relaunch", pricing_model="fixed_price",
                fixed_price=2000, currency="EUR",
            ),
        ]

        df = groups_to_dataframe(groups)

        assert list(df.columns) == SUMMARY_COLUMNS
        assert len(df) == 2
        acme, beta = df.to_dict("records")
        assert acme["Client"] == "Acme"
        assert acme["Pricing"] == "hourly"
        assert acme["Hours"] == 5.0
        assert acme["Rate"] == 100.0
        assert acme["Amount"] == 500.0
        assert beta["Rate"] == 2000.0
        assert beta["Amount"] == 2000.0
        assert beta["Currency"] == "EUR"

    def test_unpriced_client_only_group(self):
        df = groups_to_dataframe([make_group("4", client_id=1, client_name="Acme")])

        row = df.iloc[0]
        assert pd.isna(row["Contract ID"])
        assert pd.isna(row["Rate"])
        assert row["Amount"] == 0.0
        assert row["Currency"] == "USD"

    def test_contract_id_is_nullable_integer(self):
        groups = [
            make_group("1", client_id=1, contract_id=None),
            make_group("1", client_id=1, contract_id=7),
        ]
        df = groups_to_dataframe(groups)
        assert str(df["Contract ID"].dtype) == "Int64"
        assert df["Contract ID"].iloc[1] == 7

    def test_no_groups(self):
        df = groups_to_dataframe([])
        assert list(df.columns) == SUMMARY_COLUMNS
        assert df.empty


class TestExportGroupsCsv:
    """Test CSV export."""

    def test_writes_csv(self, tmp_path):
        groups = [make_group("2.5", client_id=1, client_name="Acme", hourly_rate=80)]
        target = tmp_path / "out" / "unbilled.csv"

        output = export_groups_csv(groups, target)

        assert output == target
        df = pd.read_csv(output)
        assert list(df.columns) == SUMMARY_COLUMNS
        assert df.loc[0, "Amount"] == 200.0
