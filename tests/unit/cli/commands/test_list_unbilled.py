"""Unit tests for the list-unbilled command."""

import pandas as pd
import pytest
from click.testing import CliRunner

from timebill.cli import cli


@pytest.fixture
def invoke(mock_env, db_path, db_engine):
    """Run the CLI against the test database."""
    runner = CliRunner()

    def _invoke(*args):
        return runner.invoke(cli, ["--db-path", str(db_path), "list-unbilled", *args])

    return _invoke


class TestListUnbilledCommand:
    """Test suite for list-unbilled command."""

    def test_empty_store(self, invoke):
        result = invoke()
        assert result.exit_code == 0
        assert "No unbilled time found." in result.output

    def test_lists_groups(self, invoke, seed):
        acme = seed.client("Acme")
        contract = seed.contract(acme, hourly_rate=100.0, name="Support")
        seed.tracking(acme, contract, hours=3.0)
        seed.tracking(acme, contract, hours=2.0)

        result = invoke()

        assert result.exit_code == 0, result.output
        assert "Acme" in result.output
        assert "Support" in result.output
        assert "5.00h" in result.output
        assert "500.00 USD" in result.output
        assert "Found 1 unbilled group(s)" in result.output

    def test_unpriced_group_flagged(self, invoke, seed):
        acme = seed.client("Acme")
        seed.tracking(acme, None, hours=2.0)

        result = invoke()

        assert result.exit_code == 0
        assert "no rate" in result.output
        assert "1 group(s) have no rate configured" in result.output

    def test_client_filter(self, invoke, seed):
        seed.tracking(seed.client("Acme"), hours=1.0)
        seed.tracking(seed.client("Beta GmbH"), hours=2.0)

        result = invoke("--client", "beta")

        assert result.exit_code == 0
        assert "Beta GmbH" in result.output
        assert "Acme" not in result.output

    def test_unknown_client(self, invoke, seed):
        result = invoke("--client", "Globex")
        assert result.exit_code == 1

    def test_csv_export(self, invoke, seed, tmp_path):
        acme = seed.client("Acme")
        seed.tracking(acme, None, hours=2.0)
        target = tmp_path / "unbilled.csv"

        result = invoke("--csv", str(target))

        assert result.exit_code == 0, result.output
        assert "Exported summary" in result.output
        df = pd.read_csv(target)
        assert df.loc[0, "Client"] == "Acme"
        assert df.loc[0, "Hours"] == 2.0

    def test_listing_does_not_invoice(self, invoke, seed):
        acme = seed.client("Acme")
        seed.tracking(acme, None, hours=2.0)

        invoke()
        result = invoke()

        assert "Found 1 unbilled group(s)" in result.output
