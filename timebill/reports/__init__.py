"""Reports over unbilled time."""

from timebill.reports.unbilled_report import (
    SUMMARY_COLUMNS,
    export_groups_csv,
    groups_to_dataframe,
)

__all__ = ["SUMMARY_COLUMNS", "export_groups_csv", "groups_to_dataframe"]
