"""Tabular summary of unbilled billing groups.

One row per billing group, suitable for printing or exporting to CSV
before invoicing.
"""

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from timebill.calculators.invoice_calculator import compute_amount, is_fixed_price
from timebill.models.billing import BillingGroup

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "Client ID",
    "Client",
    "Contract ID",
    "Contract",
    "Pricing",
    "Entries",
    "Hours",
    "Rate",
    "Amount",
    "Currency",
]


def groups_to_dataframe(groups: List[BillingGroup]) -> pd.DataFrame:
    """Summarize billing groups as a DataFrame.

    Rate holds the hourly rate, or the fixed price for fixed-price groups;
    it is None when nothing is configured. Amount is 0 for groups that
    cannot be invoiced yet.

    Args:
        groups: Billing groups to summarize

    Returns:
        DataFrame with SUMMARY_COLUMNS, one row per group
    """
    rows = []
    for group in groups:
        pricing = compute_amount(group)
        rate = group.fixed_price if is_fixed_price(group) else group.hourly_rate
        rows.append(
            {
                "Client ID": group.client_id,
                "Client": group.client_name,
                "Contract ID": group.contract_id,
                "Contract": group.contract_name,
                "Pricing": group.pricing_model.value,
                "Entries": len(group.entries),
                "Hours": float(group.total_hours),
                "Rate": float(rate) if rate is not None else None,
                "Amount": round(float(pricing.amount), 2),
                "Currency": pricing.currency,
            }
        )

    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    df["Contract ID"] = df["Contract ID"].astype("Int64")
    return df


def export_groups_csv(groups: List[BillingGroup], path: Union[str, Path]) -> Path:
    """Write the group summary to a CSV file.

    Returns:
        Path of the written file
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    groups_to_dataframe(groups).to_csv(output, index=False)
    logger.info(f"Exported {len(groups)} unbilled group(s) to {output}")
    return output
