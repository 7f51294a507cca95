"""Fold unbilled session rows into billing groups.

This module turns the flat, ordered rows produced by TrackingReader into
one BillingGroup per (client, contract) pair.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from timebill.models.billing import BillingGroup, GroupKey
from timebill.readers.tracking_reader import UnbilledSessionRow

logger = logging.getLogger(__name__)


def group_unbilled_rows(rows: Iterable[UnbilledSessionRow]) -> List[BillingGroup]:
    """Group rows by (client_id, contract_id).

    The first row seen for a key opens the group and fixes its client name
    and pricing fields; later rows only add entries and hours. Groups with
    zero total hours are dropped.

    Args:
        rows: Rows ordered by client_id, contract_id, start_time

    Returns:
        Groups sorted by client id, then contract id (client-only work
        first); entries inside a group keep the row order

    Example:
        >>> groups = group_unbilled_rows(reader.read_unbilled_rows())
        >>> [(g.client_name, g.total_hours) for g in groups]
        [('Acme', Decimal('5.0'))]
    """
    groups: Dict[GroupKey, BillingGroup] = {}

    for row in rows:
        entry = row.entry
        if entry.client_id is None:
            continue

        key = GroupKey(entry.client_id, entry.contract_id)
        group = groups.get(key)
        if group is None:
            group = BillingGroup.start(
                client_id=key.client_id,
                client_name=row.client_name,
                contract_id=key.contract_id,
                terms=row.terms,
            )
            groups[key] = group

        group.add_entry(entry)

    result = []
    for key in sorted(groups, key=GroupKey.sort_key):
        group = groups[key]
        if group.total_hours == Decimal("0"):
            logger.debug(f"Dropping group {key} with no billable hours")
            continue
        result.append(group)

    return result
