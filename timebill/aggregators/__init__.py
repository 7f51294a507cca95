"""Aggregators for combining unbilled sessions into billing groups."""

from timebill.aggregators.unbilled_aggregator import group_unbilled_rows

__all__ = ["group_unbilled_rows"]
