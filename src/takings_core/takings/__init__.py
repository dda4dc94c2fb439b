"""Daily takings domain module.

This module turns raw receipts into per-day takings:

- `takings.aggregate`: `aggregate_daily_takings()` - per-day totals, counts,
  averages, cash/card split, per-store and per-item breakdowns
- `takings.payments`: cash/card classification and the card shortfall rule
- `takings.enrich`: item category resolution against the Loyverse catalog
- `takings.marts`: DataFrame views, category totals, compact rows, CSV export
- `takings.api`: `get_daily_takings()` - cache, fetch, aggregate, enrich

Example:
    >>> from takings_core.takings import aggregate, marts
    >>>
    >>> days = aggregate.aggregate_daily_takings(raw_receipts)
    >>> df = marts.to_frame(days)
"""

from takings_core.takings import aggregate, enrich, marts, models, payments
from takings_core.takings.models import (
    UNCATEGORIZED,
    DailyTaking,
    ItemSales,
    PaymentBreakdown,
)

__all__ = [
    "UNCATEGORIZED",
    "DailyTaking",
    "ItemSales",
    "PaymentBreakdown",
    "aggregate",
    "enrich",
    "marts",
    "models",
    "payments",
]
