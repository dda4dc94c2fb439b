"""Receipts domain module.

This module provides access to raw Loyverse receipt data:

- `receipts.models`: Receipt / LineItem / Payment records, built once from
  upstream JSON with defaults applied
- `receipts.extract`: HTTP session, cursor-paged receipt fetch, catalog calls

Example:
    >>> from datetime import date
    >>> from takings_core.receipts import extract, models
    >>>
    >>> session = extract.make_session("token")
    >>> raw = extract.fetch_receipts(session, "store-1", date(2024, 3, 1))
    >>> receipts = [models.Receipt.from_dict(r) for r in raw]
"""

from takings_core.receipts import extract, models
from takings_core.receipts.extract import ALL_STORES
from takings_core.receipts.models import LineItem, Payment, Receipt

__all__ = ["ALL_STORES", "LineItem", "Payment", "Receipt", "extract", "models"]
