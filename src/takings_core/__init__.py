"""Takings Core - daily takings from Loyverse point-of-sale receipts.

This package fetches receipts from the Loyverse API and rolls them up into
per-day summaries for a dashboard:

- **Receipts**: cursor-paged extraction of raw receipts
- **Takings**: per-day revenue, receipt counts, averages, cash/card split,
  per-store and per-item breakdowns with item categories
- **Cache**: memory and file tiers keyed by account and date window

Module Structure:
    takings_core.receipts: Receipt models and Loyverse HTTP extraction
    takings_core.takings: Aggregation, enrichment, marts, public API
    takings_core.accounts: Account registry (accounts.json)
    takings_core.cache: Cache-aside tiers
    takings_core.config: DataPaths and LoyverseSettings

Quick Start:
    >>> from takings_core import DataPaths, TieredCache, get_daily_takings
    >>> from takings_core.accounts import get_active_account, load_accounts
    >>>
    >>> paths = DataPaths.from_root("data", "utils/accounts.json")
    >>> account = get_active_account(load_accounts(paths.accounts_json))
    >>> result = get_daily_takings(account, days_to_load=31,
    ...                            cache=TieredCache.for_paths(paths))
    >>> for day in result.takings:
    ...     print(day.date, day.total, day.receipt_count)
"""

__version__ = "0.1.0"

from takings_core.cache import TieredCache
from takings_core.config import DataPaths, LoyverseSettings
from takings_core.exceptions import (
    ConfigError,
    ETLError,
    MalformedRecordWarning,
    TakingsAPIError,
    UpstreamFetchError,
)
from takings_core.takings.api import TakingsResult, get_critical_takings, get_daily_takings
from takings_core.takings.models import DailyTaking, ItemSales, PaymentBreakdown

__all__ = [
    "ConfigError",
    "DailyTaking",
    "DataPaths",
    "ETLError",
    "ItemSales",
    "LoyverseSettings",
    "MalformedRecordWarning",
    "PaymentBreakdown",
    "TakingsAPIError",
    "TakingsResult",
    "TieredCache",
    "UpstreamFetchError",
    "__version__",
    "get_critical_takings",
    "get_daily_takings",
]
