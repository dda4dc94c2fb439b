"""Example: Daily takings for the active account

This example loads the fast 7-day view first (what the dashboard renders
immediately), then the full 31-day window, both through the two-tier cache.

Prerequisites:
- Create utils/accounts.json (see utils/accounts.example.json)
- Ensure data/ directory exists (or modify paths below)
"""

from pathlib import Path

from takings_core import DataPaths, TieredCache, get_critical_takings, get_daily_takings
from takings_core.accounts import get_active_account, load_accounts
from takings_core.takings import marts

paths = DataPaths.from_root(Path("data"), Path("utils/accounts.json"))
paths.ensure_dirs()
cache = TieredCache.for_paths(paths)

account = get_active_account(load_accounts(paths.accounts_json))
print(f"Loading takings for {account.name}...")

# Fast view: last 7 days
critical = get_critical_takings(account, cache=cache)
print(f"\nLast 7 days ({'cached' if critical.from_cache else 'fresh'}):")
print(marts.to_frame(critical.takings))

# Full window: 31 days by default
result = get_daily_takings(account, days_to_load=31, cache=cache)
print(f"\nFull window: {len(result.takings)} day(s), {result.receipts_scanned} receipts")

if result.takings:
    latest = result.takings[0]
    print(f"\nTop items on {latest.date}:")
    for item in latest.item_breakdown[:5]:
        variant = f" ({item.variant_name})" if item.variant_name else ""
        print(f"  {item.item_name}{variant}: {item.quantity:g} x {item.average_price:.2f}"
              f" = {item.total_sales:.2f} [{item.category}]")

    print("\nSales by category:")
    print(marts.category_totals(result.takings).head(10))
