"""Example: Export CSVs for every configured account

Fetches a fixed date window for each account in utils/accounts.json,
bypassing the cache, and writes daily_takings.csv / item_sales.csv under
data/exports/<account id>/.

Prerequisites:
- Create utils/accounts.json (see utils/accounts.example.json)
"""

from pathlib import Path

from takings_core import DataPaths, TakingsAPIError, get_daily_takings
from takings_core.accounts import load_accounts
from takings_core.takings.marts import export_csv

paths = DataPaths.from_root(Path("data"), Path("utils/accounts.json"))
paths.ensure_dirs()

from_date = "2025-01-01"  # MODIFY AS NEEDED

for account in load_accounts(paths.accounts_json):
    try:
        result = get_daily_takings(account, from_date=from_date)
    except TakingsAPIError as e:
        print(f"✗ {account.name}: {e}")
        continue

    daily_csv, items_csv = export_csv(result.takings, paths.exports_dir / account.id)
    total = sum(d.total for d in result.takings)
    print(f"✓ {account.name}: {len(result.takings)} day(s), {total:.2f} total -> {daily_csv}")
