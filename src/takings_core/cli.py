#!/usr/bin/env python3
"""Command line: fetch and export daily takings for one Loyverse account.

Examples:
  # Account from accounts.json, default 31-day window
  takings-core --accounts-json utils/accounts.json --account main

  # Explicit start date, bypass cache, print compact JSON instead of CSV
  takings-core --accounts-json utils/accounts.json --from-date 2024-03-01 \
      --refresh --compact

  # No accounts file: LOYVERSE_API_TOKEN / LOYVERSE_LOCATION_ID from env
  takings-core --days 7 -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from takings_core.accounts import Account, get_account, get_active_account, load_accounts
from takings_core.cache import TieredCache
from takings_core.config import DataPaths, LoyverseSettings
from takings_core.exceptions import TakingsAPIError
from takings_core.takings.api import get_daily_takings
from takings_core.takings.marts import export_csv, to_compact
from takings_core.utils import format_duration

ENV_ACCOUNT_ID = "env"


@dataclass
class Args:
    accounts_json: Optional[Path]
    account: Optional[str]
    from_date: Optional[str]
    days: Optional[int]
    data_root: Path
    refresh: bool
    no_cache: bool
    compact: bool
    verbose: bool


def parse_args(argv: list[str] | None = None) -> Args:
    p = argparse.ArgumentParser(description="Daily takings from Loyverse receipts")
    p.add_argument("--accounts-json", type=Path, help="accounts.json with tokens and store ids")
    p.add_argument("--account", help="Account id or name (default: the active account)")
    p.add_argument("--from-date", help="Start date YYYY-MM-DD (inclusive)")
    p.add_argument("--days", type=int, help="Days to load when --from-date is not given")
    p.add_argument(
        "--data-root",
        type=Path,
        default=Path("data"),
        help="Root for cache and exports (default: ./data)",
    )
    p.add_argument("--refresh", action="store_true", help="Ignore cached takings")
    p.add_argument("--no-cache", action="store_true", help="Neither read nor write the cache")
    p.add_argument("--compact", action="store_true", help="Print compact JSON to stdout")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    a = p.parse_args(argv)
    return Args(
        accounts_json=a.accounts_json,
        account=a.account,
        from_date=a.from_date,
        days=a.days,
        data_root=a.data_root,
        refresh=a.refresh,
        no_cache=a.no_cache,
        compact=a.compact,
        verbose=a.verbose,
    )


def resolve_account(args: Args, settings: LoyverseSettings) -> Account:
    """Pick the account from accounts.json, or build one from the environment."""
    if args.accounts_json is not None:
        accounts = load_accounts(args.accounts_json)
        if args.account:
            return get_account(accounts, args.account)
        return get_active_account(accounts)

    settings.validate()
    return Account(
        id=ENV_ACCOUNT_ID,
        name=ENV_ACCOUNT_ID,
        api_token=settings.api_token or "",
        store_id=settings.store_id or "",
        is_active=True,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    settings = LoyverseSettings.from_env()
    account = resolve_account(args, settings)
    paths = DataPaths.from_root(args.data_root, args.accounts_json or Path("accounts.json"))
    paths.ensure_dirs()

    result = get_daily_takings(
        account,
        from_date=args.from_date,
        days_to_load=args.days if args.days is not None else settings.days_to_load,
        cache=None if args.no_cache else TieredCache.for_paths(paths),
        refresh=args.refresh,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )

    if not result.takings:
        logging.warning("No receipts found for %s in the requested window", account.name)

    if args.compact:
        json.dump(to_compact(result.takings), sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        export_csv(result.takings, paths.exports_dir / account.id)

    logging.info(
        "%d day(s), %d receipts scanned, %s%s",
        len(result.takings),
        result.receipts_scanned,
        format_duration(result.duration_seconds),
        " (cached)" if result.from_cache else "",
    )
    return 0


def run() -> None:
    """Console-script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
    except (TakingsAPIError, ValueError) as e:
        logging.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
