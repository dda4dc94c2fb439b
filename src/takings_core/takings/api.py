"""Public API for daily takings.

This module provides the main entry point for loading daily takings for an
account:

1. Returns cached takings for (account, window) if present
2. Otherwise fetches receipts from Loyverse
3. Aggregates them per business date
4. Resolves item categories
5. Stores the result in the cache
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date

import requests

from takings_core.accounts import Account
from takings_core.cache import TakingsCache, window_key
from takings_core.config import DEFAULT_BASE_URL, DEFAULT_DAYS_TO_LOAD, DEFAULT_TIMEOUT
from takings_core.exceptions import ConfigError
from takings_core.receipts.extract import fetch_receipts, make_session
from takings_core.takings.aggregate import aggregate_daily_takings
from takings_core.takings.enrich import enrich_categories
from takings_core.takings.models import DailyTaking
from takings_core.utils import compute_start_date, format_duration

logger = logging.getLogger(__name__)

CRITICAL_DAYS = 7
CRITICAL_WINDOW_KEY = "critical-7d"


@dataclass
class TakingsResult:
    """Result of a daily takings request.

    An empty ``takings`` list means the window had no qualifying receipts;
    failures raise instead.

    Attributes:
        takings: DailyTaking list, newest first.
        receipts_scanned: Raw receipts fetched (0 on a cache hit).
        duration_seconds: Wall time spent serving the request.
        from_cache: True when served from the cache.
    """

    takings: list[DailyTaking] = field(default_factory=list)
    receipts_scanned: int = 0
    duration_seconds: float = 0.0
    from_cache: bool = False


def _validate_account(account: Account) -> None:
    if not account.api_token:
        raise ConfigError(f"Account {account.id!r}: API token is required")
    if not account.store_id:
        raise ConfigError(f"Account {account.id!r}: store id is required")


def get_daily_takings(
    account: Account,
    *,
    from_date: str | None = None,
    days_to_load: int = DEFAULT_DAYS_TO_LOAD,
    cache: TakingsCache | None = None,
    cache_key: str | None = None,
    refresh: bool = False,
    session: requests.Session | None = None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    today: date | None = None,
) -> TakingsResult:
    """Load daily takings for an account.

    Args:
        account: Account with API token and store id (or ALL_STORES).
        from_date: Inclusive start in YYYY-MM-DD format. When None, the
            window starts days_to_load days before today (UTC).
        days_to_load: Window size used when from_date is None.
        cache: Optional cache-aside store.
        cache_key: Window key override. Defaults to from_date, else
            "default-<days_to_load>d".
        refresh: If True, skip the cache lookup (the result is still stored).
        session: Pre-built session. Defaults to make_session(account token).
        base_url: Loyverse API root.
        timeout: Per-request timeout when building the session.
        today: Reference day for the default window.

    Returns:
        TakingsResult with takings newest first.

    Raises:
        ConfigError: If the account lacks a token or store id. Raised
            before any network activity.
        UpstreamFetchError: If any receipts page fails. No partial result.
        ValueError: If from_date is malformed.

    Examples:
        >>> from takings_core.accounts import Account
        >>> acc = Account("main", "Main", "token", "store-1")
        >>> result = get_daily_takings(acc, days_to_load=7)  # doctest: +SKIP
        >>> result.takings[0].date  # doctest: +SKIP
        '2024-03-08'

    """
    _validate_account(account)
    start_date = compute_start_date(from_date, days_to_load, today)
    key = cache_key or window_key(from_date, days_to_load)
    started = time.perf_counter()

    if cache is not None and not refresh:
        entry = cache.get(account.id, key)
        if entry is not None:
            logger.info("Using cached takings for %s (%s)", account.id, key)
            return TakingsResult(
                takings=list(entry.data),
                duration_seconds=time.perf_counter() - started,
                from_cache=True,
            )

    if session is None:
        session = make_session(account.api_token, timeout=timeout)

    logger.info(
        "Fetching receipts for %s (store %s) since %s",
        account.id,
        account.store_id,
        start_date,
    )
    raw = fetch_receipts(session, account.store_id, start_date, base_url=base_url)
    takings = aggregate_daily_takings(raw)
    takings = enrich_categories(takings, session, base_url=base_url)

    if cache is not None:
        cache.set(account.id, key, takings)

    elapsed = time.perf_counter() - started
    logger.info(
        "Daily takings for %s: %d receipts -> %d day(s) in %s",
        account.id,
        len(raw),
        len(takings),
        format_duration(elapsed),
    )
    return TakingsResult(
        takings=takings,
        receipts_scanned=len(raw),
        duration_seconds=elapsed,
        from_cache=False,
    )


def get_critical_takings(
    account: Account,
    *,
    cache: TakingsCache | None = None,
    refresh: bool = False,
    session: requests.Session | None = None,
    base_url: str = DEFAULT_BASE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    today: date | None = None,
) -> TakingsResult:
    """Load the last CRITICAL_DAYS days, cached under "critical-7d".

    This is the small window the dashboard renders first, before the full
    window is loaded.
    """
    return get_daily_takings(
        account,
        days_to_load=CRITICAL_DAYS,
        cache=cache,
        cache_key=CRITICAL_WINDOW_KEY,
        refresh=refresh,
        session=session,
        base_url=base_url,
        timeout=timeout,
        today=today,
    )
