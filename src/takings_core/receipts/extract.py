"""Loyverse HTTP extraction: receipts, categories and catalog items.

Receipts are paged with the opaque ``cursor`` returned by the API. The loop
is driven only by the presence of a cursor and a non-empty page, and stops
early at a fixed ceiling (15,000 receipts for one store, 10,000 for all
stores) to bound latency and memory.

Any non-2xx response or transport error raises UpstreamFetchError. For
receipts this aborts the whole fetch: pages already read are discarded.

Environment (see takings_core.config.LoyverseSettings.from_env):
  LOYVERSE_API_TOKEN, LOYVERSE_LOCATION_ID, LOYVERSE_BASE, LOYVERSE_TIMEOUT
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

import requests

from takings_core.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from takings_core.exceptions import UpstreamFetchError

logger = logging.getLogger(__name__)

# ------------------------- Config -------------------------
RECEIPTS_PAGE_SIZE = 100
ITEMS_PAGE_SIZE = 250

SINGLE_STORE_LIMIT = 15_000
ALL_STORES_LIMIT = 10_000

# Store identifier meaning "every store under the account"
ALL_STORES = "*"


# ------------------------- Helpers -------------------------
def is_all_stores(store_id: str | None) -> bool:
    """True when store_id asks for every store (None or ALL_STORES)."""
    return store_id is None or store_id == ALL_STORES


def make_session(api_token: str, timeout: float = DEFAULT_TIMEOUT) -> requests.Session:
    """Create a requests Session authenticated against Loyverse.

    Configures the session with:
    - Bearer token Authorization header
    - JSON Content-Type
    - Default timeout for all requests

    No retry adapter is mounted: transient failures propagate to the caller.

    Args:
        api_token: Loyverse access token.
        timeout: Default timeout in seconds for all requests.

    Returns:
        Configured requests.Session object.

    """
    s = requests.Session()
    s.headers.update(
        {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }
    )
    # Default timeouts via a wrapper
    orig_request = s.request

    def timed_request(method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return orig_request(method, url, **kwargs)

    s.request = timed_request  # type: ignore[method-assign,assignment]
    return s


def ensure_ok(resp: requests.Response, msg: str, *, endpoint: str | None = None) -> None:
    """Check if HTTP response is successful, raise UpstreamFetchError if not.

    Args:
        resp: HTTP response object to check.
        msg: Error message prefix if response is not successful.
        endpoint: Endpoint name recorded on the exception.

    Raises:
        UpstreamFetchError: If response status code is not in 200-299 range.

    """
    if not (200 <= resp.status_code < 300):
        raise UpstreamFetchError(
            f"{msg}. HTTP {resp.status_code}: {(resp.text or '')[:400]}",
            status_code=resp.status_code,
            endpoint=endpoint,
        )


def _get_json(
    session: requests.Session,
    url: str,
    params: dict[str, Any],
    *,
    endpoint: str,
) -> dict[str, Any]:
    """GET a Loyverse endpoint and decode its JSON object body."""
    try:
        r = session.get(url, params=params)
    except requests.RequestException as e:
        raise UpstreamFetchError(
            f"Loyverse {endpoint} request failed: {e}", endpoint=endpoint
        ) from e
    ensure_ok(r, f"Loyverse {endpoint} request failed", endpoint=endpoint)
    try:
        body = r.json()
    except ValueError as e:
        raise UpstreamFetchError(
            f"Loyverse {endpoint} returned invalid JSON",
            status_code=r.status_code,
            endpoint=endpoint,
        ) from e
    if not isinstance(body, dict):
        raise UpstreamFetchError(
            f"Loyverse {endpoint} returned {type(body).__name__}, expected object",
            status_code=r.status_code,
            endpoint=endpoint,
        )
    return body


def _list_field(body: dict[str, Any], field: str, *, endpoint: str) -> list[Any]:
    """Return body[field] as a list (missing or null means empty)."""
    value = body.get(field)
    if value is None:
        return []
    if not isinstance(value, list):
        raise UpstreamFetchError(
            f"Loyverse {endpoint} returned {type(value).__name__} for '{field}', expected list",
            endpoint=endpoint,
        )
    return value


# ------------------------- Receipts -------------------------
def fetch_receipts(
    session: requests.Session,
    store_id: str | None,
    start_date: date,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> list[dict[str, Any]]:
    """Fetch every receipt created on or after start_date (UTC midnight).

    Pages of RECEIPTS_PAGE_SIZE are requested while the API returns both a
    non-empty page and a cursor. Accumulation stops at SINGLE_STORE_LIMIT,
    or ALL_STORES_LIMIT when store_id is None/ALL_STORES; the result is
    truncated to exactly that ceiling.

    Voided and cancelled receipts are returned too; filtering happens in
    the aggregator.

    Args:
        session: Authenticated session from make_session().
        store_id: Store to filter on, or None/ALL_STORES for every store.
        start_date: First calendar day to include.
        base_url: API root.

    Returns:
        Flat list of raw receipt objects, in page order.

    Raises:
        UpstreamFetchError: On any failed page. No partial result is returned.

    """
    all_stores = is_all_stores(store_id)
    limit = ALL_STORES_LIMIT if all_stores else SINGLE_STORE_LIMIT
    url = f"{base_url.rstrip('/')}/receipts"

    params: dict[str, Any] = {
        "created_at_min": f"{start_date.strftime('%Y-%m-%d')}T00:00:00.000Z",
        "limit": RECEIPTS_PAGE_SIZE,
    }
    if not all_stores:
        params["store_id"] = store_id

    receipts: list[dict[str, Any]] = []
    cursor: str | None = None
    pages = 0

    while True:
        page_params = dict(params)
        if cursor:
            page_params["cursor"] = cursor

        body = _get_json(session, url, page_params, endpoint="receipts")
        page = _list_field(body, "receipts", endpoint="receipts")
        cursor = body.get("cursor") or None
        pages += 1

        receipts.extend(r for r in page if isinstance(r, dict))
        logger.debug("Receipts page %d: %d rows (total %d)", pages, len(page), len(receipts))

        if len(receipts) >= limit:
            logger.warning(
                "Receipt ceiling reached (%d) for store %s; remaining pages skipped",
                limit,
                "ALL" if all_stores else store_id,
            )
            return receipts[:limit]

        if not page or not cursor:
            break

    logger.info(
        "Fetched %d receipts in %d page(s) since %s for store %s",
        len(receipts),
        pages,
        start_date,
        "ALL" if all_stores else store_id,
    )
    return receipts


# ------------------------- Catalog -------------------------
def fetch_categories(
    session: requests.Session,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> dict[str, str]:
    """Fetch the category catalog as {category_id: name}.

    Raises:
        UpstreamFetchError: On a failed request.
    """
    body = _get_json(session, f"{base_url.rstrip('/')}/categories", {}, endpoint="categories")
    mapping: dict[str, str] = {}
    for cat in _list_field(body, "categories", endpoint="categories"):
        if isinstance(cat, dict) and cat.get("id") and cat.get("name"):
            mapping[str(cat["id"])] = str(cat["name"])
    return mapping


def fetch_items(
    session: requests.Session,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> list[dict[str, Any]]:
    """Fetch one page (ITEMS_PAGE_SIZE) of catalog items.

    Only the first page is read. Accounts with more catalog items than that
    will see the remainder fall back to "Uncategorized".

    Raises:
        UpstreamFetchError: On a failed request.
    """
    body = _get_json(
        session,
        f"{base_url.rstrip('/')}/items",
        {"limit": ITEMS_PAGE_SIZE},
        endpoint="items",
    )
    items = [i for i in _list_field(body, "items", endpoint="items") if isinstance(i, dict)]
    if body.get("cursor"):
        logger.info(
            "Catalog has more than %d items; only the first page is used for categories",
            ITEMS_PAGE_SIZE,
        )
    return items
