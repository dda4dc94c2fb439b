"""Resolve item categories on aggregated takings.

A lookup table item_id -> category name is built from two Loyverse calls
(categories, then one page of items) and applied to every item of every
day, producing new DailyTaking records. If either call fails, every item
is labelled "Uncategorized" and the takings are still returned.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import requests

from takings_core.config import DEFAULT_BASE_URL
from takings_core.exceptions import UpstreamFetchError
from takings_core.receipts.extract import fetch_categories, fetch_items
from takings_core.takings.models import UNCATEGORIZED, DailyTaking

logger = logging.getLogger(__name__)


def build_category_lookup(
    categories: Mapping[str, str],
    items: Sequence[dict[str, Any]],
) -> dict[str, str]:
    """Map catalog item ids to category names.

    Items without a category_id, or whose category is unknown, are left
    out of the lookup.

    Examples:
        >>> build_category_lookup({"c1": "Coffee"}, [{"id": "i1", "category_id": "c1"}])
        {'i1': 'Coffee'}
    """
    lookup: dict[str, str] = {}
    for item in items:
        item_id = item.get("id")
        category_id = item.get("category_id")
        if not item_id or not category_id:
            continue
        name = categories.get(str(category_id))
        if name:
            lookup[str(item_id)] = name
    return lookup


def apply_categories(
    takings: Sequence[DailyTaking],
    lookup: Mapping[str, str],
) -> list[DailyTaking]:
    """Return copies of takings with every item's category resolved.

    Args:
        takings: Aggregated days (not modified).
        lookup: item_id -> category name. Missing ids become "Uncategorized".

    Returns:
        New DailyTaking list in the same order.
    """
    enriched: list[DailyTaking] = []
    for day in takings:
        items = tuple(
            dataclasses.replace(
                item,
                category=lookup.get(item.item_id, UNCATEGORIZED) if item.item_id else UNCATEGORIZED,
            )
            for item in day.item_breakdown
        )
        enriched.append(dataclasses.replace(day, item_breakdown=items))
    return enriched


def fetch_category_lookup(
    session: requests.Session,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> dict[str, str]:
    """Fetch categories and one page of items, and build the lookup.

    Raises:
        UpstreamFetchError: If either call fails.
    """
    categories = fetch_categories(session, base_url=base_url)
    items = fetch_items(session, base_url=base_url)
    lookup = build_category_lookup(categories, items)
    logger.debug(
        "Category lookup: %d categories, %d items, %d resolved",
        len(categories),
        len(items),
        len(lookup),
    )
    return lookup


def enrich_categories(
    takings: Sequence[DailyTaking],
    session: requests.Session,
    *,
    base_url: str = DEFAULT_BASE_URL,
) -> list[DailyTaking]:
    """Resolve categories for all items, degrading to "Uncategorized".

    Enrichment failure never fails the caller: an UpstreamFetchError from
    either catalog call is logged and an empty lookup is used instead.

    Args:
        takings: Output of aggregate_daily_takings().
        session: Authenticated session.
        base_url: API root.

    Returns:
        New DailyTaking list with categories set on every item.
    """
    if not any(day.item_breakdown for day in takings):
        return list(takings)

    try:
        lookup = fetch_category_lookup(session, base_url=base_url)
    except UpstreamFetchError as e:
        logger.warning("Category enrichment failed, using %r: %s", UNCATEGORIZED, e)
        lookup = {}

    return apply_categories(takings, lookup)
