"""Tabular and compact views of daily takings.

This module turns the DailyTaking list into pandas DataFrames for export
and analysis, and into the compact row format consumed by the dashboard.

Grain Reference:
    to_frame:        one row per date
    items_frame:     one row per date x (item, variant)
    location_frame:  one row per date x store
    category_totals: one row per date x category
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from takings_core.takings.models import UNCATEGORIZED, DailyTaking, PaymentBreakdown

logger = logging.getLogger(__name__)

DAILY_COLUMNS = [
    "date",
    "total",
    "receipt_count",
    "average_receipt",
    "cash",
    "card",
]

ITEM_COLUMNS = [
    "date",
    "item_name",
    "variant_name",
    "category",
    "quantity",
    "total_sales",
    "average_price",
]


def to_frame(takings: Sequence[DailyTaking]) -> pd.DataFrame:
    """One row per business date, newest first."""
    rows = [
        {
            "date": d.date,
            "total": d.total,
            "receipt_count": d.receipt_count,
            "average_receipt": d.average_receipt,
            "cash": d.payment_breakdown.cash,
            "card": d.payment_breakdown.card,
        }
        for d in takings
    ]
    return pd.DataFrame(rows, columns=DAILY_COLUMNS)


def items_frame(takings: Sequence[DailyTaking]) -> pd.DataFrame:
    """One row per date x item, keeping each day's total-sales order."""
    rows = [
        {
            "date": d.date,
            "item_name": i.item_name,
            "variant_name": i.variant_name,
            "category": i.category,
            "quantity": i.quantity,
            "total_sales": i.total_sales,
            "average_price": i.average_price,
        }
        for d in takings
        for i in d.item_breakdown
    ]
    return pd.DataFrame(rows, columns=ITEM_COLUMNS)


def location_frame(takings: Sequence[DailyTaking]) -> pd.DataFrame:
    """One row per date x store with that store's revenue."""
    rows = [
        {"date": d.date, "store_id": store_id, "total": total}
        for d in takings
        for store_id, total in d.location_breakdown.items()
    ]
    return pd.DataFrame(rows, columns=["date", "store_id", "total"])


def category_totals(takings: Sequence[DailyTaking]) -> pd.DataFrame:
    """Sum item sales per date x category.

    Items without a category (enrichment not run) count as "Uncategorized".

    Returns:
        DataFrame with columns date, category, total_sales, quantity, sorted
        by date descending then total_sales descending.
    """
    df = items_frame(takings)
    if df.empty:
        return pd.DataFrame(columns=["date", "category", "total_sales", "quantity"])

    df["category"] = df["category"].fillna(UNCATEGORIZED)
    out = df.groupby(["date", "category"], as_index=False).agg(
        total_sales=("total_sales", "sum"),
        quantity=("quantity", "sum"),
    )
    return out.sort_values(["date", "total_sales"], ascending=[False, False]).reset_index(
        drop=True
    )


# ------------------------------------------------------------
# Compact format
# ------------------------------------------------------------


def to_compact(takings: Sequence[DailyTaking]) -> list[dict[str, Any]]:
    """Shrink takings to the dashboard's short-key rows.

    Keys: d=date, t=total, rc=receipt count, ar=average receipt,
    pb=payment breakdown, lb=location breakdown. Items are omitted.

    Examples:
        >>> to_compact([DailyTaking("2024-03-01", 50.0, 1, 50.0)])[0]["d"]
        '2024-03-01'
    """
    return [
        {
            "d": d.date,
            "t": d.total,
            "rc": d.receipt_count,
            "ar": d.average_receipt,
            "pb": {"cash": d.payment_breakdown.cash, "card": d.payment_breakdown.card},
            "lb": dict(d.location_breakdown),
        }
        for d in takings
    ]


def from_compact(rows: Sequence[dict[str, Any]]) -> list[DailyTaking]:
    """Inverse of to_compact (item breakdowns come back empty)."""
    result = []
    for row in rows:
        pb = row.get("pb") or {}
        result.append(
            DailyTaking(
                date=str(row["d"]),
                total=float(row.get("t", 0.0)),
                receipt_count=int(row.get("rc", 0)),
                average_receipt=float(row.get("ar", 0.0)),
                payment_breakdown=PaymentBreakdown(
                    cash=float(pb.get("cash", 0.0)), card=float(pb.get("card", 0.0))
                ),
                location_breakdown={str(k): float(v) for k, v in (row.get("lb") or {}).items()},
            )
        )
    return result


def export_csv(takings: Sequence[DailyTaking], out_dir: Path) -> tuple[Path, Path]:
    """Write daily_takings.csv and item_sales.csv (UTF-8 with BOM).

    Returns:
        Paths of the two files written.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    daily_path = out_dir / "daily_takings.csv"
    items_path = out_dir / "item_sales.csv"
    to_frame(takings).to_csv(daily_path, index=False, encoding="utf-8-sig")
    items_frame(takings).to_csv(items_path, index=False, encoding="utf-8-sig")
    logger.info("Wrote %s and %s", daily_path, items_path)
    return daily_path, items_path
