"""Aggregate receipts into per-day takings.

Single pass over the receipts, independent of their order:

1. Skip voided/cancelled receipts (status VOIDED or CANCELLED, or any
   cancelled_at).
2. Attribute the receipt to its business date (receipt_date, else
   created_at).
3. Split its payments into cash/card, with the card shortfall rule.
4. Add its total to the day's revenue, receipt count and its store's
   location entry; recompute the average from scratch.
5. Add each line item to the day's (item name, variant) entry.

Then days are sorted newest first and each day's items by total sales,
descending. Categories are left unset here; see takings.enrich.

Output
------
A list of DailyTaking, one per business date with at least one included
receipt.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Union

from takings_core.exceptions import MalformedRecordWarning
from takings_core.receipts.models import LineItem, Receipt
from takings_core.takings.models import DailyTaking, ItemSales, PaymentBreakdown
from takings_core.takings.payments import split_payments

logger = logging.getLogger(__name__)

ReceiptLike = Union[Receipt, dict[str, Any]]


# ------------------------------------------------------------
# Accumulators
# ------------------------------------------------------------


@dataclass
class _ItemAccumulator:
    item_name: str
    variant_name: str | None
    item_id: str | None
    quantity: float = 0.0
    total_sales: float = 0.0

    def add(self, line: LineItem) -> None:
        self.quantity += line.quantity
        self.total_sales += line.total
        if self.item_id is None:
            self.item_id = line.item_id

    def freeze(self) -> ItemSales:
        avg = self.total_sales / self.quantity if self.quantity else 0.0
        return ItemSales(
            item_name=self.item_name,
            variant_name=self.variant_name,
            quantity=self.quantity,
            total_sales=self.total_sales,
            average_price=avg,
            category=None,
            item_id=self.item_id,
        )


@dataclass
class _DayAccumulator:
    date: str
    total: float = 0.0
    receipt_count: int = 0
    average_receipt: float = 0.0
    cash: float = 0.0
    card: float = 0.0
    locations: dict[str, float] = field(default_factory=dict)
    items: dict[tuple[str, str | None], _ItemAccumulator] = field(default_factory=dict)

    def add(self, receipt: Receipt) -> None:
        self.total += receipt.total
        self.receipt_count += 1
        self.average_receipt = self.total / self.receipt_count

        location = receipt.store_id or "unknown"
        self.locations[location] = self.locations.get(location, 0.0) + receipt.total

        split = split_payments(receipt.payments, receipt.total)
        self.cash += split.cash
        self.card += split.card

        for line in receipt.line_items:
            acc = self.items.get(line.key)
            if acc is None:
                acc = _ItemAccumulator(line.item_name, line.variant_name, line.item_id)
                self.items[line.key] = acc
            acc.add(line)

    def freeze(self) -> DailyTaking:
        items = sorted(
            (acc.freeze() for acc in self.items.values()),
            key=lambda i: i.total_sales,
            reverse=True,
        )
        return DailyTaking(
            date=self.date,
            total=self.total,
            receipt_count=self.receipt_count,
            average_receipt=self.average_receipt,
            payment_breakdown=PaymentBreakdown(cash=self.cash, card=self.card),
            location_breakdown=dict(self.locations),
            item_breakdown=tuple(items),
        )


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------


def aggregate_daily_takings(receipts: Iterable[ReceiptLike]) -> list[DailyTaking]:
    """Roll receipts up into one DailyTaking per business date.

    Raw dicts are converted with Receipt.from_dict. Records with missing
    fields are aggregated with zero/empty defaults; records that are not
    objects, or carry no usable date, are skipped. Either case is reported
    once per call as a MalformedRecordWarning.

    Args:
        receipts: Raw receipt objects from the API, or Receipt instances.

    Returns:
        DailyTaking list sorted by date, newest first. Empty if no
        receipt qualifies.
    """
    days: dict[str, _DayAccumulator] = {}
    scanned = 0
    excluded = 0
    defaulted = 0
    skipped = 0

    for raw in receipts:
        scanned += 1
        if isinstance(raw, Receipt):
            receipt = raw
        elif isinstance(raw, dict):
            receipt = Receipt.from_dict(raw)
        else:
            skipped += 1
            continue

        if receipt.is_excluded:
            excluded += 1
            continue

        day = receipt.business_date
        if day is None:
            skipped += 1
            continue
        if receipt.was_defaulted:
            defaulted += 1

        acc = days.get(day)
        if acc is None:
            acc = _DayAccumulator(date=day)
            days[day] = acc
        acc.add(receipt)

    if defaulted or skipped:
        warnings.warn(
            f"{defaulted} receipt(s) aggregated with defaulted fields, "
            f"{skipped} skipped as unusable",
            MalformedRecordWarning,
            stacklevel=2,
        )

    # ISO dates compare chronologically as strings
    result = [days[d].freeze() for d in sorted(days, reverse=True)]
    logger.info(
        "Aggregated %d receipts (%d excluded, %d skipped) into %d day(s)",
        scanned,
        excluded,
        skipped,
        len(result),
    )
    return result
