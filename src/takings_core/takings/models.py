"""Output records of the daily takings pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class PaymentBreakdown:
    """Cash/card split for one day."""

    cash: float = 0.0
    card: float = 0.0


@dataclass(frozen=True)
class ItemSales:
    """Sales of one (item name, variant) pair on one day.

    Attributes:
        item_name: Catalog item name.
        variant_name: Variant, or None.
        quantity: Units sold across all receipts of the day.
        total_sales: Sum of line totals.
        average_price: total_sales / quantity (0.0 when quantity is 0).
        category: Category name; None until enrichment has run.
        item_id: Catalog item id of the first line seen for this pair.
    """

    item_name: str
    variant_name: str | None
    quantity: float
    total_sales: float
    average_price: float
    category: str | None = None
    item_id: str | None = None


@dataclass(frozen=True)
class DailyTaking:
    """Aggregated takings for one business date.

    Attributes:
        date: Business date, YYYY-MM-DD.
        total: Sum of totals of the day's included receipts.
        receipt_count: Number of included receipts.
        average_receipt: total / receipt_count.
        payment_breakdown: Cash/card split (independent from total).
        location_breakdown: store_id -> revenue for the day.
        item_breakdown: Items sorted by total_sales, descending.
    """

    date: str
    total: float
    receipt_count: int
    average_receipt: float
    payment_breakdown: PaymentBreakdown = field(default_factory=PaymentBreakdown)
    location_breakdown: dict[str, float] = field(default_factory=dict)
    item_breakdown: tuple[ItemSales, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation (used by the cache tiers)."""
        data = asdict(self)
        data["item_breakdown"] = [asdict(i) for i in self.item_breakdown]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailyTaking:
        pb = data.get("payment_breakdown") or {}
        return cls(
            date=str(data["date"]),
            total=float(data.get("total", 0.0)),
            receipt_count=int(data.get("receipt_count", 0)),
            average_receipt=float(data.get("average_receipt", 0.0)),
            payment_breakdown=PaymentBreakdown(
                cash=float(pb.get("cash", 0.0)), card=float(pb.get("card", 0.0))
            ),
            location_breakdown={
                str(k): float(v) for k, v in (data.get("location_breakdown") or {}).items()
            },
            item_breakdown=tuple(ItemSales(**i) for i in data.get("item_breakdown") or []),
        )
