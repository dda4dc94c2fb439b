"""Receipt records as received from the Loyverse receipts endpoint.

Raw JSON is converted exactly once, in the ``from_dict`` constructors.
Missing numeric fields become 0.0, missing arrays become empty tuples and
missing strings become None, so the aggregation code never has to guard
against absent keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from takings_core.utils import business_date_from, to_float

EXCLUDED_STATUSES = frozenset({"VOIDED", "CANCELLED"})

UNKNOWN_ITEM_NAME = "Unknown Item"


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class Payment:
    """One tender on a receipt.

    Attributes:
        type: Payment type tag (e.g. "CASH", "CARD"), if any.
        name: Free-text payment name configured in the POS, if any.
        amount: Amount paid (money_amount).
    """

    type: str | None
    name: str | None
    amount: float
    was_defaulted: bool = field(default=False, compare=False)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Payment:
        return cls(
            type=_str_or_none(raw.get("type")),
            name=_str_or_none(raw.get("name")),
            amount=to_float(raw.get("money_amount")),
            was_defaulted="money_amount" not in raw,
        )


@dataclass(frozen=True)
class LineItem:
    """One sold line on a receipt.

    Attributes:
        item_name: Catalog item name.
        variant_name: Variant name, or None for single-variant items.
        quantity: Units sold (may be fractional, e.g. weighed goods).
        total: Line total after discounts (total_money).
        item_id: Catalog item identifier used for category lookup.
    """

    item_name: str
    variant_name: str | None
    quantity: float
    total: float
    item_id: str | None
    was_defaulted: bool = field(default=False, compare=False)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LineItem:
        name = _str_or_none(raw.get("item_name"))
        return cls(
            item_name=name or UNKNOWN_ITEM_NAME,
            variant_name=_str_or_none(raw.get("variant_name")),
            quantity=to_float(raw.get("quantity")),
            total=to_float(raw.get("total_money")),
            item_id=_str_or_none(raw.get("item_id")),
            was_defaulted=name is None
            or "quantity" not in raw
            or "total_money" not in raw,
        )

    @property
    def key(self) -> tuple[str, str | None]:
        """Aggregation identity: (item name, variant name)."""
        return (self.item_name, self.variant_name)


@dataclass(frozen=True)
class Receipt:
    """A point-of-sale receipt.

    Attributes:
        receipt_id: receipt_number (falls back to id).
        store_id: Store/location that issued the receipt.
        created_at: Creation timestamp (ISO-8601 string).
        receipt_date: Business-date timestamp, if provided.
        status: Upper-cased lifecycle status; "NORMAL" when absent.
        cancelled_at: Cancellation timestamp, or None.
        total: Receipt total (total_money, falling back to total).
        line_items: Sold lines, in upstream order.
        payments: Tenders, in upstream order.
    """

    receipt_id: str | None
    store_id: str | None
    created_at: str | None
    receipt_date: str | None
    status: str
    cancelled_at: str | None
    total: float
    line_items: tuple[LineItem, ...] = ()
    payments: tuple[Payment, ...] = ()
    was_defaulted: bool = field(default=False, compare=False)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Receipt:
        """Build a Receipt from one element of the ``receipts`` array.

        Args:
            raw: Decoded JSON object.

        Returns:
            Receipt with all defaults applied.

        Examples:
            >>> r = Receipt.from_dict({"total_money": 12.5, "created_at": "2024-03-01T09:00:00Z"})
            >>> (r.status, r.total, r.business_date)
            ('NORMAL', 12.5, '2024-03-01')
        """
        raw_items = raw.get("line_items")
        raw_payments = raw.get("payments")
        items = tuple(
            LineItem.from_dict(li) for li in (raw_items or []) if isinstance(li, dict)
        )
        payments = tuple(
            Payment.from_dict(p) for p in (raw_payments or []) if isinstance(p, dict)
        )

        # total_money || total || 0
        total = to_float(raw.get("total_money")) or to_float(raw.get("total"))
        total_missing = raw.get("total_money") is None and raw.get("total") is None

        status = _str_or_none(raw.get("status"))

        return cls(
            receipt_id=_str_or_none(raw.get("receipt_number")) or _str_or_none(raw.get("id")),
            store_id=_str_or_none(raw.get("store_id")),
            created_at=_str_or_none(raw.get("created_at")),
            receipt_date=_str_or_none(raw.get("receipt_date")),
            status=status.upper() if status else "NORMAL",
            # an absent key is treated like null: not cancelled
            cancelled_at=_str_or_none(raw.get("cancelled_at")),
            total=total,
            line_items=items,
            payments=payments,
            was_defaulted=total_missing
            or not isinstance(raw_items, list)
            or not isinstance(raw_payments, list)
            or any(li.was_defaulted for li in items)
            or any(p.was_defaulted for p in payments),
        )

    @property
    def is_excluded(self) -> bool:
        """True for voided or cancelled receipts, which contribute to nothing."""
        return self.status in EXCLUDED_STATUSES or self.cancelled_at is not None

    @property
    def business_date(self) -> str | None:
        """Calendar day the receipt is attributed to.

        Uses receipt_date when present, otherwise created_at.
        """
        if self.receipt_date:
            return business_date_from(self.receipt_date)
        return business_date_from(self.created_at)
