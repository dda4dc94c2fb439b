"""Payment classification into cash/card buckets.

Loyverse payment types and names are free-form, so the split is heuristic:

- type == "cash" or name contains "cash"                    -> CASH
- type in {"card", "credit_card", "debit_card"} or name
  contains card/visa/mastercard/amex/credit/debit           -> CARD
- anything else                                             -> dropped

Comparisons are case-insensitive. The cash rule is checked first.

Reconciliation: when the classified cash + card is positive but below the
receipt total, the shortfall is added to CARD, never to CASH.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from takings_core.receipts.models import Payment
from takings_core.takings.models import PaymentBreakdown

Bucket = Literal["cash", "card"]

CASH_TYPES = frozenset({"cash"})
CARD_TYPES = frozenset({"card", "credit_card", "debit_card"})

CASH_NAME_TOKENS = ("cash",)
CARD_NAME_TOKENS = ("card", "visa", "mastercard", "amex", "credit", "debit")


def bucket_for_payment(payment: Payment) -> Bucket | None:
    """Map a payment to "cash", "card", or None when neither rule matches.

    Examples:
        >>> bucket_for_payment(Payment(type="CASH", name=None, amount=10.0))
        'cash'
        >>> bucket_for_payment(Payment(type=None, name="Visa Terminal", amount=10.0))
        'card'
        >>> bucket_for_payment(Payment(type="visa-debit-unlisted", name=None, amount=1.0)) is None
        True
    """
    ptype = (payment.type or "").lower()
    name = (payment.name or "").lower()

    if ptype in CASH_TYPES or any(t in name for t in CASH_NAME_TOKENS):
        return "cash"
    if ptype in CARD_TYPES or any(t in name for t in CARD_NAME_TOKENS):
        return "card"
    return None


def split_payments(payments: Iterable[Payment], receipt_total: float) -> PaymentBreakdown:
    """Sum a receipt's payments into cash/card and apply the card shortfall.

    Args:
        payments: The receipt's tenders.
        receipt_total: The receipt total used for reconciliation.

    Returns:
        PaymentBreakdown for this receipt alone.

    Examples:
        >>> split_payments([Payment(type="CASH", name=None, amount=25.0)], 50.0)
        PaymentBreakdown(cash=25.0, card=25.0)
    """
    cash = 0.0
    card = 0.0
    for p in payments:
        bucket = bucket_for_payment(p)
        if bucket == "cash":
            cash += p.amount
        elif bucket == "card":
            card += p.amount

    classified = cash + card
    if 0 < classified < receipt_total:
        card += receipt_total - classified

    return PaymentBreakdown(cash=cash, card=card)
