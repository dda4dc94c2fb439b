"""Tests for the daily takings aggregator."""

import random
import warnings

import pytest

from fakes import line, make_receipt
from takings_core.exceptions import MalformedRecordWarning
from takings_core.receipts.models import Receipt
from takings_core.takings.aggregate import aggregate_daily_takings


@pytest.fixture
def mixed_receipts() -> list[dict]:
    """Receipts over three days, two stores, with voided/cancelled noise."""
    return [
        make_receipt(12.0, date="2024-03-01", line_items=[line("Latte", 12.0, 3)]),
        make_receipt(8.0, date="2024-03-01", store_id="store-2",
                     line_items=[line("Bagel", 8.0, 2)]),
        make_receipt(20.0, date="2024-03-02", line_items=[line("Latte", 8.0, 2),
                                                          line("Bagel", 12.0, 3)]),
        make_receipt(5.5, date="2024-03-03", payments=[{"type": "CARD", "money_amount": 5.5}]),
        make_receipt(999.0, date="2024-03-02", status="VOIDED"),
        make_receipt(777.0, date="2024-03-03", status="CANCELLED"),
        make_receipt(555.0, date="2024-03-04", cancelled_at="2024-03-04T13:00:00Z"),
    ]


def test_voided_receipt_scenario() -> None:
    """NORMAL 50.00 cash receipt plus a VOIDED 1000.00 receipt on the same day."""
    a = make_receipt(50.0, date="2024-03-01")
    b = make_receipt(1000.0, date="2024-03-01", status="VOIDED")

    result = aggregate_daily_takings([a, b])

    assert len(result) == 1
    day = result[0]
    assert day.date == "2024-03-01"
    assert day.total == 50.0
    assert day.receipt_count == 1
    assert day.payment_breakdown.cash == 50.0
    assert day.payment_breakdown.card == 0.0


def test_unclassified_payment_scenario() -> None:
    """Revenue and the payment split are independent ledgers."""
    r = make_receipt(30.0, payments=[{"type": "visa-debit-unlisted", "money_amount": 30.0}])

    (day,) = aggregate_daily_takings([r])

    assert day.total == 30.0
    assert day.payment_breakdown.cash == 0.0
    assert day.payment_breakdown.card == 0.0


def test_half_cash_shortfall_goes_to_card() -> None:
    """Partial cash payment leaves the remainder on card."""
    r = make_receipt(40.0, payments=[{"type": "CASH", "money_amount": 20.0}])
    (day,) = aggregate_daily_takings([r])
    assert day.payment_breakdown.cash == 20.0
    assert day.payment_breakdown.card == 20.0


def test_totals_match_included_receipts(mixed_receipts: list[dict]) -> None:
    """Day totals sum to the included receipt totals."""
    result = aggregate_daily_takings(mixed_receipts)
    assert sum(d.total for d in result) == pytest.approx(12.0 + 8.0 + 20.0 + 5.5)
    assert sum(d.receipt_count for d in result) == 4


def test_average_is_total_over_count(mixed_receipts: list[dict]) -> None:
    """Average receipt equals total / receipt count."""
    for day in aggregate_daily_takings(mixed_receipts):
        assert day.average_receipt == day.total / day.receipt_count


def test_dates_strictly_descending_and_no_empty_days(mixed_receipts: list[dict]) -> None:
    """Days are unique, newest first, never empty."""
    result = aggregate_daily_takings(mixed_receipts)
    dates = [d.date for d in result]
    assert dates == ["2024-03-03", "2024-03-02", "2024-03-01"]
    # 2024-03-04 only has a cancelled receipt
    assert "2024-03-04" not in dates


def test_excluded_receipts_never_change_output(mixed_receipts: list[dict]) -> None:
    """Adding voided or cancelled receipts changes nothing."""
    baseline = aggregate_daily_takings(mixed_receipts)
    noise = [
        make_receipt(123.0, date="2024-03-01", status="VOIDED",
                     line_items=[line("Latte", 123.0, 9)]),
        make_receipt(50.0, date="2024-03-09", status="CANCELLED"),
        make_receipt(75.0, date="2024-03-02", cancelled_at="2024-03-02T10:00:00Z"),
    ]
    assert aggregate_daily_takings(mixed_receipts + noise) == baseline


def test_order_independent(mixed_receipts: list[dict]) -> None:
    """Shuffling the input gives the same output."""
    shuffled = list(mixed_receipts)
    random.Random(7).shuffle(shuffled)
    a = aggregate_daily_takings(mixed_receipts)
    b = aggregate_daily_takings(shuffled)
    assert [(d.date, d.total, d.receipt_count) for d in a] == [
        (d.date, d.total, d.receipt_count) for d in b
    ]


def test_location_breakdown(mixed_receipts: list[dict]) -> None:
    """Revenue is split per store."""
    day = {d.date: d for d in aggregate_daily_takings(mixed_receipts)}["2024-03-01"]
    assert day.location_breakdown == {"store-1": 12.0, "store-2": 8.0}


def test_items_with_same_name_and_variant_merge() -> None:
    """Lines with the same (name, variant) merge within a day."""
    receipts = [
        make_receipt(7.0, line_items=[line("Latte", 7.0, 2, variant="Large")]),
        make_receipt(3.5, line_items=[line("Latte", 3.5, 1, variant="Large")]),
        make_receipt(3.0, line_items=[line("Latte", 3.0, 1, variant="Small")]),
    ]
    (day,) = aggregate_daily_takings(receipts)

    by_key = {(i.item_name, i.variant_name): i for i in day.item_breakdown}
    assert set(by_key) == {("Latte", "Large"), ("Latte", "Small")}
    large = by_key[("Latte", "Large")]
    assert large.quantity == 3.0
    assert large.total_sales == 10.5
    assert large.average_price == 3.5
    assert large.category is None


def test_items_on_different_days_do_not_merge() -> None:
    """Item entries are per day."""
    receipts = [
        make_receipt(4.0, date="2024-03-01", line_items=[line("Latte", 4.0)]),
        make_receipt(4.0, date="2024-03-02", line_items=[line("Latte", 4.0)]),
    ]
    result = aggregate_daily_takings(receipts)
    assert [len(d.item_breakdown) for d in result] == [1, 1]
    assert all(d.item_breakdown[0].quantity == 1.0 for d in result)


def test_items_sorted_by_total_sales_desc(mixed_receipts: list[dict]) -> None:
    """Items are sorted by total sales, descending."""
    for day in aggregate_daily_takings(mixed_receipts):
        sales = [i.total_sales for i in day.item_breakdown]
        assert sales == sorted(sales, reverse=True)


def test_zero_quantity_item_average_is_zero() -> None:
    """Average price is 0.0 when quantity is 0."""
    (day,) = aggregate_daily_takings([make_receipt(0.0, line_items=[line("Refill", 0.0, 0)])])
    assert day.item_breakdown[0].average_price == 0.0


def test_empty_input_returns_empty_list() -> None:
    """No receipts gives no days."""
    assert aggregate_daily_takings([]) == []


def test_accepts_receipt_instances() -> None:
    """Receipt objects are accepted as well as raw dicts."""
    r = Receipt.from_dict(make_receipt(9.0))
    (day,) = aggregate_daily_takings([r])
    assert day.total == 9.0


def test_malformed_records_are_tolerated() -> None:
    """Missing fields default to zero/empty; one bad record never aborts the batch."""
    receipts = [
        make_receipt(10.0),
        {"created_at": "2024-03-01T08:00:00Z"},  # no total, no arrays
        {"total_money": 99.0},  # no date at all
        "garbage",
    ]
    with pytest.warns(MalformedRecordWarning):
        result = aggregate_daily_takings(receipts)

    (day,) = result
    assert day.total == 10.0
    assert day.receipt_count == 2
    assert day.average_receipt == 5.0


def test_clean_batch_emits_no_warning() -> None:
    """Well-formed receipts raise no MalformedRecordWarning."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", MalformedRecordWarning)
        aggregate_daily_takings([make_receipt(10.0, line_items=[line("Latte", 10.0)])])


def test_created_at_used_without_receipt_date() -> None:
    """created_at decides the day when receipt_date is absent."""
    r = make_receipt(10.0, date="2024-02-28", use_receipt_date=False)
    (day,) = aggregate_daily_takings([r])
    assert day.date == "2024-02-28"
