"""Fake Loyverse API pieces: a requests-shaped session and receipt builders."""

from __future__ import annotations

from typing import Any, Callable


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, body: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


Handler = Callable[[dict[str, Any]], FakeResponse]


class FakeSession:
    """Routes GET calls by the last URL segment to per-endpoint handlers.

    Every call is recorded as (endpoint, params) in ``calls``.
    """

    def __init__(self, handlers: dict[str, Handler] | None = None) -> None:
        self.handlers: dict[str, Handler] = handlers or {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, **kwargs: Any) -> FakeResponse:
        endpoint = url.rstrip("/").rsplit("/", 1)[-1]
        params = dict(params or {})
        self.calls.append((endpoint, params))
        handler = self.handlers.get(endpoint)
        if handler is None:
            return FakeResponse(404, text=f"no handler for {endpoint}")
        return handler(params)

    def endpoint_calls(self, endpoint: str) -> list[dict[str, Any]]:
        return [p for e, p in self.calls if e == endpoint]


def paged_receipts(pages: list[list[dict[str, Any]]]) -> Handler:
    """Handler serving ``pages`` in order, with cursors "c1", "c2", ..."""

    def handler(params: dict[str, Any]) -> FakeResponse:
        cursor = params.get("cursor")
        index = int(cursor[1:]) if cursor else 0
        body: dict[str, Any] = {"receipts": pages[index]}
        if index + 1 < len(pages):
            body["cursor"] = f"c{index + 1}"
        return FakeResponse(200, body)

    return handler


def endless_receipts(page_size: int = 100) -> Handler:
    """Handler that always returns a full page and a new cursor."""
    counter = {"n": 0}

    def handler(params: dict[str, Any]) -> FakeResponse:
        start = counter["n"]
        counter["n"] += page_size
        page = [
            {
                "receipt_number": f"R{start + i}",
                "total_money": 1.0,
                "created_at": "2024-03-01T10:00:00Z",
            }
            for i in range(page_size)
        ]
        return FakeResponse(200, {"receipts": page, "cursor": f"c{counter['n']}"})

    return handler


def static(body: Any, status_code: int = 200) -> Handler:
    return lambda params: FakeResponse(status_code, body, text=str(body))


def raising(exc: Exception) -> Handler:
    def handler(params: dict[str, Any]) -> FakeResponse:
        raise exc

    return handler


def make_receipt(
    total: float = 10.0,
    *,
    date: str = "2024-03-01",
    status: str | None = "NORMAL",
    cancelled_at: str | None = None,
    store_id: str = "store-1",
    payments: list[dict[str, Any]] | None = None,
    line_items: list[dict[str, Any]] | None = None,
    use_receipt_date: bool = True,
) -> dict[str, Any]:
    """Build a raw receipt as the Loyverse API returns it.

    By default the receipt is paid in full with one cash payment.
    """
    raw: dict[str, Any] = {
        "receipt_number": f"1-{int(total * 100)}",
        "store_id": store_id,
        "created_at": f"{date}T12:00:00.000Z",
        "status": status,
        "cancelled_at": cancelled_at,
        "total_money": total,
        "line_items": line_items or [],
        "payments": (
            payments
            if payments is not None
            else [{"type": "CASH", "name": "Cash", "money_amount": total}]
        ),
    }
    if use_receipt_date:
        raw["receipt_date"] = f"{date}T12:00:00.000Z"
    return raw


def line(
    name: str,
    total: float,
    quantity: float = 1.0,
    *,
    variant: str | None = None,
    item_id: str | None = None,
) -> dict[str, Any]:
    """Build a raw line item."""
    return {
        "item_name": name,
        "variant_name": variant,
        "quantity": quantity,
        "total_money": total,
        "item_id": item_id or f"id-{name}",
    }
