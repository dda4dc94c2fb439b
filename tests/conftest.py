"""Shared fixtures for the takings_core test suite."""

from __future__ import annotations

import pytest

from fakes import FakeSession, Handler, static


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def catalog_handlers() -> dict[str, Handler]:
    """Categories + items endpoints for a small coffee-shop catalog."""
    return {
        "categories": static(
            {"categories": [{"id": "c-drinks", "name": "Drinks"}, {"id": "c-food", "name": "Food"}]}
        ),
        "items": static(
            {
                "items": [
                    {"id": "id-Latte", "category_id": "c-drinks"},
                    {"id": "id-Bagel", "category_id": "c-food"},
                    {"id": "id-Gift", "category_id": None},
                ]
            }
        ),
    }
