"""Tests for record deserialization and session bookkeeping."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from stockroom import seed
from stockroom.constants import PurchaseStatus
from stockroom.models import (
    InventorySession,
    deserialize_product,
    deserialize_purchase,
    deserialize_sale,
)


def test_deserialize_product_normalises_types():
    product = deserialize_product(
        {"product_id": "7", "name": "Kettle", "category": "Home", "stock": "4", "price": 19.9, "supplier": "HG", "min_stock": 2}
    )

    assert product.product_id == 7
    assert product.stock == 4
    assert product.price == Decimal("19.9")


def test_deserialize_sale_accepts_iso_dates():
    sale = deserialize_sale(
        {"sale_id": 1, "product_name": "Kettle", "quantity": 1, "price": "10", "discount": "0", "total": "10", "sold_on": "2024-01-10"}
    )

    assert sale.sold_on == date(2024, 1, 10)


def test_deserialize_purchase_parses_status():
    purchase = deserialize_purchase(
        {
            "purchase_id": 3,
            "product_name": "Kettle",
            "supplier": "HG",
            "quantity": 5,
            "cost_price": "8",
            "total": "40",
            "ordered_on": date(2024, 1, 2),
            "status": "cancelled",
        }
    )

    assert purchase.status is PurchaseStatus.CANCELLED
    assert purchase.ordered_on == date(2024, 1, 2)


def test_allocate_sale_id_is_monotonic():
    session = InventorySession()

    assert [session.allocate_sale_id() for _ in range(3)] == [1, 2, 3]


def test_invalidate_ignores_missing_buckets():
    session = InventorySession()
    session.cache_bucket("summary")["x"] = 1

    session.invalidate("summary", "never-created")

    assert "x" not in session.cache_bucket("summary")


def test_demo_sessions_are_independent():
    first = seed.demo_session()
    second = seed.demo_session()

    first.products.clear()

    assert len(second.products) == 5
    assert [p.status for p in second.purchases] == [PurchaseStatus.RECEIVED, PurchaseStatus.PENDING]


def test_replace_product_keeps_catalog_order(session, product_factory):
    updated = product_factory(1, name="Product P", stock=3)

    previous = session.replace_product(updated)

    assert previous.stock == 10
    assert session.products[0] is updated
    assert [p.product_id for p in session.products] == [1, 2]


def test_replace_product_rejects_unknown_id(session, product_factory):
    with pytest.raises(KeyError):
        session.replace_product(product_factory(99))

    assert [p.product_id for p in session.products] == [1, 2]


def test_add_sale_prepends(sale_factory):
    session = InventorySession(sales=[sale_factory(1)])

    session.add_sale(sale_factory(2))

    assert [sale.sale_id for sale in session.sales] == [2, 1]
