"""Demo data set used to populate a fresh dashboard session.

The helpers double as fixtures for tests and for trying the exports out by
hand without a live front-end.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .models import (
    InventorySession,
    deserialize_product,
    deserialize_purchase,
    deserialize_sale,
)


DEMO_PRODUCTS: Sequence[Mapping[str, Any]] = (
    {"product_id": 1, "name": "Samsung Galaxy S23 Smartphone", "category": "Electronics", "stock": 45, "price": "65000", "supplier": "Tech Supplier", "min_stock": 10},
    {"product_id": 2, "name": "ASUS ROG Laptop", "category": "Electronics", "stock": 8, "price": "120000", "supplier": "Tech Supplier", "min_stock": 5},
    {"product_id": 3, "name": "Sony WH-1000XM5 Headphones", "category": "Accessories", "stock": 23, "price": "28000", "supplier": "Audio Store", "min_stock": 15},
    {"product_id": 4, "name": "DeLonghi Coffee Maker", "category": "Home Appliances", "stock": 12, "price": "35000", "supplier": "Home Goods", "min_stock": 8},
    {"product_id": 5, "name": "Apple Watch", "category": "Electronics", "stock": 3, "price": "45000", "supplier": "Tech Supplier", "min_stock": 10},
)

# Newest first, matching the order the transaction engine maintains.
DEMO_SALES: Sequence[Mapping[str, Any]] = (
    {"sale_id": 1, "product_name": "Samsung Galaxy S23 Smartphone", "quantity": 2, "price": "65000", "discount": "5", "total": "123500", "sold_on": "2024-01-10"},
    {"sale_id": 2, "product_name": "Sony WH-1000XM5 Headphones", "quantity": 1, "price": "28000", "discount": "0", "total": "28000", "sold_on": "2024-01-10"},
    {"sale_id": 3, "product_name": "ASUS ROG Laptop", "quantity": 1, "price": "120000", "discount": "10", "total": "108000", "sold_on": "2024-01-09"},
)

DEMO_PURCHASES: Sequence[Mapping[str, Any]] = (
    {"purchase_id": 1, "product_name": "Samsung Galaxy S23 Smartphone", "supplier": "Tech Supplier", "quantity": 50, "cost_price": "55000", "total": "2750000", "ordered_on": "2024-01-05", "status": "received"},
    {"purchase_id": 2, "product_name": "Apple Watch", "supplier": "Tech Supplier", "quantity": 20, "cost_price": "38000", "total": "760000", "ordered_on": "2024-01-08", "status": "pending"},
)


def demo_session() -> InventorySession:
    """Return a new session holding its own copy of the demo records."""

    return InventorySession(
        products=[deserialize_product(raw) for raw in DEMO_PRODUCTS],
        sales=[deserialize_sale(raw) for raw in DEMO_SALES],
        purchases=[deserialize_purchase(raw) for raw in DEMO_PURCHASES],
    )
