"""Shared pytest fixtures and utilities for stockroom tests."""

from __future__ import annotations

import sys
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterator

import pytest

# Ensure source packages are importable without installation.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from stockroom import core_logic, seed  # noqa: E402
from stockroom.constants import PurchaseStatus  # noqa: E402
from stockroom.models import InventorySession, Product, Purchase, Sale  # noqa: E402
from stockroom.settings import ReportSettings  # noqa: E402

GENERATED_AT = datetime(2024, 3, 15, 9, 30, tzinfo=UTC)


@pytest.fixture(scope="session", autouse=True)
def _restore_sys_path() -> Iterator[None]:
    """Ensure sys.path modifications are undone after the test session."""

    original = sys.path.copy()
    try:
        yield
    finally:
        sys.path[:] = original


@pytest.fixture
def report_settings() -> ReportSettings:
    return ReportSettings()


@pytest.fixture
def generated_at() -> datetime:
    return GENERATED_AT


@pytest.fixture
def product_factory() -> Callable[..., Product]:
    """Factory producing products with sensible defaults."""

    def _make(
        product_id: int = 1,
        *,
        name: str | None = None,
        category: str = "Electronics",
        stock: int = 10,
        price: str = "100",
        supplier: str = "Tech Supplier",
        min_stock: int = 5,
    ) -> Product:
        return Product(
            product_id=product_id,
            name=name or f"Product {product_id}",
            category=category,
            stock=stock,
            price=Decimal(price),
            supplier=supplier,
            min_stock=min_stock,
        )

    return _make


@pytest.fixture
def sale_factory() -> Callable[..., Sale]:
    def _make(
        sale_id: int = 1,
        *,
        product_name: str = "Product 1",
        quantity: int = 1,
        price: str = "100",
        discount: str = "0",
        total: str | None = None,
        sold_on: date = date(2024, 1, 10),
    ) -> Sale:
        amount = Decimal(total) if total is not None else core_logic.calculate_sale_total(
            Decimal(price), quantity, Decimal(discount)
        )
        return Sale(
            sale_id=sale_id,
            product_name=product_name,
            quantity=quantity,
            price=Decimal(price),
            discount=Decimal(discount),
            total=amount,
            sold_on=sold_on,
        )

    return _make


@pytest.fixture
def purchase_factory() -> Callable[..., Purchase]:
    def _make(
        purchase_id: int = 1,
        *,
        product_name: str = "Product 1",
        supplier: str = "Tech Supplier",
        quantity: int = 10,
        cost_price: str = "80",
        status: PurchaseStatus = PurchaseStatus.PENDING,
        ordered_on: date = date(2024, 1, 5),
    ) -> Purchase:
        return Purchase(
            purchase_id=purchase_id,
            product_name=product_name,
            supplier=supplier,
            quantity=quantity,
            cost_price=Decimal(cost_price),
            total=Decimal(cost_price) * quantity,
            ordered_on=ordered_on,
            status=status,
        )

    return _make


@pytest.fixture
def session(product_factory: Callable[..., Product]) -> InventorySession:
    """Session holding product P (stock 10, price 100, min 5) and a spare."""

    return InventorySession(
        products=[
            product_factory(1, name="Product P", stock=10, price="100", min_stock=5),
            product_factory(2, name="Spare Part", category="Accessories", stock=4, price="25", min_stock=2),
        ]
    )


@pytest.fixture
def demo() -> InventorySession:
    return seed.demo_session()


@pytest.fixture
def set_fixed_date(monkeypatch: pytest.MonkeyPatch) -> Callable[[datetime], datetime]:
    """Patch ``core_logic.datetime`` so ``now`` returns a predetermined moment."""

    def _apply(moment: datetime) -> datetime:
        class _FixedDateTime:
            @staticmethod
            def now(tz=None):
                assert tz is UTC
                return moment

        monkeypatch.setattr(core_logic, "datetime", _FixedDateTime)
        return moment

    return _apply
