"""Report aggregation over products and sales.

All functions except :func:`summarize` are pure: they read the sequences they
are handed and return new values. :func:`summarize` memoizes the summary on
the session; :func:`stockroom.core_logic.record_sale` evicts that entry so a
cached summary never outlives the data it was computed from.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from . import log
from .core_logic import SUMMARY_BUCKET
from .models import InventorySession, Product, Sale
from .settings import ReportSettings


@dataclass(frozen=True)
class CategoryTotals:
    """Aggregate figures for a single product category.

    ``share`` is the category's fraction of total inventory value, in the
    range ``[0, 1]``.
    """

    category: str
    product_count: int
    total_stock: int
    total_value: Decimal
    share: Decimal


@dataclass(frozen=True)
class ReportSummary:
    """Derived metrics shown on the dashboard and in every export."""

    total_revenue: Decimal
    total_stock: int
    product_count: int
    low_stock_count: int
    sale_count: int
    average_discount: Decimal
    top_products: Tuple[Product, ...]
    categories: Tuple[CategoryTotals, ...]


def inventory_value(product: Product) -> Decimal:
    return product.price * product.stock


def total_revenue(sales: Sequence[Sale]) -> Decimal:
    return sum((sale.total for sale in sales), Decimal("0"))


def total_stock(products: Sequence[Product]) -> int:
    return sum(product.stock for product in products)


def is_low_stock(product: Product) -> bool:
    """Stock strictly below the minimum counts as low; equal does not."""

    return product.stock < product.min_stock


def low_stock_count(products: Sequence[Product]) -> int:
    return sum(1 for product in products if is_low_stock(product))


def average_discount(sales: Sequence[Sale]) -> Decimal:
    """Mean discount percentage over ``sales``; ``0`` when there are none."""

    if not sales:
        return Decimal("0")
    return sum((sale.discount for sale in sales), Decimal("0")) / len(sales)


def top_by_value(products: Sequence[Product], n: int) -> List[Product]:
    """Return the ``n`` products holding the most inventory value.

    ``sorted`` is stable, so products with equal value keep their input order.
    """

    return sorted(products, key=inventory_value, reverse=True)[:n]


def category_breakdown(products: Sequence[Product]) -> List[CategoryTotals]:
    """Group ``products`` by category in order of first appearance.

    When the catalog holds no value at all every share is reported as zero.
    """

    groups: Dict[str, List[Product]] = {}
    for product in products:
        groups.setdefault(product.category, []).append(product)

    grand_total = sum((inventory_value(product) for product in products), Decimal("0"))
    breakdown: List[CategoryTotals] = []
    for category, members in groups.items():
        value = sum((inventory_value(product) for product in members), Decimal("0"))
        share = value / grand_total if grand_total else Decimal("0")
        breakdown.append(
            CategoryTotals(
                category=category,
                product_count=len(members),
                total_stock=total_stock(members),
                total_value=value,
                share=share,
            )
        )
    return breakdown


def build_summary(products: Sequence[Product], sales: Sequence[Sale], *, top_n: int = 3) -> ReportSummary:
    """Compute every derived metric in one pass over the inputs."""

    return ReportSummary(
        total_revenue=total_revenue(sales),
        total_stock=total_stock(products),
        product_count=len(products),
        low_stock_count=low_stock_count(products),
        sale_count=len(sales),
        average_discount=average_discount(sales),
        top_products=tuple(top_by_value(products, top_n)),
        categories=tuple(category_breakdown(products)),
    )


def summarize(
    session: InventorySession,
    *,
    settings: Optional[ReportSettings] = None,
    top_n: Optional[int] = None,
) -> ReportSummary:
    """Return the session summary, reusing a cached copy when still valid.

    ``top_n`` defaults to ``settings.top_products``; defaults apply when
    ``settings`` is omitted.

    The cached entry remembers the records it was built from, so edits made
    to the session lists outside the transaction engine are detected too.
    """

    if top_n is None:
        top_n = (settings or ReportSettings()).top_products
    bucket = session.cache_bucket(SUMMARY_BUCKET)
    products = tuple(session.products)
    sales = tuple(session.sales)
    cached = bucket.get(top_n)
    if cached is not None and cached[0] == products and cached[1] == sales:
        return cached[2]

    summary = build_summary(products, sales, top_n=top_n)
    bucket[top_n] = (products, sales, summary)
    log.debug(
        "Computed report summary for %d products and %d sales",
        summary.product_count,
        summary.sale_count,
    )
    return summary
