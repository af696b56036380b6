"""Transaction engine and catalog lookups for stockroom.

Every mutation of an :class:`~stockroom.models.InventorySession` passes
through this module. Validation happens before any write, so a rejected
request leaves the catalog and the sale history exactly as they were.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from . import log
from .constants import StockLevel
from .models import InventorySession, Product, Sale


CENT = Decimal("0.01")
PRODUCTS_BUCKET = "products"
SUMMARY_BUCKET = "summary"


class BusinessRuleViolation(Exception):
    """Raised when a requested operation violates a domain constraint."""


class ProductNotFound(BusinessRuleViolation):
    """Raised when a sale references a product id missing from the catalog."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Unknown product id: {product_id}")
        self.product_id = product_id


class InsufficientStock(BusinessRuleViolation):
    """Raised when a sale asks for more units than the catalog holds."""

    def __init__(self, product_id: int, *, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}: requested {requested}, available {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


@dataclass(frozen=True)
class SaleCommand:
    """User intent for recording a sale."""

    product_id: int
    quantity: int
    discount: Decimal = Decimal("0")
    sold_on: Optional[date] = None


def _resolve_sale_date(candidate: Optional[date]) -> date:
    """Return ``candidate`` or, when omitted, the current UTC date."""

    return candidate if candidate is not None else datetime.now(UTC).date()


def _ensure_products_cache(session: InventorySession) -> Dict[str, Any]:
    """Populate the product lookup bucket on demand.

    The bucket is rebuilt whenever the catalog list no longer matches the
    snapshot it was built from, which covers products added or removed by
    callers outside this module.

    Returns:
        dict[str, Any]: Bucket holding a ``by_id`` mapping and the ordered
            ``categories`` list.
    """

    bucket = session.cache_bucket(PRODUCTS_BUCKET)
    snapshot = tuple(session.products)
    if bucket.get("snapshot") != snapshot:
        bucket["snapshot"] = snapshot
        bucket["by_id"] = {product.product_id: product for product in session.products}
        bucket["categories"] = list(dict.fromkeys(product.category for product in session.products))
        log.debug("Populated products cache with %d entries", len(session.products))
    return bucket


def get_product(session: InventorySession, product_id: int) -> Product:
    """Resolve a product record by its identifier.

    Raises:
        ProductNotFound: If ``product_id`` is absent from the catalog.
    """

    cache = _ensure_products_cache(session)
    try:
        return cache["by_id"][product_id]
    except KeyError:
        raise ProductNotFound(product_id) from None


def list_products(session: InventorySession, *, category: Optional[str] = None) -> List[Product]:
    """Return the catalog in its stored order, optionally for one category."""

    if category is None:
        return list(session.products)
    return [product for product in session.products if product.category == category]


def list_categories(session: InventorySession) -> List[str]:
    """Return the distinct categories in order of first appearance."""

    return list(_ensure_products_cache(session)["categories"])


def stock_status(product: Product) -> StockLevel:
    """Classify a product as out of stock, low, or sufficiently stocked."""

    if product.stock == 0:
        return StockLevel.OUT
    if product.stock < product.min_stock:
        return StockLevel.LOW
    return StockLevel.OK


def require_positive_quantity(quantity: int) -> None:
    """Validate that a quantity is a strictly positive whole number.

    Raises:
        ValueError: If ``quantity`` is not an ``int`` or is below one.
    """

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValueError("Quantity must be a positive whole number")


def normalize_discount(discount: object) -> Decimal:
    """Return ``discount`` as a :class:`~decimal.Decimal`.

    Floats go through ``str`` so ``10.1`` becomes ``Decimal("10.1")`` rather
    than its binary expansion.

    Raises:
        ValueError: If ``discount`` is not a finite number.
    """

    if isinstance(discount, bool):
        raise ValueError("Discount must be a number")
    try:
        value = discount if isinstance(discount, Decimal) else Decimal(str(discount))
    except InvalidOperation:
        raise ValueError(f"Discount must be a number, got {discount!r}") from None
    if not value.is_finite():
        raise ValueError("Discount must be a finite number")
    return value


def require_discount_range(discount: Decimal) -> None:
    """Validate that a discount percentage lies between 0 and 100.

    Raises:
        ValueError: If ``discount`` is outside ``[0, 100]``.
    """

    if not Decimal("0") <= normalize_discount(discount) <= Decimal("100"):
        raise ValueError("Discount must be between 0 and 100 percent")


def calculate_sale_total(price: Decimal, quantity: int, discount: Decimal) -> Decimal:
    """Apply a percentage discount to ``price * quantity``, rounded to cents."""

    subtotal = price * quantity
    discount_amount = subtotal * normalize_discount(discount) / Decimal("100")
    return (subtotal - discount_amount).quantize(CENT, rounding=ROUND_HALF_UP)


def build_sale(product: Product, command: SaleCommand, *, sale_id: int, sold_on: date) -> Sale:
    """Materialize a :class:`SaleCommand` against ``product``.

    The product name and unit price are copied so the sale stays meaningful
    if the product is later renamed, repriced, or removed.
    """

    discount = normalize_discount(command.discount)
    return Sale(
        sale_id=sale_id,
        product_name=product.name,
        quantity=command.quantity,
        price=product.price,
        discount=discount,
        total=calculate_sale_total(product.price, command.quantity, discount),
        sold_on=sold_on,
    )


def record_sale(session: InventorySession, command: SaleCommand) -> Sale:
    """Validate a sale, decrement stock, and prepend it to the sale history.

    Validation runs in a fixed order: the product must exist, then it must
    hold at least ``command.quantity`` units. Nothing is written until both
    checks pass. On success the matching product is replaced with a copy whose
    stock is reduced, the new sale is placed at the head of
    ``session.sales``, and derived caches are invalidated.

    Args:
        session (InventorySession): State owned by the caller.
        command (SaleCommand): Product, quantity, and discount to apply.

    Returns:
        Sale: The newly recorded sale.

    Raises:
        ValueError: If the quantity or discount is malformed.
        ProductNotFound: If the product id is not in the catalog.
        InsufficientStock: If the catalog holds fewer units than requested.
    """

    require_positive_quantity(command.quantity)
    require_discount_range(command.discount)

    product = get_product(session, command.product_id)
    if product.stock < command.quantity:
        raise InsufficientStock(
            product.product_id,
            requested=command.quantity,
            available=product.stock,
        )

    sale = build_sale(
        product,
        command,
        sale_id=session.allocate_sale_id(),
        sold_on=_resolve_sale_date(command.sold_on),
    )
    session.replace_product(replace(product, stock=product.stock - command.quantity))
    session.add_sale(sale)
    session.invalidate(PRODUCTS_BUCKET, SUMMARY_BUCKET)
    log.info(
        "Recorded sale %d for product %d (quantity=%d, discount=%s, total=%s)",
        sale.sale_id,
        product.product_id,
        sale.quantity,
        sale.discount,
        sale.total,
    )
    return sale
