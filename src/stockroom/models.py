"""In-memory records and session state for stockroom.

The presentation layer owns a single :class:`InventorySession` for the
lifetime of a dashboard and passes it explicitly into every core operation.
Records are immutable dataclasses; a stock change replaces the product record
inside the session catalog rather than mutating it.

Plain mappings coming from a UI (or the demo data set) are turned into typed
records by the ``deserialize_*`` helpers, which normalise money into
:class:`~decimal.Decimal` and dates into :class:`~datetime.date`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping

from . import log
from .constants import PurchaseStatus


@dataclass(frozen=True)
class Product:
    """A catalog entry with its current stock level."""

    product_id: int
    name: str
    category: str
    stock: int
    price: Decimal
    supplier: str
    min_stock: int


@dataclass(frozen=True)
class Sale:
    """A completed sale. ``product_name`` is a snapshot, not a reference."""

    sale_id: int
    product_name: str
    quantity: int
    price: Decimal
    discount: Decimal
    total: Decimal
    sold_on: date


@dataclass(frozen=True)
class Purchase:
    """A purchase order placed with a supplier."""

    purchase_id: int
    product_name: str
    supplier: str
    quantity: int
    cost_price: Decimal
    total: Decimal
    ordered_on: date
    status: PurchaseStatus


@dataclass
class InventorySession:
    """Mutable state shared by the transaction engine and the report layer.

    ``sales`` is kept newest-first. Sale identifiers come from a counter that
    only ever moves forward, so removing a sale from the list never causes an
    identifier to be reused.
    """

    products: List[Product] = field(default_factory=list)
    sales: List[Sale] = field(default_factory=list)
    purchases: List[Purchase] = field(default_factory=list)
    _next_sale_id: int = field(default=1, repr=False)
    _cache: Dict[str, Dict[str, Any]] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        highest = max((sale.sale_id for sale in self.sales), default=0)
        self._next_sale_id = max(self._next_sale_id, highest + 1)

    def allocate_sale_id(self) -> int:
        """Reserve and return the next sale identifier."""

        sale_id = self._next_sale_id
        self._next_sale_id += 1
        return sale_id

    def replace_product(self, product: Product) -> Product:
        """Swap the catalog entry sharing ``product.product_id`` for ``product``.

        Catalog order is preserved. Returns the record that was replaced.

        Raises:
            KeyError: If no product with that identifier is in the catalog.
        """

        for index, existing in enumerate(self.products):
            if existing.product_id == product.product_id:
                self.products[index] = product
                return existing
        raise KeyError(f"Product {product.product_id} is not in the catalog")

    def add_sale(self, sale: Sale) -> None:
        """Prepend ``sale`` so the history stays newest-first."""

        self.sales.insert(0, sale)

    def cache_bucket(self, name: str) -> Dict[str, Any]:
        """Return (creating on demand) the cache bucket called ``name``."""

        bucket = self._cache.get(name)
        if bucket is None:
            log.debug("Initializing cache bucket '%s'", name)
            bucket = {}
            self._cache[name] = bucket
        return bucket

    def invalidate(self, *names: str) -> None:
        """Evict cache buckets after the collections change.

        Missing buckets are ignored.
        """

        if not names:
            return
        log.debug("Invalidating cache buckets: %s", ", ".join(names))
        for name in names:
            self._cache.pop(name, None)


def _as_decimal(raw: object) -> Decimal:
    return Decimal(str(raw)) if raw is not None else Decimal("0.00")


def _as_date(raw: object) -> date:
    if isinstance(raw, date):
        return raw
    return date.fromisoformat(str(raw))


def deserialize_product(raw: Mapping[str, Any]) -> Product:
    """Convert a plain mapping into a :class:`Product`.

    Args:
        raw (Mapping[str, Any]): Values keyed by field name. ``price`` may be
            any value accepted by :class:`~decimal.Decimal` via ``str``.

    Returns:
        Product: Typed record with integer stock fields and decimal price.
    """

    return Product(
        product_id=int(raw["product_id"]),
        name=str(raw["name"]),
        category=str(raw["category"]),
        stock=int(raw["stock"]),
        price=_as_decimal(raw.get("price")),
        supplier=str(raw.get("supplier", "")),
        min_stock=int(raw.get("min_stock", 0)),
    )


def deserialize_sale(raw: Mapping[str, Any]) -> Sale:
    """Convert a plain mapping into a :class:`Sale`.

    ``sold_on`` accepts either a :class:`~datetime.date` or an ISO string.
    """

    return Sale(
        sale_id=int(raw["sale_id"]),
        product_name=str(raw["product_name"]),
        quantity=int(raw["quantity"]),
        price=_as_decimal(raw.get("price")),
        discount=_as_decimal(raw.get("discount", 0)),
        total=_as_decimal(raw.get("total")),
        sold_on=_as_date(raw["sold_on"]),
    )


def deserialize_purchase(raw: Mapping[str, Any]) -> Purchase:
    """Convert a plain mapping into a :class:`Purchase`."""

    return Purchase(
        purchase_id=int(raw["purchase_id"]),
        product_name=str(raw["product_name"]),
        supplier=str(raw.get("supplier", "")),
        quantity=int(raw["quantity"]),
        cost_price=_as_decimal(raw.get("cost_price")),
        total=_as_decimal(raw.get("total")),
        ordered_on=_as_date(raw["ordered_on"]),
        status=PurchaseStatus(raw["status"]),
    )
