"""Enumerations and fixed labels shared across stockroom modules.

Centralises the report contract (column order, sheet names, status labels)
so the transaction engine, the aggregator, and every export formatter rely on
a single source of truth.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Sequence


class PurchaseStatus(str, Enum):
    """Enumerate the lifecycle states of a purchase order."""

    PENDING = "pending"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class StockLevel(str, Enum):
    """Three-way stock indicator used by dashboard views."""

    OUT = "out"
    LOW = "low"
    OK = "ok"


class SheetName(str, Enum):
    """Enumerate the workbook sheet names produced by the excel export."""

    SUMMARY = "Summary"
    PRODUCTS = "Products"
    SALES = "Sales"
    PURCHASES = "Purchases"


PURCHASE_STATUS_LABELS: Mapping[PurchaseStatus, str] = {
    PurchaseStatus.RECEIVED: "Received",
    PurchaseStatus.PENDING: "In transit",
    PurchaseStatus.CANCELLED: "Cancelled",
}

NEEDS_RESTOCK_LABEL = "Needs restock"
IN_STOCK_LABEL = "In stock"

PRODUCT_COLUMNS: Sequence[str] = (
    "Name",
    "Category",
    "Stock",
    "Price",
    "Supplier",
    "Min Stock",
    "Status",
)

SALE_COLUMNS: Sequence[str] = (
    "Date",
    "Product Name",
    "Quantity",
    "Price",
    "Discount %",
    "Total",
)

PURCHASE_COLUMNS: Sequence[str] = (
    "Date",
    "Product Name",
    "Supplier",
    "Quantity",
    "Cost Price",
    "Total",
    "Status",
)

SUMMARY_COLUMNS: Sequence[str] = ("Metric", "Value")

SUMMARY_LABELS: Sequence[str] = (
    "Total Revenue",
    "Stock Units on Hand",
    "Number of Product Names",
    "Low-Stock Count",
    "Number of Sales",
)

REPORT_TITLE = "Warehouse Report"
PRODUCTS_SECTION_TITLE = "Products in Stock"
SALES_SECTION_TITLE = "Sales History"
PURCHASES_SECTION_TITLE = "Purchases and Receipts"
SUMMARY_SECTION_TITLE = "Summary"


__all__ = [
    "PurchaseStatus",
    "StockLevel",
    "SheetName",
    "PURCHASE_STATUS_LABELS",
    "NEEDS_RESTOCK_LABEL",
    "IN_STOCK_LABEL",
    "PRODUCT_COLUMNS",
    "SALE_COLUMNS",
    "PURCHASE_COLUMNS",
    "SUMMARY_COLUMNS",
    "SUMMARY_LABELS",
    "REPORT_TITLE",
    "PRODUCTS_SECTION_TITLE",
    "SALES_SECTION_TITLE",
    "PURCHASES_SECTION_TITLE",
    "SUMMARY_SECTION_TITLE",
]
