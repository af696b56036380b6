"""Field-level transforms shared by every export format.

Each formatter turns records into rows through the helpers below, so a date,
an amount, or a status reads the same in the workbook, the PDF, and the CSV.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence, Union

from .constants import (
    IN_STOCK_LABEL,
    NEEDS_RESTOCK_LABEL,
    PURCHASE_STATUS_LABELS,
    SUMMARY_LABELS,
    PurchaseStatus,
)
from .models import Product, Purchase, Sale
from .reports import ReportSummary, is_low_stock
from .settings import ReportSettings


Cell = Union[str, int, Decimal]


def format_date(value: date, settings: ReportSettings) -> str:
    return value.strftime(settings.date_format)


def format_amount(value: Decimal, settings: ReportSettings) -> str:
    """Render ``value`` with two decimals and grouped thousands."""

    rounded = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{rounded:,.2f}".replace(",", settings.thousands_separator)


def format_currency(value: Decimal, settings: ReportSettings) -> str:
    return f"{format_amount(value, settings)} {settings.currency_symbol}"


def format_percent(value: Decimal) -> str:
    """Render a percentage without trailing zeros, e.g. ``12.5%``."""

    normalized = Decimal(value).normalize()
    if normalized == normalized.to_integral_value():
        normalized = normalized.quantize(Decimal("1"))
    return f"{normalized:f}%"


def purchase_status_label(status: PurchaseStatus) -> str:
    return PURCHASE_STATUS_LABELS[PurchaseStatus(status)]


def stock_status_label(product: Product) -> str:
    return NEEDS_RESTOCK_LABEL if is_low_stock(product) else IN_STOCK_LABEL


def product_row(product: Product, settings: ReportSettings, *, text: bool = True) -> List[Cell]:
    """Return a product in ``PRODUCT_COLUMNS`` order.

    With ``text=False`` money stays a :class:`~decimal.Decimal` so spreadsheet
    writers can store a real number and apply their own display format.
    """

    price: Cell = format_currency(product.price, settings) if text else product.price
    return [
        product.name,
        product.category,
        product.stock,
        price,
        product.supplier,
        product.min_stock,
        stock_status_label(product),
    ]


def sale_row(sale: Sale, settings: ReportSettings, *, text: bool = True) -> List[Cell]:
    """Return a sale in ``SALE_COLUMNS`` order."""

    if text:
        return [
            format_date(sale.sold_on, settings),
            sale.product_name,
            sale.quantity,
            format_currency(sale.price, settings),
            format_percent(sale.discount),
            format_currency(sale.total, settings),
        ]
    return [
        format_date(sale.sold_on, settings),
        sale.product_name,
        sale.quantity,
        sale.price,
        sale.discount,
        sale.total,
    ]


def purchase_row(purchase: Purchase, settings: ReportSettings, *, text: bool = True) -> List[Cell]:
    """Return a purchase in ``PURCHASE_COLUMNS`` order."""

    cost: Cell = format_currency(purchase.cost_price, settings) if text else purchase.cost_price
    total: Cell = format_currency(purchase.total, settings) if text else purchase.total
    return [
        format_date(purchase.ordered_on, settings),
        purchase.product_name,
        purchase.supplier,
        purchase.quantity,
        cost,
        total,
        purchase_status_label(purchase.status),
    ]


def summary_rows(summary: ReportSummary, settings: ReportSettings, *, text: bool = True) -> List[List[Cell]]:
    """Return the five label/value pairs that open every report.

    With ``text=False`` the revenue stays a :class:`~decimal.Decimal` and the
    counts stay integers.
    """

    counts = (summary.total_stock, summary.product_count, summary.low_stock_count, summary.sale_count)
    if not text:
        return [[label, value] for label, value in zip(SUMMARY_LABELS, (summary.total_revenue, *counts))]
    values: Sequence[str] = (format_currency(summary.total_revenue, settings), *(str(count) for count in counts))
    return [[label, value] for label, value in zip(SUMMARY_LABELS, values)]


def artifact_name(settings: ReportSettings, generated_at: datetime, extension: str) -> str:
    """Build ``Report_<tag>_<date>.<ext>`` with a filesystem-safe date."""

    stamp = format_date(generated_at.date(), settings).replace("/", "-").replace("\\", "-")
    return f"Report_{settings.domain_tag}_{stamp}.{extension}"
