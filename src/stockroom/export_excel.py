"""Workbook export: summary, products, sales, and purchases sheets."""

from __future__ import annotations

import io
from datetime import UTC, datetime
from typing import Iterable, List, Optional, Sequence

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from . import log
from .artifacts import XLSX_MEDIA_TYPE, Artifact
from .constants import (
    PRODUCT_COLUMNS,
    PURCHASE_COLUMNS,
    SALE_COLUMNS,
    SUMMARY_COLUMNS,
    SheetName,
)
from .formatting import Cell, artifact_name, product_row, purchase_row, sale_row, summary_rows
from .models import Product, Purchase, Sale
from .reports import ReportSummary, build_summary
from .settings import ReportSettings


PERCENT_FORMAT = '0.00"%"'

# Columns holding money, per sheet, as 1-based indexes.
_PRODUCT_MONEY_COLUMNS = (4,)
_SALE_MONEY_COLUMNS = (4, 6)
_SALE_PERCENT_COLUMNS = (5,)
_PURCHASE_MONEY_COLUMNS = (5, 6)
# Summary values share one column; only the revenue row holds money.
_SUMMARY_REVENUE_CELL = "B2"


def currency_format(settings: ReportSettings) -> str:
    """Excel number format showing grouped thousands and the currency suffix."""

    return f'#,##0.00 "{settings.currency_symbol}"'


def _write_sheet(
    worksheet: Worksheet,
    columns: Sequence[str],
    rows: Iterable[List[Cell]],
    *,
    number_formats: Optional[dict[int, str]] = None,
) -> None:
    bold_font = Font(bold=True)
    for column_index, column_name in enumerate(columns, start=1):
        cell = worksheet.cell(row=1, column=column_index)
        cell.value = column_name
        cell.font = bold_font

    widths = [len(column_name) for column_name in columns]
    for row_index, row in enumerate(rows, start=2):
        for column_index, value in enumerate(row, start=1):
            cell = worksheet.cell(row=row_index, column=column_index, value=value)
            if number_formats and column_index in number_formats:
                cell.number_format = number_formats[column_index]
            widths[column_index - 1] = max(widths[column_index - 1], len(str(value)))

    for column_index, width in enumerate(widths, start=1):
        worksheet.column_dimensions[get_column_letter(column_index)].width = width + 2


def build_workbook(
    products: Sequence[Product],
    sales: Sequence[Sale],
    purchases: Sequence[Purchase],
    *,
    summary: ReportSummary,
    settings: ReportSettings,
) -> openpyxl.Workbook:
    """Assemble the four report sheets into an in-memory workbook."""

    workbook = openpyxl.Workbook()
    # Remove the default sheet openpyxl generates so we can create ours.
    if workbook.active and workbook.active.title == "Sheet":
        workbook.remove(workbook.active)

    money = currency_format(settings)

    summary_sheet = workbook.create_sheet(title=SheetName.SUMMARY.value)
    _write_sheet(summary_sheet, SUMMARY_COLUMNS, summary_rows(summary, settings, text=False))
    summary_sheet[_SUMMARY_REVENUE_CELL].number_format = money
    _write_sheet(
        workbook.create_sheet(title=SheetName.PRODUCTS.value),
        PRODUCT_COLUMNS,
        (product_row(product, settings, text=False) for product in products),
        number_formats={column: money for column in _PRODUCT_MONEY_COLUMNS},
    )
    sale_formats = {column: money for column in _SALE_MONEY_COLUMNS}
    sale_formats.update({column: PERCENT_FORMAT for column in _SALE_PERCENT_COLUMNS})
    _write_sheet(
        workbook.create_sheet(title=SheetName.SALES.value),
        SALE_COLUMNS,
        (sale_row(sale, settings, text=False) for sale in sales),
        number_formats=sale_formats,
    )
    _write_sheet(
        workbook.create_sheet(title=SheetName.PURCHASES.value),
        PURCHASE_COLUMNS,
        (purchase_row(purchase, settings, text=False) for purchase in purchases),
        number_formats={column: money for column in _PURCHASE_MONEY_COLUMNS},
    )
    return workbook


def export_workbook(
    products: Sequence[Product],
    sales: Sequence[Sale],
    purchases: Sequence[Purchase],
    *,
    settings: Optional[ReportSettings] = None,
    summary: Optional[ReportSummary] = None,
    generated_at: Optional[datetime] = None,
) -> Artifact:
    """Render the report as an ``.xlsx`` artifact.

    Args:
        products, sales, purchases: Collections to export, trusted as-is.
        settings (ReportSettings | None): Formatting options; defaults apply
            when omitted.
        summary (ReportSummary | None): Precomputed summary. Built from
            ``products`` and ``sales`` when omitted.
        generated_at (datetime | None): Timestamp used in the file name.
            Defaults to the current UTC time.

    Returns:
        Artifact: Workbook bytes with an ``xlsx`` file name.
    """

    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now(UTC)
    if summary is None:
        summary = build_summary(products, sales, top_n=settings.top_products)

    workbook = build_workbook(products, sales, purchases, summary=summary, settings=settings)
    buffer = io.BytesIO()
    workbook.save(buffer)

    artifact = Artifact(
        filename=artifact_name(settings, generated_at, "xlsx"),
        content=buffer.getvalue(),
        media_type=XLSX_MEDIA_TYPE,
    )
    log.info(
        "Generated workbook '%s' (%d products, %d sales, %d purchases)",
        artifact.filename,
        len(products),
        len(sales),
        len(purchases),
    )
    return artifact
