"""Delimited-text export.

The output is a real comma-separated stream written with :mod:`csv`, not a
spreadsheet serialized under a ``.csv`` name. Three blocks follow each other
in a fixed order, each introduced by a section title row and a column header
row, with one blank row between blocks.
"""

from __future__ import annotations

import csv
import io
from datetime import UTC, datetime
from typing import List, Optional, Sequence

from . import log
from .artifacts import CSV_MEDIA_TYPE, Artifact
from .constants import PRODUCT_COLUMNS, PURCHASE_COLUMNS, SALE_COLUMNS
from .formatting import Cell, artifact_name, product_row, purchase_row, sale_row
from .models import Product, Purchase, Sale
from .settings import ReportSettings


PRODUCTS_BLOCK_TITLE = "PRODUCTS IN STOCK"
SALES_BLOCK_TITLE = "SALES"
PURCHASES_BLOCK_TITLE = "PURCHASES"
# Excel only detects UTF-8 in CSV files that start with a byte order mark.
CSV_ENCODING = "utf-8-sig"


def build_rows(
    products: Sequence[Product],
    sales: Sequence[Sale],
    purchases: Sequence[Purchase],
    *,
    settings: ReportSettings,
) -> List[List[Cell]]:
    """Lay out the three blocks as a flat list of rows."""

    rows: List[List[Cell]] = [[PRODUCTS_BLOCK_TITLE], list(PRODUCT_COLUMNS)]
    rows.extend(product_row(product, settings) for product in products)
    rows.append([])
    rows.extend([[SALES_BLOCK_TITLE], list(SALE_COLUMNS)])
    rows.extend(sale_row(sale, settings) for sale in sales)
    rows.append([])
    rows.extend([[PURCHASES_BLOCK_TITLE], list(PURCHASE_COLUMNS)])
    rows.extend(purchase_row(purchase, settings) for purchase in purchases)
    return rows


def export_csv(
    products: Sequence[Product],
    sales: Sequence[Sale],
    purchases: Sequence[Purchase],
    *,
    settings: Optional[ReportSettings] = None,
    generated_at: Optional[datetime] = None,
    delimiter: str = ",",
) -> Artifact:
    """Render the report as a ``.csv`` artifact."""

    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now(UTC)

    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer, delimiter=delimiter, lineterminator="\r\n")
    writer.writerows(build_rows(products, sales, purchases, settings=settings))

    artifact = Artifact(
        filename=artifact_name(settings, generated_at, "csv"),
        content=buffer.getvalue().encode(CSV_ENCODING),
        media_type=CSV_MEDIA_TYPE,
    )
    log.info("Generated delimited text '%s'", artifact.filename)
    return artifact
