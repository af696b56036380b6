"""Paginated PDF export drawn directly on a reportlab canvas.

Layout runs top-down on A4 pages. Vertical positions are tracked as the
distance from the top edge of the page in points and converted to reportlab's
bottom-up coordinates only when drawing.

Page order: title, summary, and products; a forced page break; sales history;
then purchases. Purchases follow the sales table on the same page only if the
sales table ends above ``ReportSettings.page_break_ratio`` of the page height.
Long tables continue on new pages with their header row repeated.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import List, Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from . import log
from .artifacts import PDF_MEDIA_TYPE, Artifact
from .constants import (
    PRODUCT_COLUMNS,
    PRODUCTS_SECTION_TITLE,
    PURCHASE_COLUMNS,
    PURCHASES_SECTION_TITLE,
    REPORT_TITLE,
    SALE_COLUMNS,
    SALES_SECTION_TITLE,
    SUMMARY_COLUMNS,
    SUMMARY_SECTION_TITLE,
)
from .formatting import artifact_name, format_date, product_row, purchase_row, sale_row, summary_rows
from .models import Product, Purchase, Sale
from .reports import ReportSummary, build_summary
from .settings import ReportSettings


PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_X = 14 * mm
TOP_MARGIN = 20 * mm
BOTTOM_MARGIN = 15 * mm
HEADING_GAP = 10 * mm
TABLE_GAP = 4 * mm
ROW_HEIGHT = 18
CELL_PADDING = 3

FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
BODY_SIZE = 9
HEADING_SIZE = 12
TITLE_SIZE = 18

SUMMARY_FILL = colors.Color(139 / 255, 92 / 255, 246 / 255)
PRODUCTS_FILL = colors.Color(217 / 255, 70 / 255, 239 / 255)
SALES_FILL = SUMMARY_FILL
PURCHASES_FILL = colors.Color(249 / 255, 115 / 255, 22 / 255)
STRIPE_FILL = colors.Color(0.96, 0.96, 0.96)

# Relative column widths; each tuple is scaled to the printable width.
SUMMARY_WEIGHTS = (3, 2)
PRODUCT_WEIGHTS = (3.2, 2, 1, 2, 2, 1.4, 2)
SALE_WEIGHTS = (1.6, 3.6, 1.2, 2, 1.4, 2)
PURCHASE_WEIGHTS = (1.5, 2.5, 1.8, 1.2, 2.1, 2.4, 1.5)


@dataclass(frozen=True)
class SectionPlacement:
    """Where a titled table started and ended in the rendered document."""

    title: str
    start_page: int
    end_page: int
    bottom: float


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    placements: Tuple[SectionPlacement, ...]

    def placement(self, title: str) -> SectionPlacement:
        for placement in self.placements:
            if placement.title == title:
                return placement
        raise KeyError(f"No section titled {title!r}")


def needs_section_break(bottom: float, *, page_height: float, ratio: float) -> bool:
    """Return ``True`` when content ending at ``bottom`` leaves too little room.

    ``bottom`` is measured from the top edge of the page.
    """

    return bottom > page_height * ratio


def _column_widths(weights: Sequence[float]) -> List[float]:
    printable = PAGE_WIDTH - 2 * MARGIN_X
    total = sum(weights)
    return [printable * weight / total for weight in weights]


def _fit_text(text: str, width: float, font: str, size: float) -> str:
    """Truncate ``text`` with an ellipsis so it fits inside ``width``."""

    available = width - 2 * CELL_PADDING
    if stringWidth(text, font, size) <= available:
        return text
    while text and stringWidth(text + "...", font, size) > available:
        text = text[:-1]
    return text + "..."


class _ReportCanvas:
    """Thin cursor over a reportlab canvas that knows how to lay out tables."""

    def __init__(self, buffer: io.BytesIO, *, title: str) -> None:
        self._canvas = canvas.Canvas(buffer, pagesize=A4)
        self._canvas.setTitle(title)
        self.page = 1
        self.top = TOP_MARGIN
        self.placements: List[SectionPlacement] = []

    def new_page(self) -> None:
        self._canvas.showPage()
        self.page += 1
        self.top = TOP_MARGIN

    def text(self, value: str, *, top: float, font: str = FONT, size: float = BODY_SIZE) -> None:
        self._canvas.setFillColor(colors.black)
        self._canvas.setFont(font, size)
        self._canvas.drawString(MARGIN_X, PAGE_HEIGHT - top, value)

    def _row(
        self,
        values: Sequence[object],
        widths: Sequence[float],
        *,
        fill: Optional[colors.Color],
        header: bool,
    ) -> None:
        y = PAGE_HEIGHT - self.top - ROW_HEIGHT
        x = MARGIN_X
        font = BOLD_FONT if header else FONT
        for value, width in zip(values, widths):
            if fill is not None:
                self._canvas.setFillColor(fill)
                self._canvas.rect(x, y, width, ROW_HEIGHT, stroke=0, fill=1)
            self._canvas.setStrokeColor(colors.lightgrey)
            self._canvas.rect(x, y, width, ROW_HEIGHT, stroke=1, fill=0)
            self._canvas.setFillColor(colors.white if header else colors.black)
            self._canvas.setFont(font, BODY_SIZE)
            self._canvas.drawString(
                x + CELL_PADDING,
                y + (ROW_HEIGHT - BODY_SIZE) / 2 + 2,
                _fit_text(str(value), width, font, BODY_SIZE),
            )
            x += width
        self.top += ROW_HEIGHT

    def section(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[object]],
        *,
        weights: Sequence[float],
        header_fill: colors.Color,
        heading_top: float,
    ) -> SectionPlacement:
        """Draw a heading and a table, paging as rows run out of room."""

        limit = PAGE_HEIGHT - BOTTOM_MARGIN
        # Keep the heading together with the header row and the first data row.
        if heading_top + TABLE_GAP + 2 * ROW_HEIGHT > limit:
            self.new_page()
            heading_top = TOP_MARGIN

        self.text(title, top=heading_top, font=BOLD_FONT, size=HEADING_SIZE)
        self.top = heading_top + TABLE_GAP
        start_page = self.page
        widths = _column_widths(weights)

        self._row(columns, widths, fill=header_fill, header=True)
        for index, row in enumerate(rows):
            if self.top + ROW_HEIGHT > limit:
                self.new_page()
                self._row(columns, widths, fill=header_fill, header=True)
            self._row(row, widths, fill=STRIPE_FILL if index % 2 else None, header=False)

        placement = SectionPlacement(title=title, start_page=start_page, end_page=self.page, bottom=self.top)
        self.placements.append(placement)
        return placement

    def save(self) -> None:
        self._canvas.save()


def render_document(
    products: Sequence[Product],
    sales: Sequence[Sale],
    purchases: Sequence[Purchase],
    *,
    summary: ReportSummary,
    settings: ReportSettings,
    generated_at: datetime,
) -> RenderedDocument:
    """Draw the full report and report where each section was placed."""

    buffer = io.BytesIO()
    pdf = _ReportCanvas(buffer, title=REPORT_TITLE)

    pdf.text(REPORT_TITLE, top=TOP_MARGIN, font=BOLD_FONT, size=TITLE_SIZE)
    pdf.text(f"Generated: {format_date(generated_at.date(), settings)}", top=TOP_MARGIN + 8 * mm)

    summary_section = pdf.section(
        SUMMARY_SECTION_TITLE,
        SUMMARY_COLUMNS,
        summary_rows(summary, settings),
        weights=SUMMARY_WEIGHTS,
        header_fill=SUMMARY_FILL,
        heading_top=TOP_MARGIN + 18 * mm,
    )
    pdf.section(
        PRODUCTS_SECTION_TITLE,
        PRODUCT_COLUMNS,
        [product_row(product, settings) for product in products],
        weights=PRODUCT_WEIGHTS,
        header_fill=PRODUCTS_FILL,
        heading_top=summary_section.bottom + HEADING_GAP,
    )

    pdf.new_page()
    sales_section = pdf.section(
        SALES_SECTION_TITLE,
        SALE_COLUMNS,
        [sale_row(sale, settings) for sale in sales],
        weights=SALE_WEIGHTS,
        header_fill=SALES_FILL,
        heading_top=TOP_MARGIN,
    )

    if needs_section_break(sales_section.bottom, page_height=PAGE_HEIGHT, ratio=settings.page_break_ratio):
        pdf.new_page()
        purchases_top = TOP_MARGIN
    else:
        purchases_top = sales_section.bottom + HEADING_GAP
    pdf.section(
        PURCHASES_SECTION_TITLE,
        PURCHASE_COLUMNS,
        [purchase_row(purchase, settings) for purchase in purchases],
        weights=PURCHASE_WEIGHTS,
        header_fill=PURCHASES_FILL,
        heading_top=purchases_top,
    )

    pdf.save()
    return RenderedDocument(content=buffer.getvalue(), placements=tuple(pdf.placements))


def export_pdf(
    products: Sequence[Product],
    sales: Sequence[Sale],
    purchases: Sequence[Purchase],
    *,
    settings: Optional[ReportSettings] = None,
    summary: Optional[ReportSummary] = None,
    generated_at: Optional[datetime] = None,
) -> Artifact:
    """Render the report as a ``.pdf`` artifact."""

    settings = settings or ReportSettings()
    generated_at = generated_at or datetime.now(UTC)
    if summary is None:
        summary = build_summary(products, sales, top_n=settings.top_products)

    document = render_document(
        products,
        sales,
        purchases,
        summary=summary,
        settings=settings,
        generated_at=generated_at,
    )
    artifact = Artifact(
        filename=artifact_name(settings, generated_at, "pdf"),
        content=document.content,
        media_type=PDF_MEDIA_TYPE,
    )
    log.info(
        "Generated document '%s' across %d pages",
        artifact.filename,
        document.placements[-1].end_page,
    )
    return artifact
