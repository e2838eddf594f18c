"""Compose an invoice record into a paginated document."""

import logging
from datetime import date
from typing import List, Optional, Tuple

from .config import ComposerConfig
from .document import Align, ImageOp, PageBuilder, RenderedDocument, TextOp
from .imaging import fit_image
from .layout_engine import LayoutCursor
from .models import Client, InvoiceRecord, Issuer
from .styles import get_bold_font, get_style
from .table_flow import TableFlowRenderer
from .tax import InvoiceTotals, compute_totals, format_currency

logger = logging.getLogger(__name__)

# Vertical advances (mm) after each line of a block
ISSUER_NAME_ADVANCE = 7.0
LINE_ADVANCE = 5.0
BILL_TO_LABEL_ADVANCE = 4.0
TOTALS_LINE_ADVANCE = 7.0

# Document-info block, offsets from its top edge
INFO_TITLE_OFFSET = 5.0
INFO_NUMBER_OFFSET = 12.0
INFO_DATE_OFFSET = 17.0
INFO_BLOCK_HEIGHT = 25.0

SECTION_GAP = 10.0
TOTALS_LABEL_OFFSET = 70.0  # Distance of totals labels from the right margin

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_issue_date(value: date) -> str:
    """Format a date as e.g. 'March 5, 2025'."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


class DocumentComposer:
    """Turns one InvoiceRecord into one RenderedDocument.

    The composer holds only configuration; every call to ``compose`` builds
    its own cursor and page builder, so one instance can serve several
    threads.
    """

    def __init__(self, config: Optional[ComposerConfig] = None):
        self.config = config or ComposerConfig()
        self.layout = self.config.page_layout
        self.style = get_style(self.config.style)

    def compose(self, record: InvoiceRecord, totals: Optional[InvoiceTotals] = None) -> RenderedDocument:
        """Render the record. The record is assumed to be valid.

        Totals are computed before anything is drawn, so an unknown
        jurisdiction aborts without producing pages.
        """
        if totals is None:
            totals = compute_totals(record)

        builder = PageBuilder(page_width=self.layout.page_width, page_height=self.layout.page_height)
        cursor = LayoutCursor.for_layout(self.layout)

        logo_drawn = self._draw_logo(record.issuer, builder, cursor)
        issuer_top = cursor.y

        # Right column sits at the top margin when a logo occupies the left
        # column, otherwise level with the issuer block.
        if logo_drawn:
            info_top = self.layout.content_start_y
        else:
            info_top = max(self.layout.content_start_y, issuer_top)
        info_bottom = self._draw_document_info(record, builder, info_top)

        self._draw_issuer(record.issuer, builder, cursor)

        if cursor.page_index == 0:
            cursor.advance_to(max(cursor.y, info_bottom))
        cursor.advance(SECTION_GAP)

        self._draw_bill_to(record.client, builder, cursor)

        self._begin_block(builder, cursor)
        table = TableFlowRenderer(builder, self.layout, self.style, self.config)
        cursor = table.render(record.line_items, cursor)
        cursor.advance(SECTION_GAP)

        self._draw_totals(totals, builder, cursor)

        document = builder.build()
        logger.debug(
            "Composed receipt %r: %d item(s), %d page(s)",
            record.document_number, len(record.line_items), document.page_count,
        )
        return document

    def _begin_block(self, builder: PageBuilder, cursor: LayoutCursor) -> None:
        """Break the page if the previous advance left the printable area."""
        if cursor.should_break:
            cursor.break_page()
            builder.sync(cursor.page_index)

    def _text(
        self,
        builder: PageBuilder,
        cursor: LayoutCursor,
        text: str,
        size: float,
        advance: float,
        bold: bool = False,
        color=None,
    ) -> None:
        """Draw one left-column line at the cursor, then advance."""
        self._begin_block(builder, cursor)
        font = get_bold_font(self.style.font_family) if bold else self.style.font_family
        builder.draw(TextOp(
            x=self.layout.content_start_x,
            y=cursor.y,
            text=text,
            font=font,
            size=size,
            color=color if color is not None else self.style.text_color,
        ))
        cursor.advance(advance)

    def _draw_logo(self, issuer: Issuer, builder: PageBuilder, cursor: LayoutCursor) -> bool:
        if issuer.logo is None:
            return False

        width, height = fit_image(
            issuer.logo.width,
            issuer.logo.height,
            self.config.logo_max_width,
            self.config.logo_max_height,
        )
        builder.draw(ImageOp(
            x=self.layout.content_start_x,
            y=cursor.y,
            width=width,
            height=height,
            image=issuer.logo,
        ))
        cursor.advance(height + self.config.logo_gap)
        return True

    def _draw_issuer(self, issuer: Issuer, builder: PageBuilder, cursor: LayoutCursor) -> None:
        body = self.style.body_font_size
        self._text(builder, cursor, issuer.name, self.style.issuer_font_size, ISSUER_NAME_ADVANCE)
        for line in _split_lines(issuer.address):
            self._text(builder, cursor, line, body, LINE_ADVANCE)
        if issuer.tax_id:
            self._text(builder, cursor, f"Tax ID: {issuer.tax_id}", body, LINE_ADVANCE)

    def _draw_document_info(self, record: InvoiceRecord, builder: PageBuilder, top: float) -> float:
        """Draw the right-aligned title/number/date block and return its bottom edge."""
        x = self.layout.content_end_x
        number = record.document_number.strip() or self.config.placeholder_number
        lines: List[Tuple[float, str, float, bool]] = [
            (INFO_TITLE_OFFSET, self.config.document_title, self.style.title_font_size, True),
            (INFO_NUMBER_OFFSET, f"#{number}", self.style.body_font_size, False),
            (INFO_DATE_OFFSET, f"Date: {format_issue_date(record.issue_date)}", self.style.body_font_size, False),
        ]
        for offset, text, size, bold in lines:
            builder.draw(TextOp(
                x=x,
                y=top + offset,
                text=text,
                font=get_bold_font(self.style.font_family) if bold else self.style.font_family,
                size=size,
                align=Align.RIGHT,
                color=self.style.text_color,
            ))
        return top + INFO_BLOCK_HEIGHT

    def _draw_bill_to(self, client: Client, builder: PageBuilder, cursor: LayoutCursor) -> None:
        body = self.style.body_font_size
        self._text(
            builder, cursor, "BILL TO", self.style.label_font_size, BILL_TO_LABEL_ADVANCE,
            color=self.style.muted_color,
        )
        self._text(builder, cursor, client.name, body, LINE_ADVANCE, bold=True)
        address_lines = _split_lines(client.address)
        for i, line in enumerate(address_lines):
            advance = SECTION_GAP if i == len(address_lines) - 1 else LINE_ADVANCE
            self._text(builder, cursor, line, body, advance)
        if not address_lines:
            cursor.advance(SECTION_GAP - LINE_ADVANCE)

    def _draw_totals(self, totals: InvoiceTotals, builder: PageBuilder, cursor: LayoutCursor) -> None:
        """Labels share a column anchored to the right margin; values are right-aligned."""
        symbol = self.config.currency_symbol
        lines = [("Subtotal:", format_currency(totals.subtotal, symbol), False)]
        if totals.has_tax_line:
            lines.append((f"{totals.tax.label}:", format_currency(totals.tax.amount, symbol), False))
        lines.append(("Total Paid:", format_currency(totals.total, symbol), True))

        label_x = self.layout.content_end_x - TOTALS_LABEL_OFFSET
        value_x = self.layout.content_end_x
        size = self.style.body_font_size

        for label, value, bold in lines:
            self._begin_block(builder, cursor)
            font = get_bold_font(self.style.font_family) if bold else self.style.font_family
            builder.draw(TextOp(
                x=label_x, y=cursor.y, text=label, font=font, size=size,
                color=self.style.text_color,
            ))
            builder.draw(TextOp(
                x=value_x, y=cursor.y, text=value, font=font, size=size,
                align=Align.RIGHT, color=self.style.text_color,
            ))
            cursor.advance(TOTALS_LINE_ADVANCE)


def _split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]
