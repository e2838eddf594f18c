"""Items table that flows across page boundaries."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

from .config import ComposerConfig
from .document import Align, PageBuilder, RowKind, TableRowOp
from .layout_engine import LayoutCursor, PageLayout
from .models import LineItem
from .styles import DocumentStyle, get_bold_font
from .tax import format_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnSpec:
    """A table column. ``width`` of None means the column takes the remaining space."""
    name: str
    alignment: Align = Align.LEFT
    width: Optional[float] = None


def item_columns(config: ComposerConfig) -> Tuple[ColumnSpec, ...]:
    return (
        ColumnSpec("Description"),
        ColumnSpec("Amount", alignment=Align.RIGHT, width=config.amount_column_width),
    )


def text_width(text: str, font_name: str, font_size: float) -> float:
    """Width of ``text`` in millimetres."""
    return stringWidth(text, font_name, font_size) / mm


def truncate_text(text: str, max_width: float, font_name: str, font_size: float) -> str:
    """Truncate text to fit within max_width (mm), adding '...' if needed."""
    if not text:
        return text

    if text_width(text, font_name, font_size) <= max_width:
        return text

    ellipsis = "..."
    available_width = max_width - text_width(ellipsis, font_name, font_size)

    if available_width <= 0:
        return ellipsis[:1]

    # Start from full text and reduce
    for i in range(len(text), 0, -1):
        truncated = text[:i].rstrip()
        if text_width(truncated, font_name, font_size) <= available_width:
            return truncated + ellipsis

    return ellipsis


class TableFlowRenderer:
    """Renders line items as a table, repeating the header row on every page."""

    def __init__(
        self,
        builder: PageBuilder,
        layout: PageLayout,
        style: DocumentStyle,
        config: ComposerConfig,
    ):
        self.builder = builder
        self.layout = layout
        self.style = style
        self.config = config
        self.columns = item_columns(config)
        self.widths = self.compute_column_widths()

    def compute_column_widths(self) -> Tuple[float, ...]:
        """Fixed columns keep their width; flexible columns share the rest."""
        fixed = sum(col.width for col in self.columns if col.width is not None)
        flexible = [col for col in self.columns if col.width is None]
        share = (self.layout.content_width - fixed) / len(flexible) if flexible else 0.0
        return tuple(col.width if col.width is not None else share for col in self.columns)

    def rows_per_page(self) -> int:
        """How many body rows fit below a header on an empty continuation page."""
        printable = self.layout.content_end_y - self.layout.content_start_y
        return int((printable - self.config.table_header_height) // self.config.table_row_height)

    def render(self, line_items: Sequence[LineItem], cursor: LayoutCursor) -> LayoutCursor:
        """Draw the header and every item starting at the cursor.

        Returns the cursor positioned directly below the last row.
        """
        self._draw_header(cursor)
        for index, item in enumerate(line_items):
            row_top = self._reserve_body_row(cursor)
            self._draw_body_row(item, index, row_top)
        logger.debug(
            "Items table: %d rows, ends on page %d at y=%.2f",
            len(line_items), cursor.page_index, cursor.y,
        )
        return cursor

    def _reserve_body_row(self, cursor: LayoutCursor) -> float:
        """Advance past one body row and return its top edge.

        A row that would cross the bottom margin moves to a new page below
        a repeated header.
        """
        row_top = cursor.y
        cursor.advance(self.config.table_row_height)
        if cursor.should_break:
            cursor.break_page()
            self.builder.sync(cursor.page_index)
            self._draw_header(cursor)
            row_top = cursor.y
            cursor.advance(self.config.table_row_height)
        return row_top

    def _draw_header(self, cursor: LayoutCursor) -> None:
        height = self.config.table_header_height
        row_top = cursor.y
        cursor.advance(height)
        if cursor.should_break:
            cursor.break_page()
            self.builder.sync(cursor.page_index)
            row_top = cursor.y
            cursor.advance(height)

        self.builder.draw(TableRowOp(
            x=self.layout.content_start_x,
            y=row_top,
            height=height,
            widths=self.widths,
            cells=tuple(col.name for col in self.columns),
            alignments=tuple(col.alignment for col in self.columns),
            kind=RowKind.HEADER,
            font=get_bold_font(self.style.font_family),
            size=self.style.table_font_size,
            text_color=self.style.header_text_color,
            fill=self.style.header_bg_color,
            padding=self.config.cell_padding,
        ))

    def _draw_body_row(self, item: LineItem, index: int, row_top: float) -> None:
        font = self.style.font_family
        size = self.style.table_font_size
        padding = self.config.cell_padding

        cells: List[str] = [
            item.description,
            format_currency(item.amount, self.config.currency_symbol),
        ]
        cells = [
            truncate_text(text, width - 2 * padding, font, size)
            for text, width in zip(cells, self.widths)
        ]

        fill = self.style.stripe_color if self.style.striped and index % 2 == 1 else None

        self.builder.draw(TableRowOp(
            x=self.layout.content_start_x,
            y=row_top,
            height=self.config.table_row_height,
            widths=self.widths,
            cells=tuple(cells),
            alignments=tuple(col.alignment for col in self.columns),
            kind=RowKind.BODY,
            font=font,
            size=size,
            text_color=self.style.text_color,
            fill=fill,
            padding=padding,
        ))
