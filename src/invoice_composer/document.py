"""Rendered document model: pages of positioned draw operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from reportlab.lib.colors import Color, black

from .imaging import RasterImage


class Align(Enum):
    """Horizontal anchoring of text relative to its x position."""
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class RowKind(Enum):
    """Table row kinds."""
    HEADER = "header"
    BODY = "body"


@dataclass(frozen=True)
class TextOp:
    """Text whose baseline starts (or ends, when right-aligned) at (x, y)."""
    x: float
    y: float
    text: str
    font: str
    size: float
    align: Align = Align.LEFT
    color: Color = black


@dataclass(frozen=True)
class ImageOp:
    """Image drawn into the rect whose top-left corner is (x, y)."""
    x: float
    y: float
    width: float
    height: float
    image: RasterImage


@dataclass(frozen=True)
class TableRowOp:
    """One table row whose top edge is at y."""
    x: float
    y: float
    height: float
    widths: Tuple[float, ...]
    cells: Tuple[str, ...]
    alignments: Tuple[Align, ...]
    kind: RowKind
    font: str
    size: float
    text_color: Color = black
    fill: Optional[Color] = None
    padding: float = 2.0

    @property
    def width(self) -> float:
        return sum(self.widths)

    @property
    def bottom(self) -> float:
        return self.y + self.height


DrawOp = Union[TextOp, ImageOp, TableRowOp]


@dataclass(frozen=True)
class Page:
    """A single page of draw operations in drawing order."""
    index: int
    ops: Tuple[DrawOp, ...]

    def texts(self) -> List[str]:
        """All text drawn on the page, including table cells."""
        result: List[str] = []
        for op in self.ops:
            if isinstance(op, TextOp):
                result.append(op.text)
            elif isinstance(op, TableRowOp):
                result.extend(op.cells)
        return result

    def table_rows(self, kind: Optional[RowKind] = None) -> List[TableRowOp]:
        return [
            op for op in self.ops
            if isinstance(op, TableRowOp) and (kind is None or op.kind is kind)
        ]


@dataclass(frozen=True)
class RenderedDocument:
    """An ordered sequence of pages."""
    pages: Tuple[Page, ...]
    page_width: float
    page_height: float

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass
class PageBuilder:
    """Collects draw operations during a single composition pass.

    Pages are opened on demand; ``build()`` freezes everything into a
    RenderedDocument.
    """
    page_width: float
    page_height: float
    _pages: List[List[DrawOp]] = field(default_factory=lambda: [[]])

    @property
    def current_index(self) -> int:
        return len(self._pages) - 1

    def new_page(self) -> int:
        self._pages.append([])
        return self.current_index

    def sync(self, page_index: int) -> None:
        """Open pages until ``page_index`` exists."""
        while self.current_index < page_index:
            self.new_page()

    def draw(self, op: DrawOp) -> None:
        self._pages[-1].append(op)

    def build(self) -> RenderedDocument:
        return RenderedDocument(
            pages=tuple(Page(index=i, ops=tuple(ops)) for i, ops in enumerate(self._pages)),
            page_width=self.page_width,
            page_height=self.page_height,
        )
