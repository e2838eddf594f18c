"""PDF serialization of rendered documents using ReportLab."""

import io
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .config import ComposerConfig
from .document import Align, ImageOp, Page, RenderedDocument, TableRowOp, TextOp

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "Receipt-"
CAP_HEIGHT_RATIO = 0.7  # Approximate cap height of the standard fonts, relative to size
UNSAFE_FILENAME_CHARS = re.compile(r"[\\/\x00]")
LEADING_DOTS = re.compile(r"^\.+")


@dataclass(frozen=True)
class DownloadableFile:
    """Serialized document ready to be offered for download."""
    data: bytes
    filename: str
    media_type: str = "application/pdf"

    def write_to(self, directory: Path) -> Path:
        """Write the file into ``directory`` under its suggested name.

        The name is flattened with ``safe_filename`` so the file always lands
        directly inside ``directory``.
        """
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / safe_filename(self.filename)
        path.write_bytes(self.data)
        return path


def safe_filename(filename: str) -> str:
    """Replace path separators and leading dots so the name stays a single path component."""
    name = UNSAFE_FILENAME_CHARS.sub("_", filename)
    name = LEADING_DOTS.sub(lambda m: "_" * len(m.group()), name)
    return name or "_"


def suggested_filename(document_number: Optional[str], placeholder: str = "unknown") -> str:
    """``Receipt-<number>.pdf``; blank numbers use the placeholder."""
    number = (document_number or "").strip() or placeholder
    return f"{FILENAME_PREFIX}{number}.pdf"


def to_reportlab_point(x: float, y: float, page_height: float) -> Tuple[float, float]:
    """
    Convert a top-left origin position in mm to ReportLab points.

    Layout: origin at TOP-LEFT, y increases DOWNWARD, millimetres
    ReportLab: origin at BOTTOM-LEFT, y increases UPWARD, points
    """
    return x * mm, (page_height - y) * mm


class FileEmitter:
    """Writes RenderedDocument pages onto a ReportLab canvas."""

    def __init__(self, config: Optional[ComposerConfig] = None):
        self.config = config or ComposerConfig()

    def emit(
        self,
        document: RenderedDocument,
        document_number: Optional[str] = None,
        title: Optional[str] = None,
    ) -> DownloadableFile:
        """Serialize the document to PDF bytes.

        The canvas runs in invariant mode, so equal documents produce
        identical bytes.
        """
        buffer = io.BytesIO()
        pagesize = (document.page_width * mm, document.page_height * mm)
        c = canvas.Canvas(buffer, pagesize=pagesize, invariant=1, pageCompression=1)

        filename = suggested_filename(document_number, self.config.placeholder_number)
        c.setTitle(title or filename[:-len(".pdf")])
        c.setCreator("invoice-composer")

        for page in document.pages:
            self._draw_page(c, page, document.page_height)
            c.showPage()
        c.save()

        data = buffer.getvalue()
        logger.debug("Emitted %s: %d page(s), %d bytes", filename, document.page_count, len(data))
        return DownloadableFile(data=data, filename=filename)

    def _draw_page(self, c: canvas.Canvas, page: Page, page_height: float) -> None:
        for op in page.ops:
            if isinstance(op, TextOp):
                self._draw_text(c, op, page_height)
            elif isinstance(op, ImageOp):
                self._draw_image(c, op, page_height)
            elif isinstance(op, TableRowOp):
                self._draw_table_row(c, op, page_height)
            else:
                raise TypeError(f"Unsupported draw operation: {op!r}")

    def _draw_text(self, c: canvas.Canvas, op: TextOp, page_height: float) -> None:
        x, y = to_reportlab_point(op.x, op.y, page_height)
        c.setFillColor(op.color)
        c.setFont(op.font, op.size)
        _draw_aligned(c, op.align, x, y, op.text)

    def _draw_image(self, c: canvas.Canvas, op: ImageOp, page_height: float) -> None:
        # drawImage anchors at the lower-left corner
        x, y = to_reportlab_point(op.x, op.y + op.height, page_height)
        reader = ImageReader(op.image.to_pil())
        c.drawImage(reader, x, y, width=op.width * mm, height=op.height * mm, mask="auto")

    def _draw_table_row(self, c: canvas.Canvas, op: TableRowOp, page_height: float) -> None:
        """Draw row background and cell text, vertically centred in the row."""
        x0, y_bottom = to_reportlab_point(op.x, op.bottom, page_height)

        if op.fill is not None:
            c.setFillColor(op.fill)
            c.rect(x0, y_bottom, op.width * mm, op.height * mm, fill=1, stroke=0)

        cap_height = op.size * CAP_HEIGHT_RATIO / mm
        baseline = op.y + (op.height + cap_height) / 2

        c.setFillColor(op.text_color)
        c.setFont(op.font, op.size)

        cell_x = op.x
        for text, width, align in zip(op.cells, op.widths, op.alignments):
            if align is Align.RIGHT:
                anchor = cell_x + width - op.padding
            elif align is Align.CENTER:
                anchor = cell_x + width / 2
            else:
                anchor = cell_x + op.padding
            x, y = to_reportlab_point(anchor, baseline, page_height)
            _draw_aligned(c, align, x, y, text)
            cell_x += width


def _draw_aligned(c: canvas.Canvas, align: Align, x: float, y: float, text: str) -> None:
    if align is Align.RIGHT:
        c.drawRightString(x, y, text)
    elif align is Align.CENTER:
        c.drawCentredString(x, y, text)
    else:
        c.drawString(x, y, text)
