"""Dump rendered document layouts to JSON for inspection."""

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.lib.units import mm

from .document import Align, DrawOp, ImageOp, Page, RenderedDocument, TableRowOp, TextOp
from .layout_engine import PageLayout


# ============================================================================
# BOUNDING BOXES
# ============================================================================

def op_bbox(op: DrawOp) -> Tuple[float, float, float, float]:
    """
    Bounding box of a draw op as (x0, top, x1, bottom) in mm.

    Text boxes span from the baseline up by the font size, which is an
    over-estimate of the glyph height but stable across fonts.
    """
    if isinstance(op, TextOp):
        width = stringWidth(op.text, op.font, op.size) / mm
        height = op.size / mm
        if op.align is Align.RIGHT:
            x0 = op.x - width
        elif op.align is Align.CENTER:
            x0 = op.x - width / 2
        else:
            x0 = op.x
        return (x0, op.y - height, x0 + width, op.y)
    if isinstance(op, ImageOp):
        return (op.x, op.y, op.x + op.width, op.y + op.height)
    if isinstance(op, TableRowOp):
        return (op.x, op.y, op.x + op.width, op.bottom)
    raise TypeError(f"Unsupported draw operation: {op!r}")


def ops_below_printable_area(document: RenderedDocument, layout: PageLayout) -> List[Tuple[int, DrawOp]]:
    """(page index, op) for every op whose bottom edge crosses the bottom margin."""
    limit = layout.content_end_y
    return [
        (page.index, op)
        for page in document.pages
        for op in page.ops
        if op_bbox(op)[3] > limit + 1e-9
    ]


# ============================================================================
# SERIALIZATION
# ============================================================================

def _color_hex(color: Any) -> str:
    if color is None:
        return ""
    return "#" + "".join(f"{round(c * 255):02X}" for c in color.rgb())


def op_to_dict(op: DrawOp) -> Dict[str, Any]:
    """Convert a draw op to a JSON-ready dict."""
    bbox = [round(v, 3) for v in op_bbox(op)]
    if isinstance(op, TextOp):
        return {
            "op": "text",
            "x": op.x,
            "y": op.y,
            "text": op.text,
            "font": op.font,
            "size": op.size,
            "align": op.align.value,
            "color": _color_hex(op.color),
            "bbox": bbox,
        }
    if isinstance(op, ImageOp):
        return {
            "op": "image",
            "x": op.x,
            "y": op.y,
            "width": op.width,
            "height": op.height,
            "pixel_size": [op.image.width, op.image.height],
            "bbox": bbox,
        }
    return {
        "op": "table_row",
        "kind": op.kind.value,
        "x": op.x,
        "y": op.y,
        "height": op.height,
        "widths": list(op.widths),
        "cells": list(op.cells),
        "alignments": [a.value for a in op.alignments],
        "font": op.font,
        "size": op.size,
        "fill": _color_hex(op.fill),
        "bbox": bbox,
    }


def page_to_dict(page: Page) -> Dict[str, Any]:
    return {
        "page_index": page.index,
        "n_ops": len(page.ops),
        "ops": [op_to_dict(op) for op in page.ops],
    }


def document_to_dict(document: RenderedDocument) -> Dict[str, Any]:
    """Convert a whole document to a JSON-ready dict."""
    return {
        "page_width": document.page_width,
        "page_height": document.page_height,
        "page_count": document.page_count,
        "pages": [page_to_dict(page) for page in document.pages],
    }


def write_layout_json(document: RenderedDocument, path: Path) -> Path:
    """Write the document layout as indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document_to_dict(document), f, indent=2)
        f.write("\n")
    return path
