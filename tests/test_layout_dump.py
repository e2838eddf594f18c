"""Tests for layout JSON dumps and bounding boxes."""

import json

import pytest

from invoice_composer.composer import DocumentComposer
from invoice_composer.document import Align, PageBuilder, TextOp
from invoice_composer.layout_dump import (
    document_to_dict,
    op_bbox,
    ops_below_printable_area,
    write_layout_json,
)


def test_text_bbox_follows_alignment():
    left = op_bbox(TextOp(x=100, y=50, text="Total", font="Helvetica", size=10))
    right = op_bbox(TextOp(x=100, y=50, text="Total", font="Helvetica", size=10, align=Align.RIGHT))
    assert left[0] == 100
    assert right[2] == pytest.approx(100)
    assert left[2] - left[0] == pytest.approx(right[2] - right[0])
    assert left[3] == 50


def test_ops_below_printable_area(config):
    builder = PageBuilder(page_width=210.0, page_height=297.0)
    builder.draw(TextOp(x=15, y=282, text="ok", font="Helvetica", size=10))
    builder.draw(TextOp(x=15, y=290, text="too low", font="Helvetica", size=10))
    offenders = ops_below_printable_area(builder.build(), config.page_layout)
    assert [(i, op.text) for i, op in offenders] == [(0, "too low")]


def test_document_to_dict(config, make_record, logo):
    document = DocumentComposer(config).compose(make_record(logo=logo, tax="ON"))
    data = document_to_dict(document)
    assert data["page_count"] == 1
    ops = data["pages"][0]["ops"]
    kinds = {op["op"] for op in ops}
    assert kinds == {"image", "text", "table_row"}

    image = next(op for op in ops if op["op"] == "image")
    assert image["pixel_size"] == [400, 150]

    header = next(op for op in ops if op["op"] == "table_row" and op["kind"] == "header")
    assert header["cells"] == ["Description", "Amount"]
    assert header["fill"] == "#468090"


def test_write_layout_json(tmp_path, config, make_record):
    document = DocumentComposer(config).compose(make_record(amounts=["1.00"] * 60))
    path = write_layout_json(document, tmp_path / "nested" / "receipt.layout.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["page_count"] == document.page_count == 2
    assert [p["page_index"] for p in data["pages"]] == [0, 1]
