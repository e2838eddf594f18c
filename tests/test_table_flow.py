"""Unit tests for the page-spanning items table."""

from decimal import Decimal

import pytest

from invoice_composer.document import Align, PageBuilder, RowKind
from invoice_composer.layout_dump import ops_below_printable_area
from invoice_composer.layout_engine import LayoutCursor
from invoice_composer.models import LineItem
from invoice_composer.styles import get_style
from invoice_composer.table_flow import TableFlowRenderer, text_width, truncate_text


def _items(n, amount="10.00"):
    return [LineItem(description=f"Item {i}", amount=Decimal(amount)) for i in range(n)]


@pytest.fixture
def setup(config):
    layout = config.page_layout
    builder = PageBuilder(page_width=layout.page_width, page_height=layout.page_height)
    cursor = LayoutCursor.for_layout(layout)
    table = TableFlowRenderer(builder, layout, get_style("default"), config)
    return table, builder, cursor


def test_column_widths(setup, config):
    table, _, _ = setup
    assert table.widths == (pytest.approx(140.0), config.amount_column_width)


def test_rows_per_page(setup):
    table, _, _ = setup
    # (282 - 15 - 8) // 7
    assert table.rows_per_page() == 37


def test_single_page_table(setup):
    table, builder, cursor = setup
    result = table.render(_items(5), cursor)

    assert result is cursor
    assert cursor.page_index == 0
    assert cursor.y == pytest.approx(15 + 8 + 5 * 7)

    document = builder.build()
    rows = document.pages[0].table_rows()
    assert [r.kind for r in rows] == [RowKind.HEADER] + [RowKind.BODY] * 5
    assert rows[0].cells == ("Description", "Amount")
    assert rows[1].cells == ("Item 0", "$10.00")
    assert rows[1].alignments == (Align.LEFT, Align.RIGHT)


def test_rows_are_contiguous(setup):
    table, builder, cursor = setup
    table.render(_items(3), cursor)
    rows = builder.build().pages[0].table_rows()
    for upper, lower in zip(rows, rows[1:]):
        assert lower.y == pytest.approx(upper.bottom)


def test_header_repeats_on_every_page(setup, config):
    table, builder, cursor = setup
    n = table.rows_per_page() * 2 + 10
    table.render(_items(n), cursor)
    document = builder.build()

    assert document.page_count == 3
    for page in document.pages:
        headers = page.table_rows(RowKind.HEADER)
        assert len(headers) == 1
        assert page.ops[0] is headers[0]
        assert headers[0].y == pytest.approx(config.margin)

    bodies = [row for page in document.pages for row in page.table_rows(RowKind.BODY)]
    assert [row.cells[0] for row in bodies] == [f"Item {i}" for i in range(n)]
    assert ops_below_printable_area(document, config.page_layout) == []


def test_page_exactly_full_does_not_break(setup):
    table, builder, cursor = setup
    table.render(_items(table.rows_per_page()), cursor)
    assert builder.build().page_count == 1
    assert cursor.y == pytest.approx(282.0)
    assert not cursor.should_break


def test_header_moves_to_next_page_when_no_room(setup, config):
    table, builder, cursor = setup
    cursor.advance(263.0)  # y = 278, header would end at 286
    table.render(_items(2), cursor)
    document = builder.build()

    assert document.page_count == 2
    assert document.pages[0].ops == ()
    header = document.pages[1].table_rows(RowKind.HEADER)[0]
    assert header.y == pytest.approx(config.margin)


def test_striped_rows(setup):
    table, builder, cursor = setup
    table.render(_items(4), cursor)
    bodies = builder.build().pages[0].table_rows(RowKind.BODY)
    style = get_style("default")
    assert [row.fill for row in bodies] == [None, style.stripe_color, None, style.stripe_color]


def test_long_description_truncated(setup):
    table, builder, cursor = setup
    items = [LineItem(description="Consulting " * 40, amount=Decimal("1"))]
    table.render(items, cursor)
    row = builder.build().pages[0].table_rows(RowKind.BODY)[0]
    description = row.cells[0]
    assert description.endswith("...")
    assert text_width(description, row.font, row.size) <= table.widths[0] - 2 * row.padding


def test_truncate_text_keeps_short_text():
    assert truncate_text("Short", 50.0, "Helvetica", 10) == "Short"
    assert truncate_text("", 1.0, "Helvetica", 10) == ""
