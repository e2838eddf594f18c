"""Tests for invoice file parsing and the stored document form."""

from datetime import date
from decimal import Decimal

import pytest

from invoice_composer.errors import InvalidInvoiceData
from invoice_composer.models import NO_TAX, Jurisdiction
from invoice_composer.records import (
    invoice_from_dict,
    invoice_from_document,
    invoice_to_dict,
    invoice_to_document,
    load_invoice,
    logo_reference,
    parse_amount,
    parse_tax_selection,
    read_invoice_file,
    write_invoice_file,
)

INVOICE_YAML = """\
document_number: R-2040
issue_date: 2025-06-30
issuer:
  name: Northern Lights Bakery
  address: |
    88 Main St
    Halifax, NS B3H 1A1
  tax_id: 123456789 RT0001
  logo: logo.png
client:
  name: Alex Tremblay
  address: 5 Rue Ste-Catherine, Montreal, QC
line_items:
  - description: Wedding cake
    amount: 450.00
  - description: Delivery
    amount: "35.50"
tax:
  option: ca
  location: ns
"""


@pytest.fixture
def invoice_file(tmp_path):
    path = tmp_path / "invoice.yaml"
    path.write_text(INVOICE_YAML, encoding="utf-8")
    return path


def test_load_invoice(invoice_file):
    record = load_invoice(invoice_file)
    assert record.document_number == "R-2040"
    assert record.issue_date == date(2025, 6, 30)
    assert record.issuer.name == "Northern Lights Bakery"
    assert record.issuer.address == "88 Main St\nHalifax, NS B3H 1A1"
    assert record.issuer.tax_id == "123456789 RT0001"
    assert record.issuer.logo is None
    assert [item.amount for item in record.line_items] == [Decimal("450.0"), Decimal("35.50")]
    assert record.tax_selection == Jurisdiction("NS")
    assert record.subtotal == Decimal("485.50")


def test_logo_reference(invoice_file):
    assert logo_reference(read_invoice_file(invoice_file)) == "logo.png"
    assert logo_reference({"logoUrl": "data:image/png;base64,AAAA"}) == "data:image/png;base64,AAAA"
    assert logo_reference({}) is None


def test_read_invoice_file_requires_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(InvalidInvoiceData):
        read_invoice_file(path)


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, NO_TAX),
        ("none", NO_TAX),
        ("", NO_TAX),
        ("on", Jurisdiction("ON")),
        ({"option": "none"}, NO_TAX),
        ({"option": "ca", "location": "QC"}, Jurisdiction("QC")),
    ],
)
def test_parse_tax_selection(value, expected):
    assert parse_tax_selection(value) == expected


@pytest.mark.parametrize("value", [{"option": "ca"}, 13, ["ON"]])
def test_parse_tax_selection_rejects(value):
    with pytest.raises(InvalidInvoiceData):
        parse_tax_selection(value)


@pytest.mark.parametrize(
    "value,expected",
    [(12, Decimal("12")), ("19.99", Decimal("19.99")), (0.1, Decimal("0.1"))],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


@pytest.mark.parametrize("value", [None, True, "abc", "NaN", "Infinity"])
def test_parse_amount_rejects(value):
    with pytest.raises(InvalidInvoiceData):
        parse_amount(value)


@pytest.mark.parametrize(
    "data",
    [
        {"client": {"name": "A"}, "issue_date": "2025-01-01"},
        {"issuer": {"name": ""}, "client": {"name": "A"}, "issue_date": "2025-01-01"},
        {"issuer": {"name": "A"}, "client": {"name": "B"}},
        {"issuer": {"name": "A"}, "client": {"name": "B"}, "issue_date": "not a date"},
        {"issuer": {"name": "A"}, "client": {"name": "B"}, "issue_date": "2025-01-01",
         "line_items": [{"amount": 1}]},
    ],
)
def test_invoice_from_dict_rejects_incomplete_data(data):
    with pytest.raises(InvalidInvoiceData):
        invoice_from_dict(data)


def test_invoice_from_dict_allows_empty_items():
    # Empty item lists are rejected at render time, not when reading
    record = invoice_from_dict({
        "issuer": {"name": "A"},
        "client": {"name": "B"},
        "issue_date": "2025-01-01",
    })
    assert record.line_items == ()
    assert record.document_number == ""


def test_invoice_to_document(make_record):
    doc = invoice_to_document(make_record(amounts=["60.00", "40.00"], tax="ON", tax_id="99"))
    assert doc["businessName"] == "Maple Leaf Consulting"
    assert doc["clientName"] == "Jordan Smith"
    assert doc["receiptNumber"] == "R-1001"
    assert doc["paymentDate"] == "2025-03-05"
    assert doc["taxId"] == "99"
    assert doc["services"] == [
        {"description": "Service 1", "amount": 60.0},
        {"description": "Service 2", "amount": 40.0},
    ]
    assert doc["subtotal"] == 100.0
    assert doc["taxInfo"] == {"option": "ca", "location": "ON", "rate": 0.13, "amount": 13.0}
    assert doc["totalAmount"] == 113.0


def test_invoice_to_document_without_tax(make_record):
    doc = invoice_to_document(make_record())
    assert doc["taxInfo"] == {"option": "none"}
    assert "taxId" not in doc
    assert doc["totalAmount"] == doc["subtotal"] == 100.0


def test_stored_document_round_trip(make_record):
    record = make_record(amounts=["19.99", "5.01"], tax="QC", tax_id="42")
    assert invoice_from_document(invoice_to_document(record)) == record


def test_invoice_file_round_trip(tmp_path, make_record):
    record = make_record(amounts=["1234.56", "0.99"], tax="BC")
    path = tmp_path / "round.yaml"
    write_invoice_file(record, path)
    assert load_invoice(path) == record
    assert invoice_to_dict(load_invoice(path)) == invoice_to_dict(record)


@pytest.mark.parametrize(
    "data",
    [{"issuer": "Acme"}, {"issuer": None}, {"issuer": ["Acme"]}, {"issuer": {"name": "Acme"}}],
)
def test_logo_reference_without_logo_mapping(data):
    assert logo_reference(data) is None


@pytest.mark.parametrize("data", [{"issuer": {"logo": 42}}, {"logoUrl": ["a.png"]}])
def test_logo_reference_rejects_non_string(data):
    with pytest.raises(InvalidInvoiceData):
        logo_reference(data)


def test_read_invoice_file_rejects_broken_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("issuer: {name: Acme\n", encoding="utf-8")
    with pytest.raises(InvalidInvoiceData):
        read_invoice_file(path)
